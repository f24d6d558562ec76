"""Operator input providers"""

from operator_input.mock_input import MockInput, TestScripts

__all__ = ["MockInput", "TestScripts"]
