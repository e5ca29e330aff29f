"""Consistency validator -- finds structural defects in a generated project."""

from pwaforge.validator.syntax import (
    INVALID_JSON,
    UNBALANCED_DELIMITER,
    UNQUOTED_ATTRIBUTE,
    BraceBalance,
    SyntaxIssue,
    brace_balance,
    check_syntax,
    find_unquoted_attributes,
    mask_literals,
    repair_json,
)
from pwaforge.validator.validator import DEFECT_POLICY, ConsistencyValidator, make_defect

__all__ = [
    "BraceBalance",
    "ConsistencyValidator",
    "DEFECT_POLICY",
    "INVALID_JSON",
    "SyntaxIssue",
    "UNBALANCED_DELIMITER",
    "UNQUOTED_ATTRIBUTE",
    "brace_balance",
    "check_syntax",
    "find_unquoted_attributes",
    "make_defect",
    "mask_literals",
    "repair_json",
]
