"""Input validation package."""

from src.validation.validator import (
    ExpenseInputValidator,
    parse_amount,
)

__all__ = [
    "ExpenseInputValidator",
    "parse_amount",
]
