"""Form validation package."""

from src.validation.validator import TransactionFormValidator

__all__ = ["TransactionFormValidator"]
