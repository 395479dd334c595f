"""
Data Models Package

This package contains all Pydantic models used in Kameti Ledger.
All data flowing through the system must conform to these schemas.
"""

from src.models.ledger import (
    DESCRIPTION_MAX_LENGTH,
    EMAIL_MAX_LENGTH,
    NAME_MAX_LENGTH,
    Member,
    MemberStatus,
    Transaction,
    TransactionCategory,
    TransactionInput,
    TransactionType,
)
from src.models.period import (
    MONTH_NAMES,
    MemberContribution,
    MonthlyBucket,
    Period,
    PeriodTotals,
    PeriodView,
)
from src.models.audit import (
    AuditAction,
    AuditEntity,
    AuditRecord,
    AuditRecordBuilder,
    format_amount,
)
from src.models.validation import (
    FormValidationResult,
    ValidationIssue,
)

__all__ = [
    # Ledger models
    "DESCRIPTION_MAX_LENGTH",
    "EMAIL_MAX_LENGTH",
    "NAME_MAX_LENGTH",
    "Member",
    "MemberStatus",
    "Transaction",
    "TransactionCategory",
    "TransactionInput",
    "TransactionType",
    # Derived views
    "MONTH_NAMES",
    "MemberContribution",
    "MonthlyBucket",
    "Period",
    "PeriodTotals",
    "PeriodView",
    # Audit models
    "AuditAction",
    "AuditEntity",
    "AuditRecord",
    "AuditRecordBuilder",
    "format_amount",
    # Validation models
    "FormValidationResult",
    "ValidationIssue",
]
