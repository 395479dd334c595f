"""
Audit Models for Kameti Ledger

Every ledger mutation is recorded for the treasurer to review.
This provides:
1. Traceability of who-did-what during the session
2. Debugging information when totals look wrong
3. A readable activity feed for the Audit Trail view

Audit records are append-only. We never delete or modify them, and they
live only as long as the process does.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from src.models.ledger import Member, Transaction


class AuditAction(str, Enum):
    """What happened to the entity."""
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class AuditEntity(str, Enum):
    """Which kind of entity the record is about."""
    MEMBER = "MEMBER"
    TRANSACTION = "TRANSACTION"


class AuditRecord(BaseModel):
    """
    A single audit record.

    This is the core unit of the audit trail.
    Every successful ledger mutation creates exactly one of these.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Unique record identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the mutation happened (UTC)"
    )
    action: AuditAction
    entity: AuditEntity
    details: str = Field(
        ...,
        max_length=700,
        description="Human-readable description of what happened"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "record_id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "action": self.action.value,
            "entity": self.entity.value,
            "details": self.details,
        }


def format_amount(amount: Decimal, currency: str = "Rs.") -> str:
    """Render an amount the way audit details show it, e.g. 'Rs.1500'."""
    if amount == amount.to_integral_value():
        return f"{currency}{amount:.0f}"
    return f"{currency}{amount.normalize():f}"


class AuditRecordBuilder:
    """
    Helper class to build audit records with common patterns.

    Usage:
        record = AuditRecordBuilder.transaction_created(record_id, tx, now)
        record = AuditRecordBuilder.member_created(record_id, member, now)
    """

    @staticmethod
    def transaction_created(
        record_id: str,
        transaction: Transaction,
        timestamp: datetime,
        currency: str = "Rs.",
    ) -> AuditRecord:
        amount = format_amount(transaction.amount, currency)
        return AuditRecord(
            id=record_id,
            timestamp=timestamp,
            action=AuditAction.CREATE,
            entity=AuditEntity.TRANSACTION,
            details=f"Added transaction: {transaction.description} ({amount})",
        )

    @staticmethod
    def transaction_updated(
        record_id: str,
        transaction: Transaction,
        timestamp: datetime,
    ) -> AuditRecord:
        return AuditRecord(
            id=record_id,
            timestamp=timestamp,
            action=AuditAction.UPDATE,
            entity=AuditEntity.TRANSACTION,
            details=f"Updated transaction: {transaction.description}",
        )

    @staticmethod
    def transaction_deleted(
        record_id: str,
        transaction: Transaction,
        timestamp: datetime,
    ) -> AuditRecord:
        return AuditRecord(
            id=record_id,
            timestamp=timestamp,
            action=AuditAction.DELETE,
            entity=AuditEntity.TRANSACTION,
            details=f"Deleted transaction: {transaction.description}",
        )

    @staticmethod
    def member_created(
        record_id: str,
        member: Member,
        timestamp: datetime,
    ) -> AuditRecord:
        return AuditRecord(
            id=record_id,
            timestamp=timestamp,
            action=AuditAction.CREATE,
            entity=AuditEntity.MEMBER,
            details=f"Added member: {member.name}",
        )
