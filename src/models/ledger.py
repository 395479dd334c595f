"""
Core Data Models for Kameti Ledger

These models define the schemas for members and transactions.
They are designed to:
1. Enforce type safety at runtime
2. Keep amounts non-negative (the sign lives in the transaction type)
3. Be serializable for logging and for the insights prompt

Validation of user input happens in the form validator; these models only
guard the structural invariants.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


NAME_MAX_LENGTH = 200
EMAIL_MAX_LENGTH = 320
DESCRIPTION_MAX_LENGTH = 500


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of money. Amounts are always magnitudes."""
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class TransactionCategory(str, Enum):
    """
    Supported transaction categories.

    The values double as display labels in the ledger table and form.
    """
    DUES = "Dues"
    DONATION = "Donation"
    UTILITIES = "Utilities"
    MARKETING = "Marketing"
    EVENT = "Event"
    MAINTENANCE = "Maintenance"
    OTHER = "Other"


class MemberStatus(str, Enum):
    """Membership status. Every member is created ACTIVE."""
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


# =============================================================================
# MEMBERS
# =============================================================================

class Member(BaseModel):
    """A committee member who can be credited with income."""
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque unique member id"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=NAME_MAX_LENGTH,
        description="Display name"
    )
    email: str = Field(
        ...,
        min_length=1,
        max_length=EMAIL_MAX_LENGTH,
        description="Contact email"
    )
    join_date: dt.date = Field(
        ...,
        description="Day the member was added"
    )
    status: MemberStatus = Field(
        default=MemberStatus.ACTIVE,
        description="Membership status"
    )

    @property
    def initial(self) -> str:
        """First letter of the name, used as an avatar."""
        return self.name[:1].upper()


# =============================================================================
# TRANSACTIONS
# =============================================================================

class TransactionInput(BaseModel):
    """
    A transaction without its identity.

    This is what the entry form produces and what the store accepts
    for both create and update.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    date: dt.date = Field(
        ...,
        description="Calendar date of the entry"
    )
    type: TransactionType = Field(
        ...,
        description="INCOME or EXPENSE"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Non-negative magnitude in the ledger currency"
    )
    description: str = Field(
        default="",
        max_length=DESCRIPTION_MAX_LENGTH,
        description="Free-text description"
    )
    category: TransactionCategory = Field(
        default=TransactionCategory.DUES,
        description="Transaction category"
    )
    member_id: Optional[str] = Field(
        default=None,
        description="Member credited with this income, if any"
    )

    @field_validator('member_id', mode='before')
    @classmethod
    def empty_member_is_none(cls, v: Optional[str]) -> Optional[str]:
        """The form sends an empty string when no member is chosen."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


class Transaction(TransactionInput):
    """A ledger entry. Updates replace everything except the id."""

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque unique transaction id"
    )

    @classmethod
    def from_input(cls, transaction_id: str, data: TransactionInput) -> "Transaction":
        return cls(id=transaction_id, **data.model_dump())

    def to_prompt_dict(self) -> dict:
        """Plain JSON-friendly representation for the insights prompt."""
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "type": self.type.value,
            "amount": float(self.amount),
            "description": self.description,
            "category": self.category.value,
            "memberId": self.member_id,
        }
