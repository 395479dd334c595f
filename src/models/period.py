"""
Derived-view models.

Everything here is computed from the ledger snapshot by the period
aggregator and never stored.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.models.ledger import Member, Transaction


MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


class Period(BaseModel):
    """
    The selected (year, month-or-all) window.

    month is 1..12, or None for the whole year.
    """
    model_config = ConfigDict(frozen=True)

    year: int = Field(..., ge=1, le=9999)
    month: Optional[int] = Field(default=None, ge=1, le=12)

    @property
    def is_whole_year(self) -> bool:
        return self.month is None

    @property
    def month_name(self) -> Optional[str]:
        if self.month is None:
            return None
        return MONTH_NAMES[self.month - 1]


class PeriodTotals(BaseModel):
    """Income, expense and their difference over some set of transactions."""
    model_config = ConfigDict(frozen=True)

    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")

    @property
    def balance(self) -> Decimal:
        return self.income - self.expense


class MemberContribution(BaseModel):
    """A member's all-time income total and its share of all income."""
    model_config = ConfigDict(frozen=True)

    member: Member
    total: Decimal = Decimal("0")
    share: float = Field(
        default=0.0,
        ge=0.0,
        description="Percentage of all-time income (0-100)"
    )


class MonthlyBucket(BaseModel):
    """One month of the annual cash-flow chart."""
    model_config = ConfigDict(frozen=True)

    month: int = Field(..., ge=1, le=12)
    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")

    @property
    def label(self) -> str:
        """Three-letter month label, as shown on the chart axis."""
        return MONTH_NAMES[self.month - 1][:3]


class PeriodView(BaseModel):
    """Everything the UI renders for one period selection."""
    model_config = ConfigDict(frozen=True)

    period: Period
    search_term: str = ""
    transactions: list[Transaction] = Field(default_factory=list)
    totals: PeriodTotals = Field(default_factory=PeriodTotals)
    all_time: PeriodTotals = Field(default_factory=PeriodTotals)
    contributions: list[MemberContribution] = Field(default_factory=list)
    monthly: list[MonthlyBucket] = Field(default_factory=list)

    @property
    def all_time_balance(self) -> Decimal:
        return self.all_time.balance

    def top_contributors(self, limit: int = 5) -> list[MemberContribution]:
        return self.contributions[:limit]
