"""
Period Aggregator

Derives every number the UI shows from one ledger snapshot and the current
period selection. All functions are pure: they read the collections they
are given and return new values.

Which set each figure is computed over matters:
- the transaction list and period totals use the period-filtered set
- the all-time balance, member contributions and the monthly series use
  the full collection (the series restricted to the selected year)
"""

from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal

from src.models.ledger import Member, Transaction, TransactionType
from src.models.period import (
    MemberContribution,
    MonthlyBucket,
    Period,
    PeriodTotals,
    PeriodView,
)


ZERO = Decimal("0")


def _matches(transaction: Transaction, period: Period, needle: str) -> bool:
    if needle not in transaction.description.lower():
        return False
    if transaction.date.year != period.year:
        return False
    return period.month is None or transaction.date.month == period.month


def filter_transactions(
    transactions: Iterable[Transaction],
    period: Period,
    search_term: str = "",
) -> list[Transaction]:
    """
    Transactions in `period` whose description contains `search_term`.

    Matching is case-insensitive and looks at the description only.
    The result is ordered by date, most recent first; entries on the same
    day keep their insertion order.
    """
    needle = search_term.lower()
    matched = [t for t in transactions if _matches(t, period, needle)]
    return sorted(matched, key=lambda t: t.date, reverse=True)


def summarize(transactions: Iterable[Transaction]) -> PeriodTotals:
    """Sum income and expense amounts."""
    income = ZERO
    expense = ZERO
    for transaction in transactions:
        if transaction.type == TransactionType.INCOME:
            income += transaction.amount
        else:
            expense += transaction.amount
    return PeriodTotals(income=income, expense=expense)


def total_income(transactions: Iterable[Transaction]) -> Decimal:
    return summarize(transactions).income


def contribution_share(total: Decimal, transactions: Iterable[Transaction]) -> float:
    """
    `total` as a percentage of all-time income.

    The divisor is floored at 1 so an empty ledger gives 0 instead of
    dividing by zero.
    """
    return _percent(total, _income_divisor(transactions))


def _income_divisor(transactions: Iterable[Transaction]) -> Decimal:
    return max(total_income(transactions), Decimal("1"))


def _percent(total: Decimal, divisor: Decimal) -> float:
    return float(total / divisor * 100)


def member_contributions(
    members: Iterable[Member],
    transactions: Sequence[Transaction],
) -> list[MemberContribution]:
    """
    All-time INCOME per member, largest first.

    Members without income report 0. Ties keep roster order.
    """
    totals: dict[str, Decimal] = {}
    for transaction in transactions:
        if transaction.type == TransactionType.INCOME and transaction.member_id:
            totals[transaction.member_id] = totals.get(transaction.member_id, ZERO) + transaction.amount

    divisor = _income_divisor(transactions)
    contributions = []
    for member in members:
        total = totals.get(member.id, ZERO)
        contributions.append(
            MemberContribution(member=member, total=total, share=_percent(total, divisor))
        )
    return sorted(contributions, key=lambda c: c.total, reverse=True)


def monthly_series(
    transactions: Iterable[Transaction],
    year: int,
) -> list[MonthlyBucket]:
    """
    Twelve buckets, January to December, for `year`.

    Only transactions dated in `year` are counted.
    """
    income = [ZERO] * 12
    expense = [ZERO] * 12
    for transaction in transactions:
        if transaction.date.year != year:
            continue
        index = transaction.date.month - 1
        if transaction.type == TransactionType.INCOME:
            income[index] += transaction.amount
        else:
            expense[index] += transaction.amount

    return [
        MonthlyBucket(month=index + 1, income=income[index], expense=expense[index])
        for index in range(12)
    ]


def aggregate_period(
    transactions: Sequence[Transaction],
    members: Sequence[Member],
    period: Period,
    search_term: str = "",
) -> PeriodView:
    """Compute the full derived view for one period selection."""
    filtered = filter_transactions(transactions, period, search_term)
    return PeriodView(
        period=period,
        search_term=search_term,
        transactions=filtered,
        totals=summarize(filtered),
        all_time=summarize(transactions),
        contributions=member_contributions(members, transactions),
        monthly=monthly_series(transactions, period.year),
    )


def describe_period(period: Period) -> str:
    """Subtitle under the page heading."""
    if period.month is None:
        return f"Viewing all records for {period.year}"
    return f"Viewing {period.month_name} {period.year}"


def year_options(today: date) -> list[int]:
    """Years offered by the period selector."""
    return [today.year - 1, today.year, today.year + 1]
