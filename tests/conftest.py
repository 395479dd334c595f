"""Shared fixtures: deterministic ids and a fixed clock."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from src.models.ledger import TransactionCategory, TransactionInput, TransactionType
from src.store import LedgerStore, SequentialIdFactory


FIXED_NOW = datetime(2024, 3, 15, 10, 30, tzinfo=timezone.utc)


def make_input(
    amount="100",
    on=date(2024, 1, 5),
    kind=TransactionType.INCOME,
    description="Monthly dues",
    category=TransactionCategory.DUES,
    member_id=None,
) -> TransactionInput:
    return TransactionInput(
        date=on,
        type=kind,
        amount=Decimal(amount),
        description=description,
        category=category,
        member_id=member_id,
    )


@pytest.fixture
def store() -> LedgerStore:
    return LedgerStore(
        id_factory=SequentialIdFactory(),
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def tx():
    """Factory for TransactionInput with sensible defaults."""
    return make_input
