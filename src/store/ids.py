"""Identifier generators for ledger entities and audit records."""

import itertools
from typing import Callable
from uuid import uuid4


IdFactory = Callable[[], str]


def new_id() -> str:
    """Random 12-character hex id."""
    return uuid4().hex[:12]


class SequentialIdFactory:
    """
    Deterministic ids: "<prefix>1", "<prefix>2", ...

    Handy for tests and demos where ids must be predictable.
    """

    def __init__(self, prefix: str = "id-", start: int = 1):
        self._prefix = prefix
        self._counter = itertools.count(start)

    def __call__(self) -> str:
        return f"{self._prefix}{next(self._counter)}"
