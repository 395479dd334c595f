"""
Ledger Store

Owns the three collections of the application: members, transactions and
the audit trail. Nothing else mutates them.

Every successful mutation appends exactly one audit record. Mutations that
target a missing id, or that the user cancels, change nothing and record
nothing; they are not errors.
"""

from datetime import datetime, timezone
from typing import Callable, Optional

import structlog

from src.audit import AuditTrail
from src.models.audit import AuditRecord, AuditRecordBuilder
from src.models.ledger import (
    EMAIL_MAX_LENGTH,
    NAME_MAX_LENGTH,
    Member,
    MemberStatus,
    Transaction,
    TransactionInput,
)
from src.store.ids import IdFactory, new_id


Clock = Callable[[], datetime]
ConfirmDelete = Callable[[Transaction], bool]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class LedgerStore:
    """
    Single-writer in-memory ledger.

    Args:
        id_factory: Generates ids for new members, transactions and audit records.
        clock: Source of "now" for audit timestamps and member join dates.
        audit_trail: Where audit records go. A fresh trail is created if omitted.
        currency: Symbol used in audit details.
    """

    def __init__(
        self,
        id_factory: IdFactory = new_id,
        clock: Clock = utc_now,
        audit_trail: Optional[AuditTrail] = None,
        currency: str = "Rs.",
        members: Optional[list[Member]] = None,
        transactions: Optional[list[Transaction]] = None,
    ):
        self._id_factory = id_factory
        self._clock = clock
        self._audit = audit_trail if audit_trail is not None else AuditTrail()
        self._currency = currency
        self._members: list[Member] = list(members or [])
        self._transactions: list[Transaction] = list(transactions or [])
        self._revision = 0
        self._logger = structlog.get_logger(__name__)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def members(self) -> tuple[Member, ...]:
        return tuple(self._members)

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return tuple(self._transactions)

    @property
    def audit_log(self) -> tuple[AuditRecord, ...]:
        """Audit records, most recent first."""
        return self._audit.records

    @property
    def revision(self) -> int:
        """Bumped once per successful mutation."""
        return self._revision

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        for transaction in self._transactions:
            if transaction.id == transaction_id:
                return transaction
        return None

    def get_member(self, member_id: Optional[str]) -> Optional[Member]:
        if not member_id:
            return None
        for member in self._members:
            if member.id == member_id:
                return member
        return None

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def create_transaction(self, data: TransactionInput) -> Transaction:
        """Append a new transaction under a fresh id."""
        transaction = Transaction.from_input(self._id_factory(), data)
        self._transactions.append(transaction)
        self._commit(
            AuditRecordBuilder.transaction_created(
                self._id_factory(), transaction, self._clock(), self._currency
            )
        )
        return transaction

    def update_transaction(
        self,
        transaction_id: str,
        data: TransactionInput,
    ) -> Optional[Transaction]:
        """
        Replace the transaction with `transaction_id` by `data`.

        The id and the position in the collection are kept.
        Returns None, without recording anything, if the id is unknown.
        """
        for index, existing in enumerate(self._transactions):
            if existing.id == transaction_id:
                updated = Transaction.from_input(transaction_id, data)
                self._transactions[index] = updated
                self._commit(
                    AuditRecordBuilder.transaction_updated(
                        self._id_factory(), updated, self._clock()
                    )
                )
                return updated

        self._logger.debug("transaction_update_ignored", transaction_id=transaction_id)
        return None

    def delete_transaction(
        self,
        transaction_id: str,
        confirm: ConfirmDelete,
    ) -> Optional[Transaction]:
        """
        Remove a transaction after `confirm` approves it.

        Unknown ids are ignored without asking for confirmation.
        Returns the removed transaction, or None if nothing was removed.
        """
        transaction = self.get_transaction(transaction_id)
        if transaction is None:
            self._logger.debug("transaction_delete_ignored", transaction_id=transaction_id)
            return None

        if not confirm(transaction):
            return None

        self._transactions = [t for t in self._transactions if t.id != transaction_id]
        self._commit(
            AuditRecordBuilder.transaction_deleted(
                self._id_factory(), transaction, self._clock()
            )
        )
        return transaction

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------

    def create_member(
        self,
        name: Optional[str],
        email: Optional[str],
    ) -> Optional[Member]:
        """
        Add an ACTIVE member who joins today.

        A missing or blank name or email means the prompt was cancelled:
        nothing is created and None is returned. Over-long values are
        rejected the same way.
        """
        name = (name or "").strip()
        email = (email or "").strip()
        if not name or not email:
            return None
        if len(name) > NAME_MAX_LENGTH or len(email) > EMAIL_MAX_LENGTH:
            self._logger.info(
                "member_rejected_too_long",
                name_length=len(name),
                email_length=len(email),
            )
            return None

        member = Member(
            id=self._id_factory(),
            name=name,
            email=email,
            join_date=self._clock().date(),
            status=MemberStatus.ACTIVE,
        )
        self._members.append(member)
        self._commit(
            AuditRecordBuilder.member_created(self._id_factory(), member, self._clock())
        )
        return member

    def _commit(self, record: AuditRecord) -> None:
        self._audit.record(record)
        self._revision += 1
