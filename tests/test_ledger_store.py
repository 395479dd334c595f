"""Tests for the in-memory ledger store."""

from datetime import date, datetime, timezone
from decimal import Decimal

from src.audit import AuditTrail
from src.models.audit import AuditAction, AuditEntity
from src.models.ledger import EMAIL_MAX_LENGTH, NAME_MAX_LENGTH, MemberStatus, TransactionType
from src.store import LedgerStore


def _always(answer):
    calls = []

    def confirm(transaction):
        calls.append(transaction.id)
        return answer

    confirm.calls = calls
    return confirm


class TestCreateTransaction:
    """Tests for LedgerStore.create_transaction."""

    def test_assigns_id_and_appends(self, store, tx):
        """Test that new transactions get ids and keep insertion order."""
        first = store.create_transaction(tx(description="First"))
        second = store.create_transaction(tx(description="Second"))

        assert first.id != second.id
        assert [t.description for t in store.transactions] == ["First", "Second"]

    def test_records_create_audit(self, store, tx):
        """Test the CREATE/TRANSACTION audit record."""
        store.create_transaction(tx(amount="1000", description="January dues"))

        (record,) = store.audit_log
        assert record.action == AuditAction.CREATE
        assert record.entity == AuditEntity.TRANSACTION
        assert record.details == "Added transaction: January dues (Rs.1000)"

    def test_uses_injected_clock(self, store, tx):
        """Test that audit timestamps come from the injected clock."""
        store.create_transaction(tx())
        assert store.audit_log[0].timestamp == datetime(2024, 3, 15, 10, 30, tzinfo=timezone.utc)


class TestUpdateTransaction:
    """Tests for LedgerStore.update_transaction."""

    def test_create_then_update_round_trip(self, store, tx):
        """Test that update changes exactly one record and logs UPDATE before CREATE."""
        other = store.create_transaction(tx(description="Other"))
        created = store.create_transaction(tx(description="Dues"))

        updated = store.update_transaction(created.id, tx(amount="250", description="Dues (corrected)"))

        assert updated.id == created.id
        assert store.get_transaction(created.id).amount == Decimal("250")
        assert store.get_transaction(other.id) == other
        assert [t.id for t in store.transactions] == [other.id, created.id]

        actions = [record.action for record in store.audit_log]
        assert actions == [AuditAction.UPDATE, AuditAction.CREATE, AuditAction.CREATE]
        assert store.audit_log[0].details == "Updated transaction: Dues (corrected)"

    def test_missing_id_is_a_silent_no_op(self, store, tx):
        """Test that updating an unknown id changes nothing and logs nothing."""
        store.create_transaction(tx())
        before = (store.transactions, store.audit_log, store.revision)

        assert store.update_transaction("missing", tx(amount="5")) is None
        assert (store.transactions, store.audit_log, store.revision) == before


class TestDeleteTransaction:
    """Tests for LedgerStore.delete_transaction."""

    def test_confirmed_delete_removes_and_audits(self, store, tx):
        """Test a confirmed delete."""
        created = store.create_transaction(tx(description="Hall booking"))
        confirm = _always(True)

        removed = store.delete_transaction(created.id, confirm)

        assert removed == created
        assert store.transactions == ()
        assert confirm.calls == [created.id]
        assert store.audit_log[0].action == AuditAction.DELETE
        assert store.audit_log[0].details == "Deleted transaction: Hall booking"

    def test_declined_delete_changes_nothing(self, store, tx):
        """Test that declining the confirmation keeps the record."""
        created = store.create_transaction(tx())

        assert store.delete_transaction(created.id, _always(False)) is None
        assert store.transactions == (created,)
        assert len(store.audit_log) == 1

    def test_missing_id_does_not_ask_or_change(self, store, tx):
        """Test that deleting an unknown id leaves transactions and audit log unchanged."""
        store.create_transaction(tx())
        before = (store.transactions, store.audit_log)
        confirm = _always(True)

        assert store.delete_transaction("missing", confirm) is None
        assert (store.transactions, store.audit_log) == before
        assert confirm.calls == []


class TestCreateMember:
    """Tests for LedgerStore.create_member."""

    def test_creates_active_member_joining_today(self, store):
        """Test member defaults and the audit record."""
        member = store.create_member("Ayesha", "ayesha@example.com")

        assert member.status == MemberStatus.ACTIVE
        assert member.join_date == date(2024, 3, 15)
        assert store.members == (member,)
        assert store.audit_log[0].entity == AuditEntity.MEMBER
        assert store.audit_log[0].details == "Added member: Ayesha"

    def test_cancelled_prompt_creates_nothing(self, store):
        """Test that a missing name or email performs no mutation."""
        assert store.create_member(None, "a@example.com") is None
        assert store.create_member("Ayesha", None) is None
        assert store.create_member("   ", "a@example.com") is None

        assert store.members == ()
        assert store.audit_log == ()
        assert store.revision == 0


class TestAuditInvariants:
    """Every successful mutation shows up exactly once, newest first."""

    def test_one_record_per_mutation(self, store, tx):
        """Test the audit count and revision track mutations."""
        member = store.create_member("Ayesha", "a@example.com")
        created = store.create_transaction(tx(kind=TransactionType.INCOME, member_id=member.id))
        store.update_transaction(created.id, tx(amount="200"))
        store.delete_transaction(created.id, _always(True))

        assert store.revision == 4
        assert [(r.action, r.entity) for r in store.audit_log] == [
            (AuditAction.DELETE, AuditEntity.TRANSACTION),
            (AuditAction.UPDATE, AuditEntity.TRANSACTION),
            (AuditAction.CREATE, AuditEntity.TRANSACTION),
            (AuditAction.CREATE, AuditEntity.MEMBER),
        ]
        assert len({r.id for r in store.audit_log}) == 4


class TestLengthLimits:
    """Over-long member fields are rejected without raising."""

    def test_over_long_name_creates_nothing(self, store):
        """Test a name one character over the limit."""
        assert store.create_member("n" * (NAME_MAX_LENGTH + 1), "a@example.com") is None
        assert store.members == ()
        assert store.audit_log == ()

    def test_over_long_email_creates_nothing(self, store):
        """Test an email one character over the limit."""
        assert store.create_member("Ayesha", "e" * (EMAIL_MAX_LENGTH + 1)) is None
        assert store.members == ()
        assert store.revision == 0

    def test_values_at_limit_are_accepted(self, store):
        """Test name and email exactly at their limits."""
        member = store.create_member("n" * NAME_MAX_LENGTH, "e" * EMAIL_MAX_LENGTH)
        assert member is not None
        assert store.members == (member,)


class TestInjectedAuditTrail:
    """An injected trail is used even while it is still empty."""

    def test_empty_trail_is_kept(self, tx):
        """Test that records land in the trail passed in."""
        trail = AuditTrail()
        store = LedgerStore(audit_trail=trail)
        store.create_transaction(tx())
        assert len(trail.records) == 1
