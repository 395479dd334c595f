"""
Flow tests for LedgerSession.

External services are replaced: preferences live in memory and the insights
agent is a stub.
"""

import asyncio
from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from src.agents import InsightsCoordinator
from src.agents.insights_agent import PENDING_TEXT
from src.models.audit import AuditAction
from src.models.ledger import DESCRIPTION_MAX_LENGTH, NAME_MAX_LENGTH
from src.orchestrator import UNKNOWN_MEMBER, LedgerSession, View, create_app_components
from src.services import DARK_MODE_KEY, InMemoryPreferenceStorage, StorageError, ThemePreference


class _StubAgent:
    def __init__(self, text="Finances look steady."):
        self.text = text
        self.calls = 0

    async def generate_insights(self, transactions, members):
        self.calls += 1
        return self.text


def _form(**overrides):
    form = {
        "date": date(2024, 3, 2),
        "type": "INCOME",
        "amount": "1000",
        "description": "March dues",
        "category": "Dues",
        "member_id": "",
    }
    form.update(overrides)
    return form


@pytest.fixture
def agent():
    return _StubAgent()


@pytest.fixture
def preferences():
    return InMemoryPreferenceStorage()


@pytest.fixture
def session(store, agent, preferences):
    return LedgerSession(
        store=store,
        theme=ThemePreference(preferences),
        insights=InsightsCoordinator(agent),
        today=lambda: date(2024, 3, 15),
    )


class TestInitialState:
    """Tests for a freshly opened session."""

    def test_defaults(self, session):
        """Test current month, dashboard, light mode and placeholder insights."""
        assert session.period.year == 2024
        assert session.period.month == 3
        assert session.active_view == View.DASHBOARD
        assert session.dark_mode is False
        assert session.search_term == ""
        assert session.insights_text == PENDING_TEXT
        assert session.period_description == "Viewing March 2024"

    def test_dark_mode_loaded_from_preferences(self, store, agent):
        """Test that a stored "true" starts the session in dark mode."""
        session = LedgerSession(
            store=store,
            theme=ThemePreference(InMemoryPreferenceStorage({DARK_MODE_KEY: "true"})),
            insights=InsightsCoordinator(agent),
        )
        assert session.dark_mode is True


class TestFilters:
    """Period, search and navigation changes."""

    def test_select_month_and_year(self, session):
        """Test that year changes keep the month and None selects all year."""
        session.select_year(2023)
        assert (session.period.year, session.period.month) == (2023, 3)

        session.select_month(None)
        assert session.period.is_whole_year
        assert session.period_description == "Viewing all records for 2023"

    def test_year_options_include_selection(self, session):
        """Test that an out-of-range selected year stays selectable."""
        assert session.year_options() == [2023, 2024, 2025]
        session.select_year(2019)
        assert session.year_options() == [2019, 2023, 2024, 2025]

    def test_search_and_navigation_do_not_mutate(self, session):
        """Test that UI state changes leave the ledger untouched."""
        session.set_search("dues")
        session.navigate(View.AUDIT)

        assert session.search_term == "dues"
        assert session.active_view == View.AUDIT
        assert session.store.revision == 0

    def test_view_follows_selection(self, session):
        """Test that view() recomputes for the current period and search."""
        session.save_transaction(_form())
        session.save_transaction(_form(description="Generator fuel", type="EXPENSE", amount="300"))

        assert session.view().totals.balance == Decimal("700")

        session.set_search("fuel")
        view = session.view()
        assert [t.description for t in view.transactions] == ["Generator fuel"]
        assert view.all_time_balance == Decimal("700")


class TestSaveTransaction:
    """Create and update through the form."""

    def test_create(self, session):
        """Test a valid new entry is stored and audited."""
        result, saved = session.save_transaction(_form())

        assert result.is_valid
        assert session.store.transactions == (saved,)
        assert session.store.audit_log[0].action == AuditAction.CREATE

    def test_invalid_form_changes_nothing(self, session):
        """Test that validation errors block the save."""
        result, saved = session.save_transaction(_form(amount="-1"))

        assert saved is None
        assert not result.is_valid
        assert session.store.transactions == ()
        assert session.store.audit_log == ()

    def test_update(self, session):
        """Test that a form with an id edits that transaction."""
        _, created = session.save_transaction(_form())
        _, updated = session.save_transaction(_form(id=created.id, amount="1200"))

        assert updated.id == created.id
        assert session.store.get_transaction(created.id).amount == Decimal("1200")
        assert len(session.store.transactions) == 1
        assert session.store.audit_log[0].action == AuditAction.UPDATE

    def test_update_of_deleted_entry_is_a_no_op(self, session):
        """Test that editing a vanished id neither updates nor creates."""
        _, created = session.save_transaction(_form())
        session.delete_transaction(created.id, confirm=lambda _tx: True)

        result, saved = session.save_transaction(_form(id=created.id))

        assert result.is_valid
        assert saved is None
        assert session.store.transactions == ()


class TestMembers:
    """Member creation and name lookup."""

    def test_add_member_and_lookup(self, session):
        """Test that linked income shows the member's name."""
        member = session.add_member("Ayesha", "ayesha@example.com")
        assert session.member_name(member.id) == "Ayesha"

    def test_no_link_and_dangling_link(self, session):
        """Test the display for no member and an unknown member."""
        assert session.member_name(None) is None
        assert session.member_name("") is None
        assert session.member_name("ghost") == UNKNOWN_MEMBER

    def test_cancelled_prompt(self, session):
        """Test that a blank name adds nobody."""
        assert session.add_member("", "a@example.com") is None
        assert session.store.members == ()

    def test_over_long_input_does_not_raise(self, session):
        """Test that over-long form input is refused instead of raising."""
        assert session.add_member("n" * (NAME_MAX_LENGTH + 1), "a@example.com") is None

        result, saved = session.save_transaction(
            _form(description="d" * (DESCRIPTION_MAX_LENGTH + 1))
        )

        assert saved is None
        assert [issue.issue_type for issue in result.errors] == ["too_long"]
        assert session.store.revision == 0


class TestDarkMode:
    """Dark-mode toggling."""

    def test_toggle_persists(self, session, preferences):
        """Test that the toggle writes the stored flag."""
        assert session.toggle_dark_mode() is True
        assert preferences.get(DARK_MODE_KEY) == "true"
        assert session.toggle_dark_mode() is False
        assert preferences.get(DARK_MODE_KEY) == "false"

    def test_storage_failure_still_toggles_in_memory(self, store, agent):
        """Test that a failed write raises but the session keeps the new value."""
        storage = MagicMock()
        storage.get.return_value = None
        storage.set.side_effect = StorageError("disk full")
        session = LedgerSession(
            store=store,
            theme=ThemePreference(storage),
            insights=InsightsCoordinator(agent),
        )

        with pytest.raises(StorageError):
            session.toggle_dark_mode()
        assert session.dark_mode is True


class TestInsights:
    """Insights refresh tracking."""

    def test_stale_until_refreshed(self, session, agent):
        """Test that insights are stale at start and after each mutation."""
        assert session.insights_stale

        assert asyncio.run(session.refresh_insights()) is True
        assert session.insights_text == "Finances look steady."
        assert not session.insights_stale

        session.add_member("Ayesha", "a@example.com")
        assert session.insights_stale
        assert agent.calls == 1

    def test_filters_do_not_invalidate(self, session):
        """Test that period and search changes do not trigger a refresh."""
        asyncio.run(session.refresh_insights())
        session.select_month(None)
        session.set_search("x")
        assert not session.insights_stale


class TestCreateAppComponents:
    """Tests for the factory."""

    def test_builds_empty_session_without_api_key(self, monkeypatch, tmp_path):
        """Test that a missing Gemini key still gives a working session."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)

        session = create_app_components(use_file_preferences=False)

        assert session.store.transactions == ()
        assert session.store.members == ()
        assert session.dark_mode is False
        assert asyncio.run(session.refresh_insights()) is True
        assert session.insights_text == "Insights are currently unavailable."
