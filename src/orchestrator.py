"""
Main Orchestrator for Kameti Ledger

Ties the components together and defines what each user action does:
1. Save entry (form -> validate -> create or update -> audit)
2. Delete entry (confirm -> delete -> audit)
3. Add member (prompt -> create -> audit)
4. Period, search and navigation changes (no mutation)
5. Insights refresh (async, best effort)

The session owns the UI state. Ledger data is owned by the store and only
changed through it; derived figures are recomputed on every call to view().
"""

from collections.abc import Callable, Mapping
from datetime import date
from enum import Enum
from typing import Any, Optional

import structlog

from src.agents import InsightsAgent, InsightsCoordinator
from src.audit import AuditTrail, configure_logging
from src.config import get_settings
from src.models.ledger import Member, Transaction
from src.models.period import Period, PeriodView
from src.models.validation import FormValidationResult
from src.queries import aggregate_period, describe_period, year_options
from src.services import (
    InMemoryPreferenceStorage,
    JsonFilePreferenceStorage,
    PreferenceStorageInterface,
    StorageError,
    ThemePreference,
)
from src.store import LedgerStore
from src.store.ids import IdFactory, new_id
from src.store.ledger_store import ConfirmDelete
from src.validation import TransactionFormValidator


UNKNOWN_MEMBER = "Unknown member"


class View(str, Enum):
    """The four screens of the app, with their navigation labels."""
    DASHBOARD = "Dashboard"
    TRANSACTIONS = "Ledger"
    MEMBERS = "Members"
    AUDIT = "Audit Trail"


class LedgerSession:
    """
    One user's working session.

    Holds the store plus everything the UI remembers between interactions:
    selected period, search term, active view, dark mode and insights.
    """

    def __init__(
        self,
        store: LedgerStore,
        theme: ThemePreference,
        insights: InsightsCoordinator,
        validator: Optional[TransactionFormValidator] = None,
        today: Callable[[], date] = date.today,
    ):
        self._store = store
        self._theme = theme
        self._insights = insights
        self._validator = validator or TransactionFormValidator()
        self._today = today

        current = today()
        self._period = Period(year=current.year, month=current.month)
        self._search_term = ""
        self._active_view = View.DASHBOARD
        self._dark_mode = theme.load_dark_mode()
        self._insights_revision: Optional[int] = None
        self._logger = structlog.get_logger(__name__)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def store(self) -> LedgerStore:
        return self._store

    @property
    def period(self) -> Period:
        return self._period

    @property
    def search_term(self) -> str:
        return self._search_term

    @property
    def active_view(self) -> View:
        return self._active_view

    @property
    def dark_mode(self) -> bool:
        return self._dark_mode

    @property
    def period_description(self) -> str:
        return describe_period(self._period)

    def year_options(self) -> list[int]:
        options = year_options(self._today())
        if self._period.year not in options:
            options.append(self._period.year)
            options.sort()
        return options

    def member_name(self, member_id: Optional[str]) -> Optional[str]:
        """Display name for a member link; None when there is no link."""
        if not member_id:
            return None
        member = self._store.get_member(member_id)
        return member.name if member else UNKNOWN_MEMBER

    def view(self) -> PeriodView:
        """Recompute every derived figure for the current selection."""
        return aggregate_period(
            self._store.transactions,
            self._store.members,
            self._period,
            self._search_term,
        )

    # ------------------------------------------------------------------
    # Navigation and filters
    # ------------------------------------------------------------------

    def navigate(self, view: View) -> None:
        self._active_view = view

    def select_year(self, year: int) -> None:
        self._period = Period(year=year, month=self._period.month)

    def select_month(self, month: Optional[int]) -> None:
        """Select a month 1..12, or None for the whole year."""
        self._period = Period(year=self._period.year, month=month)

    def set_search(self, term: str) -> None:
        self._search_term = term or ""

    def toggle_dark_mode(self) -> bool:
        """
        Flip dark mode and persist it.

        The in-memory value changes even if persisting fails; the
        StorageError is re-raised for the UI to report.
        """
        self._dark_mode = not self._dark_mode
        try:
            self._theme.save_dark_mode(self._dark_mode)
        except StorageError as e:
            self._logger.error("dark_mode_not_saved", error=str(e))
            raise
        return self._dark_mode

    # ------------------------------------------------------------------
    # Ledger actions
    # ------------------------------------------------------------------

    def save_transaction(
        self,
        form: Mapping[str, Any],
    ) -> tuple[FormValidationResult, Optional[Transaction]]:
        """
        Validate a form submission, then create or update.

        A form carrying an `id` edits that transaction; editing an id that no
        longer exists changes nothing. Returns the validation result and the
        saved transaction (None when invalid or not found).
        """
        result = self._validator.validate(form, self._store.members)
        if not result.is_valid:
            return result, None

        if result.transaction_id:
            saved = self._store.update_transaction(result.transaction_id, result.data)
        else:
            saved = self._store.create_transaction(result.data)
        return result, saved

    def delete_transaction(
        self,
        transaction_id: str,
        confirm: ConfirmDelete,
    ) -> Optional[Transaction]:
        return self._store.delete_transaction(transaction_id, confirm)

    def add_member(self, name: Optional[str], email: Optional[str]) -> Optional[Member]:
        return self._store.create_member(name, email)

    # ------------------------------------------------------------------
    # Insights
    # ------------------------------------------------------------------

    @property
    def insights_text(self) -> str:
        return self._insights.text

    @property
    def insights_stale(self) -> bool:
        """True when members or transactions changed since the last refresh."""
        return self._insights_revision != self._store.revision

    async def refresh_insights(self) -> bool:
        """
        Request fresh insights for the current data.

        Returns True if the response was applied.
        """
        self._insights_revision = self._store.revision
        return await self._insights.refresh(
            self._store.transactions,
            self._store.members,
        )


def create_app_components(
    use_file_preferences: bool = True,
    preferences: Optional[PreferenceStorageInterface] = None,
    id_factory: IdFactory = new_id,
) -> LedgerSession:
    """
    Factory function to create a ready-to-use session.

    Args:
        use_file_preferences: Persist preferences to the configured JSON file.
            Set to False for tests and throwaway runs.
        preferences: Explicit preference backend; overrides the above.
        id_factory: Id generator for the store.

    Returns:
        A LedgerSession with an empty ledger.
    """
    settings = get_settings()
    app_settings = settings.app
    ledger_settings = settings.ledger

    configure_logging(app_settings.log_level)

    if preferences is None:
        if use_file_preferences:
            preferences = JsonFilePreferenceStorage(ledger_settings.preferences_path)
        else:
            preferences = InMemoryPreferenceStorage()

    store = LedgerStore(
        id_factory=id_factory,
        audit_trail=AuditTrail(),
        currency=ledger_settings.currency_symbol,
    )
    agent = InsightsAgent.from_settings(
        currency=ledger_settings.currency_symbol,
        recent_count=ledger_settings.insights_recent_count,
    )

    return LedgerSession(
        store=store,
        theme=ThemePreference(preferences),
        insights=InsightsCoordinator(agent),
    )
