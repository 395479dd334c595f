"""
Insights Agent for Kameti Ledger

Produces the short "financial health" paragraph on the dashboard.

BOUNDARIES:
- The LLM only sees aggregate totals, the member count and a handful of
  recent transactions.
- The paragraph is cosmetic. Any failure (no API key, network, quota,
  blocked or empty response) degrades to a fixed sentence and is logged;
  nothing is raised to the caller.
- Requests are not deduplicated or rate limited. The coordinator only makes
  sure an older response never replaces a newer one.
"""

import json
from collections.abc import Sequence
from decimal import Decimal
from typing import Any, Optional

import google.generativeai as genai
import structlog

from src.config import GeminiSettings
from src.models.ledger import Member, Transaction
from src.queries.aggregator import summarize


PENDING_TEXT = "Analyzing PKR financials..."
EMPTY_RESPONSE_TEXT = "Unable to generate PKR insights at this time."
UNAVAILABLE_TEXT = "Insights are currently unavailable."


class InsightsAgent:
    """
    Gemini-backed insights generator.

    Args:
        model: Anything with an async `generate_content_async(prompt)` method.
            None means the service is not configured.
        currency: Symbol used in the prompt.
        recent_count: How many of the latest transactions go into the prompt.
    """

    def __init__(
        self,
        model: Optional[Any] = None,
        currency: str = "Rs.",
        recent_count: int = 5,
    ):
        self._model = model
        self._currency = currency
        self._recent_count = recent_count
        self._logger = structlog.get_logger(__name__)

    @classmethod
    def from_settings(
        cls,
        settings: Optional[GeminiSettings] = None,
        currency: str = "Rs.",
        recent_count: int = 5,
    ) -> "InsightsAgent":
        """Build an agent from GEMINI_* settings, unconfigured if they are missing."""
        logger = structlog.get_logger(__name__)
        try:
            settings = settings or GeminiSettings()
            genai.configure(api_key=settings.api_key)
            model = genai.GenerativeModel(
                model_name=settings.model_name,
                generation_config={
                    "temperature": settings.temperature,
                    "max_output_tokens": settings.max_tokens,
                }
            )
        except Exception as e:
            logger.warning("insights_not_configured", error=str(e))
            model = None
        return cls(model=model, currency=currency, recent_count=recent_count)

    @property
    def is_configured(self) -> bool:
        return self._model is not None

    def _money(self, amount: Decimal) -> str:
        return f"{self._currency} {amount:,}"

    def build_prompt(
        self,
        transactions: Sequence[Transaction],
        members: Sequence[Member],
    ) -> str:
        """Prompt with headline totals and the most recently added entries."""
        totals = summarize(transactions)
        recent = list(transactions)[-self._recent_count:] if self._recent_count else []
        recent_json = json.dumps([t.to_prompt_dict() for t in recent])

        return f"""As a financial analyst for a Pakistani organization using PKR ({self._currency}), analyze the following financial summary:
- Total Members: {len(members)}
- Total Income: {self._money(totals.income)}
- Total Expenses: {self._money(totals.expense)}
- Current Balance: {self._money(totals.balance)}

Recent Transactions: {recent_json}

Provide a short, professional 2-sentence summary of the financial health in the context of a local organization or committee (kameti), and one actionable suggestion for the treasurer to optimize savings or collection in PKR."""

    async def generate_insights(
        self,
        transactions: Sequence[Transaction],
        members: Sequence[Member],
    ) -> str:
        """
        Generate the insights paragraph.

        Always returns a string: the model's text, or a fallback sentence.
        """
        if self._model is None:
            return UNAVAILABLE_TEXT

        prompt = self.build_prompt(transactions, members)
        try:
            response = await self._model.generate_content_async(prompt)
            text = (response.text or "").strip()
        except Exception as e:
            self._logger.error(
                "insights_failed",
                error=str(e),
                error_type=type(e).__name__,
                transaction_count=len(transactions),
            )
            return UNAVAILABLE_TEXT

        return text or EMPTY_RESPONSE_TEXT


class InsightsCoordinator:
    """
    Holds the insights text shown on the dashboard.

    Each refresh takes a new generation number. When a response arrives
    after a newer refresh has started, it is dropped.
    """

    def __init__(self, agent: InsightsAgent):
        self._agent = agent
        self._generation = 0
        self.text = PENDING_TEXT
        self._logger = structlog.get_logger(__name__)

    @property
    def generation(self) -> int:
        return self._generation

    async def refresh(
        self,
        transactions: Sequence[Transaction],
        members: Sequence[Member],
    ) -> bool:
        """
        Ask the agent for fresh insights.

        Returns True if the result was applied, False if it was stale.
        """
        self._generation += 1
        token = self._generation

        text = await self._agent.generate_insights(transactions, members)

        if token != self._generation:
            self._logger.info(
                "insights_stale",
                request_generation=token,
                current_generation=self._generation,
            )
            return False

        self.text = text
        return True
