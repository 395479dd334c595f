"""AI Agents package."""

from src.agents.insights_agent import (
    EMPTY_RESPONSE_TEXT,
    PENDING_TEXT,
    UNAVAILABLE_TEXT,
    InsightsAgent,
    InsightsCoordinator,
)

__all__ = [
    "EMPTY_RESPONSE_TEXT",
    "PENDING_TEXT",
    "UNAVAILABLE_TEXT",
    "InsightsAgent",
    "InsightsCoordinator",
]
