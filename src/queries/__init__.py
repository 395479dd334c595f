"""Period aggregation package."""

from src.queries.aggregator import (
    aggregate_period,
    contribution_share,
    describe_period,
    filter_transactions,
    member_contributions,
    monthly_series,
    summarize,
    total_income,
    year_options,
)

__all__ = [
    "aggregate_period",
    "contribution_share",
    "describe_period",
    "filter_transactions",
    "member_contributions",
    "monthly_series",
    "summarize",
    "total_income",
    "year_options",
]
