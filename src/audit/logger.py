"""
Audit Trail

Every ledger mutation is recorded exactly once, newest first.
The trail:
- Is synchronous, because mutations are synchronous
- Mirrors each record to the structured local log
- Never raises because of logging
"""

import logging
from typing import Optional

import structlog

from src.models.audit import AuditRecord


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output through the stdlib root logger at `level`."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper(), logging.INFO))


class AuditTrail:
    """
    Append-only, newest-first audit log.

    Logs records both to:
    1. An in-memory list (for the Audit Trail view)
    2. The structured local log (for debugging)
    """

    def __init__(self, records: Optional[list[AuditRecord]] = None):
        self._records: list[AuditRecord] = list(records or [])
        self._logger = structlog.get_logger(__name__)

    def record(self, entry: AuditRecord) -> AuditRecord:
        """Prepend an audit record and mirror it to the local log."""
        self._records.insert(0, entry)
        self._logger.info("audit_record", **entry.to_log_dict())
        return entry

    @property
    def records(self) -> tuple[AuditRecord, ...]:
        """All records, most recent first."""
        return tuple(self._records)
