"""Audit logging package."""

from src.audit.logger import AuditTrail, configure_logging

__all__ = ["AuditTrail", "configure_logging"]
