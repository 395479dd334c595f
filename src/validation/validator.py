"""
Transaction Form Validation

The entry form is the only place user input is checked. The ledger store
trusts what it is given, so every create/update from the UI goes through
here first.

Validation happens in two stages:

STAGE 1 - FIELD VALIDATION:
- Required fields present
- Dates, amounts, types and categories parse
- Amounts are not negative
- Descriptions fit the stored length limit

STAGE 2 - REFERENCE CHECKS:
- A member link on an expense is dropped
- A member link to an unknown member is reported as a warning, not an error

Validation never raises on bad input; it reports issues for the form to show.
"""

from collections.abc import Iterable, Mapping
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import structlog

from src.models.ledger import (
    DESCRIPTION_MAX_LENGTH,
    Member,
    TransactionCategory,
    TransactionInput,
    TransactionType,
)
from src.models.validation import FormValidationResult, ValidationIssue


class TransactionFormValidator:
    """Turns raw form fields into a TransactionInput, or a list of problems."""

    def __init__(self):
        self._logger = structlog.get_logger(__name__)

    def validate(
        self,
        form: Mapping[str, Any],
        members: Iterable[Member] = (),
    ) -> FormValidationResult:
        """
        Validate a form submission.

        Expected keys: date, type, amount, description, category,
        member_id (optional) and id (present when editing).
        """
        issues: list[ValidationIssue] = []

        entry_date = self._parse_date(form.get("date"), issues)
        entry_type = self._parse_type(form.get("type"), issues)
        amount = self._parse_amount(form.get("amount"), issues)
        category = self._parse_category(form.get("category"), issues)

        description = str(form.get("description") or "").strip()
        if not description:
            issues.append(ValidationIssue(
                field="description",
                issue_type="missing",
                message="Description is required",
                severity="error",
            ))
        elif len(description) > DESCRIPTION_MAX_LENGTH:
            issues.append(ValidationIssue(
                field="description",
                issue_type="too_long",
                message=f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters",
                severity="error",
            ))

        member_id = self._check_member(form.get("member_id"), entry_type, members, issues)

        transaction_id = form.get("id") or None
        if any(issue.severity == "error" for issue in issues):
            self._logger.info(
                "transaction_form_rejected",
                transaction_id=transaction_id,
                fields=[issue.field for issue in issues if issue.severity == "error"],
            )
            return FormValidationResult(transaction_id=transaction_id, issues=issues)

        data = TransactionInput(
            date=entry_date,
            type=entry_type,
            amount=amount,
            description=description,
            category=category,
            member_id=member_id,
        )
        return FormValidationResult(transaction_id=transaction_id, data=data, issues=issues)

    def _parse_date(self, value: Any, issues: list[ValidationIssue]) -> Optional[date]:
        if isinstance(value, date):
            return value
        if isinstance(value, str) and value.strip():
            try:
                return date.fromisoformat(value.strip())
            except ValueError:
                issues.append(ValidationIssue(
                    field="date",
                    issue_type="invalid_format",
                    message=f"'{value}' is not a valid date (expected YYYY-MM-DD)",
                    severity="error",
                ))
                return None
        issues.append(ValidationIssue(
            field="date",
            issue_type="missing",
            message="Date is required",
            severity="error",
        ))
        return None

    def _parse_type(self, value: Any, issues: list[ValidationIssue]) -> Optional[TransactionType]:
        if isinstance(value, TransactionType):
            return value
        try:
            return TransactionType(str(value).upper())
        except ValueError:
            issues.append(ValidationIssue(
                field="type",
                issue_type="invalid_value",
                message="Entry type must be INCOME or EXPENSE",
                severity="error",
            ))
            return None

    def _parse_amount(self, value: Any, issues: list[ValidationIssue]) -> Optional[Decimal]:
        if value is None or (isinstance(value, str) and not value.strip()):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Amount is required",
                severity="error",
            ))
            return None
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message=f"'{value}' is not a number",
                severity="error",
            ))
            return None
        if not amount.is_finite():
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message="Amount must be a finite number",
                severity="error",
            ))
            return None
        if amount < 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount cannot be negative; choose Expense instead",
                severity="error",
            ))
            return None
        return amount

    def _parse_category(self, value: Any, issues: list[ValidationIssue]) -> Optional[TransactionCategory]:
        if isinstance(value, TransactionCategory):
            return value
        for category in TransactionCategory:
            if str(value).strip().lower() == category.value.lower():
                return category
        issues.append(ValidationIssue(
            field="category",
            issue_type="invalid_value",
            message=f"Unknown category '{value}'",
            severity="error",
        ))
        return None

    def _check_member(
        self,
        value: Any,
        entry_type: Optional[TransactionType],
        members: Iterable[Member],
        issues: list[ValidationIssue],
    ) -> Optional[str]:
        member_id = str(value).strip() if value else ""
        if not member_id or entry_type != TransactionType.INCOME:
            return None
        if member_id not in {member.id for member in members}:
            issues.append(ValidationIssue(
                field="member_id",
                issue_type="unknown_reference",
                message="Linked member is not on the roster",
                severity="warning",
            ))
        return member_id
