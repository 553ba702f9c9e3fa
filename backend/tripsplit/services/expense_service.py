"""
Expense service for expense-related business logic.
"""
import logging
from decimal import Decimal
from typing import Sequence
from tripsplit.core.config import settings
from tripsplit.core.utils import has_currency_precision
from tripsplit.schemas.expense import ExpenseCreate, ExpenseValidationResult
from tripsplit.schemas.user import Member

logger = logging.getLogger(__name__)


def validate_expense(expense: ExpenseCreate, roster: Sequence[Member]) -> ExpenseValidationResult:
    """
    Check an expense before it is saved.

    Collects every problem instead of stopping at the first one. An empty
    roster skips the membership checks.
    """
    errors = []
    member_ids = {member.user_id for member in roster}

    if not expense.title or not expense.title.strip():
        errors.append("Please enter an expense title")

    amount = expense.amount
    if amount is None or amount <= 0:
        errors.append("Please enter a valid amount")
        amount = None
    elif not has_currency_precision(amount):
        errors.append(f"Amount must have at most {settings.CURRENCY_PRECISION} decimal places")

    if not expense.paid_by:
        errors.append("Please select who paid")
    elif member_ids and expense.paid_by not in member_ids:
        errors.append(f"Payer {expense.paid_by} is not a trip member")

    if not expense.split_among:
        errors.append("Select at least one member to split with")

    seen = set()
    for split in expense.split_among:
        if split.user_id in seen:
            errors.append(f"Member {split.user_id} appears more than once in the split")
        seen.add(split.user_id)
        if member_ids and split.user_id not in member_ids:
            errors.append(f"Member {split.user_id} is not a trip member")
        if not has_currency_precision(split.amount):
            errors.append(
                f"Share of {split.user_id} must have at most {settings.CURRENCY_PRECISION} decimal places"
            )

    difference = Decimal("0")
    if amount is not None and expense.split_among:
        difference = amount - sum((split.amount for split in expense.split_among), Decimal(0))
        if abs(difference) > settings.SPLIT_TOLERANCE:
            errors.append("Split amounts do not add up to the expense amount")

    if errors:
        logger.debug(f"Expense '{expense.title}' failed validation: {errors}")

    return ExpenseValidationResult(
        is_valid=not errors,
        errors=errors,
        amount_difference=difference
    )
