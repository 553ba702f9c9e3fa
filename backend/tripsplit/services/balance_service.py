"""
Balance service: folds a trip's expenses into one net balance per member.
"""
import logging
from collections import Counter
from decimal import Decimal
from typing import Dict, List, Sequence
from tripsplit.core.config import settings
from tripsplit.core.utils import from_minor_units, has_currency_precision, to_minor_units
from tripsplit.schemas.expense import Expense, ExpenseCategory, CategoryExpenseItem
from tripsplit.schemas.settlement import Balance, ExpenseSummary
from tripsplit.schemas.user import Member

logger = logging.getLogger(__name__)


def find_unknown_members(expenses: Sequence[Expense], roster: Sequence[Member]) -> List[str]:
    """Return user ids used by expenses but missing from the roster, in order of appearance."""
    known = {member.user_id for member in roster}
    unknown = []
    for expense in expenses:
        for user_id in [expense.paid_by] + [split.user_id for split in expense.split_among]:
            if user_id not in known and user_id not in unknown:
                unknown.append(user_id)
    return unknown


def find_currencies(expenses: Sequence[Expense]) -> List[str]:
    """Return the currencies used by expenses, most frequent first."""
    counts = Counter(expense.currency for expense in expenses)
    # Counter.most_common keeps first-seen order among equal counts
    return [currency for currency, _ in counts.most_common()]


def aggregate_balances(expenses: Sequence[Expense], roster: Sequence[Member]) -> List[Balance]:
    """
    Compute totals paid and owed for every roster member.

    Members appear in roster order, including those without any activity.
    Users found in expenses but not in the roster are logged and appended
    after the roster so the ledger still balances.
    A split gap within SPLIT_TOLERANCE is charged to the largest share
    (ties by user_id) so each expense balances exactly.
    """
    paid: Dict[str, int] = {member.user_id: 0 for member in roster}
    owed: Dict[str, int] = {member.user_id: 0 for member in roster}
    names: Dict[str, str] = {member.user_id: member.display_name for member in roster}

    for user_id in find_unknown_members(expenses, roster):
        logger.warning(f"User {user_id} appears in expenses but is not a trip member")
        paid[user_id] = 0
        owed[user_id] = 0
        names[user_id] = user_id

    currencies = find_currencies(expenses)
    if len(currencies) > 1:
        logger.warning(f"Expenses use several currencies {currencies}; balances assume one currency")

    tolerance_units = to_minor_units(settings.SPLIT_TOLERANCE)
    for expense in expenses:
        amount_units = to_minor_units(expense.amount)
        paid[expense.paid_by] += amount_units

        split_units = []
        for split in expense.split_among:
            if not has_currency_precision(split.amount):
                logger.warning(
                    f"Split of {split.amount} for {split.user_id} in expense {expense.id} "
                    f"is below currency precision; rounding"
                )
            split_units.append((split.user_id, to_minor_units(split.amount)))

        # Gaps accepted by validation are charged to the largest share
        gap = amount_units - sum(units for _, units in split_units)
        if gap and split_units and abs(gap) <= tolerance_units:
            index = min(range(len(split_units)), key=lambda i: (-split_units[i][1], split_units[i][0]))
            user_id, units = split_units[index]
            split_units[index] = (user_id, units + gap)
            logger.debug(f"Charged {gap} minor units of rounding in expense {expense.id} to {user_id}")

        for user_id, units in split_units:
            owed[user_id] += units

    roster_ids = {member.user_id for member in roster}
    balances = []
    for user_id in paid:
        balances.append(Balance(
            user_id=user_id,
            display_name=names[user_id],
            total_paid=from_minor_units(paid[user_id]),
            total_owed=from_minor_units(owed[user_id]),
            balance=from_minor_units(paid[user_id] - owed[user_id]),
            is_member=user_id in roster_ids
        ))

    logger.debug(f"Aggregated {len(expenses)} expenses into {len(balances)} balances")
    return balances


def summarize_expenses(expenses: Sequence[Expense], roster: Sequence[Member]) -> ExpenseSummary:
    """
    Summarize a trip's expenses: total, category breakdown and member balances.

    Totals, categories and member balances only count expenses in the main
    currency (the most frequent one).
    """
    currencies = find_currencies(expenses)
    currency = currencies[0] if currencies else settings.DEFAULT_CURRENCY
    in_currency = [expense for expense in expenses if expense.currency == currency]

    total_units = sum(to_minor_units(expense.amount) for expense in in_currency)

    category_units = {category: 0 for category in ExpenseCategory}
    category_counts = {category: 0 for category in ExpenseCategory}
    for expense in in_currency:
        category_units[expense.category] += to_minor_units(expense.amount)
        category_counts[expense.category] += 1

    by_category = []
    for category, units in category_units.items():
        if units <= 0:
            continue
        percentage = units / total_units * 100 if total_units > 0 else 0.0
        by_category.append(CategoryExpenseItem(
            category=category,
            amount=from_minor_units(units),
            expense_count=category_counts[category],
            percentage=percentage
        ))

    # Sort by amount (descending)
    by_category.sort(key=lambda item: item.amount, reverse=True)

    return ExpenseSummary(
        total_amount=from_minor_units(total_units),
        currency=currency,
        by_category=by_category,
        by_payer=aggregate_balances(in_currency, roster)
    )
