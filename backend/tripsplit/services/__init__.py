"""Services package - the pure split, balance and settlement functions."""
from tripsplit.services.split_service import (
    compute_split, split_equally, split_by_ratio, split_by_amount
)
from tripsplit.services.balance_service import (
    aggregate_balances, find_unknown_members, summarize_expenses
)
from tripsplit.services.settlement_service import (
    plan_settlement, format_settlement, summarize_settlements
)
from tripsplit.services.expense_service import validate_expense

__all__ = [
    "compute_split",
    "split_equally",
    "split_by_ratio",
    "split_by_amount",
    "aggregate_balances",
    "find_unknown_members",
    "summarize_expenses",
    "plan_settlement",
    "format_settlement",
    "summarize_settlements",
    "validate_expense",
]
