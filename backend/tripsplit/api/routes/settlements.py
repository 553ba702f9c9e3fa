"""
Balance and settlement routes.
"""
from typing import List
from fastapi import APIRouter
from tripsplit.core.config import settings
from tripsplit.schemas.settlement import BalanceReport, LedgerSnapshot, SettlementPlan
from tripsplit.services.balance_service import (
    aggregate_balances, find_currencies, find_unknown_members
)
from tripsplit.services.settlement_service import plan_settlement, summarize_settlements

router = APIRouter(tags=["settlement"])


def collect_warnings(snapshot: LedgerSnapshot) -> List[str]:
    """Describe data-integrity problems in a snapshot without rejecting it."""
    warnings = [
        f"User {user_id} appears in expenses but is not a trip member"
        for user_id in find_unknown_members(snapshot.expenses, snapshot.members)
    ]
    currencies = find_currencies(snapshot.expenses)
    if len(currencies) > 1:
        warnings.append(f"Expenses use several currencies ({', '.join(currencies)}); no conversion is applied")
    return warnings


@router.post("/balances", response_model=BalanceReport)
async def get_balances(snapshot: LedgerSnapshot):
    """Get the net balance of every trip member."""
    return BalanceReport(
        balances=aggregate_balances(snapshot.expenses, snapshot.members),
        warnings=collect_warnings(snapshot)
    )


@router.post("/settlements", response_model=SettlementPlan)
async def get_settlements(snapshot: LedgerSnapshot):
    """Plan the transfers that settle a trip."""
    currencies = find_currencies(snapshot.expenses)
    currency = snapshot.currency or (currencies[0] if currencies else settings.DEFAULT_CURRENCY)

    balances = aggregate_balances(snapshot.expenses, snapshot.members)
    settlements = plan_settlement(balances, currency=currency)

    return SettlementPlan(
        currency=currency,
        balances=balances,
        settlements=settlements,
        summary=summarize_settlements(balances, settlements, currency),
        warnings=collect_warnings(snapshot)
    )
