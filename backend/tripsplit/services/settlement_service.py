"""
Settlement service for automated fair settlement calculation.
"""
import heapq
import logging
from decimal import Decimal
from typing import Dict, List, Optional, Sequence
from tripsplit.core.config import settings
from tripsplit.core.exceptions import ImbalancedLedger
from tripsplit.core.utils import format_amount, from_minor_units, to_minor_units
from tripsplit.schemas.settlement import Balance, Settlement
from tripsplit.schemas.user import Member

logger = logging.getLogger(__name__)


class Transfer:
    """Represents a single transfer between users, in minor units."""
    def __init__(self, from_user_id: str, to_user_id: str, units: int):
        self.from_user_id = from_user_id
        self.to_user_id = to_user_id
        self.units = units


def plan_settlement(
    balances: Sequence[Balance],
    currency: Optional[str] = None,
    epsilon: Optional[Decimal] = None,
) -> List[Settlement]:
    """
    Plan the transfers that bring every balance to zero.

    Greedy matching of the largest creditor with the largest debtor, ties
    broken by user_id. Emits at most n - 1 transfers for n non-zero balances.
    Only exactly zero counts as settled: a 0.01 balance still gets a transfer.
    `epsilon` bounds how far the sum of all balances may be from zero.

    Raises:
        ImbalancedLedger: balances do not sum to zero within `epsilon`.
    """
    currency = currency or settings.DEFAULT_CURRENCY
    epsilon_units = to_minor_units(settings.SETTLEMENT_EPSILON if epsilon is None else epsilon)

    members: Dict[str, Member] = {}
    net_units: Dict[str, int] = {}  # user_id -> net balance (positive = owed, negative = owes)
    for balance in balances:
        members.setdefault(
            balance.user_id,
            Member(user_id=balance.user_id, display_name=balance.display_name)
        )
        net_units[balance.user_id] = net_units.get(balance.user_id, 0) + to_minor_units(balance.balance)

    difference = sum(net_units.values())
    if abs(difference) > epsilon_units:
        logger.error(f"Balances are off by {from_minor_units(difference)} {currency}; refusing to settle")
        raise ImbalancedLedger(from_minor_units(difference))

    transfers = minimize_transfers(net_units)

    settlements = [
        Settlement(
            from_member=members[t.from_user_id],
            to_member=members[t.to_user_id],
            amount=from_minor_units(t.units),
            currency=currency
        )
        for t in transfers
    ]
    logger.debug(f"Planned {len(settlements)} transfers for {len(net_units)} members")
    return settlements


def minimize_transfers(net_units: Dict[str, int]) -> List[Transfer]:
    """
    Minimize the number of transfers needed to settle debts.
    Uses a greedy algorithm over two heaps.
    """
    # Heaps ordered by largest amount first, then user_id
    creditors = [(-units, uid) for uid, units in net_units.items() if units > 0]
    debtors = [(units, uid) for uid, units in net_units.items() if units < 0]
    heapq.heapify(creditors)
    heapq.heapify(debtors)

    transfers = []
    while creditors and debtors:
        neg_credit, creditor_id = heapq.heappop(creditors)
        neg_debt, debtor_id = heapq.heappop(debtors)
        credit, debt = -neg_credit, -neg_debt

        # Transfer the minimum of what's owed and what's needed
        units = min(credit, debt)
        transfers.append(Transfer(debtor_id, creditor_id, units))

        if credit > units:
            heapq.heappush(creditors, (-(credit - units), creditor_id))
        if debt > units:
            heapq.heappush(debtors, (-(debt - units), debtor_id))

    # Whatever is left comes from a ledger off by a few cents
    for neg_credit, creditor_id in creditors:
        _absorb(transfers, -neg_credit, lambda t: t.to_user_id == creditor_id, creditor_id)
    for neg_debt, debtor_id in debtors:
        _absorb(transfers, -neg_debt, lambda t: t.from_user_id == debtor_id, debtor_id)

    return transfers


def _absorb(transfers: List[Transfer], units: int, touches, user_id: str) -> None:
    candidates = [t for t in transfers if touches(t)]
    if not candidates:
        logger.warning(f"Leftover of {units} minor units for {user_id} has no transfer to absorb it")
        return
    smallest = min(candidates, key=lambda t: t.units)
    smallest.units += units


def format_settlement(settlement: Settlement) -> str:
    """Render one settlement as shareable text, e.g. 'Alice pays Bob NT$100.00'."""
    return (
        f"{settlement.from_member.display_name} pays {settlement.to_member.display_name} "
        f"{format_amount(settlement.amount, settlement.currency)}"
    )


def summarize_settlements(
    balances: Sequence[Balance],
    settlements: Sequence[Settlement],
    currency: Optional[str] = None,
) -> str:
    """Create a plain-text settlement summary."""
    currency = currency or settings.DEFAULT_CURRENCY
    total_paid = sum((b.total_paid for b in balances), Decimal(0))

    summary_lines = []
    summary_lines.append(f"Total expenses: {format_amount(total_paid, currency)}")
    summary_lines.append(f"Participants: {len(balances)}")
    summary_lines.append("\nNet balances:")
    for balance in balances:
        sign = "+" if balance.balance > 0 else ""
        summary_lines.append(f"  {balance.display_name}: {sign}{format_amount(balance.balance, currency)}")
    summary_lines.append("\nTransfers:")
    if not settlements:
        summary_lines.append("  All settled up!")
    for settlement in settlements:
        summary_lines.append(f"  {format_settlement(settlement)}")
    return "\n".join(summary_lines)
