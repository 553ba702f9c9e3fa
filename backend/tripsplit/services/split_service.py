"""
Split service: divides one expense amount among its participants.
"""
import logging
from decimal import Decimal, ROUND_FLOOR
from typing import Dict, List, Mapping, Optional, Sequence
from tripsplit.core.config import settings
from tripsplit.core.exceptions import InvalidSplit
from tripsplit.core.utils import (
    from_minor_units, has_currency_precision, to_minor_units
)
from tripsplit.schemas.expense import ExpenseSplit
from tripsplit.schemas.split import SplitMethod, SplitResult

logger = logging.getLogger(__name__)


def _check_amount(amount: Decimal) -> Decimal:
    amount = Decimal(amount)
    if amount <= 0:
        raise InvalidSplit("Amount must be greater than zero", {"amount": str(amount)})
    if not has_currency_precision(amount):
        raise InvalidSplit(
            f"Amount must have at most {settings.CURRENCY_PRECISION} decimal places",
            {"amount": str(amount)}
        )
    return amount


def _check_participants(participants: Sequence[str]) -> List[str]:
    participants = list(participants)
    if not participants:
        raise InvalidSplit("Select at least one member to split with")
    duplicates = sorted({p for p in participants if participants.count(p) > 1})
    if duplicates:
        raise InvalidSplit(
            "A member can appear only once per expense",
            {"duplicates": duplicates}
        )
    return participants


def distribute_residual(total_units: int, shares: Dict[str, int]) -> Dict[str, int]:
    """
    Add the cents lost to rounding down back onto the shares.

    One cent each goes to the first members ordered by user_id, so the result
    sums exactly to `total_units` and is deterministic.
    """
    residual = total_units - sum(shares.values())
    if residual < 0 or residual > len(shares):
        raise InvalidSplit("Shares cannot be reconciled with the amount")
    result = dict(shares)
    for user_id in sorted(result)[:residual]:
        result[user_id] += 1
    return result


def split_equally(amount: Decimal, user_ids: Sequence[str]) -> List[ExpenseSplit]:
    """Split an amount evenly; shares differ by at most one cent."""
    amount = _check_amount(amount)
    user_ids = _check_participants(user_ids)

    total_units = to_minor_units(amount)
    base_share = total_units // len(user_ids)
    shares = distribute_residual(total_units, {uid: base_share for uid in user_ids})

    return [
        ExpenseSplit(user_id=uid, amount=from_minor_units(shares[uid]))
        for uid in user_ids
    ]


def split_by_ratio(amount: Decimal, ratios: Mapping[str, Decimal]) -> List[ExpenseSplit]:
    """
    Split an amount proportionally to non-negative weights.

    Members with weight 0 are left out of the result.
    """
    amount = _check_amount(amount)
    weights = {uid: Decimal(w) for uid, w in ratios.items()}

    negative = sorted(uid for uid, w in weights.items() if w < 0)
    if negative:
        raise InvalidSplit("Ratios cannot be negative", {"user_ids": negative})

    weights = {uid: w for uid, w in weights.items() if w > 0}
    if not weights:
        raise InvalidSplit("At least one member needs a ratio greater than zero")

    total_units = to_minor_units(amount)
    total_weight = sum(weights.values())
    shares = {
        uid: int((Decimal(total_units) * w / total_weight).to_integral_value(rounding=ROUND_FLOOR))
        for uid, w in weights.items()
    }
    shares = distribute_residual(total_units, shares)

    return [
        ExpenseSplit(user_id=uid, amount=from_minor_units(shares[uid]))
        for uid in weights
    ]


def split_by_amount(amounts: Mapping[str, Decimal]) -> List[ExpenseSplit]:
    """Pass explicit amounts through; zero amounts are left out."""
    negative = sorted(uid for uid, a in amounts.items() if Decimal(a) < 0)
    if negative:
        raise InvalidSplit("Amounts cannot be negative", {"user_ids": negative})
    imprecise = sorted(uid for uid, a in amounts.items() if not has_currency_precision(a))
    if imprecise:
        raise InvalidSplit(
            f"Amounts must have at most {settings.CURRENCY_PRECISION} decimal places",
            {"user_ids": imprecise}
        )
    return [
        ExpenseSplit(user_id=uid, amount=Decimal(a))
        for uid, a in amounts.items()
        if Decimal(a) > 0
    ]


def compute_split(
    amount: Decimal,
    method: SplitMethod,
    participants: Sequence[str],
    weights: Optional[Mapping[str, Decimal]] = None,
    custom_amounts: Optional[Mapping[str, Decimal]] = None,
) -> SplitResult:
    """
    Compute the per-member shares of one expense.

    `equal` and `ratio` always return splits that sum exactly to `amount`.
    `custom` returns the caller's amounts; when they are off by more than
    SPLIT_TOLERANCE the result is flagged invalid with `amount_difference`
    set, instead of being corrected.

    Only listed participants take part: weights or custom amounts for users
    outside `participants` are ignored, and participants without one count
    as zero.

    Raises:
        InvalidSplit: non-positive amount, empty or duplicated participants,
            no positive ratio, or amounts below currency precision.
    """
    method = SplitMethod(method)
    amount = _check_amount(amount)
    participants = _check_participants(participants)

    if method == SplitMethod.EQUAL:
        splits = split_equally(amount, participants)

    elif method == SplitMethod.RATIO:
        weights = weights or {}
        splits = split_by_ratio(
            amount, {uid: weights.get(uid, Decimal(0)) for uid in participants}
        )

    else:
        custom_amounts = custom_amounts or {}
        splits = split_by_amount(
            {uid: custom_amounts.get(uid, Decimal(0)) for uid in participants}
        )
        difference = amount - sum((s.amount for s in splits), Decimal(0))
        if abs(difference) > settings.SPLIT_TOLERANCE:
            logger.debug(f"Custom split off by {difference} for amount {amount}")
            return SplitResult(
                method=method,
                amount=amount,
                splits=splits,
                amount_difference=difference,
                is_valid=False
            )
        return SplitResult(
            method=method,
            amount=amount,
            splits=splits,
            amount_difference=difference
        )

    logger.debug(f"Split {amount} by {method.value} among {len(splits)} members")
    return SplitResult(method=method, amount=amount, splits=splits)
