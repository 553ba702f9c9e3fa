"""
Pydantic schemas for the split calculator.
"""
import enum
from pydantic import Field
from typing import Dict, List, Optional
from decimal import Decimal
from tripsplit.schemas.base import CamelModel
from tripsplit.schemas.expense import ExpenseSplit


class SplitMethod(str, enum.Enum):
    """How an expense amount is divided among participants."""
    EQUAL = "equal"
    RATIO = "ratio"
    CUSTOM = "custom"


class SplitRequest(CamelModel):
    """Schema for split calculation request."""
    amount: Decimal
    method: SplitMethod = SplitMethod.EQUAL
    participants: List[str] = Field(default_factory=list)
    weights: Optional[Dict[str, Decimal]] = None  # ratio method: user_id -> weight
    custom_amounts: Optional[Dict[str, Decimal]] = None  # custom method: user_id -> amount


class SplitResult(CamelModel):
    """
    Schema for split calculation result.

    For custom splits out of tolerance `is_valid` is False and `splits` holds
    the caller's raw amounts; `amount_difference` is amount - sum(splits).
    """
    method: SplitMethod
    amount: Decimal
    splits: List[ExpenseSplit]
    amount_difference: Decimal = Decimal("0")
    is_valid: bool = True
