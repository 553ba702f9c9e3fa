"""
Pydantic schemas for Expense entity.
"""
import enum
from pydantic import Field
from typing import List, Optional
from decimal import Decimal
from tripsplit.core.config import settings
from tripsplit.schemas.base import CamelModel
from tripsplit.schemas.user import Member


class ExpenseCategory(str, enum.Enum):
    """Expense category enumeration."""
    TRANSPORT = "transport"
    FOOD = "food"
    ACCOMMODATION = "accommodation"
    TICKET = "ticket"
    SHOPPING = "shopping"
    OTHER = "other"


class ExpenseSplit(CamelModel):
    """Portion of one expense attributed to one member."""
    user_id: str
    amount: Decimal = Field(..., ge=0)


class Expense(CamelModel):
    """
    A shared expense with its split already computed.

    The split sum is not enforced here; snapshots are validated with
    `validate_expense` and imbalances are reported by the settlement planner.
    """
    id: Optional[str] = None
    trip_id: Optional[str] = None
    title: str = ""
    amount: Decimal = Field(..., gt=0)
    currency: str = Field(default_factory=lambda: settings.DEFAULT_CURRENCY)
    category: ExpenseCategory = ExpenseCategory.OTHER
    paid_by: str
    split_among: List[ExpenseSplit] = []


class ExpenseCreate(CamelModel):
    """Schema for an expense being entered, before validation."""
    title: Optional[str] = None
    amount: Optional[Decimal] = None
    currency: str = Field(default_factory=lambda: settings.DEFAULT_CURRENCY)
    category: ExpenseCategory = ExpenseCategory.OTHER
    paid_by: Optional[str] = None
    split_among: List[ExpenseSplit] = []


class ExpenseValidationRequest(CamelModel):
    """Schema for validating an expense against the trip roster."""
    expense: ExpenseCreate
    members: List[Member] = []


class ExpenseValidationResult(CamelModel):
    """Schema for expense validation response."""
    is_valid: bool
    errors: List[str] = []
    amount_difference: Decimal = Decimal("0")


class CategoryExpenseItem(CamelModel):
    """Schema for category expense item in summary."""
    category: ExpenseCategory
    amount: Decimal
    expense_count: int
    percentage: float  # Percentage of total expenses (0-100)


class CurrencyItem(CamelModel):
    """Schema for a supported currency."""
    code: str
    name: str
    symbol: str
