"""
Pydantic schemas for balances and settlements.
"""
from pydantic import Field
from typing import List, Optional
from decimal import Decimal
from tripsplit.schemas.base import CamelModel
from tripsplit.schemas.expense import Expense, CategoryExpenseItem
from tripsplit.schemas.user import Member


class Balance(CamelModel):
    """Net position of one member (positive = is owed money, negative = owes money)."""
    user_id: str
    display_name: str
    total_paid: Decimal = Decimal("0")
    total_owed: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")
    is_member: bool = True  # False when the user appears in expenses but not in the roster


class Settlement(CamelModel):
    """One advisory transfer: `from_member` pays `to_member`."""
    from_member: Member = Field(..., alias="from")
    to_member: Member = Field(..., alias="to")
    amount: Decimal
    currency: str


class LedgerSnapshot(CamelModel):
    """Schema for a trip's expense snapshot and roster."""
    expenses: List[Expense] = []
    members: List[Member] = []
    currency: Optional[str] = None


class BalanceReport(CamelModel):
    """Schema for balance aggregation response."""
    balances: List[Balance]
    warnings: List[str] = []


class SettlementPlan(CamelModel):
    """Schema for settlement plan response."""
    currency: str
    balances: List[Balance]
    settlements: List[Settlement]
    summary: str
    warnings: List[str] = []


class ExpenseSummary(CamelModel):
    """Schema for expense summary response."""
    total_amount: Decimal
    currency: str
    by_category: List[CategoryExpenseItem]
    by_payer: List[Balance]
