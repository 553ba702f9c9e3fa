"""
Expense summary and validation routes.
"""
from typing import List
from fastapi import APIRouter
from tripsplit.core.utils import SUPPORTED_CURRENCIES
from tripsplit.schemas.expense import (
    CurrencyItem, ExpenseCategory, ExpenseValidationRequest, ExpenseValidationResult
)
from tripsplit.schemas.settlement import ExpenseSummary, LedgerSnapshot
from tripsplit.services.balance_service import summarize_expenses
from tripsplit.services.expense_service import validate_expense

router = APIRouter(prefix="/expenses", tags=["expenses"])


@router.get("/categories", response_model=List[ExpenseCategory])
async def get_categories():
    """List expense categories."""
    return list(ExpenseCategory)


@router.get("/currencies", response_model=List[CurrencyItem])
async def get_currencies():
    """List supported currencies."""
    return SUPPORTED_CURRENCIES


@router.post("/summary", response_model=ExpenseSummary)
async def get_expense_summary(snapshot: LedgerSnapshot):
    """
    Get expense summary for a trip.
    Returns the total, category breakdown and member balances.
    """
    return summarize_expenses(snapshot.expenses, snapshot.members)


@router.post("/validate", response_model=ExpenseValidationResult)
async def check_expense(validation_request: ExpenseValidationRequest):
    """Validate an expense against the trip roster before saving it."""
    return validate_expense(validation_request.expense, validation_request.members)
