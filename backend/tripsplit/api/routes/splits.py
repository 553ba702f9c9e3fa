"""
Split calculation routes.
"""
from fastapi import APIRouter
from tripsplit.schemas.split import SplitRequest, SplitResult
from tripsplit.services.split_service import compute_split

router = APIRouter(prefix="/splits", tags=["splits"])


@router.post("", response_model=SplitResult)
async def calculate_split(split_request: SplitRequest):
    """
    Calculate the per-member shares of one expense.
    A custom split that does not add up comes back with isValid false.
    """
    return compute_split(
        amount=split_request.amount,
        method=split_request.method,
        participants=split_request.participants,
        weights=split_request.weights,
        custom_amounts=split_request.custom_amounts
    )
