"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from tripsplit.api.routes import expenses, settlements, splits

api_router = APIRouter()

# Include all route modules
api_router.include_router(splits.router)
api_router.include_router(settlements.router)
api_router.include_router(expenses.router)
