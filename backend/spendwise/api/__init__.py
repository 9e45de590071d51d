from fastapi import APIRouter

from .budgets import router as budgets_router
from .categories import router as categories_router
from .transactions import router as transactions_router
from .receipts import router as receipts_router
from .settings import router as settings_router
from .summary import router as summary_router

api_router = APIRouter()

api_router.include_router(budgets_router, prefix="/budgets", tags=["budgets"])
api_router.include_router(categories_router, prefix="/categories", tags=["categories"])
api_router.include_router(transactions_router, prefix="/transactions", tags=["transactions"])
api_router.include_router(receipts_router, prefix="/receipts", tags=["receipts"])
api_router.include_router(settings_router, tags=["settings"])
api_router.include_router(summary_router, prefix="/summary", tags=["summary"])
