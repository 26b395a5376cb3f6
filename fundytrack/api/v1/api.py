# fundytrack/api/v1/api.py
from fastapi import APIRouter

from fundytrack.api.v1.endpoints import users
from fundytrack.api.v1.endpoints import transactions
from fundytrack.api.v1.endpoints import categories
from fundytrack.api.v1.endpoints import budget
from fundytrack.api.v1.endpoints import dashboard

api_router = APIRouter()

api_router.include_router(users.router, tags=["Users"])
api_router.include_router(transactions.router, prefix="/transactions", tags=["Transactions"])
api_router.include_router(categories.router, prefix="/categories", tags=["Categories"])
api_router.include_router(budget.router, prefix="/budget", tags=["Budget"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
