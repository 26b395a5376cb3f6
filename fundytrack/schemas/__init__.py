from .user import User, UserCreate, UserUpdate, CurrentUserResponse
from .category import Category, CategoryCreate, CategoryUpdate
from .transaction import (
    Transaction,
    TransactionCreate,
    TransactionUpdate,
    TransactionListResponse,
)
from .budget import (
    MonthlyBudget,
    MonthlyBudgetUpdate,
    CategoryBudget,
    CategoryBudgetUpdate,
    CategoryBudgetList,
)
from .dashboard import (
    MonthlySummary,
    BudgetEvaluation,
    CategoryBudgetStatus,
    DashboardResponse,
)
