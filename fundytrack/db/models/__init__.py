from .user import User
from .category import Category, DEFAULT_CATEGORY_COLOR
from .transaction import Transaction, TransactionType
from .budget import MonthlyBudget, CategoryBudget
