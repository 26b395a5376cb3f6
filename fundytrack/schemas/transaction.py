# fundytrack/schemas/transaction.py
from pydantic import BaseModel, Field
from typing import Optional, List
from decimal import Decimal
from datetime import date as date_type
from fundytrack.db.models.transaction import TransactionType

# Same bounds as the Numeric(12, 2) column, checked before anything is stored
AMOUNT_CONSTRAINTS = dict(ge=0, max_digits=12, decimal_places=2, allow_inf_nan=False)

class TransactionBase(BaseModel):
    date: date_type
    description: str = Field(..., min_length=1, max_length=255)
    amount: Decimal = Field(..., **AMOUNT_CONSTRAINTS) # Always a magnitude, type carries the sign
    type: TransactionType
    category_id: Optional[int] = None # None means "Uncategorized"

class TransactionCreate(TransactionBase):
    pass

class TransactionUpdate(BaseModel):
    date: Optional[date_type] = None
    description: Optional[str] = Field(None, min_length=1, max_length=255)
    amount: Optional[Decimal] = Field(None, **AMOUNT_CONSTRAINTS)
    type: Optional[TransactionType] = None
    category_id: Optional[int] = None

class Transaction(TransactionBase):
    id: int
    amount: float
    category_name: Optional[str] = None

    class Config:
        from_attributes = True

class TransactionListResponse(BaseModel):
    transactions: List[Transaction]
    total_count: int
