# fundytrack/db/models/transaction.py
import enum
from sqlalchemy import (
    Column, Integer, String, Numeric, Date, DateTime, ForeignKey, func,
    CheckConstraint, Enum as SQLAlchemyEnum,
)
from sqlalchemy.orm import relationship
from fundytrack.db.base_class import Base

class TransactionType(str, enum.Enum): # str subclass so pydantic/FastAPI treat it as a plain string
    expense = "expense"
    income = "income"

class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    description = Column(String(255), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False) # Magnitude only, the sign comes from type
    # VARCHAR + CHECK (type IN ('expense', 'income'))
    type = Column(
        SQLAlchemyEnum(TransactionType, name="transaction_type", native_enum=False, create_constraint=True, length=20),
        nullable=False,
    )
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="transactions")
    category = relationship("Category", back_populates="transactions")

    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_transaction_amount_non_negative"),
    )
