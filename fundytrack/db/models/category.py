# fundytrack/db/models/category.py
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, func
from sqlalchemy.orm import relationship
from fundytrack.db.base_class import Base

DEFAULT_CATEGORY_COLOR = "#CCCCCC"

class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    color = Column(String(20), nullable=False, default=DEFAULT_CATEGORY_COLOR, server_default=DEFAULT_CATEGORY_COLOR)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="categories")
    # No cascade here: deleting a category that transactions still point to is rejected
    transactions = relationship("Transaction", back_populates="category", passive_deletes="all")
    budgets = relationship("CategoryBudget", back_populates="category", cascade="all, delete-orphan", passive_deletes=True)
