# expense_api/models/budget.py
from sqlalchemy import Column, ForeignKey, Float, Uuid
from sqlalchemy.orm import relationship
from expense_api.core.database import Base

class Budget(Base):
    """Monthly spending limit for one of the user's categories."""
    __tablename__ = "budgets"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    category_id = Column(Uuid(as_uuid=True), ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True)
    amount = Column(Float, nullable=False, default=0.0)

    category = relationship("Category", lazy="joined")

    def __repr__(self):
        return f"<Budget category_id={self.category_id} amount={self.amount}>"
