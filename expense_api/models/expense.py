# expense_api/models/expense.py
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, ForeignKey, Float, Date, DateTime, Uuid
from sqlalchemy.orm import relationship
from expense_api.core.database import Base

class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(Uuid(as_uuid=True), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    amount = Column(Float, nullable=False)
    note = Column(String(length=280), nullable=True)
    incurred_on = Column(Date, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

    category = relationship("Category", back_populates="expenses", lazy="joined")    # see category.py

    def __repr__(self):
        return f"<Expense amount={self.amount} incurred_on={self.incurred_on} user_id={self.user_id}>"
