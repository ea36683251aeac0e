# expense_api/models/category.py
import uuid
from sqlalchemy import Column, String, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from expense_api.core.database import Base

class Category(Base):
    __tablename__ = "categories"
    # Names are unique per user; the case-insensitive check happens before insert
    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_categories_user_name"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(length=60), nullable=False)
    color = Column(String(length=16), nullable=True)

    expenses = relationship("Expense", back_populates="category", passive_deletes=True)

    def __repr__(self):
        return f"<Category name={self.name} user_id={self.user_id}>"
