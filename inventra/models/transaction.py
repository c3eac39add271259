from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from inventra.database import Base


class TransactionType(str, PyEnum):
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"


class TransactionEntry(Base):
    """One immutable quantity change of an item. Rows are never updated or deleted."""

    __tablename__ = "transactions"

    # Autoincrement id doubles as the append order
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    item_id: Mapped[str] = mapped_column(String, ForeignKey("items.id"), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    type: Mapped[TransactionType] = mapped_column(Enum(TransactionType), nullable=False)
    quantity_change: Mapped[int] = mapped_column(Integer, nullable=False)  # magnitude only
    previous_quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    new_quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    notes: Mapped[str] = mapped_column(Text, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    @property
    def signed_change(self) -> int:
        if self.type == TransactionType.CHECK_OUT:
            return -self.quantity_change
        return self.quantity_change
