from datetime import datetime

from pydantic import BaseModel

from inventra.models.transaction import TransactionType


class TransactionOut(BaseModel):
    id: int
    item_id: str
    user_id: str
    type: TransactionType
    quantity_change: int
    previous_quantity: int
    new_quantity: int
    notes: str
    created_at: datetime

    model_config = {"from_attributes": True}
