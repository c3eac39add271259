from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from inventra.models.item import ItemStatus
from inventra.services.stock import StockStatus


class ItemCreate(BaseModel):
    name: str
    category_id: str | None = None
    quantity: int = Field(default=0, ge=0)
    min_quantity: int = Field(default=5, ge=0)
    price: Decimal | None = Field(default=None, ge=0)
    location: str = ""
    description: str = ""
    sku: str | None = None
    barcode: str | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Item name is required")
        return v

    @field_validator("sku", "barcode", "category_id")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v


class ItemUpdate(BaseModel):
    """Fields a caller may change. Anything else in the payload is ignored."""

    name: str | None = None
    category_id: str | None = None
    quantity: int | None = Field(default=None, ge=0)
    min_quantity: int | None = Field(default=None, ge=0)
    price: Decimal | None = Field(default=None, ge=0)
    location: str | None = None
    description: str | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str | None) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("Item name cannot be empty")
        return v

    @field_validator("quantity", "min_quantity")
    @classmethod
    def not_null(cls, v: int | None) -> int:
        if v is None:
            raise ValueError("Value cannot be null")
        return v

    @field_validator("location", "description")
    @classmethod
    def null_to_empty(cls, v: str | None) -> str:
        return v or ""

    @field_validator("category_id")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class ItemOut(BaseModel):
    id: str
    sku: str
    barcode: str | None = None
    name: str
    description: str
    category_id: str | None = None
    category_name: str | None = None
    quantity: int
    min_quantity: int
    price: float | None = None
    location: str
    status: ItemStatus
    stock_status: StockStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PaginationMeta(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int = Field(serialization_alias="totalPages")


class ItemListOut(BaseModel):
    success: bool = True
    data: list[ItemOut]
    pagination: PaginationMeta
