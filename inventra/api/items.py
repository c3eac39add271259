from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from inventra.api.auth import get_current_user
from inventra.api.deps import get_item_store, get_query_engine, get_settings
from inventra.config import Settings
from inventra.database import get_db
from inventra.models.user import User
from inventra.schemas.item import ItemCreate, ItemListOut, ItemOut, ItemUpdate
from inventra.schemas.transaction import TransactionOut
from inventra.services import summary_service
from inventra.services.item_store import ItemStore
from inventra.services.query_engine import ItemFilter, ItemSort, QueryEngine

router = APIRouter(prefix="/items", tags=["Items"], dependencies=[Depends(get_current_user)])


@router.post("", response_model=ItemOut, status_code=201)
def create_item(data: ItemCreate, user: User = Depends(get_current_user), store: ItemStore = Depends(get_item_store)):
    return store.create(data, user.id)


@router.get("", response_model=ItemListOut)
def list_items(
    category: str | None = None,
    status: str | None = None,
    search: str | None = None,
    sort_by: str = Query("name", alias="sortBy"),
    order: str = "asc",
    page: int = 1,
    limit: int | None = None,
    include_inactive: bool = False,
    engine: QueryEngine = Depends(get_query_engine),
):
    item_filter = ItemFilter(category=category, status=status, search=search, include_inactive=include_inactive)
    items, meta = engine.list(item_filter, ItemSort(field=sort_by, order=order), page=page, limit=limit)
    return ItemListOut(data=[ItemOut.model_validate(i) for i in items], pagination=meta)


@router.get("/stats/summary")
def item_summary(db: Session = Depends(get_db)):
    return {"success": True, "data": summary_service.get_summary(db)}


@router.get("/dashboard/recent", response_model=list[ItemOut])
def recent_items(
    limit: int = Query(5, ge=1),
    settings: Settings = Depends(get_settings),
    store: ItemStore = Depends(get_item_store),
):
    return store.recent(min(limit, settings.MAX_PAGE_SIZE))


@router.get("/{item_id}", response_model=ItemOut)
def get_item(item_id: str, store: ItemStore = Depends(get_item_store)):
    return store.get(item_id)


@router.put("/{item_id}", response_model=ItemOut)
@router.patch("/{item_id}", response_model=ItemOut)
def update_item(
    item_id: str,
    data: ItemUpdate,
    expected_quantity: int | None = None,
    user: User = Depends(get_current_user),
    store: ItemStore = Depends(get_item_store),
):
    return store.update(item_id, data, user.id, expected_quantity=expected_quantity)


@router.delete("/{item_id}")
def delete_item(item_id: str, user: User = Depends(get_current_user), store: ItemStore = Depends(get_item_store)):
    store.soft_delete(item_id, user.id)
    return {"success": True, "message": "Item deleted successfully"}


@router.get("/{item_id}/transactions", response_model=list[TransactionOut])
def item_transactions(item_id: str, store: ItemStore = Depends(get_item_store)):
    return list(store.ledger_for(item_id))
