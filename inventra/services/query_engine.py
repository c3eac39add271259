import math
from dataclasses import dataclass

from sqlalchemy import ColumnElement, func, or_
from sqlalchemy.orm import Query, Session, contains_eager

from inventra.config import Settings
from inventra.config import settings as default_settings
from inventra.models.category import Category
from inventra.models.item import Item, ItemStatus
from inventra.schemas.item import PaginationMeta
from inventra.services.stock import parse_status, status_clause

SORT_COLUMNS = {
    "name": Item.name,
    "quantity": Item.quantity,
    "price": Item.price,
    "created_at": Item.created_at,
    "category_name": Category.name,
}
DEFAULT_SORT = "name"


@dataclass(frozen=True)
class ItemFilter:
    """Which items a listing covers. Shared by the count and the page fetch."""

    category: str | None = None
    status: str | None = None
    search: str | None = None
    include_inactive: bool = False

    def clauses(self) -> tuple[ColumnElement[bool], ...]:
        clauses = []
        if not self.include_inactive:
            clauses.append(Item.status == ItemStatus.ACTIVE)
        if self.category and self.category != "all":
            clauses.append(or_(Category.name == self.category, Category.id == self.category))
        stock_status = parse_status(self.status)
        if stock_status is not None:
            clauses.append(status_clause(stock_status, Item.quantity, Item.min_quantity))
        term = (self.search or "").strip()
        if term:
            clauses.append(
                or_(
                    Item.name.icontains(term, autoescape=True),
                    Item.description.icontains(term, autoescape=True),
                    Item.sku.icontains(term, autoescape=True),
                )
            )
        return tuple(clauses)


@dataclass(frozen=True)
class ItemSort:
    field: str = DEFAULT_SORT
    order: str = "asc"

    def order_by(self) -> tuple:
        column = SORT_COLUMNS.get(self.field, SORT_COLUMNS[DEFAULT_SORT])
        descending = (self.order or "").lower() == "desc"
        primary = column.desc() if descending else column.asc()
        return primary, Item.id.asc()


class QueryEngine:
    def __init__(self, db: Session, settings: Settings | None = None):
        self.db = db
        self.settings = settings or default_settings

    @staticmethod
    def _scoped(q: Query, item_filter: ItemFilter) -> Query:
        return q.outerjoin(Category, Item.category_id == Category.id).filter(*item_filter.clauses())

    def _normalize(self, page: int | None, limit: int | None) -> tuple[int, int]:
        page = page if page and page > 0 else 1
        if not limit or limit <= 0:
            limit = self.settings.DEFAULT_PAGE_SIZE
        return page, min(limit, self.settings.MAX_PAGE_SIZE)

    def count(self, item_filter: ItemFilter) -> int:
        q = self._scoped(self.db.query(func.count(Item.id)).select_from(Item), item_filter)
        return q.scalar() or 0

    def list(
        self,
        item_filter: ItemFilter | None = None,
        sort: ItemSort | None = None,
        page: int | None = 1,
        limit: int | None = None,
    ) -> tuple[list[Item], PaginationMeta]:
        item_filter = item_filter or ItemFilter()
        sort = sort or ItemSort()
        page, limit = self._normalize(page, limit)

        total = self.count(item_filter)
        items = (
            self._scoped(self.db.query(Item), item_filter)
            .options(contains_eager(Item.category))
            .order_by(*sort.order_by())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        meta = PaginationMeta(
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit),
        )
        return items, meta
