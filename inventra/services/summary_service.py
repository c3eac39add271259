from sqlalchemy import and_, case, func
from sqlalchemy.orm import Session

from inventra.models.category import Category
from inventra.models.item import Item, ItemStatus
from inventra.services.item_store import ItemStore
from inventra.services.stock import StockStatus, status_clause


def _count_where(clause):
    return func.coalesce(func.sum(case((clause, 1), else_=0)), 0)


def get_summary(db: Session) -> dict:
    """Aggregates over active items, counted with the same thresholds as ``classify``.

    ``avg_price`` averages only items priced above zero; unpriced and free
    items do not pull it down.
    """
    row = (
        db.query(
            func.count(Item.id),
            func.coalesce(func.sum(Item.quantity), 0),
            _count_where(status_clause(StockStatus.LOW_STOCK, Item.quantity, Item.min_quantity)),
            _count_where(status_clause(StockStatus.OUT_OF_STOCK, Item.quantity, Item.min_quantity)),
            func.coalesce(func.sum(Item.price * Item.quantity), 0),
            func.avg(case((Item.price > 0, Item.price), else_=None)),
            func.count(func.distinct(Item.category_id)),
        )
        .filter(Item.status == ItemStatus.ACTIVE)
        .one()
    )
    total_items, total_quantity, low_stock, out_of_stock, total_value, avg_price, categories = row

    return {
        "total_items": total_items,
        "total_quantity": int(total_quantity),
        "low_stock": int(low_stock),
        "out_of_stock": int(out_of_stock),
        "total_value": round(float(total_value or 0), 2),
        "avg_price": round(float(avg_price or 0), 2),
        "categories_count": categories,
    }


def top_categories(db: Session, limit: int = 5) -> list[dict]:
    item_join = and_(Item.category_id == Category.id, Item.status == ItemStatus.ACTIVE)
    item_count = func.count(Item.id)
    rows = (
        db.query(
            Category.name,
            item_count,
            func.coalesce(func.sum(Item.price * Item.quantity), 0),
        )
        .outerjoin(Item, item_join)
        .group_by(Category.id, Category.name)
        .order_by(item_count.desc(), Category.name)
        .limit(limit)
        .all()
    )
    return [
        {"name": name, "item_count": count, "total_value": round(float(value or 0), 2)}
        for name, count, value in rows
    ]


def dashboard(db: Session, recent_limit: int = 5) -> dict:
    return {
        **get_summary(db),
        "recent_items": ItemStore(db).recent(recent_limit),
        "top_categories": top_categories(db),
    }
