import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone

from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from inventra.config import Settings
from inventra.config import settings as default_settings
from inventra.errors import ConflictError, InventoryError, NotFoundError, PersistenceError, ValidationError
from inventra.models.item import Item, ItemStatus
from inventra.models.transaction import TransactionEntry, TransactionType
from inventra.schemas.item import ItemCreate, ItemUpdate
from inventra.services.category_service import get_category
from inventra.services.ledger import TransactionLedger

logger = logging.getLogger(__name__)


def _generate_sku(prefix: str) -> str:
    ts = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    short = uuid.uuid4().hex[:6].upper()
    return f"{prefix}-{ts}-{short}"


def _parse(schema: type[BaseModel], data):
    if isinstance(data, schema):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)
    try:
        return schema.model_validate(data)
    except SchemaValidationError as exc:
        raise ValidationError.from_pydantic(exc) from exc


def _require_actor(user_id: str | None) -> None:
    if not user_id or not str(user_id).strip():
        raise ValidationError.single("user_id", "Acting user is required")


class ItemStore:
    """Item records and the ledger entries their quantity changes produce."""

    def __init__(self, db: Session, settings: Settings | None = None):
        self.db = db
        self.settings = settings or default_settings
        self.ledger = TransactionLedger(db)

    # --- reads ---

    def find_by_id(self, item_id: str) -> Item | None:
        return self.db.get(Item, item_id)

    def get(self, item_id: str) -> Item:
        item = self.find_by_id(item_id)
        if item is None:
            raise NotFoundError("Item", item_id)
        return item

    def find_all(self, active_only: bool = True) -> list[Item]:
        q = self.db.query(Item)
        if active_only:
            q = q.filter(Item.status == ItemStatus.ACTIVE)
        return q.order_by(Item.name, Item.id).all()

    def recent(self, limit: int = 5) -> list[Item]:
        return (
            self.db.query(Item)
            .filter(Item.status == ItemStatus.ACTIVE)
            .order_by(Item.created_at.desc(), Item.id.desc())
            .limit(limit)
            .all()
        )

    def ledger_for(self, item_id: str) -> Iterator[TransactionEntry]:
        self.get(item_id)
        return self.ledger.list_by_item(item_id)

    # --- writes ---

    @contextmanager
    def _unit_of_work(self, action: str):
        try:
            yield
            self.db.commit()
        except InventoryError:
            self.db.rollback()
            raise
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Failed to %s: %s", action, exc)
            raise PersistenceError(f"Failed to {action}", details=str(exc)) from exc

    def _lock_item(self, item_id: str) -> Item | None:
        """Re-read the row inside the current transaction, locking it where the backend supports it."""
        return self.db.query(Item).filter(Item.id == item_id).with_for_update().populate_existing().first()

    def _sku_exists(self, sku: str) -> bool:
        return self.db.query(Item.id).filter(Item.sku == sku).first() is not None

    def create(self, draft, user_id: str) -> Item:
        _require_actor(user_id)
        data = _parse(ItemCreate, draft)
        if data.category_id and get_category(self.db, data.category_id) is None:
            raise NotFoundError("Category", data.category_id)
        if data.sku and self._sku_exists(data.sku):
            raise ConflictError(f"Item with SKU {data.sku} already exists")

        min_quantity = data.min_quantity
        if "min_quantity" not in data.model_fields_set:
            min_quantity = self.settings.DEFAULT_MIN_QUANTITY

        for attempt in range(1, self.settings.SKU_MAX_ATTEMPTS + 1):
            sku = data.sku or _generate_sku(self.settings.SKU_PREFIX)
            item = Item(
                sku=sku,
                barcode=data.barcode,
                name=data.name,
                description=data.description,
                category_id=data.category_id,
                quantity=data.quantity,
                min_quantity=min_quantity,
                price=data.price,
                location=data.location,
                status=ItemStatus.ACTIVE,
            )
            try:
                self.db.add(item)
                self.db.flush()
                self.ledger.append(
                    item_id=item.id,
                    user_id=user_id,
                    type=TransactionType.CHECK_IN,
                    quantity_change=data.quantity,
                    previous_quantity=0,
                    new_quantity=data.quantity,
                    notes="Initial stock entry",
                )
                self.db.commit()
            except IntegrityError as exc:
                self.db.rollback()
                if not self._sku_exists(sku):
                    logger.error("Failed to create item: %s", exc)
                    raise PersistenceError("Failed to create item", details=str(exc.orig)) from exc
                if data.sku:
                    raise ConflictError(f"Item with SKU {sku} already exists") from exc
                logger.warning("Generated SKU %s collided, regenerating (attempt %d)", sku, attempt)
                continue
            except SQLAlchemyError as exc:
                self.db.rollback()
                logger.error("Failed to create item: %s", exc)
                raise PersistenceError("Failed to create item", details=str(exc)) from exc

            logger.info("Created item %s (%s) qty=%d by user %s", item.id, sku, data.quantity, user_id)
            return self.get(item.id)

        raise ConflictError("Could not generate a unique SKU, retry the request")

    def update(
        self,
        item_id: str,
        patch,
        user_id: str,
        expected_quantity: int | None = None,
        note: str = "Manual adjustment",
    ) -> Item:
        _require_actor(user_id)
        data = _parse(ItemUpdate, patch)
        changes = data.model_dump(exclude_unset=True)

        with self._unit_of_work("update item"):
            item = self._lock_item(item_id)
            if item is None:
                raise NotFoundError("Item", item_id)
            if changes.get("category_id") and get_category(self.db, changes["category_id"]) is None:
                raise NotFoundError("Category", changes["category_id"])

            previous = item.quantity
            if expected_quantity is not None and expected_quantity != previous:
                raise ConflictError(
                    f"Item quantity changed (expected {expected_quantity}, found {previous}), reload and retry"
                )
            if not changes:
                return item

            new_quantity = changes.get("quantity", previous)
            q = self.db.query(Item).filter(Item.id == item_id)
            if new_quantity != previous:
                # Compare-and-set against the value the delta is computed from
                q = q.filter(Item.quantity == previous)
            updated = q.update({**changes, "updated_at": func.now()}, synchronize_session=False)
            if updated != 1:
                logger.warning("Concurrent quantity update on item %s (read %d)", item_id, previous)
                raise ConflictError("Item quantity was changed by another request, reload and retry")

            delta = new_quantity - previous
            if delta:
                self.ledger.append(
                    item_id=item_id,
                    user_id=user_id,
                    type=TransactionType.CHECK_IN if delta > 0 else TransactionType.CHECK_OUT,
                    quantity_change=abs(delta),
                    previous_quantity=previous,
                    new_quantity=new_quantity,
                    notes=note,
                )

        logger.info("Updated item %s fields=%s by user %s", item_id, sorted(changes), user_id)
        return self.get(item_id)

    def soft_delete(self, item_id: str, user_id: str) -> None:
        _require_actor(user_id)
        with self._unit_of_work("delete item"):
            updated = (
                self.db.query(Item)
                .filter(Item.id == item_id, Item.status == ItemStatus.ACTIVE)
                .update({"status": ItemStatus.INACTIVE, "updated_at": func.now()}, synchronize_session=False)
            )
            if updated != 1:
                raise NotFoundError("Item", item_id)
        logger.info("Soft-deleted item %s by user %s", item_id, user_id)
