import logging
from collections.abc import Iterator

from sqlalchemy.orm import Session

from inventra.models.transaction import TransactionEntry, TransactionType

logger = logging.getLogger(__name__)


class TransactionLedger:
    """Append-only history of quantity changes.

    The ledger never commits. Appends join whatever transaction the caller
    has open, so the item write and its entry land or fail together.
    """

    def __init__(self, db: Session):
        self.db = db

    def append(
        self,
        item_id: str,
        user_id: str,
        type: TransactionType,
        quantity_change: int,
        previous_quantity: int,
        new_quantity: int,
        notes: str = "",
    ) -> TransactionEntry:
        if quantity_change < 0:
            raise ValueError(f"quantity_change must be a magnitude, got {quantity_change}")
        signed = quantity_change if type == TransactionType.CHECK_IN else -quantity_change
        if previous_quantity + signed != new_quantity:
            raise ValueError(
                f"Ledger arithmetic mismatch: {previous_quantity} {type.value} {quantity_change} != {new_quantity}"
            )
        entry = TransactionEntry(
            item_id=item_id,
            user_id=user_id,
            type=type,
            quantity_change=quantity_change,
            previous_quantity=previous_quantity,
            new_quantity=new_quantity,
            notes=notes,
        )
        self.db.add(entry)
        self.db.flush()
        logger.debug(
            "Ledger append item=%s %s %d (%d -> %d)",
            item_id, type.value, quantity_change, previous_quantity, new_quantity,
        )
        return entry

    def list_by_item(self, item_id: str) -> Iterator[TransactionEntry]:
        """Oldest-first entries for one item. Each call runs a fresh query."""
        yield from (
            self.db.query(TransactionEntry)
            .filter(TransactionEntry.item_id == item_id)
            .order_by(TransactionEntry.id.asc())
            .yield_per(100)
        )

    def replay(self, item_id: str) -> int | None:
        """Rebuild the quantity from history. ``None`` when the item has no entries."""
        quantity = None
        for entry in self.list_by_item(item_id):
            if quantity is None:
                quantity = entry.previous_quantity
            quantity += entry.signed_change
        return quantity

    def recent(self, limit: int = 20) -> list[TransactionEntry]:
        return self.db.query(TransactionEntry).order_by(TransactionEntry.id.desc()).limit(limit).all()
