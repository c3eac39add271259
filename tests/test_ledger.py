import pytest

from inventra.models.transaction import TransactionType
from inventra.services.ledger import TransactionLedger


def test_append_rejects_broken_arithmetic(db, store, user_id):
    item = store.create({"name": "Widget", "quantity": 4}, user_id)
    ledger = TransactionLedger(db)
    with pytest.raises(ValueError):
        ledger.append(item.id, user_id, TransactionType.CHECK_IN, 3, 4, 8)
    with pytest.raises(ValueError):
        ledger.append(item.id, user_id, TransactionType.CHECK_OUT, -2, 4, 6)
    db.rollback()
    assert len(list(ledger.list_by_item(item.id))) == 1


def test_list_by_item_is_oldest_first_and_restartable(db, store, user_id):
    item = store.create({"name": "Widget", "quantity": 1}, user_id)
    for qty in (5, 2, 7):
        store.update(item.id, {"quantity": qty}, user_id)

    ledger = TransactionLedger(db)
    first = [(e.previous_quantity, e.new_quantity) for e in ledger.list_by_item(item.id)]
    second = [(e.previous_quantity, e.new_quantity) for e in ledger.list_by_item(item.id)]
    assert first == [(0, 1), (1, 5), (5, 2), (2, 7)]
    assert first == second


def test_replay_reproduces_current_quantity(db, store, user_id):
    item = store.create({"name": "Widget", "quantity": 12}, user_id)
    for qty in (12, 0, 30, 29, 29, 4, 100):
        store.update(item.id, {"quantity": qty}, user_id)

    ledger = TransactionLedger(db)
    assert ledger.replay(item.id) == store.get(item.id).quantity == 100

    entries = list(ledger.list_by_item(item.id))
    for prev, nxt in zip(entries, entries[1:]):
        assert nxt.previous_quantity == prev.new_quantity
    for entry in entries:
        assert entry.previous_quantity + entry.signed_change == entry.new_quantity
        assert entry.quantity_change >= 0


def test_replay_unknown_item(db):
    assert TransactionLedger(db).replay("missing") is None


def test_history_survives_soft_delete(db, store, user_id):
    item = store.create({"name": "Widget", "quantity": 8}, user_id)
    store.update(item.id, {"quantity": 3}, user_id)
    store.soft_delete(item.id, user_id)

    ledger = TransactionLedger(db)
    assert len(list(ledger.list_by_item(item.id))) == 2
    assert ledger.replay(item.id) == 3


def test_recent_is_newest_first(db, store, user_id):
    a = store.create({"name": "A", "quantity": 1}, user_id)
    b = store.create({"name": "B", "quantity": 2}, user_id)
    store.update(a.id, {"quantity": 9}, user_id)

    recent = TransactionLedger(db).recent(limit=2)
    assert [(e.item_id, e.new_quantity) for e in recent] == [(a.id, 9), (b.id, 2)]
