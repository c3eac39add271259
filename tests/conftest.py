from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from inventra.config import Settings
from inventra.database import init_db, make_engine, make_session_factory
from inventra.main import create_app
from inventra.models.category import Category
from inventra.services import auth_service
from inventra.services.item_store import ItemStore

ADMIN_PASSWORD = "admin-pass"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite:///{tmp_path / 'inventra-test.db'}",
        ENVIRONMENT="testing",
        SECRET_KEY="test-secret",
        ADMIN_PASSWORD=ADMIN_PASSWORD,
    )


@pytest.fixture
def engine(settings):
    engine = make_engine(settings)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def user_id(db):
    return auth_service.create_user(db, "clerk", "clerk-pass").id


@pytest.fixture
def store(db, settings):
    return ItemStore(db, settings)


@pytest.fixture
def inventory(db, store, user_id):
    """Five active items across two categories plus one soft-deleted item."""
    tools = Category(name="Tools", description="Hand tools")
    paint = Category(name="Paint")
    db.add_all([tools, paint])
    db.commit()

    rows = [
        {"name": "Hammer", "sku": "HAM-001", "category_id": tools.id, "quantity": 10, "min_quantity": 5, "price": Decimal("12.50")},
        {"name": "Wrench", "sku": "WRE-001", "category_id": tools.id, "quantity": 3, "min_quantity": 5, "price": Decimal("8")},
        {"name": "Brush", "sku": "BRU-001", "category_id": paint.id, "quantity": 0, "min_quantity": 2, "price": Decimal("3")},
        {"name": "Roller", "sku": "ROL-001", "category_id": paint.id, "quantity": 2, "min_quantity": 2, "price": Decimal("6")},
        {"name": "Primer", "sku": "PRI-001", "quantity": 50, "min_quantity": 0, "description": "White base coat"},
        {"name": "Old Saw", "sku": "SAW-001", "category_id": tools.id, "quantity": 1, "min_quantity": 5, "price": Decimal("100")},
    ]
    ids = {row["name"]: store.create(row, user_id).id for row in rows}
    store.soft_delete(ids["Old Saw"], user_id)
    return {"items": ids, "tools": tools.id, "paint": paint.id}


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def anon_client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        resp = c.post("/api/auth/login", json={"username": "admin", "password": ADMIN_PASSWORD})
        assert resp.status_code == 200
        yield c
