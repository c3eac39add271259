import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from inventra.errors import ConflictError
from inventra.models.category import Category
from inventra.schemas.category import CategoryCreate

logger = logging.getLogger(__name__)


def get_category(db: Session, category_id: str) -> Category | None:
    return db.get(Category, category_id)


def get_category_by_name(db: Session, name: str) -> Category | None:
    return db.query(Category).filter(Category.name == name).first()


def list_categories(db: Session) -> list[Category]:
    return db.query(Category).order_by(Category.name).all()


def create_category(db: Session, data: CategoryCreate) -> Category:
    if get_category_by_name(db, data.name):
        raise ConflictError(f"Category '{data.name}' already exists")
    category = Category(name=data.name, description=data.description)
    db.add(category)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError(f"Category '{data.name}' already exists") from exc
    db.refresh(category)
    logger.info("Created category %s (%s)", category.name, category.id)
    return category
