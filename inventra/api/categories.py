from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from inventra.api.auth import get_current_user
from inventra.database import get_db
from inventra.schemas.category import CategoryCreate, CategoryOut
from inventra.services import category_service

router = APIRouter(prefix="/categories", tags=["Categories"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=list[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return category_service.list_categories(db)


@router.post("", response_model=CategoryOut, status_code=201)
def create_category(data: CategoryCreate, db: Session = Depends(get_db)):
    return category_service.create_category(db, data)
