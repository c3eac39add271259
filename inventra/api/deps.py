from fastapi import Depends, Request
from sqlalchemy.orm import Session

from inventra.config import Settings
from inventra.database import get_db
from inventra.services.item_store import ItemStore
from inventra.services.query_engine import QueryEngine


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_item_store(db: Session = Depends(get_db), settings: Settings = Depends(get_settings)) -> ItemStore:
    return ItemStore(db, settings)


def get_query_engine(db: Session = Depends(get_db), settings: Settings = Depends(get_settings)) -> QueryEngine:
    return QueryEngine(db, settings)
