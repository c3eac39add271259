from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from inventra.api.auth import get_current_user
from inventra.api.deps import get_settings
from inventra.config import Settings
from inventra.database import get_db
from inventra.schemas.transaction import TransactionOut
from inventra.services.ledger import TransactionLedger

router = APIRouter(prefix="/transactions", tags=["Transactions"], dependencies=[Depends(get_current_user)])


@router.get("/recent", response_model=list[TransactionOut])
def recent_transactions(
    limit: int = Query(20, ge=1),
    settings: Settings = Depends(get_settings),
    db: Session = Depends(get_db),
):
    return TransactionLedger(db).recent(min(limit, settings.MAX_PAGE_SIZE))
