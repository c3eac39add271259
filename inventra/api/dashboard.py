from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from inventra.api.auth import get_current_user
from inventra.database import get_db
from inventra.schemas.item import ItemOut
from inventra.services import summary_service

router = APIRouter(prefix="/dashboard", tags=["Dashboard"], dependencies=[Depends(get_current_user)])


@router.get("/summary")
def dashboard_summary(db: Session = Depends(get_db)):
    data = summary_service.dashboard(db)
    data["recent_items"] = [ItemOut.model_validate(i) for i in data["recent_items"]]
    data["timestamp"] = datetime.now(timezone.utc).isoformat()
    return {"success": True, "data": data}
