from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.auth import require_staff
from shared.core.database import get_db
from shared.core.schemas import JsonOutResult, UserToken
from shared.helpers.json_response_helper import success_response
from ..crud import dashboard_crud as crud
from ..schemas.dashboard_schemas import DashboardOut

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


@router.get("", response_model=JsonOutResult[DashboardOut])
def get_dashboard(
    period: int = Query(30, ge=1, le=365),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_staff)
):
    return success_response(data=crud.get_dashboard(db, period))
