from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from teacher_eval.api import deps
from teacher_eval.api.auth.auth import ADMIN_ONLY
from teacher_eval.models.activity_log_model import ActivityType
from teacher_eval.schemas.activity_log_schema import ActivityLogPage, ActivityLogView
from teacher_eval.services import activity_service

router = APIRouter()


@router.get(
    "/",
    response_model=ActivityLogPage,
    summary="Tra cứu nhật ký hoạt động",
    dependencies=[Depends(ADMIN_ONLY)],
)
def search_activity_logs(
    date_from: Optional[datetime] = Query(None),
    date_to: Optional[datetime] = Query(None),
    activity_type: Optional[ActivityType] = Query(None),
    username: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    db: Session = Depends(deps.get_db),
):
    return activity_service.search_logs(
        db, date_from=date_from, date_to=date_to, activity_type=activity_type, username=username, page=page
    )


@router.get(
    "/{activity_log_id}",
    response_model=ActivityLogView,
    summary="Chi tiết một dòng nhật ký",
    dependencies=[Depends(ADMIN_ONLY)],
)
def get_activity_log(activity_log_id: int, db: Session = Depends(deps.get_db)):
    return activity_service.get_log(db, activity_log_id)
