from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from teacher_eval.api import deps
from teacher_eval.api.auth.auth import ADMIN_ONLY
from teacher_eval.schemas.report_schema import DashboardSummary
from teacher_eval.services import report_service

router = APIRouter()


@router.get(
    "/dashboard",
    response_model=DashboardSummary,
    summary="Tổng quan hệ thống đánh giá",
    dependencies=[Depends(ADMIN_ONLY)],
)
def get_dashboard(db: Session = Depends(deps.get_db)):
    return report_service.dashboard_summary(db)
