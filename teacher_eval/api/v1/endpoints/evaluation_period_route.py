# teacher_eval/api/v1/endpoints/evaluation_period_route.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from teacher_eval.api import deps
from teacher_eval.api.auth.auth import ADMIN_ONLY, get_current_active_user
from teacher_eval.schemas.auth_schema import AuthenticatedUser
from teacher_eval.schemas.evaluation_period_schema import (
    CurrentPeriodResponse,
    EvaluationPeriodCreate,
    EvaluationPeriodUpdate,
    EvaluationPeriodView,
    PeriodActionResult,
)
from teacher_eval.schemas.report_schema import PeriodStatistics
from teacher_eval.services import period_service, report_service
from teacher_eval.services.excel_services.export_period_statistics import export_period_statistics

router = APIRouter()


@router.get(
    "/current",
    response_model=CurrentPeriodResponse,
    summary="Lấy kỳ đánh giá hiện tại",
    dependencies=[Depends(get_current_active_user)],
)
def get_current_period(db: Session = Depends(deps.get_db)):
    return period_service.get_current_response(db)


@router.get(
    "/",
    response_model=List[EvaluationPeriodView],
    summary="Danh sách kỳ đánh giá (kỳ hiện tại lên đầu)",
    dependencies=[Depends(ADMIN_ONLY)],
)
def list_periods(db: Session = Depends(deps.get_db)):
    return period_service.get_all(db)


@router.post(
    "/",
    response_model=EvaluationPeriodView,
    status_code=status.HTTP_201_CREATED,
    summary="Tạo kỳ đánh giá mới",
)
def create_period(
    period_in: EvaluationPeriodCreate,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(ADMIN_ONLY),
):
    return period_service.create_period(db, period_in, created_by=current_user.username)


@router.get(
    "/{period_id}",
    response_model=EvaluationPeriodView,
    summary="Lấy kỳ đánh giá theo ID",
    dependencies=[Depends(ADMIN_ONLY)],
)
def get_period(period_id: int, db: Session = Depends(deps.get_db)):
    return period_service.get_period_view(db, period_id)


@router.put(
    "/{period_id}",
    response_model=EvaluationPeriodView,
    summary="Cập nhật kỳ đánh giá",
    dependencies=[Depends(ADMIN_ONLY)],
)
def update_period(period_id: int, period_in: EvaluationPeriodUpdate, db: Session = Depends(deps.get_db)):
    return period_service.update_period(db, period_id, period_in)


@router.post(
    "/{period_id}/set-current",
    response_model=PeriodActionResult,
    summary="Đặt làm kỳ hiện tại",
    dependencies=[Depends(ADMIN_ONLY)],
)
def set_current_period(period_id: int, db: Session = Depends(deps.get_db)):
    return period_service.set_current(db, period_id)


@router.post(
    "/{period_id}/toggle-active",
    response_model=PeriodActionResult,
    summary="Bật/tắt kỳ đánh giá",
    dependencies=[Depends(ADMIN_ONLY)],
)
def toggle_period_active(period_id: int, db: Session = Depends(deps.get_db)):
    return period_service.toggle_active(db, period_id)


@router.delete(
    "/{period_id}",
    summary="Xóa kỳ đánh giá (chỉ khi chưa có lượt đánh giá)",
    dependencies=[Depends(ADMIN_ONLY)],
)
def delete_period(period_id: int, db: Session = Depends(deps.get_db)):
    period_service.delete_period(db, period_id)
    return {
        "message": "Evaluation period deleted successfully",
        "deleted_id": period_id,
        "status": "success",
    }


@router.get(
    "/{period_id}/statistics",
    response_model=PeriodStatistics,
    summary="Thống kê kỳ đánh giá",
    dependencies=[Depends(ADMIN_ONLY)],
)
def get_period_statistics(period_id: int, db: Session = Depends(deps.get_db)):
    return report_service.period_statistics(db, period_id)


@router.get(
    "/{period_id}/statistics/export",
    summary="Xuất thống kê kỳ đánh giá ra Excel",
    dependencies=[Depends(ADMIN_ONLY)],
)
def export_statistics(period_id: int, db: Session = Depends(deps.get_db)):
    return export_period_statistics(db, period_id)
