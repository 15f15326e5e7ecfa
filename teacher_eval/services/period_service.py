# teacher_eval/services/period_service.py
"""
Vòng đời kỳ đánh giá: tạo/sửa, chọn kỳ hiện tại, bật/tắt, xóa.

Bất biến:
- tối đa một kỳ có is_current = true (chỉ mục unique một-phần + retry khi xung đột);
- các kỳ đang active không giao nhau về ngày (tính cả hai đầu).
"""
import logging
from datetime import date
from typing import Callable, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from teacher_eval.config import CURRENT_PERIOD_MAX_RETRIES
from teacher_eval.crud import evaluation_period_crud
from teacher_eval.exceptions import (
    HasDependentsError,
    InvalidRangeError,
    NotFoundError,
    OverlappingPeriodError,
    UnavailableError,
)
from teacher_eval.models.evaluation_period_model import EvaluationPeriod, PeriodStatus
from teacher_eval.schemas.evaluation_period_schema import (
    CurrentPeriod,
    CurrentPeriodResponse,
    EvaluationPeriodCreate,
    EvaluationPeriodUpdate,
    EvaluationPeriodView,
    PeriodActionResult,
)

logger = logging.getLogger(__name__)


def _validate_range(start_date: date, end_date: date) -> None:
    if end_date <= start_date:
        raise InvalidRangeError()


def _check_overlap(db: Session, start_date: date, end_date: date, exclude_id: Optional[int] = None) -> None:
    conflict = evaluation_period_crud.find_overlapping_period(db, start_date, end_date, exclude_id)
    if conflict is not None:
        logger.warning(
            f"Kỳ [{start_date} - {end_date}] giao với kỳ đang active {conflict.evaluation_period_id}"
        )
        raise OverlappingPeriodError(conflict.evaluation_period_id)


def _claim_current(db: Session, stage: Callable[[], EvaluationPeriod]) -> EvaluationPeriod:
    """
    Ghi các thay đổi do stage() tạo ra, bỏ cờ current ở các kỳ khác rồi đặt cho kỳ đó,
    tất cả trong một transaction và commit một lần.
    Nếu chỉ mục single-current từ chối (ghi đồng thời), rollback toàn bộ rồi thử lại
    tối đa CURRENT_PERIOD_MAX_RETRIES lần; stage() được gọi lại ở mỗi lần thử.
    """
    for attempt in range(1, CURRENT_PERIOD_MAX_RETRIES + 1):
        try:
            period = stage()
            db.flush()
            evaluation_period_crud.claim_current_flag(db, period.evaluation_period_id)
            db.commit()
            return period
        except IntegrityError:
            db.rollback()
            logger.warning(f"Xung đột khi đặt kỳ hiện tại (lần {attempt})")
    raise UnavailableError("Could not set the current evaluation period, please retry.")


def _get_or_404(db: Session, period_id: int) -> EvaluationPeriod:
    period = evaluation_period_crud.get_period(db, period_id)
    if period is None:
        raise NotFoundError("Evaluation period", period_id)
    return period


def _view(db: Session, period: EvaluationPeriod, today: Optional[date] = None) -> EvaluationPeriodView:
    count = evaluation_period_crud.count_evaluations(db, period.evaluation_period_id)
    return EvaluationPeriodView.from_model(period, today, count)


def create_period(
    db: Session, period_in: EvaluationPeriodCreate, created_by: Optional[str] = None, today: Optional[date] = None
) -> EvaluationPeriodView:
    _validate_range(period_in.start_date, period_in.end_date)
    if period_in.is_active:
        _check_overlap(db, period_in.start_date, period_in.end_date)

    data = period_in.model_dump()
    make_current = data.pop("is_current")

    def stage() -> EvaluationPeriod:
        new_period = EvaluationPeriod(**data, is_current=False, created_by=created_by)
        db.add(new_period)
        return new_period

    # Kỳ không active thì không được giữ cờ current
    if make_current and period_in.is_active:
        period = _claim_current(db, stage)
    else:
        period = stage()
        db.commit()
    db.refresh(period)
    logger.info(f"Đã tạo kỳ đánh giá {period.evaluation_period_id} '{period.period_name}'")
    return _view(db, period, today)


def update_period(
    db: Session, period_id: int, period_in: EvaluationPeriodUpdate, today: Optional[date] = None
) -> EvaluationPeriodView:
    period = _get_or_404(db, period_id)
    _validate_range(period_in.start_date, period_in.end_date)
    if period_in.is_active:
        _check_overlap(db, period_in.start_date, period_in.end_date, exclude_id=period_id)

    data = period_in.model_dump()
    make_current = data.pop("is_current") and period_in.is_active

    def stage() -> EvaluationPeriod:
        for field, value in data.items():
            setattr(period, field, value)
        if not make_current:
            period.is_current = False
        return period

    if make_current:
        _claim_current(db, stage)
    else:
        stage()
        db.commit()
    db.refresh(period)
    logger.info(f"Đã cập nhật kỳ đánh giá {period_id}")
    return _view(db, period, today)


def set_current(db: Session, period_id: int, today: Optional[date] = None) -> PeriodActionResult:
    period = _get_or_404(db, period_id)
    _claim_current(db, lambda: period)
    db.refresh(period)
    logger.info(f"Kỳ hiện tại chuyển sang {period_id}")
    return PeriodActionResult(
        success=True,
        message=f"'{period.period_name}' is now the current evaluation period.",
        period=_view(db, period, today),
    )


def toggle_active(db: Session, period_id: int, today: Optional[date] = None) -> PeriodActionResult:
    period = _get_or_404(db, period_id)
    if not period.is_active:
        # Bật lại cũng phải giữ các kỳ active không giao nhau
        _check_overlap(db, period.start_date, period.end_date, exclude_id=period_id)
        period.is_active = True
    else:
        period.is_active = False
        period.is_current = False
    db.commit()
    db.refresh(period)
    state = "activated" if period.is_active else "deactivated"
    logger.info(f"Kỳ đánh giá {period_id} {state}")
    return PeriodActionResult(
        success=True,
        message=f"Evaluation period {state} successfully.",
        period=_view(db, period, today),
    )


def delete_period(db: Session, period_id: int) -> EvaluationPeriod:
    period = _get_or_404(db, period_id)
    count = evaluation_period_crud.count_evaluations(db, period_id)
    if count > 0:
        raise HasDependentsError(
            f"Cannot delete period with {count} existing evaluation(s).", count=count
        )
    evaluation_period_crud.delete_period(db, period)
    logger.info(f"Đã xóa kỳ đánh giá {period_id}")
    return period


def get_current(db: Session) -> Optional[EvaluationPeriod]:
    return evaluation_period_crud.get_current_period(db)


def get_current_response(db: Session, today: Optional[date] = None) -> CurrentPeriodResponse:
    period = get_current(db)
    if period is None:
        return CurrentPeriodResponse(found=False, message="No active evaluation period")
    return CurrentPeriodResponse(
        found=True,
        message="Current evaluation period found",
        period=CurrentPeriod.from_model(period, today),
    )


def get_period_view(db: Session, period_id: int, today: Optional[date] = None) -> EvaluationPeriodView:
    return _view(db, _get_or_404(db, period_id), today)


def get_all(db: Session, today: Optional[date] = None) -> List[EvaluationPeriodView]:
    rows: List[Tuple[EvaluationPeriod, int]] = evaluation_period_crud.get_all_periods_with_counts(db)
    return [EvaluationPeriodView.from_model(period, today, count) for period, count in rows]


def check_current_period(db: Session, today: Optional[date] = None) -> Optional[EvaluationPeriod]:
    """Tác vụ định kỳ: ghi log trạng thái kỳ hiện tại."""
    today = today or date.today()
    period = get_current(db)
    if period is None:
        logger.warning("Chưa có kỳ đánh giá hiện tại nào được thiết lập")
        return None
    status = period.status(today)
    if status == PeriodStatus.completed:
        logger.warning(
            f"Kỳ hiện tại '{period.period_name}' đã kết thúc ngày {period.end_date}, cần chọn kỳ mới"
        )
    else:
        logger.info(f"Kỳ hiện tại '{period.period_name}': {status.value} ({period.start_date} - {period.end_date})")
    return period
