# teacher_eval/services/report_service.py
import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from teacher_eval.config import TOP_RATED_LIMIT
from teacher_eval.crud import enrollment_crud, evaluation_crud, evaluation_period_crud, student_crud, teacher_crud
from teacher_eval.exceptions import NotFoundError
from teacher_eval.schemas.evaluation_period_schema import CurrentPeriod
from teacher_eval.schemas.report_schema import DashboardSummary, PeriodStatistics
from teacher_eval.services import score_service

logger = logging.getLogger(__name__)


def period_statistics(db: Session, period_id: int, top_n: int = TOP_RATED_LIMIT) -> PeriodStatistics:
    """
    Thống kê một kỳ: số lượt, số học sinh/giáo viên tham gia, điểm trung bình
    (trung bình của evaluation_average từng lượt) và danh sách giáo viên được đánh giá cao nhất.
    """
    period = evaluation_period_crud.get_period(db, period_id)
    if period is None:
        raise NotFoundError("Evaluation period", period_id)

    evaluations = evaluation_crud.get_period_evaluations(db, period_id)
    averages = [score_service.evaluation_average(e) for e in evaluations]
    return PeriodStatistics(
        evaluation_period_id=period.evaluation_period_id,
        period_name=period.period_name,
        total_evaluations=len(evaluations),
        unique_students=len({e.student_id for e in evaluations}),
        unique_teachers=len({e.teacher_id for e in evaluations}),
        average_score=round(sum(averages) / len(averages), 2) if averages else 0,
        anonymous_count=sum(1 for e in evaluations if e.is_anonymous),
        top_rated_teachers=score_service.rank_teachers(evaluations, top_n),
    )


def dashboard_summary(db: Session, today: Optional[date] = None) -> DashboardSummary:
    summary = DashboardSummary(
        total_teachers=teacher_crud.count_teachers(db),
        total_students=student_crud.count_students(db),
        total_evaluations=evaluation_crud.count_all_evaluations(db),
    )
    period = evaluation_period_crud.get_current_period(db)
    if period is None:
        return summary

    period_id = period.evaluation_period_id
    avg_score, participants = evaluation_crud.get_period_score_summary(db, period_id)
    period_count = evaluation_period_crud.count_evaluations(db, period_id)
    possible = enrollment_crud.count_distinct_student_teacher_pairs(db)

    summary.current_period = CurrentPeriod.from_model(period, today)
    summary.current_period_evaluations = period_count
    summary.current_period_average = round(avg_score, 2) if avg_score is not None else 0
    summary.current_period_participants = participants
    summary.total_possible_evaluations = possible
    summary.completion_percentage = round(period_count * 100.0 / possible, 2) if possible else 0
    return summary
