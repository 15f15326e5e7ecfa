# teacher_eval/services/eligibility_service.py
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from teacher_eval.crud import enrollment_crud, evaluation_crud, evaluation_period_crud
from teacher_eval.schemas.evaluation_schema import EligibilityResult, EligibilityStatus, EligibleCandidate


def resolve_eligibility(db: Session, student_id: int, today: Optional[date] = None) -> EligibilityResult:
    """
    Các cặp (giáo viên, môn) học sinh còn được đánh giá trong kỳ hiện tại:
    enrollments có giáo viên đang active trừ đi các cặp đã đánh giá trong kỳ.
    Không có kỳ hiện tại thì trả về trạng thái no_active_period thay vì danh sách rỗng.
    """
    period = evaluation_period_crud.get_current_period(db)
    if period is None:
        return EligibilityResult(
            status=EligibilityStatus.no_active_period,
            has_active_period=False,
            message="There is no active evaluation period at the moment.",
        )

    enrollments = enrollment_crud.get_active_teacher_enrollments(db, student_id)
    can_submit = period.is_valid_for_evaluation(today)
    if not enrollments:
        return EligibilityResult(
            status=EligibilityStatus.not_enrolled,
            has_active_period=True,
            can_submit=can_submit,
            evaluation_period_id=period.evaluation_period_id,
            period_name=period.period_name,
            message="You are not enrolled in any subject with an active teacher.",
        )

    evaluated = evaluation_crud.get_evaluated_pairs(db, student_id, period.evaluation_period_id)
    enrolled_pairs = {(e.teacher_id, e.subject_id) for e in enrollments}
    candidates = [
        EligibleCandidate(
            teacher_id=e.teacher_id,
            teacher_name=e.teacher.full_name,
            subject_id=e.subject_id,
            subject_code=e.subject.subject_code,
            subject_name=e.subject.subject_name,
        )
        for e in enrollments
        if (e.teacher_id, e.subject_id) not in evaluated
    ]

    total = len(enrolled_pairs)
    done = len(enrolled_pairs & evaluated)
    status = EligibilityStatus.pending if candidates else EligibilityStatus.completed
    if status == EligibilityStatus.completed:
        message = "You have completed all evaluations for this period."
    else:
        message = f"{len(candidates)} evaluation(s) remaining."
    return EligibilityResult(
        status=status,
        has_active_period=True,
        can_submit=can_submit,
        evaluation_period_id=period.evaluation_period_id,
        period_name=period.period_name,
        candidates=candidates,
        total_enrolled=total,
        total_evaluated=done,
        total_remaining=total - done,
        progress_percentage=round(done * 100.0 / total, 2) if total else 0,
        message=message,
    )
