# teacher_eval/services/evaluation_service.py
"""
Nộp, xem và xóa lượt đánh giá.

Thứ tự kiểm tra khi nộp: PeriodNotActive -> NotEnrolled -> AlreadyEvaluated.
Ràng buộc unique (student, teacher, subject, period) ở tầng DB bắt nốt trường hợp
hai yêu cầu đồng thời cùng vượt qua bước kiểm tra.
"""
import logging
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from teacher_eval.crud import (
    criteria_crud,
    enrollment_crud,
    evaluation_crud,
    evaluation_period_crud,
    student_crud,
    subject_crud,
    teacher_crud,
)
from teacher_eval.exceptions import (
    AlreadyEvaluatedError,
    InvalidScoresError,
    NotEnrolledError,
    NotFoundError,
    PeriodNotActiveError,
    UnauthorizedError,
)
from teacher_eval.models.activity_log_model import ActivityType
from teacher_eval.models.evaluation_model import Evaluation, Score
from teacher_eval.models.evaluation_period_model import PeriodStatus
from teacher_eval.schemas.auth_schema import AuthenticatedUser
from teacher_eval.schemas.evaluation_schema import (
    EvaluationListItem,
    EvaluationResult,
    EvaluationSubmit,
    SubmissionResult,
)
from teacher_eval.services import activity_service, score_service

logger = logging.getLogger(__name__)

ANONYMOUS_NAME = "Anonymous"


def resolve_student_id(current_user: AuthenticatedUser, requested_student_id: Optional[int]) -> int:
    """Học sinh chỉ nộp cho chính mình; quản trị viên phải chỉ rõ student_id."""
    if current_user.is_admin:
        if requested_student_id is None:
            raise UnauthorizedError("student_id is required when submitting on behalf of a student.")
        return requested_student_id
    if requested_student_id is not None and requested_student_id != current_user.user_id:
        raise UnauthorizedError("Students can only submit their own evaluations.")
    return current_user.user_id


def _check_scores(db: Session, submission: EvaluationSubmit) -> None:
    question_ids = [s.question_id for s in submission.scores]
    duplicates = sorted({qid for qid in question_ids if question_ids.count(qid) > 1})
    if duplicates:
        raise InvalidScoresError("Each question can only be scored once.", duplicates)
    existing = set(criteria_crud.get_existing_question_ids(db, question_ids))
    unknown = [qid for qid in question_ids if qid not in existing]
    if unknown:
        raise InvalidScoresError("Unknown question id(s) in submission.", unknown)


def submit(
    db: Session,
    current_user: AuthenticatedUser,
    submission: EvaluationSubmit,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
    today: Optional[date] = None,
    now: Optional[datetime] = None,
) -> SubmissionResult:
    student_id = resolve_student_id(current_user, submission.student_id)
    teacher_id, subject_id = submission.teacher_id, submission.subject_id
    if student_crud.get_student(db, student_id) is None:
        raise NotFoundError("Student", student_id)

    # Ghi trước khi kiểm tra để còn dấu vết cả khi bị từ chối.
    # Khóa ngoại của log chỉ được gán khi bản ghi tồn tại.
    activity_service.record_evaluation_event(
        db,
        current_user,
        ActivityType.EvaluationStarted,
        f"Started evaluation of teacher {teacher_id} for subject {subject_id}",
        student_id=student_id,
        teacher_id=teacher_id if teacher_crud.get_teacher(db, teacher_id) else None,
        subject_id=subject_id if subject_crud.get_subject(db, subject_id) else None,
        ip_address=ip_address,
        user_agent=user_agent,
        now=now,
    )

    period = evaluation_period_crud.get_current_period(db)
    if period is None:
        logger.warning(f"Từ chối đánh giá của học sinh {student_id}: không có kỳ hiện tại")
        raise PeriodNotActiveError("There is no active evaluation period.")
    if not period.is_valid_for_evaluation(today):
        status = period.status(today)
        if status == PeriodStatus.upcoming:
            detail = f"Evaluation period '{period.period_name}' has not started yet."
        elif status == PeriodStatus.completed:
            detail = f"Evaluation period '{period.period_name}' has ended."
        else:
            detail = f"Evaluation period '{period.period_name}' is not active."
        logger.warning(f"Từ chối đánh giá của học sinh {student_id}: {detail}")
        raise PeriodNotActiveError(detail)

    if not enrollment_crud.enrollment_exists(db, student_id, teacher_id, subject_id):
        logger.warning(f"Từ chối đánh giá: học sinh {student_id} không học môn {subject_id} với GV {teacher_id}")
        raise NotEnrolledError()

    period_id = period.evaluation_period_id
    if evaluation_crud.evaluation_exists(db, student_id, teacher_id, subject_id, period_id):
        logger.warning(f"Từ chối đánh giá trùng: học sinh {student_id}, GV {teacher_id}, môn {subject_id}, kỳ {period_id}")
        raise AlreadyEvaluatedError()

    _check_scores(db, submission)

    evaluation = Evaluation(
        evaluation_period_id=period_id,
        subject_id=subject_id,
        teacher_id=teacher_id,
        student_id=student_id,
        is_anonymous=submission.is_anonymous,
        date_evaluated=now or datetime.now(),
        comments=submission.comment,
        scores=[Score(question_id=s.question_id, score_value=s.value) for s in submission.scores],
    )
    try:
        evaluation = evaluation_crud.create_evaluation(db, evaluation)
    except IntegrityError:
        db.rollback()
        if evaluation_crud.evaluation_exists(db, student_id, teacher_id, subject_id, period_id):
            logger.warning(f"Đánh giá trùng bị chặn bởi ràng buộc unique: học sinh {student_id}, kỳ {period_id}")
            raise AlreadyEvaluatedError()
        raise

    activity_service.record_evaluation_event(
        db,
        current_user,
        ActivityType.EvaluationCompleted,
        f"Completed evaluation {evaluation.evaluation_id}",
        student_id=student_id,
        teacher_id=teacher_id,
        subject_id=subject_id,
        evaluation_id=evaluation.evaluation_id,
        ip_address=ip_address,
        user_agent=user_agent,
        now=now,
    )
    logger.info(f"Học sinh {student_id} đã đánh giá GV {teacher_id} môn {subject_id} trong kỳ {period_id}")
    return SubmissionResult(
        evaluation_id=evaluation.evaluation_id,
        evaluation_period_id=period_id,
        period_name=period.period_name,
        period_label=period.label,
        message="Evaluation submitted successfully.",
    )


def _student_name(evaluation: Evaluation, reveal: bool) -> Optional[str]:
    if not reveal:
        return ANONYMOUS_NAME
    return evaluation.student.full_name if evaluation.student else None


def get_evaluation_result(db: Session, evaluation_id: int, current_user: AuthenticatedUser) -> EvaluationResult:
    evaluation = evaluation_crud.get_evaluation_detail(db, evaluation_id)
    if evaluation is None:
        raise NotFoundError("Evaluation", evaluation_id)
    if not current_user.is_admin and evaluation.student_id != current_user.user_id:
        raise UnauthorizedError("You can only view your own evaluations.")

    reveal = current_user.is_admin or not evaluation.is_anonymous
    return EvaluationResult(
        evaluation_id=evaluation.evaluation_id,
        evaluation_period_id=evaluation.evaluation_period_id,
        period_name=evaluation.evaluation_period.period_name if evaluation.evaluation_period else None,
        teacher_id=evaluation.teacher_id,
        teacher_name=evaluation.teacher.full_name if evaluation.teacher else None,
        teacher_department=evaluation.teacher.department if evaluation.teacher else None,
        subject_id=evaluation.subject_id,
        subject_name=evaluation.subject.display_name if evaluation.subject else None,
        student_id=evaluation.student_id if reveal else None,
        student_name=_student_name(evaluation, reveal),
        is_anonymous=evaluation.is_anonymous,
        date_evaluated=evaluation.date_evaluated,
        comments=evaluation.comments,
        overall_average=round(score_service.evaluation_average(evaluation), 2),
        criteria_results=score_service.criteria_breakdown(evaluation),
    )


def list_evaluations(
    db: Session,
    current_user: AuthenticatedUser,
    period_id: Optional[int] = None,
    teacher_id: Optional[int] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[EvaluationListItem]:
    """Quản trị viên xem tất cả; học sinh chỉ xem của mình."""
    student_id = None if current_user.is_admin else current_user.user_id
    evaluations = evaluation_crud.get_evaluations(
        db, student_id=student_id, period_id=period_id, teacher_id=teacher_id, skip=skip, limit=limit
    )
    return [
        EvaluationListItem(
            evaluation_id=e.evaluation_id,
            evaluation_period_id=e.evaluation_period_id,
            period_name=e.evaluation_period.period_name if e.evaluation_period else None,
            subject_name=e.subject.display_name if e.subject else None,
            teacher_name=e.teacher.full_name if e.teacher else None,
            student_name=_student_name(e, current_user.is_admin or not e.is_anonymous),
            is_anonymous=e.is_anonymous,
            date_evaluated=e.date_evaluated,
            average_score=round(score_service.evaluation_average(e), 2),
        )
        for e in evaluations
    ]


def delete_evaluation(db: Session, evaluation_id: int) -> int:
    """Xóa evaluation cùng log hoạt động và điểm liên quan; trả về số dòng log đã xóa."""
    if evaluation_crud.get_evaluation(db, evaluation_id) is None:
        raise NotFoundError("Evaluation", evaluation_id)
    removed_logs = evaluation_crud.delete_evaluation_cascade(db, evaluation_id)
    logger.info(f"Đã xóa evaluation {evaluation_id} ({removed_logs} dòng log)")
    return removed_logs
