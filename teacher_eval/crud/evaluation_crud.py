# teacher_eval/crud/evaluation_crud.py
import logging
from typing import List, Optional, Set, Tuple
from sqlalchemy import delete, exists, func, select
from sqlalchemy.orm import Session, selectinload, joinedload

from teacher_eval.models.activity_log_model import ActivityLog
from teacher_eval.models.criteria_model import Question
from teacher_eval.models.evaluation_model import Evaluation, Score
from teacher_eval.models.student_model import Student

logger = logging.getLogger(__name__)


def evaluation_exists(db: Session, student_id: int, teacher_id: int, subject_id: int, period_id: int) -> bool:
    stmt = select(
        exists().where(
            Evaluation.student_id == student_id,
            Evaluation.teacher_id == teacher_id,
            Evaluation.subject_id == subject_id,
            Evaluation.evaluation_period_id == period_id,
        )
    )
    return bool(db.execute(stmt).scalar())


def get_evaluated_pairs(db: Session, student_id: int, period_id: int) -> Set[Tuple[int, int]]:
    """Các cặp (teacher_id, subject_id) học sinh đã đánh giá trong kỳ."""
    stmt = select(Evaluation.teacher_id, Evaluation.subject_id).where(
        Evaluation.student_id == student_id,
        Evaluation.evaluation_period_id == period_id,
    )
    return {(row.teacher_id, row.subject_id) for row in db.execute(stmt).all()}


def create_evaluation(db: Session, evaluation: Evaluation) -> Evaluation:
    """
    Ghi một Evaluation cùng các Score của nó trong một lần commit.
    IntegrityError được để nguyên cho tầng service xử lý.
    """
    db.add(evaluation)
    db.commit()
    db.refresh(evaluation)
    return evaluation


def get_evaluation(db: Session, evaluation_id: int) -> Optional[Evaluation]:
    return db.get(Evaluation, evaluation_id)


def get_evaluation_detail(db: Session, evaluation_id: int) -> Optional[Evaluation]:
    """Lấy evaluation kèm kỳ, giáo viên, môn, học sinh và điểm từng câu hỏi."""
    stmt = (
        select(Evaluation)
        .options(
            joinedload(Evaluation.evaluation_period),
            joinedload(Evaluation.teacher),
            joinedload(Evaluation.subject),
            joinedload(Evaluation.student).joinedload(Student.user),
            selectinload(Evaluation.scores).joinedload(Score.question).joinedload(Question.criteria),
        )
        .where(Evaluation.evaluation_id == evaluation_id)
    )
    return db.execute(stmt).unique().scalars().first()


def get_evaluations(
    db: Session,
    student_id: Optional[int] = None,
    period_id: Optional[int] = None,
    teacher_id: Optional[int] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[Evaluation]:
    stmt = select(Evaluation).options(
        joinedload(Evaluation.evaluation_period),
        joinedload(Evaluation.teacher),
        joinedload(Evaluation.subject),
        joinedload(Evaluation.student).joinedload(Student.user),
        selectinload(Evaluation.scores),
    )
    if student_id is not None:
        stmt = stmt.where(Evaluation.student_id == student_id)
    if period_id is not None:
        stmt = stmt.where(Evaluation.evaluation_period_id == period_id)
    if teacher_id is not None:
        stmt = stmt.where(Evaluation.teacher_id == teacher_id)
    stmt = stmt.order_by(Evaluation.date_evaluated.desc(), Evaluation.evaluation_id.desc()).offset(skip).limit(limit)
    return list(db.execute(stmt).unique().scalars().all())


def get_period_evaluations(db: Session, period_id: int) -> List[Evaluation]:
    """Tất cả evaluation của một kỳ theo thứ tự chèn (evaluation_id)."""
    stmt = (
        select(Evaluation)
        .options(joinedload(Evaluation.teacher), selectinload(Evaluation.scores))
        .where(Evaluation.evaluation_period_id == period_id)
        .order_by(Evaluation.evaluation_id)
    )
    return list(db.execute(stmt).unique().scalars().all())


def count_all_evaluations(db: Session) -> int:
    return db.execute(select(func.count(Evaluation.evaluation_id))).scalar() or 0


def get_period_score_summary(db: Session, period_id: int) -> Tuple[Optional[float], int]:
    """Trung bình của mọi điểm trong kỳ và số học sinh đã tham gia."""
    avg_score = db.execute(
        select(func.avg(Score.score_value))
        .join(Evaluation, Score.evaluation_id == Evaluation.evaluation_id)
        .where(Evaluation.evaluation_period_id == period_id)
    ).scalar()
    participants = db.execute(
        select(func.count(func.distinct(Evaluation.student_id))).where(Evaluation.evaluation_period_id == period_id)
    ).scalar() or 0
    return (float(avg_score) if avg_score is not None else None), participants


def delete_evaluation_cascade(db: Session, evaluation_id: int) -> int:
    """
    Xóa log hoạt động tham chiếu evaluation, rồi các Score, rồi chính Evaluation,
    trong một transaction. Trả về số dòng log đã xóa.
    """
    try:
        removed_logs = db.execute(
            delete(ActivityLog).where(ActivityLog.evaluation_id == evaluation_id)
        ).rowcount
        db.execute(delete(Score).where(Score.evaluation_id == evaluation_id))
        db.execute(delete(Evaluation).where(Evaluation.evaluation_id == evaluation_id))
        db.commit()
    except Exception:
        db.rollback()
        logger.error(f"Lỗi khi xóa evaluation {evaluation_id}", exc_info=True)
        raise
    db.expire_all()
    return removed_logs or 0
