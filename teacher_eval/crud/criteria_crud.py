from typing import List, Optional
from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session, selectinload

from teacher_eval.models.criteria_model import Criteria, Question
from teacher_eval.models.evaluation_model import Score


def get_all_criteria(db: Session) -> List[Criteria]:
    """Tiêu chí theo thứ tự ID, kèm câu hỏi (bố cục form đánh giá)."""
    stmt = select(Criteria).options(selectinload(Criteria.questions)).order_by(Criteria.criteria_id)
    return list(db.execute(stmt).scalars().all())


def get_criteria(db: Session, criteria_id: int) -> Optional[Criteria]:
    return db.get(Criteria, criteria_id)


def get_existing_question_ids(db: Session, question_ids: List[int]) -> List[int]:
    if not question_ids:
        return []
    stmt = select(Question.question_id).where(Question.question_id.in_(question_ids))
    return list(db.execute(stmt).scalars().all())


def count_scores_for_criteria(db: Session, criteria_id: int) -> int:
    stmt = (
        select(func.count(Score.score_id))
        .join(Question, Score.question_id == Question.question_id)
        .where(Question.criteria_id == criteria_id)
    )
    return db.execute(stmt).scalar() or 0


def replace_questions(db: Session, criteria: Criteria, descriptions: List[str]) -> Criteria:
    """Xóa toàn bộ câu hỏi cũ của tiêu chí và chèn danh sách mới trong cùng một commit."""
    try:
        db.execute(delete(Question).where(Question.criteria_id == criteria.criteria_id))
        db.add_all([Question(criteria_id=criteria.criteria_id, description=text) for text in descriptions])
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(criteria)
    return criteria
