import logging
from typing import List

from sqlalchemy.orm import Session

from teacher_eval.crud import criteria_crud
from teacher_eval.exceptions import HasDependentsError, NotFoundError
from teacher_eval.models.criteria_model import Criteria

logger = logging.getLogger(__name__)


def list_criteria(db: Session) -> List[Criteria]:
    return criteria_crud.get_all_criteria(db)


def replace_question_set(db: Session, criteria_id: int, descriptions: List[str]) -> Criteria:
    """
    Thay toàn bộ câu hỏi của một tiêu chí. Không cho phép khi câu hỏi cũ đã có điểm,
    vì Score tham chiếu câu hỏi bằng khóa ngoại RESTRICT.
    """
    criteria = criteria_crud.get_criteria(db, criteria_id)
    if criteria is None:
        raise NotFoundError("Criteria", criteria_id)
    scored = criteria_crud.count_scores_for_criteria(db, criteria_id)
    if scored:
        raise HasDependentsError(
            f"Questions of '{criteria.name}' already have {scored} recorded score(s).", count=scored
        )
    criteria = criteria_crud.replace_questions(db, criteria, descriptions)
    logger.info(f"Đã thay bộ câu hỏi của tiêu chí {criteria_id}: {len(descriptions)} câu")
    return criteria
