from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from teacher_eval.api import deps
from teacher_eval.api.auth.auth import ADMIN_ONLY, get_current_active_user
from teacher_eval.schemas.criteria_schema import CriteriaWithQuestions, QuestionSetReplace
from teacher_eval.services import criteria_service

router = APIRouter()


@router.get(
    "/",
    response_model=List[CriteriaWithQuestions],
    summary="Tiêu chí và câu hỏi (bố cục form đánh giá)",
    dependencies=[Depends(get_current_active_user)],
)
def list_criteria(db: Session = Depends(deps.get_db)):
    return criteria_service.list_criteria(db)


@router.put(
    "/{criteria_id}/questions",
    response_model=CriteriaWithQuestions,
    summary="Thay toàn bộ câu hỏi của một tiêu chí",
    dependencies=[Depends(ADMIN_ONLY)],
)
def replace_questions(criteria_id: int, payload: QuestionSetReplace, db: Session = Depends(deps.get_db)):
    return criteria_service.replace_question_set(db, criteria_id, payload.descriptions)
