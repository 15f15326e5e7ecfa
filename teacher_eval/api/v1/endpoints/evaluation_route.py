# teacher_eval/api/v1/endpoints/evaluation_route.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from teacher_eval.api import deps
from teacher_eval.api.auth.auth import ADMIN_ONLY, ADMIN_AND_STUDENT, client_ip, get_current_active_user
from teacher_eval.exceptions import UnauthorizedError
from teacher_eval.schemas.auth_schema import AuthenticatedUser
from teacher_eval.schemas.evaluation_schema import (
    EligibilityResult,
    EvaluationListItem,
    EvaluationResult,
    EvaluationSubmit,
    SubmissionResult,
)
from teacher_eval.services import eligibility_service, evaluation_service

router = APIRouter()


@router.get("/eligibility", response_model=EligibilityResult, summary="Các giáo viên/môn học còn được đánh giá")
def get_eligibility(
    student_id: Optional[int] = Query(None),
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(ADMIN_AND_STUDENT),
):
    if not current_user.is_admin:
        if student_id is not None and student_id != current_user.user_id:
            raise UnauthorizedError("Students can only view their own eligibility.")
        student_id = current_user.user_id
    elif student_id is None:
        raise UnauthorizedError("student_id is required for administrators.")
    return eligibility_service.resolve_eligibility(db, student_id)


@router.post(
    "/",
    response_model=SubmissionResult,
    status_code=status.HTTP_201_CREATED,
    summary="Nộp một lượt đánh giá",
)
def submit_evaluation(
    submission: EvaluationSubmit,
    request: Request,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(ADMIN_AND_STUDENT),
):
    return evaluation_service.submit(
        db, current_user, submission, client_ip(request), request.headers.get("user-agent")
    )


@router.get("/", response_model=List[EvaluationListItem], summary="Danh sách lượt đánh giá")
def list_evaluations(
    period_id: Optional[int] = Query(None),
    teacher_id: Optional[int] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    return evaluation_service.list_evaluations(
        db, current_user, period_id=period_id, teacher_id=teacher_id, skip=skip, limit=limit
    )


@router.get("/{evaluation_id}", response_model=EvaluationResult, summary="Chi tiết lượt đánh giá")
def get_evaluation(
    evaluation_id: int,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    return evaluation_service.get_evaluation_result(db, evaluation_id, current_user)


@router.delete(
    "/{evaluation_id}",
    summary="Xóa lượt đánh giá cùng điểm và nhật ký liên quan",
    dependencies=[Depends(ADMIN_ONLY)],
)
def delete_evaluation(evaluation_id: int, db: Session = Depends(deps.get_db)):
    removed_logs = evaluation_service.delete_evaluation(db, evaluation_id)
    return {
        "message": "Evaluation deleted successfully",
        "deleted_id": evaluation_id,
        "removed_activity_logs": removed_logs,
        "status": "success",
    }
