# teacher_eval/api/v1/endpoints/enrollment_route.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from teacher_eval.api import deps
from teacher_eval.api.auth.auth import ADMIN_ONLY, get_current_active_user
from teacher_eval.schemas.auth_schema import AuthenticatedUser
from teacher_eval.schemas.enrollment_schema import (
    EnrollmentCreate,
    EnrollmentResult,
    EnrollmentView,
    PlacementResult,
    StudentPlacementUpdate,
)
from teacher_eval.services import enrollment_service

router = APIRouter()


@router.post(
    "/",
    response_model=EnrollmentResult,
    status_code=status.HTTP_201_CREATED,
    summary="Ghi danh học sinh vào các môn học",
    dependencies=[Depends(ADMIN_ONLY)],
)
def enroll_student(enrollment_in: EnrollmentCreate, db: Session = Depends(deps.get_db)):
    return enrollment_service.enroll(db, enrollment_in)


@router.get("/", response_model=List[EnrollmentView], summary="Danh sách enrollments")
def list_enrollments(
    student_id: Optional[int] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    return enrollment_service.list_enrollments(db, current_user, student_id=student_id, skip=skip, limit=limit)


@router.put(
    "/students/{student_id}/placement",
    response_model=PlacementResult,
    summary="Đổi Level/Section của học sinh và tự động ghi danh",
    dependencies=[Depends(ADMIN_ONLY)],
)
def update_student_placement(student_id: int, placement: StudentPlacementUpdate, db: Session = Depends(deps.get_db)):
    return enrollment_service.update_placement(db, student_id, placement)


@router.delete(
    "/{enrollment_id}",
    summary="Xóa một enrollment",
    dependencies=[Depends(ADMIN_ONLY)],
)
def delete_enrollment(enrollment_id: int, db: Session = Depends(deps.get_db)):
    enrollment_service.delete_enrollment(db, enrollment_id)
    return {
        "message": "Enrollment deleted successfully",
        "deleted_id": enrollment_id,
        "status": "success",
    }
