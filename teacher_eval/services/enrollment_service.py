# teacher_eval/services/enrollment_service.py
import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from teacher_eval.config import AUTO_ENROLL_DURING_OPEN_PERIOD
from teacher_eval.crud import enrollment_crud, evaluation_period_crud, student_crud, subject_crud
from teacher_eval.exceptions import InvalidEnrollmentError, NotFoundError, UnauthorizedError
from teacher_eval.models.enrollment_model import Enrollment
from teacher_eval.models.student_model import Student
from teacher_eval.schemas.auth_schema import AuthenticatedUser
from teacher_eval.schemas.enrollment_schema import (
    EnrollmentCreate,
    EnrollmentResult,
    EnrollmentView,
    PlacementResult,
    StudentPlacementUpdate,
)

logger = logging.getLogger(__name__)


def _get_student_or_404(db: Session, student_id: int) -> Student:
    student = student_crud.get_student(db, student_id)
    if student is None:
        raise NotFoundError("Student", student_id)
    return student


def _student_level_id(student: Student) -> Optional[int]:
    # Level của học sinh được xác định qua Section đang học
    if student.section is not None:
        return student.section.level_id
    return None


def enroll(db: Session, enrollment_in: EnrollmentCreate) -> EnrollmentResult:
    """
    Ghi danh học sinh vào danh sách môn. Mỗi môn được kiểm tra riêng:
    tồn tại, chưa ghi danh, cùng Level với Section của học sinh, đã có giáo viên.
    Các môn hợp lệ được ghi trong một lần commit.
    """
    student = _get_student_or_404(db, enrollment_in.student_id)
    student_level = _student_level_id(student)
    enrolled_ids = enrollment_crud.get_enrolled_subject_ids(db, student.user_id)

    new_rows: List[Enrollment] = []
    errors: List[str] = []
    skipped = 0
    for subject_id in dict.fromkeys(enrollment_in.subject_ids):
        subject = subject_crud.get_subject(db, subject_id)
        if subject is None:
            errors.append(f"Subject {subject_id} not found")
            continue
        if subject_id in enrolled_ids:
            skipped += 1
            continue
        if student_level is None or subject.level_id != student_level:
            errors.append(f"{subject.display_name}: subject level does not match the student's section level")
            continue
        if not subject.teacher_id or subject.teacher_id <= 0:
            errors.append(f"{subject.display_name}: no teacher assigned")
            continue
        new_rows.append(Enrollment(student_id=student.user_id, subject_id=subject_id, teacher_id=subject.teacher_id))

    if not new_rows:
        if skipped and not errors:
            return EnrollmentResult(
                message="Student is already enrolled in all selected subjects",
                enrolled_count=0,
                skipped_count=skipped,
            )
        raise InvalidEnrollmentError(errors)

    enrollment_crud.add_enrollments(db, new_rows)
    logger.info(f"Ghi danh học sinh {student.user_id} vào {len(new_rows)} môn")
    views = enrollment_crud.get_enrollment_views_by_ids(db, [row.enrollment_id for row in new_rows])
    return EnrollmentResult(
        message=f"Successfully enrolled in {len(new_rows)} subject(s)",
        enrolled_count=len(new_rows),
        skipped_count=skipped,
        errors=errors,
        enrollments=views,
    )


def auto_enroll(db: Session, student: Student) -> int:
    """
    Ghi danh học sinh vào mọi môn cùng Level + Section đã có giáo viên, bỏ qua môn đã ghi danh.
    Trả về số enrollment mới.
    """
    if student.section_id is None:
        return 0
    subjects = subject_crud.get_subjects_with_teacher(db, student.level_id, student.section_id)
    enrolled_ids = enrollment_crud.get_enrolled_subject_ids(db, student.user_id)
    new_rows = [
        Enrollment(student_id=student.user_id, subject_id=subject.subject_id, teacher_id=subject.teacher_id)
        for subject in subjects
        if subject.subject_id not in enrolled_ids
    ]
    if new_rows:
        enrollment_crud.add_enrollments(db, new_rows)
    logger.info(f"Tự động ghi danh học sinh {student.user_id}: {len(new_rows)} môn mới")
    return len(new_rows)


def update_placement(
    db: Session,
    student_id: int,
    placement: StudentPlacementUpdate,
    today: Optional[date] = None,
    allow_during_open_period: Optional[bool] = None,
) -> PlacementResult:
    """
    Đổi Level/Section của học sinh rồi tự động ghi danh.
    Khi kỳ hiện tại đang nhận đánh giá và chính sách không cho phép, việc ghi danh bị hoãn.
    """
    student = _get_student_or_404(db, student_id)
    if placement.section_id is not None:
        section = student_crud.get_section(db, placement.section_id)
        if section is None:
            raise NotFoundError("Section", placement.section_id)
        if section.level_id != placement.level_id:
            raise InvalidEnrollmentError([f"Section {placement.section_id} does not belong to level {placement.level_id}"])

    student_crud.update_placement(
        db, student, placement.level_id, placement.section_id, placement.college_year_level
    )

    if allow_during_open_period is None:
        allow_during_open_period = AUTO_ENROLL_DURING_OPEN_PERIOD
    current = evaluation_period_crud.get_current_period(db)
    if not allow_during_open_period and current is not None and current.is_valid_for_evaluation(today):
        logger.info(
            f"Hoãn tự động ghi danh học sinh {student_id}: kỳ {current.evaluation_period_id} đang mở"
        )
        return PlacementResult(
            student_id=student_id,
            level_id=student.level_id,
            section_id=student.section_id,
            auto_enrolled_count=0,
            auto_enroll_deferred=True,
        )

    count = auto_enroll(db, student)
    return PlacementResult(
        student_id=student_id,
        level_id=student.level_id,
        section_id=student.section_id,
        auto_enrolled_count=count,
    )


def list_enrollments(
    db: Session, current_user: AuthenticatedUser, student_id: Optional[int] = None, skip: int = 0, limit: int = 100
) -> List[EnrollmentView]:
    """Học sinh chỉ xem được enrollments của chính mình."""
    if not current_user.is_admin:
        if student_id is not None and student_id != current_user.user_id:
            raise UnauthorizedError("Students can only view their own enrollments.")
        student_id = current_user.user_id
    return enrollment_crud.get_enrollment_views(db, student_id=student_id, skip=skip, limit=limit)


def delete_enrollment(db: Session, enrollment_id: int) -> Enrollment:
    enrollment = enrollment_crud.get_enrollment_by_id(db, enrollment_id)
    if enrollment is None:
        raise NotFoundError("Enrollment", enrollment_id)
    enrollment_crud.delete_enrollment(db, enrollment)
    logger.info(f"Đã xóa enrollment {enrollment_id}")
    return enrollment
