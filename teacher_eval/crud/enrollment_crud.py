# teacher_eval/crud/enrollment_crud.py
from typing import List, Optional, Set
from sqlalchemy import func, select, exists
from sqlalchemy.orm import Session, joinedload

from teacher_eval.models.enrollment_model import Enrollment
from teacher_eval.models.student_model import Student
from teacher_eval.models.subject_model import Subject
from teacher_eval.models.teacher_model import Teacher
from teacher_eval.models.user_model import User
from teacher_eval.schemas.enrollment_schema import EnrollmentView


def _enrollment_view_query():
    return (
        select(
            Enrollment.enrollment_id,
            Enrollment.student_id,
            User.full_name.label("student_name"),
            Enrollment.subject_id,
            Subject.subject_code,
            Subject.subject_name,
            Enrollment.teacher_id,
            Teacher.full_name.label("teacher_name"),
        )
        .join(Student, Enrollment.student_id == Student.user_id)
        .join(User, Student.user_id == User.user_id)
        .join(Subject, Enrollment.subject_id == Subject.subject_id)
        .join(Teacher, Enrollment.teacher_id == Teacher.teacher_id)
    )


def get_enrollment(db: Session, student_id: int, subject_id: int) -> Optional[Enrollment]:
    """Lấy bản ghi enrollment theo (student_id, subject_id)."""
    stmt = select(Enrollment).where(
        Enrollment.student_id == student_id,
        Enrollment.subject_id == subject_id,
    )
    return db.execute(stmt).scalars().first()


def get_enrollment_by_id(db: Session, enrollment_id: int) -> Optional[Enrollment]:
    return db.get(Enrollment, enrollment_id)


def enrollment_exists(db: Session, student_id: int, teacher_id: int, subject_id: int) -> bool:
    stmt = select(
        exists().where(
            Enrollment.student_id == student_id,
            Enrollment.teacher_id == teacher_id,
            Enrollment.subject_id == subject_id,
        )
    )
    return bool(db.execute(stmt).scalar())


def has_any_enrollment(db: Session, student_id: int) -> bool:
    return bool(db.execute(select(exists().where(Enrollment.student_id == student_id))).scalar())


def get_enrollment_views(
    db: Session, student_id: Optional[int] = None, skip: int = 0, limit: int = 100
) -> List[EnrollmentView]:
    """Danh sách enrollments (lọc theo học sinh nếu có) dưới dạng EnrollmentView."""
    stmt = _enrollment_view_query()
    if student_id is not None:
        stmt = stmt.where(Enrollment.student_id == student_id)
    stmt = stmt.order_by(Enrollment.enrollment_id).offset(skip).limit(limit)
    return [EnrollmentView.model_validate(row._asdict()) for row in db.execute(stmt).all()]


def get_enrollment_views_by_ids(db: Session, enrollment_ids: List[int]) -> List[EnrollmentView]:
    if not enrollment_ids:
        return []
    stmt = _enrollment_view_query().where(Enrollment.enrollment_id.in_(enrollment_ids)).order_by(Enrollment.enrollment_id)
    return [EnrollmentView.model_validate(row._asdict()) for row in db.execute(stmt).all()]


def get_active_teacher_enrollments(db: Session, student_id: int) -> List[Enrollment]:
    """
    Enrollments của học sinh mà giáo viên còn active (kèm teacher và subject).
    """
    stmt = (
        select(Enrollment)
        .join(Teacher, Enrollment.teacher_id == Teacher.teacher_id)
        .options(joinedload(Enrollment.teacher), joinedload(Enrollment.subject))
        .where(Enrollment.student_id == student_id, Teacher.is_active.is_(True))
        .order_by(Enrollment.enrollment_id)
    )
    return list(db.execute(stmt).scalars().all())


def get_enrolled_subject_ids(db: Session, student_id: int) -> Set[int]:
    stmt = select(Enrollment.subject_id).where(Enrollment.student_id == student_id)
    return set(db.execute(stmt).scalars().all())


def count_distinct_student_teacher_pairs(db: Session) -> int:
    pairs = select(Enrollment.student_id, Enrollment.teacher_id).distinct().subquery()
    return db.execute(select(func.count()).select_from(pairs)).scalar() or 0


def add_enrollments(db: Session, enrollments: List[Enrollment]) -> List[Enrollment]:
    """Thêm nhiều enrollment trong một lần commit."""
    db.add_all(enrollments)
    db.commit()
    for enrollment in enrollments:
        db.refresh(enrollment)
    return enrollments


def delete_enrollment(db: Session, db_obj: Enrollment) -> Enrollment:
    db.delete(db_obj)
    db.commit()
    return db_obj
