from typing import Optional
from sqlalchemy import func, select
from sqlalchemy.orm import Session, joinedload

from teacher_eval.models.student_model import Student
from teacher_eval.models.level_model import Section


def get_student(db: Session, student_id: int) -> Optional[Student]:
    """Lấy học sinh (kèm user và section) theo user_id."""
    stmt = (
        select(Student)
        .options(joinedload(Student.user), joinedload(Student.section))
        .where(Student.user_id == student_id)
    )
    return db.execute(stmt).scalars().first()


def get_section(db: Session, section_id: int) -> Optional[Section]:
    return db.get(Section, section_id)


def count_students(db: Session) -> int:
    return db.execute(select(func.count(Student.user_id))).scalar() or 0


def update_placement(
    db: Session, db_obj: Student, level_id: int, section_id: Optional[int], college_year_level: Optional[int] = None
) -> Student:
    """Cập nhật Level/Section của học sinh."""
    db_obj.level_id = level_id
    db_obj.section_id = section_id
    if college_year_level is not None:
        db_obj.college_year_level = college_year_level
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj
