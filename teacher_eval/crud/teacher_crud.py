from typing import Optional
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from teacher_eval.models.teacher_model import Teacher


def get_teacher(db: Session, teacher_id: int) -> Optional[Teacher]:
    """Lấy thông tin giáo viên theo ID."""
    return db.get(Teacher, teacher_id)


def count_teachers(db: Session) -> int:
    return db.execute(select(func.count(Teacher.teacher_id))).scalar() or 0
