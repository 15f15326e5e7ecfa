from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.orm import Session

from teacher_eval.models.subject_model import Subject


def get_subject(db: Session, subject_id: int) -> Optional[Subject]:
    """Lấy thông tin môn học theo ID."""
    return db.get(Subject, subject_id)


def get_subjects_with_teacher(db: Session, level_id: int, section_id: int) -> List[Subject]:
    """Các môn cùng Level + Section đã có giáo viên phụ trách."""
    stmt = (
        select(Subject)
        .where(
            Subject.level_id == level_id,
            Subject.section_id == section_id,
            Subject.teacher_id.is_not(None),
            Subject.teacher_id > 0,
        )
        .order_by(Subject.subject_id)
    )
    return list(db.execute(stmt).scalars().all())
