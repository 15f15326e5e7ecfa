# teacher_eval/crud/activity_log_crud.py
from datetime import datetime
from typing import List, Optional, Tuple
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from teacher_eval.models.activity_log_model import ActivityLog, ActivityType


def add_activity_log(db: Session, log: ActivityLog, commit: bool = True) -> ActivityLog:
    db.add(log)
    if commit:
        db.commit()
        db.refresh(log)
    return log


def get_activity_log(db: Session, activity_log_id: int) -> Optional[ActivityLog]:
    return db.get(ActivityLog, activity_log_id)


def find_open_login_by_token(db: Session, session_token: str) -> Optional[ActivityLog]:
    stmt = select(ActivityLog).where(
        ActivityLog.activity_type == ActivityType.Login,
        ActivityLog.session_token == session_token,
        ActivityLog.time_out.is_(None),
    )
    return db.execute(stmt).scalars().first()


def find_latest_open_login(db: Session, username: str) -> Optional[ActivityLog]:
    """Dòng Login gần nhất (theo thứ tự chèn) của username mà chưa có time_out."""
    stmt = (
        select(ActivityLog)
        .where(
            ActivityLog.activity_type == ActivityType.Login,
            ActivityLog.username == username,
            ActivityLog.time_out.is_(None),
        )
        .order_by(ActivityLog.activity_log_id.desc())
    )
    return db.execute(stmt).scalars().first()


def search_activity_logs(
    db: Session,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    activity_type: Optional[ActivityType] = None,
    username: Optional[str] = None,
    skip: int = 0,
    limit: int = 20,
) -> Tuple[List[ActivityLog], int]:
    """Lọc nhật ký hoạt động; trả về (trang kết quả, tổng số dòng)."""
    conditions = []
    if date_from is not None:
        conditions.append(ActivityLog.timestamp >= date_from)
    if date_to is not None:
        conditions.append(ActivityLog.timestamp <= date_to)
    if activity_type is not None:
        conditions.append(ActivityLog.activity_type == activity_type)
    if username:
        conditions.append(ActivityLog.username.ilike(f"%{username}%"))

    total = db.execute(select(func.count(ActivityLog.activity_log_id)).where(*conditions)).scalar() or 0
    stmt = (
        select(ActivityLog)
        .where(*conditions)
        .order_by(ActivityLog.timestamp.desc(), ActivityLog.activity_log_id.desc())
        .offset(skip)
        .limit(limit)
    )
    return list(db.execute(stmt).scalars().all()), total
