# teacher_eval/crud/evaluation_period_crud.py
from datetime import date
from typing import List, Optional, Tuple
from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from teacher_eval.models.evaluation_period_model import EvaluationPeriod
from teacher_eval.models.evaluation_model import Evaluation


def get_period(db: Session, period_id: int) -> Optional[EvaluationPeriod]:
    """Lấy kỳ đánh giá theo ID."""
    return db.get(EvaluationPeriod, period_id)


def get_all_periods_with_counts(db: Session) -> List[Tuple[EvaluationPeriod, int]]:
    """
    Lấy tất cả các kỳ kèm số lượt đánh giá; kỳ hiện tại lên đầu, sau đó theo ngày bắt đầu giảm dần.
    """
    eval_count = (
        select(Evaluation.evaluation_period_id, func.count(Evaluation.evaluation_id).label("cnt"))
        .group_by(Evaluation.evaluation_period_id)
        .subquery()
    )
    stmt = (
        select(EvaluationPeriod, func.coalesce(eval_count.c.cnt, 0))
        .outerjoin(eval_count, eval_count.c.evaluation_period_id == EvaluationPeriod.evaluation_period_id)
        .order_by(EvaluationPeriod.is_current.desc(), EvaluationPeriod.start_date.desc())
    )
    return [(row[0], int(row[1])) for row in db.execute(stmt).all()]


def count_evaluations(db: Session, period_id: int) -> int:
    return db.execute(
        select(func.count(Evaluation.evaluation_id)).where(Evaluation.evaluation_period_id == period_id)
    ).scalar() or 0


def find_overlapping_period(
    db: Session, start_date: date, end_date: date, exclude_id: Optional[int] = None
) -> Optional[EvaluationPeriod]:
    """
    Tìm một kỳ đang active có khoảng ngày giao với [start_date, end_date] (tính cả hai đầu).
    """
    stmt = select(EvaluationPeriod).where(
        EvaluationPeriod.is_active.is_(True),
        EvaluationPeriod.start_date <= end_date,
        EvaluationPeriod.end_date >= start_date,
    )
    if exclude_id is not None:
        stmt = stmt.where(EvaluationPeriod.evaluation_period_id != exclude_id)
    return db.execute(stmt.order_by(EvaluationPeriod.start_date)).scalars().first()


def get_current_period(db: Session) -> Optional[EvaluationPeriod]:
    """Kỳ hiện tại: is_current và is_active."""
    stmt = select(EvaluationPeriod).where(
        EvaluationPeriod.is_current.is_(True),
        EvaluationPeriod.is_active.is_(True),
    )
    return db.execute(stmt).scalars().first()


def claim_current_flag(db: Session, period_id: int) -> None:
    """
    Bỏ cờ current ở mọi kỳ khác rồi đặt cho period_id, trong cùng một transaction.
    Không commit; chỉ mục unique một-phần chặn trường hợp hai kỳ cùng current.
    """
    db.execute(
        update(EvaluationPeriod)
        .where(
            EvaluationPeriod.evaluation_period_id != period_id,
            EvaluationPeriod.is_current.is_(True),
        )
        .values(is_current=False)
    )
    db.execute(
        update(EvaluationPeriod)
        .where(EvaluationPeriod.evaluation_period_id == period_id)
        .values(is_current=True)
    )


def delete_period(db: Session, db_obj: EvaluationPeriod) -> EvaluationPeriod:
    db.delete(db_obj)
    db.commit()
    return db_obj
