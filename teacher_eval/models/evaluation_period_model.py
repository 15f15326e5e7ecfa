from datetime import date, datetime
from enum import Enum
from typing import Optional
from sqlalchemy import Column, Integer, String, Date, DateTime, Boolean, Index, text
from sqlalchemy.orm import relationship
from teacher_eval.database import Base


class PeriodStatus(str, Enum):
    """
    Trạng thái suy ra từ ngày hôm nay so với [start_date, end_date].
    """
    upcoming = "Upcoming"
    active = "Active"
    completed = "Completed"


class EvaluationPeriod(Base):
    """
    Model cho bảng evaluation_periods.
    """
    __tablename__ = "evaluation_periods"
    __table_args__ = (
        # Tối đa một kỳ có is_current = true trên toàn hệ thống
        Index(
            "uq_evaluation_periods_single_current",
            "is_current",
            unique=True,
            sqlite_where=text("is_current = 1"),
            postgresql_where=text("is_current"),
        ),
    )

    evaluation_period_id = Column(Integer, primary_key=True, index=True)
    period_name = Column(String(100), nullable=False)  # e.g. "First Semester 2024-2025"
    academic_year = Column(String(20), nullable=False)  # e.g. "2024-2025"
    semester = Column(String(50), nullable=False)  # e.g. "First Semester", "Summer"
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    is_current = Column(Boolean, default=False, nullable=False)
    description = Column(String(500), nullable=True)
    created_date = Column(DateTime, default=datetime.now, nullable=False)
    created_by = Column(String(100), nullable=True)

    evaluations = relationship("Evaluation", back_populates="evaluation_period", passive_deletes="all")

    def status(self, today: Optional[date] = None) -> PeriodStatus:
        today = today or date.today()
        if today < self.start_date:
            return PeriodStatus.upcoming
        if today > self.end_date:
            return PeriodStatus.completed
        return PeriodStatus.active

    def is_valid_for_evaluation(self, today: Optional[date] = None) -> bool:
        today = today or date.today()
        return bool(self.is_active) and self.start_date <= today <= self.end_date

    @property
    def label(self):
        return f"{self.semester}, {self.academic_year}"

    def __repr__(self):
        return (
            f"<EvaluationPeriod(id={self.evaluation_period_id}, name='{self.period_name}', "
            f"active={self.is_active}, current={self.is_current})>"
        )
