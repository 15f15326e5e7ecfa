from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from teacher_eval.models.evaluation_period_model import EvaluationPeriod as EvaluationPeriodModel, PeriodStatus


class EvaluationPeriodBase(BaseModel):
    """
    Dữ liệu đầu vào của một kỳ đánh giá (dùng cho cả tạo mới và cập nhật).
    """
    model_config = ConfigDict(extra="forbid")

    period_name: str = Field(..., min_length=1, max_length=100, example="First Semester 2025-2026")
    academic_year: str = Field(..., min_length=1, max_length=20, example="2025-2026")
    semester: str = Field(..., min_length=1, max_length=50, example="First Semester")
    start_date: date
    end_date: date
    is_active: bool = True
    is_current: bool = False
    description: Optional[str] = Field(None, max_length=500)


class EvaluationPeriodCreate(EvaluationPeriodBase):
    pass


class EvaluationPeriodUpdate(EvaluationPeriodBase):
    pass


class CurrentPeriod(BaseModel):
    evaluation_period_id: int
    period_name: str
    academic_year: str
    semester: str
    start_date: date
    end_date: date
    is_active: bool
    status: PeriodStatus
    is_valid_for_evaluation: bool

    @classmethod
    def from_model(cls, period: EvaluationPeriodModel, today: Optional[date] = None) -> "CurrentPeriod":
        return cls(
            evaluation_period_id=period.evaluation_period_id,
            period_name=period.period_name,
            academic_year=period.academic_year,
            semester=period.semester,
            start_date=period.start_date,
            end_date=period.end_date,
            is_active=period.is_active,
            status=period.status(today),
            is_valid_for_evaluation=period.is_valid_for_evaluation(today),
        )


class CurrentPeriodResponse(BaseModel):
    found: bool
    message: str
    period: Optional[CurrentPeriod] = None


class EvaluationPeriodView(CurrentPeriod):
    is_current: bool
    description: Optional[str] = None
    created_date: Optional[datetime] = None
    created_by: Optional[str] = None
    evaluation_count: int = 0

    @classmethod
    def from_model(
        cls, period: EvaluationPeriodModel, today: Optional[date] = None, evaluation_count: int = 0
    ) -> "EvaluationPeriodView":
        base = CurrentPeriod.from_model(period, today)
        return cls(
            **base.model_dump(),
            is_current=period.is_current,
            description=period.description,
            created_date=period.created_date,
            created_by=period.created_by,
            evaluation_count=evaluation_count,
        )


class PeriodActionResult(BaseModel):
    success: bool
    message: str
    period: EvaluationPeriodView
