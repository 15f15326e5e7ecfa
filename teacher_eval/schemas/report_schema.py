from typing import List, Optional
from pydantic import BaseModel, Field

from teacher_eval.schemas.evaluation_period_schema import CurrentPeriod


class TopRatedTeacher(BaseModel):
    teacher_id: int
    teacher_name: Optional[str] = None
    average_score: float
    evaluation_count: int


class PeriodStatistics(BaseModel):
    evaluation_period_id: int
    period_name: str
    total_evaluations: int
    unique_students: int
    unique_teachers: int
    average_score: float = Field(..., description="Trung bình của điểm trung bình từng lượt đánh giá")
    anonymous_count: int
    top_rated_teachers: List[TopRatedTeacher] = []


class DashboardSummary(BaseModel):
    total_teachers: int
    total_students: int
    total_evaluations: int
    current_period: Optional[CurrentPeriod] = None
    current_period_evaluations: int = 0
    current_period_average: float = 0
    current_period_participants: int = 0
    total_possible_evaluations: int = 0
    completion_percentage: float = 0
