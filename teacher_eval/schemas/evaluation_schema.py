from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from teacher_eval.config import SCORE_MIN, SCORE_MAX


class ScoreIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    question_id: int = Field(..., gt=0)
    value: int = Field(..., ge=SCORE_MIN, le=SCORE_MAX, description="Likert 1 (Poor) - 5 (Excellent)")


class EvaluationSubmit(BaseModel):
    """
    Dữ liệu gửi lên khi nộp một lượt đánh giá.
    student_id chỉ cần khi quản trị viên nộp thay cho học sinh.
    """
    model_config = ConfigDict(extra="forbid")

    student_id: Optional[int] = None
    teacher_id: int = Field(..., gt=0)
    subject_id: int = Field(..., gt=0)
    is_anonymous: bool = False
    comment: Optional[str] = Field(None, max_length=1000)
    scores: List[ScoreIn] = Field(..., min_length=1)


class SubmissionResult(BaseModel):
    evaluation_id: int
    evaluation_period_id: int
    period_name: str
    period_label: str
    message: str


class EligibilityStatus(str, Enum):
    no_active_period = "no_active_period"
    not_enrolled = "not_enrolled"
    completed = "completed"
    pending = "pending"


class EligibleCandidate(BaseModel):
    teacher_id: int
    teacher_name: str
    subject_id: int
    subject_code: str
    subject_name: str


class EligibilityResult(BaseModel):
    status: EligibilityStatus
    has_active_period: bool
    can_submit: bool = False
    evaluation_period_id: Optional[int] = None
    period_name: Optional[str] = None
    candidates: List[EligibleCandidate] = []
    total_enrolled: int = 0
    total_evaluated: int = 0
    total_remaining: int = 0
    progress_percentage: float = 0
    message: str = ""


class QuestionResult(BaseModel):
    question_id: int
    description: Optional[str] = None
    score_value: int


class CriteriaResult(BaseModel):
    criteria_id: Optional[int] = None
    criteria_name: Optional[str] = None
    criteria_average: float
    questions: List[QuestionResult] = []


class EvaluationResult(BaseModel):
    evaluation_id: int
    evaluation_period_id: int
    period_name: Optional[str] = None
    teacher_id: int
    teacher_name: Optional[str] = None
    teacher_department: Optional[str] = None
    subject_id: int
    subject_name: Optional[str] = None
    student_id: Optional[int] = None
    student_name: Optional[str] = None
    is_anonymous: bool
    date_evaluated: datetime
    comments: Optional[str] = None
    overall_average: float
    criteria_results: List[CriteriaResult] = []


class EvaluationListItem(BaseModel):
    evaluation_id: int
    evaluation_period_id: int
    period_name: Optional[str] = None
    subject_name: Optional[str] = None
    teacher_name: Optional[str] = None
    student_name: Optional[str] = None
    is_anonymous: bool
    date_evaluated: datetime
    average_score: float
