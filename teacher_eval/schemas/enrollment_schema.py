# teacher_eval/schemas/enrollment_schema.py
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class EnrollmentCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    student_id: int = Field(..., example=1)
    subject_ids: List[int] = Field(..., min_length=1, example=[1, 2])


class EnrollmentView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    enrollment_id: int
    student_id: int
    student_name: Optional[str] = None
    subject_id: int
    subject_code: Optional[str] = None
    subject_name: Optional[str] = None
    teacher_id: int
    teacher_name: Optional[str] = None


class EnrollmentResult(BaseModel):
    message: str
    enrolled_count: int
    skipped_count: int
    errors: List[str] = []
    enrollments: List[EnrollmentView] = []


class StudentPlacementUpdate(BaseModel):
    """Đổi Level/Section của học sinh (kích hoạt tự động ghi danh)."""
    model_config = ConfigDict(extra="forbid")

    level_id: int = Field(..., gt=0)
    section_id: Optional[int] = Field(None, gt=0)
    college_year_level: Optional[int] = None


class PlacementResult(BaseModel):
    student_id: int
    level_id: int
    section_id: Optional[int] = None
    auto_enrolled_count: int
    auto_enroll_deferred: bool = False
