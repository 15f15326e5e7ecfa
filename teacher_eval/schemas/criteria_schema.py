from typing import Annotated, List
from pydantic import BaseModel, ConfigDict, Field, StringConstraints


class QuestionView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    question_id: int
    description: str


class CriteriaWithQuestions(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    criteria_id: int
    name: str
    questions: List[QuestionView] = []


class QuestionSetReplace(BaseModel):
    """Thay toàn bộ danh sách câu hỏi của một tiêu chí."""
    model_config = ConfigDict(extra="forbid")

    descriptions: List[Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]] = Field(..., min_length=1)
