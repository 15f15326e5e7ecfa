from datetime import datetime, timedelta
from typing import List, Optional
from pydantic import BaseModel, ConfigDict

from teacher_eval.models.activity_log_model import ActivityType


class ActivityLogView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    activity_log_id: int
    username: str
    role: str
    activity_type: ActivityType
    description: Optional[str] = None
    ip_address: Optional[str] = None
    location: Optional[str] = None
    user_agent: Optional[str] = None
    timestamp: datetime
    time_in: Optional[datetime] = None
    time_out: Optional[datetime] = None
    duration: Optional[timedelta] = None
    evaluation_id: Optional[int] = None
    teacher_id: Optional[int] = None
    subject_id: Optional[int] = None


class ActivityLogPage(BaseModel):
    items: List[ActivityLogView]
    total_count: int
    page: int
    page_size: int
    total_pages: int
