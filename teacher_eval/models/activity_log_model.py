from datetime import datetime
from enum import Enum
from sqlalchemy import Column, Integer, String, DateTime, Interval, ForeignKey, Enum as SqlEnum
from sqlalchemy.orm import relationship
from teacher_eval.database import Base


class ActivityType(str, Enum):
    Login = "Login"
    Logout = "Logout"
    EvaluationStarted = "EvaluationStarted"
    EvaluationCompleted = "EvaluationCompleted"


class ActivityLog(Base):
    """
    Nhật ký hoạt động. Các khóa ngoại không cascade: xóa evaluation/student/teacher/subject
    phải xóa các dòng log liên quan trước.
    """
    __tablename__ = "activity_logs"

    activity_log_id = Column(Integer, primary_key=True, index=True)

    student_id = Column(Integer, ForeignKey("students.user_id"), nullable=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=True)
    username = Column(String(100), nullable=False, index=True)
    role = Column(String(50), nullable=False, default="")

    activity_type = Column(SqlEnum(ActivityType, name="activity_type_enum"), nullable=False, index=True)
    description = Column(String(500), nullable=True)

    ip_address = Column(String(45), nullable=True)
    city = Column(String(100), nullable=True)
    region = Column(String(100), nullable=True)
    country = Column(String(100), nullable=True)
    user_agent = Column(String(500), nullable=True)

    timestamp = Column(DateTime, default=datetime.now, nullable=False, index=True)

    # Theo dõi phiên đăng nhập
    session_token = Column(String(64), nullable=True, index=True)
    time_in = Column(DateTime, nullable=True)
    time_out = Column(DateTime, nullable=True)
    duration = Column(Interval, nullable=True)

    evaluation_id = Column(Integer, ForeignKey("evaluations.evaluation_id"), nullable=True, index=True)
    teacher_id = Column(Integer, ForeignKey("teachers.teacher_id"), nullable=True)
    subject_id = Column(Integer, ForeignKey("subjects.subject_id"), nullable=True)

    teacher = relationship("Teacher")
    subject = relationship("Subject")

    @property
    def location(self):
        if not any([self.city, self.region, self.country]):
            return None
        return f"{self.city}, {self.region}, {self.country}"

    def __repr__(self):
        return f"<ActivityLog(type={self.activity_type}, username='{self.username}')>"
