from .user_model import User
from .role_model import Role
from .level_model import Level, Section
from .teacher_model import Teacher
from .student_model import Student
from .subject_model import Subject
from .enrollment_model import Enrollment
from .evaluation_period_model import EvaluationPeriod, PeriodStatus
from .evaluation_model import Evaluation, Score
from .criteria_model import Criteria, Question
from .activity_log_model import ActivityLog, ActivityType

# Import các bảng liên kết từ association_tables.py
from .association_tables import user_roles
