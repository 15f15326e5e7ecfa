import sys
import os
from datetime import date, timedelta
from types import SimpleNamespace

import pytest

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from teacher_eval.api.deps import get_db
from teacher_eval.api.auth.auth import create_access_token, to_authenticated_user
from teacher_eval.database import Base, build_engine
from teacher_eval.models import (
    Criteria, Enrollment, EvaluationPeriod, Level, Question, Role, Section, Student, Subject, Teacher, User,
)
from teacher_eval.models.role_model import ROLE_ADMIN, ROLE_STUDENT, ROLE_SUPER_ADMIN
from teacher_eval.models.user_model import pwd_context
from main import app

# SQLite In-Memory (DB ảo), dùng chung một kết nối
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = build_engine(SQLALCHEMY_DATABASE_URL, poolclass=StaticPool)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "secret123"
PASSWORD_HASH = pwd_context.hash(PASSWORD)


def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture()
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db):
    return TestClient(app)


def make_period(db, name, start, end, active=True, current=False, semester="First Semester", year="2024-2025"):
    period = EvaluationPeriod(
        period_name=name,
        academic_year=year,
        semester=semester,
        start_date=start,
        end_date=end,
        is_active=active,
        is_current=current,
    )
    db.add(period)
    db.commit()
    db.refresh(period)
    return period


def _user(db, username, full_name, role, password_hash=None):
    user = User(username=username, email=f"{username}@school.edu", full_name=full_name, password=password_hash or "!")
    user.roles = [role]
    db.add(user)
    return user


@pytest.fixture()
def seed(db):
    """
    Dữ liệu mẫu:
    - student1 học IT101 (Santos), IT102 (Reyes), IT103 (Cruz, đã nghỉ);
    - student2 cùng section nhưng chưa ghi danh môn nào;
    - IT104 chưa có giáo viên, SH101 thuộc level khác.
    """
    roles = {name: Role(name=name) for name in (ROLE_SUPER_ADMIN, ROLE_ADMIN, ROLE_STUDENT)}
    db.add_all(roles.values())

    college = Level(level_name="College")
    senior_high = Level(level_name="Senior High")
    db.add_all([college, senior_high])
    db.flush()
    sec_a = Section(section_name="BSIT-1A", level_id=college.level_id)
    sec_b = Section(section_name="BSIT-1B", level_id=college.level_id)
    sec_sh = Section(section_name="STEM-11", level_id=senior_high.level_id)
    db.add_all([sec_a, sec_b, sec_sh])
    db.flush()

    santos = Teacher(full_name="Maria Santos", department="IT", level_id=college.level_id)
    reyes = Teacher(full_name="Jose Reyes", department="IT", level_id=college.level_id)
    cruz = Teacher(full_name="Ana Cruz", department="IT", level_id=college.level_id, is_active=False)
    db.add_all([santos, reyes, cruz])
    db.flush()

    def subject(code, name, level, section, teacher):
        return Subject(
            subject_code=code, subject_name=name, level_id=level.level_id, section_id=section.section_id,
            teacher_id=teacher.teacher_id if teacher else None,
        )

    it101 = subject("IT101", "Programming 1", college, sec_a, santos)
    it102 = subject("IT102", "Discrete Math", college, sec_a, reyes)
    it103 = subject("IT103", "Web Design", college, sec_a, cruz)
    it104 = subject("IT104", "Networking", college, sec_a, None)
    it105 = subject("IT105", "Databases", college, sec_b, reyes)
    sh101 = subject("SH101", "General Physics", senior_high, sec_sh, santos)
    db.add_all([it101, it102, it103, it104, it105, sh101])

    admin = _user(db, "admin", "System Admin", roles[ROLE_ADMIN], PASSWORD_HASH)
    student1 = _user(db, "juan", "Juan Dela Cruz", roles[ROLE_STUDENT], PASSWORD_HASH)
    student2 = _user(db, "pedro", "Pedro Penduko", roles[ROLE_STUDENT])
    db.flush()
    db.add_all([
        Student(user_id=student1.user_id, level_id=college.level_id, section_id=sec_a.section_id),
        Student(user_id=student2.user_id, level_id=college.level_id, section_id=sec_a.section_id),
    ])

    teaching = Criteria(name="Teaching Competence")
    teaching.questions = [Question(description="Explains clearly"), Question(description="Knows the subject")]
    management = Criteria(name="Classroom Management")
    management.questions = [Question(description="Starts on time"), Question(description="Keeps order")]
    db.add_all([teaching, management])
    db.flush()

    db.add_all([
        Enrollment(student_id=student1.user_id, subject_id=it101.subject_id, teacher_id=santos.teacher_id),
        Enrollment(student_id=student1.user_id, subject_id=it102.subject_id, teacher_id=reyes.teacher_id),
        Enrollment(student_id=student1.user_id, subject_id=it103.subject_id, teacher_id=cruz.teacher_id),
    ])
    db.commit()

    return SimpleNamespace(
        admin=admin,
        student1=student1,
        student2=student2,
        santos=santos,
        reyes=reyes,
        cruz=cruz,
        it101=it101,
        it102=it102,
        it103=it103,
        it104=it104,
        it105=it105,
        sh101=sh101,
        sec_a=sec_a,
        sec_b=sec_b,
        sec_sh=sec_sh,
        college=college,
        senior_high=senior_high,
        teaching=teaching,
        management=management,
        question_ids=[q.question_id for q in teaching.questions + management.questions],
        admin_principal=to_authenticated_user(admin),
        student1_principal=to_authenticated_user(student1),
        student2_principal=to_authenticated_user(student2),
    )


@pytest.fixture()
def open_period(db, seed):
    """Kỳ hiện tại bao quanh ngày hôm nay (dùng cho test qua HTTP)."""
    today = date.today()
    return make_period(db, "Current Term", today - timedelta(days=10), today + timedelta(days=30), current=True)


def auth_headers(user, session_token=None):
    data = {"sub": str(user.user_id)}
    if session_token:
        data["sid"] = session_token
    return {"Authorization": f"Bearer {create_access_token(data)}"}


def score_payload(question_ids, values):
    return [{"question_id": qid, "value": value} for qid, value in zip(question_ids, values)]
