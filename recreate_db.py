from teacher_eval.database import Base, engine, SessionLocal
from teacher_eval.models import Criteria, Question, Role
from teacher_eval.models.role_model import ROLE_SUPER_ADMIN, ROLE_ADMIN, ROLE_STUDENT
from sqlalchemy import text

DEFAULT_CRITERIA = {
    "Teaching Competence": [
        "Explains the lesson clearly and logically.",
        "Shows mastery of the subject matter.",
    ],
    "Classroom Management": [
        "Starts and ends classes on time.",
        "Maintains an orderly learning environment.",
    ],
    "Professionalism": [
        "Treats students with fairness and respect.",
        "Is available for consultation outside class.",
    ],
}


def seed_reference_data():
    db = SessionLocal()
    try:
        for name in (ROLE_SUPER_ADMIN, ROLE_ADMIN, ROLE_STUDENT):
            db.add(Role(name=name))
        for criteria_name, questions in DEFAULT_CRITERIA.items():
            criteria = Criteria(name=criteria_name)
            criteria.questions = [Question(description=q) for q in questions]
            db.add(criteria)
        db.commit()
        print("Đã thêm dữ liệu vai trò và tiêu chí mặc định.")
    finally:
        db.close()


def recreate_database():
    print("Đang xóa tất cả các bảng cơ sở dữ liệu...")

    all_table_names = [table.name for table in reversed(Base.metadata.sorted_tables)]
    cascade = " CASCADE" if engine.dialect.name == "postgresql" else ""

    with engine.connect() as connection:
        for table_name in all_table_names:
            print(f"Đang xóa bảng: {table_name}")
            connection.execute(text(f"DROP TABLE IF EXISTS {table_name}{cascade};"))
        connection.commit()

    print("Đang tạo lại tất cả các bảng cơ sở dữ liệu...")
    Base.metadata.create_all(bind=engine)
    seed_reference_data()
    print("Cơ sở dữ liệu đã được tạo lại thành công!")


if __name__ == "__main__":
    recreate_database()
