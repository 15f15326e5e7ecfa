from sqlalchemy import Column, Integer, ForeignKey
from sqlalchemy.orm import relationship
from teacher_eval.database import Base


class Student(Base):
    """
    Model cho bảng students.
    """
    __tablename__ = 'students'

    # user_id là khóa chính và khóa ngoại
    user_id = Column(Integer, ForeignKey('users.user_id', ondelete="RESTRICT"), primary_key=True, nullable=False)
    level_id = Column(Integer, ForeignKey("levels.level_id", ondelete="RESTRICT"), nullable=False)
    section_id = Column(Integer, ForeignKey("sections.section_id", ondelete="RESTRICT"), nullable=True)
    college_year_level = Column(Integer, nullable=True)

    user = relationship("User", back_populates="student")
    level = relationship("Level")
    section = relationship("Section")

    # Enrollment dùng khóa ngoại RESTRICT: không để ORM tự set NULL
    enrollments = relationship("Enrollment", back_populates="student", passive_deletes="all")
    evaluations = relationship("Evaluation", back_populates="student", passive_deletes="all")

    @property
    def full_name(self):
        return self.user.full_name if self.user else None

    def __repr__(self):
        return f"<Student(user_id='{self.user_id}')>"
