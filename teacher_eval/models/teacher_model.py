from sqlalchemy import Column, Integer, String, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from teacher_eval.database import Base


class Teacher(Base):
    """
    Model cho bảng teachers. Giáo viên là đối tượng được đánh giá, không đăng nhập.
    """
    __tablename__ = 'teachers'

    teacher_id = Column(Integer, primary_key=True)
    full_name = Column(String(100), nullable=False)
    department = Column(String(50), nullable=False)
    level_id = Column(Integer, ForeignKey("levels.level_id", ondelete="RESTRICT"), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    level = relationship("Level")
    subjects = relationship("Subject", back_populates="teacher")
    enrollments = relationship("Enrollment", back_populates="teacher", passive_deletes="all")
    evaluations = relationship("Evaluation", back_populates="teacher", passive_deletes="all")

    def __repr__(self):
        return f"<Teacher(teacher_id={self.teacher_id}, name='{self.full_name}')>"
