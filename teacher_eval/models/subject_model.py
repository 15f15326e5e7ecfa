# teacher_eval/models/subject_model.py
from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from teacher_eval.database import Base


class Subject(Base):
    """
    Model cho bảng subjects: một môn học thuộc một Level, một Section và một giáo viên.
    """
    __tablename__ = 'subjects'

    subject_id = Column(Integer, primary_key=True)
    subject_code = Column(String(20), nullable=False)
    subject_name = Column(String(100), nullable=False)
    level_id = Column(Integer, ForeignKey("levels.level_id", ondelete="RESTRICT"), nullable=False)
    section_id = Column(Integer, ForeignKey("sections.section_id", ondelete="RESTRICT"), nullable=False)
    teacher_id = Column(Integer, ForeignKey("teachers.teacher_id", ondelete="RESTRICT"), nullable=True)
    schedule = Column(String(100), nullable=True)  # e.g. "MWF 10:00-11:30"

    level = relationship("Level")
    section = relationship("Section")
    teacher = relationship("Teacher", back_populates="subjects")
    enrollments = relationship("Enrollment", back_populates="subject", passive_deletes="all")

    @property
    def display_name(self):
        return f"{self.subject_code} - {self.subject_name}"

    def __repr__(self):
        return f"<Subject(code='{self.subject_code}')>"
