from sqlalchemy import Column, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from teacher_eval.database import Base


class Enrollment(Base):
    """
    Bộ ba (student, subject, teacher). teacher_id được sao chép từ môn học lúc ghi danh.
    """
    __tablename__ = "enrollments"
    __table_args__ = (
        UniqueConstraint("student_id", "subject_id", name="uq_enrollments_student_subject"),
    )

    enrollment_id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.user_id", ondelete="RESTRICT"), nullable=False, index=True)
    subject_id = Column(Integer, ForeignKey("subjects.subject_id", ondelete="RESTRICT"), nullable=False)
    teacher_id = Column(Integer, ForeignKey("teachers.teacher_id", ondelete="RESTRICT"), nullable=False)

    student = relationship("Student", back_populates="enrollments")
    subject = relationship("Subject", back_populates="enrollments")
    teacher = relationship("Teacher", back_populates="enrollments")

    def __repr__(self):
        return (
            f"<Enrollment(student_id={self.student_id}, subject_id={self.subject_id}, "
            f"teacher_id={self.teacher_id})>"
        )
