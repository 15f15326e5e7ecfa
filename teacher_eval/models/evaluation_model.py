from datetime import datetime
from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, ForeignKey,
    UniqueConstraint, CheckConstraint,
)
from sqlalchemy.orm import relationship
from teacher_eval.database import Base


class Evaluation(Base):
    """
    Một lượt đánh giá của một học sinh cho một giáo viên, một môn học trong một kỳ.
    """
    __tablename__ = 'evaluations'
    __table_args__ = (
        # Mỗi cặp (student, teacher, subject) chỉ được đánh giá một lần trong một kỳ
        UniqueConstraint(
            "student_id", "teacher_id", "subject_id", "evaluation_period_id",
            name="uq_evaluations_student_teacher_subject_period",
        ),
    )

    evaluation_id = Column(Integer, primary_key=True, index=True)
    evaluation_period_id = Column(
        Integer, ForeignKey("evaluation_periods.evaluation_period_id", ondelete="RESTRICT"), nullable=False, index=True
    )
    subject_id = Column(Integer, ForeignKey("subjects.subject_id", ondelete="RESTRICT"), nullable=False)
    teacher_id = Column(Integer, ForeignKey("teachers.teacher_id", ondelete="RESTRICT"), nullable=False)
    student_id = Column(Integer, ForeignKey("students.user_id", ondelete="RESTRICT"), nullable=False)
    is_anonymous = Column(Boolean, default=False, nullable=False)
    date_evaluated = Column(DateTime, default=datetime.now, nullable=False)
    comments = Column(String(1000), nullable=True)

    evaluation_period = relationship("EvaluationPeriod", back_populates="evaluations")
    subject = relationship("Subject")
    teacher = relationship("Teacher", back_populates="evaluations")
    student = relationship("Student", back_populates="evaluations")
    scores = relationship(
        "Score",
        back_populates="evaluation",
        cascade="all, delete-orphan",
        order_by="Score.score_id",
    )

    @property
    def average_score(self) -> float:
        if not self.scores:
            return 0
        return sum(s.score_value for s in self.scores) / len(self.scores)

    def __repr__(self):
        return (
            f"<Evaluation(student_id={self.student_id}, teacher_id={self.teacher_id}, "
            f"subject_id={self.subject_id}, period_id={self.evaluation_period_id})>"
        )


class Score(Base):
    """
    Điểm của một câu hỏi trong một lượt đánh giá (Likert 1-5).
    """
    __tablename__ = 'scores'
    __table_args__ = (
        UniqueConstraint("evaluation_id", "question_id", name="uq_scores_evaluation_question"),
        CheckConstraint("score_value BETWEEN 1 AND 5", name="ck_scores_value_range"),
    )

    score_id = Column(Integer, primary_key=True)
    evaluation_id = Column(Integer, ForeignKey("evaluations.evaluation_id", ondelete="CASCADE"), nullable=False, index=True)
    question_id = Column(Integer, ForeignKey("questions.question_id", ondelete="RESTRICT"), nullable=False)
    score_value = Column(Integer, nullable=False)

    evaluation = relationship("Evaluation", back_populates="scores")
    question = relationship("Question")

    def __repr__(self):
        return f"<Score(question_id={self.question_id}, value={self.score_value})>"
