from sqlalchemy import Column, Integer, String, Text, ForeignKey
from sqlalchemy.orm import relationship
from teacher_eval.database import Base


class Criteria(Base):
    __tablename__ = "criteria"

    criteria_id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)

    questions = relationship("Question", back_populates="criteria", order_by="Question.question_id")

    def __repr__(self):
        return f"<Criteria(name='{self.name}')>"


class Question(Base):
    __tablename__ = "questions"

    question_id = Column(Integer, primary_key=True)
    criteria_id = Column(Integer, ForeignKey("criteria.criteria_id", ondelete="RESTRICT"), nullable=False, index=True)
    description = Column(Text, nullable=False)

    criteria = relationship("Criteria", back_populates="questions")

    def __repr__(self):
        return f"<Question(criteria_id={self.criteria_id}, id={self.question_id})>"
