from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from teacher_eval.database import Base


class Level(Base):
    """
    Bậc học (Junior High, Senior High, College...).
    """
    __tablename__ = "levels"

    level_id = Column(Integer, primary_key=True)
    level_name = Column(String(100), unique=True, nullable=False)

    sections = relationship("Section", back_populates="level")

    def __repr__(self):
        return f"<Level(name='{self.level_name}')>"


class Section(Base):
    __tablename__ = "sections"

    section_id = Column(Integer, primary_key=True)
    section_name = Column(String(100), nullable=False)
    level_id = Column(Integer, ForeignKey("levels.level_id", ondelete="RESTRICT"), nullable=False)

    level = relationship("Level", back_populates="sections")

    def __repr__(self):
        return f"<Section(name='{self.section_name}', level_id={self.level_id})>"
