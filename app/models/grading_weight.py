from sqlalchemy import Column, Integer, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from app.db.database import Base

class GradingWeight(Base):
    __tablename__ = "GRADING_WEIGHTS"

    weight_id = Column(Integer, primary_key=True, autoincrement=True)
    course_id = Column(Integer, ForeignKey("COURSES.course_id", onupdate="CASCADE", ondelete="CASCADE"), unique=True, nullable=False)
    professor_id = Column(Integer, nullable=True)
    # Nullable on purpose: a missing value falls back to the category default when aggregating
    assignment_weight = Column(Float, nullable=True)
    quiz_weight = Column(Float, nullable=True)
    midterm_weight = Column(Float, nullable=True)
    final_weight = Column(Float, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    course = relationship("Course", back_populates="grading_weight")
