from sqlalchemy import Column, Integer, Float, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from app.db.database import Base

class AssessmentWeight(Base):
    __tablename__ = "ASSESSMENT_WEIGHTS"

    assessment_weight_id = Column(Integer, primary_key=True, autoincrement=True)
    course_id = Column(Integer, ForeignKey("COURSES.course_id", onupdate="CASCADE", ondelete="CASCADE"), nullable=False)
    assessment_type = Column(String(20), nullable=False)
    assessment_id = Column(Integer, nullable=False)
    weight = Column(Float, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("course_id", "assessment_type", "assessment_id", name="uq_course_assessment"),
    )

    course = relationship("Course", back_populates="assessment_weights")
