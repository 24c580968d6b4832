from sqlalchemy import Column, Integer, Float, Text, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from app.db.database import Base

class Grade(Base):
    __tablename__ = "GRADES"

    grade_id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(Integer, nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("COURSES.course_id", onupdate="CASCADE", ondelete="CASCADE"), nullable=False)
    # Kept as plain text: rows with an unknown tag are skipped by the aggregation engine, not by the ORM
    assessment_type = Column(String(20), nullable=False)
    assessment_id = Column(Integer, nullable=True)
    score = Column(Float, nullable=False)
    max_score = Column(Float, nullable=False, default=100)
    remarks = Column(Text)
    graded_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    course = relationship("Course", back_populates="grades")
