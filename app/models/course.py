from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from app.db.database import Base

class Course(Base):
    __tablename__ = "COURSES"

    course_id = Column(Integer, primary_key=True, autoincrement=True)
    course_code = Column(String(20), unique=True, nullable=False)
    course_name = Column(String(150), nullable=False)
    semester = Column(String(30))
    credits = Column(Integer)
    professor_id = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    enrollments = relationship("Enrollment", back_populates="course")
    grades = relationship("Grade", back_populates="course")
    grading_weight = relationship("GradingWeight", back_populates="course", uselist=False)
    assessment_weights = relationship("AssessmentWeight", back_populates="course")
