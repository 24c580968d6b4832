from sqlalchemy import Column, Integer, DateTime, Enum, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from app.db.database import Base
import enum

class EnrollmentStatus(enum.Enum):
    active = "active"
    dropped = "dropped"
    completed = "completed"

class Enrollment(Base):
    __tablename__ = "ENROLLMENTS"

    enrollment_id = Column(Integer, primary_key=True, autoincrement=True)
    course_id = Column(Integer, ForeignKey("COURSES.course_id", onupdate="CASCADE", ondelete="CASCADE"), nullable=False)
    student_id = Column(Integer, nullable=False)
    status = Column(Enum(EnrollmentStatus), default=EnrollmentStatus.active, nullable=False)
    enrolled_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("course_id", "student_id", name="uq_course_student"),)

    course = relationship("Course", back_populates="enrollments")
