import logging
import math
from typing import Optional

from fastapi import HTTPException, status as fastapi_status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.course import Course
from app.models.grading_weight import GradingWeight
from app.services.grading_engine import Category, DEFAULT_WEIGHTS, resolve_weights

logger = logging.getLogger(__name__)


def get_course_or_404(db: Session, course_id: int) -> Course:
    course = db.query(Course).filter(Course.course_id == course_id).first()
    if not course:
        raise HTTPException(status_code=fastapi_status.HTTP_404_NOT_FOUND, detail="Course not found")
    return course


def get_weight_row(db: Session, course_id: int) -> Optional[GradingWeight]:
    """Current weight configuration of a course, or None when it was never set."""
    return db.query(GradingWeight).filter(GradingWeight.course_id == course_id).first()


def _weight_info(course_id: int, row: Optional[GradingWeight]):
    resolved = resolve_weights(row)
    return {
        "course_id": course_id,
        "configured": row is not None,
        "professor_id": row.professor_id if row else None,
        "weights": {c.value: w for c, w in resolved.items()},
        "weight_sum": sum(resolved.values()),
    }


# == Course weights
def get_weights(db: Session, course_id: int):
    get_course_or_404(db, course_id)
    return _weight_info(course_id, get_weight_row(db, course_id))


# == Save course weights (total must be 100)
def upsert_weights(
    db: Session,
    course_id: int,
    professor_id: Optional[int],
    assignment_weight: Optional[float] = None,
    quiz_weight: Optional[float] = None,
    midterm_weight: Optional[float] = None,
    final_weight: Optional[float] = None,
):
    """Create or replace the weights of a course.

    This is where a mis-summed configuration is stopped. The aggregation
    engine itself accepts any sum, so the check has to happen at write time.
    """
    try:
        get_course_or_404(db, course_id)

        submitted = {
            Category.assignment: assignment_weight,
            Category.quiz: quiz_weight,
            Category.midterm: midterm_weight,
            Category.final: final_weight,
        }
        values = {}
        for category, value in submitted.items():
            value = DEFAULT_WEIGHTS[category] if value is None else float(value)
            if not math.isfinite(value) or value < 0:
                raise HTTPException(
                    status_code=fastapi_status.HTTP_400_BAD_REQUEST,
                    detail=f"{category.value}_weight must be a non-negative number"
                )
            values[category] = value

        total = sum(values.values())
        if abs(total - 100) > settings.WEIGHT_SUM_TOLERANCE:
            raise HTTPException(
                status_code=fastapi_status.HTTP_400_BAD_REQUEST,
                detail=f"Total weights must equal 100 (got {total:g})"
            )

        row = get_weight_row(db, course_id)
        if row is None:
            row = GradingWeight(course_id=course_id)
            db.add(row)

        row.professor_id = professor_id
        row.assignment_weight = values[Category.assignment]
        row.quiz_weight = values[Category.quiz]
        row.midterm_weight = values[Category.midterm]
        row.final_weight = values[Category.final]

        db.commit()
        db.refresh(row)
        logger.info("Grading weights saved for course %s by user %s", course_id, professor_id)
        return _weight_info(course_id, row)
    except Exception as e:
        db.rollback()
        raise e
