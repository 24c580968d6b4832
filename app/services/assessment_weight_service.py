import logging
import math
from typing import Dict, Optional, Tuple

from fastapi import HTTPException, status as fastapi_status
from sqlalchemy.orm import Session

from app.models.assessment_weight import AssessmentWeight
from app.services.grading_engine import Category, parse_category
from app.services.grading_weight_service import get_course_or_404

logger = logging.getLogger(__name__)


def _validate_type(assessment_type: str) -> Category:
    category = parse_category(assessment_type)
    if category is None:
        valid_types = [c.value for c in Category]
        raise HTTPException(
            status_code=fastapi_status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid assessment type. Must be one of: {', '.join(valid_types)}"
        )
    return category


def _find(db: Session, course_id: int, assessment_type: str, assessment_id: int) -> Optional[AssessmentWeight]:
    return db.query(AssessmentWeight).filter(
        AssessmentWeight.course_id == course_id,
        AssessmentWeight.assessment_type == assessment_type,
        AssessmentWeight.assessment_id == assessment_id
    ).first()


def list_weights_of_course(db: Session, course_id: int):
    get_course_or_404(db, course_id)
    return db.query(AssessmentWeight).filter(
        AssessmentWeight.course_id == course_id
    ).order_by(AssessmentWeight.assessment_type, AssessmentWeight.assessment_id).all()


def override_map(db: Session, course_id: int) -> Dict[Tuple[str, int], float]:
    """(assessment_type, assessment_id) -> weight for every override of a course."""
    rows = db.query(AssessmentWeight).filter(AssessmentWeight.course_id == course_id).all()
    return {(row.assessment_type, row.assessment_id): row.weight for row in rows}


def get_weight(db: Session, course_id: int, assessment_type: str, assessment_id: int):
    category = _validate_type(assessment_type)
    row = _find(db, course_id, category.value, assessment_id)
    if not row:
        raise HTTPException(status_code=fastapi_status.HTTP_404_NOT_FOUND, detail="Assessment weight not found")
    return {"weight": row.weight}


def set_weight(db: Session, course_id: int, assessment_type: str, assessment_id: int, weight: float):
    try:
        get_course_or_404(db, course_id)
        category = _validate_type(assessment_type)

        if weight is None or not math.isfinite(weight) or weight < 0:
            raise HTTPException(
                status_code=fastapi_status.HTTP_400_BAD_REQUEST,
                detail="Weight must be a non-negative number"
            )

        row = _find(db, course_id, category.value, assessment_id)
        if row:
            row.weight = weight
        else:
            row = AssessmentWeight(
                course_id=course_id,
                assessment_type=category.value,
                assessment_id=assessment_id,
                weight=weight
            )
            db.add(row)

        db.commit()
        db.refresh(row)
        logger.info(
            "Assessment weight %s/%s in course %s set to %s",
            category.value, assessment_id, course_id, weight
        )
        return row
    except Exception as e:
        db.rollback()
        raise e


def delete_weight(db: Session, course_id: int, assessment_type: str, assessment_id: int):
    try:
        category = _validate_type(assessment_type)
        row = _find(db, course_id, category.value, assessment_id)
        if not row:
            raise HTTPException(status_code=fastapi_status.HTTP_404_NOT_FOUND, detail="Assessment weight not found")

        db.delete(row)
        db.commit()
        logger.info("Assessment weight %s/%s in course %s removed", category.value, assessment_id, course_id)
        return {"message": "Assessment weight deleted"}
    except Exception as e:
        db.rollback()
        raise e
