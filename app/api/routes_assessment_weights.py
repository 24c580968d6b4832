from typing import Dict, List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.db.database import get_db
from app.core.security import CurrentUser, require_roles
from app.schemas.assessment_weight_schema import (
    AssessmentWeightCreate,
    AssessmentWeightInfo,
    AssessmentWeightValue
)
from app.services.assessment_weight_service import (
    list_weights_of_course,
    get_weight,
    set_weight,
    delete_weight
)

router = APIRouter()

staff_only = require_roles("professor", "admin")

@router.get("/{course_id}", response_model=List[AssessmentWeightInfo])
def get_assessment_weights(
    course_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(staff_only)
):
    return list_weights_of_course(db, course_id)

@router.get("/{course_id}/{assessment_type}/{assessment_id}", response_model=AssessmentWeightValue)
def get_assessment_weight(
    course_id: int,
    assessment_type: str,
    assessment_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(staff_only)
):
    return get_weight(db, course_id, assessment_type, assessment_id)

@router.post("/", response_model=AssessmentWeightInfo, status_code=status.HTTP_201_CREATED)
def set_assessment_weight(
    req: AssessmentWeightCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(staff_only)
):
    """Give one assessment its own weight instead of an even share of its category."""
    return set_weight(db, req.course_id, req.assessment_type, req.assessment_id, req.weight)

@router.delete("/{course_id}/{assessment_type}/{assessment_id}", response_model=Dict[str, str])
def delete_assessment_weight(
    course_id: int,
    assessment_type: str,
    assessment_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(staff_only)
):
    return delete_weight(db, course_id, assessment_type, assessment_id)
