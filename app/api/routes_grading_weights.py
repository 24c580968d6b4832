from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.db.database import get_db
from app.core.security import CurrentUser, require_roles
from app.schemas.grading_weight_schema import GradingWeightInfo, GradingWeightUpsert
from app.services.grading_weight_service import get_weights, upsert_weights

router = APIRouter()

staff_only = require_roles("professor", "admin")

@router.get("/{course_id}", response_model=GradingWeightInfo)
def get_course_weights(
    course_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(staff_only)
):
    """Weights used for the course right now (defaults when none are stored)."""
    return get_weights(db, course_id)

@router.post("/{course_id}", response_model=GradingWeightInfo)
def save_course_weights(
    course_id: int,
    req: GradingWeightUpsert,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(staff_only)
):
    return upsert_weights(
        db,
        course_id,
        current_user.user_id,
        req.assignment_weight,
        req.quiz_weight,
        req.midterm_weight,
        req.final_weight
    )
