from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.db.database import get_db
from app.core.security import CurrentUser, ensure_can_view_student, get_current_user, require_roles
from app.schemas.grade_schema import (
    AggregationResultInfo,
    CourseResults,
    GradeRecord,
    StudentCourseGrades
)
from app.services.grade_service import (
    get_grades_of_course,
    get_grades_of_student_in_course,
    get_weighted_totals,
    get_all_courses_grades_of_student,
    get_course_results
)

router = APIRouter()

staff_only = require_roles("professor", "admin")

@router.get("/course/{course_id}", response_model=List[GradeRecord])
def get_course_grades(
    course_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(staff_only)
):
    return get_grades_of_course(db, course_id)

@router.get("/course/{course_id}/results", response_model=CourseResults)
def get_course_grade_results(
    course_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(staff_only)
):
    """Final percentage and letter of every active student, computed on the spot."""
    return get_course_results(db, course_id)

@router.get("/student/{student_id}/course/{course_id}", response_model=List[GradeRecord])
def get_student_course_grades(
    student_id: int,
    course_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(staff_only)
):
    return get_grades_of_student_in_course(db, student_id, course_id)

@router.get("/weighted-totals/{student_id}/{course_id}", response_model=AggregationResultInfo)
def get_student_weighted_totals(
    student_id: int,
    course_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    ensure_can_view_student(current_user, student_id)
    return get_weighted_totals(db, student_id, course_id)

@router.get("/student/{student_id}/all-courses", response_model=List[StudentCourseGrades])
def get_student_all_courses(
    student_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    ensure_can_view_student(current_user, student_id)
    return get_all_courses_grades_of_student(db, student_id)
