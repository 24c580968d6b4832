import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.course import Course
from app.models.enrollment import Enrollment, EnrollmentStatus
from app.models.grade import Grade
from app.services.assessment_weight_service import override_map
from app.services.grading_engine import AggregationResult, AssessmentItem, aggregate, parse_category
from app.services.grading_weight_service import get_course_or_404, get_weight_row

logger = logging.getLogger(__name__)


def _grade_rows(db: Session, course_id: int, student_id: Optional[int] = None) -> List[Grade]:
    query = db.query(Grade).filter(Grade.course_id == course_id)
    if student_id is not None:
        query = query.filter(Grade.student_id == student_id)
    return query.order_by(Grade.graded_at.desc(), Grade.grade_id.desc()).all()


def _grade_record(grade: Grade, overrides) -> dict:
    # Overrides are keyed by the normalised tag, rows may hold "Quiz" or " quiz "
    category = parse_category(grade.assessment_type)
    weight = overrides.get((category.value, grade.assessment_id)) if category else None
    return {
        "grade_id": grade.grade_id,
        "student_id": grade.student_id,
        "course_id": grade.course_id,
        "assessment_type": grade.assessment_type,
        "assessment_id": grade.assessment_id,
        "score": grade.score,
        "max_score": grade.max_score,
        "weight": weight,
        "remarks": grade.remarks,
        "graded_at": grade.graded_at,
    }


def _to_item(record: dict) -> AssessmentItem:
    return AssessmentItem(
        category=record["assessment_type"],
        score=record["score"],
        max_score=record["max_score"],
        weight=record["weight"],
        graded_at=record["graded_at"],
        assessment_id=record["assessment_id"],
    )


def result_to_dict(result: AggregationResult) -> dict:
    return {
        "course_id": result.course_id,
        "student_id": result.student_id,
        "category_weighted": dict(result.category_weighted),
        "final_percentage": result.final_percentage,
        "letter_grade": result.letter_grade,
        "weights": dict(result.weights),
        "weight_sum": result.weight_sum,
        "categories": [
            {
                "category": b.category.value,
                "weight": b.weight,
                "item_count": b.item_count,
                "excluded_count": b.excluded_count,
                "mean_ratio": b.mean_ratio,
                "weighted": b.weighted,
            }
            for b in result.categories
        ],
        "excluded_items": result.excluded_items,
    }


def _aggregate_records(student_id: int, course_id: int, records: List[dict], weight_row) -> AggregationResult:
    # Always the live configuration: nothing computed here is stored or reused
    return aggregate(
        student_id,
        course_id,
        [_to_item(r) for r in records],
        weight_row,
        cutoffs=settings.LETTER_GRADE_CUTOFFS,
        failing_letter=settings.FAILING_LETTER,
    )


# == Raw grade records
def get_grades_of_course(db: Session, course_id: int):
    get_course_or_404(db, course_id)
    overrides = override_map(db, course_id)
    return [_grade_record(g, overrides) for g in _grade_rows(db, course_id)]


def get_grades_of_student_in_course(db: Session, student_id: int, course_id: int):
    """Assessment records of one student in one course, override weights merged in."""
    get_course_or_404(db, course_id)
    overrides = override_map(db, course_id)
    return [_grade_record(g, overrides) for g in _grade_rows(db, course_id, student_id)]


# == Weighted total of one student in one course
def get_weighted_totals(db: Session, student_id: int, course_id: int):
    records = get_grades_of_student_in_course(db, student_id, course_id)
    result = _aggregate_records(student_id, course_id, records, get_weight_row(db, course_id))

    logger.info(
        "Aggregated %d assessment(s) for student %s in course %s: %.2f%% (%s)",
        len(records), student_id, course_id, result.final_percentage, result.letter_grade
    )
    return result_to_dict(result)


# == All active courses of a student
def get_all_courses_grades_of_student(db: Session, student_id: int):
    enrollments = db.query(Enrollment).join(Course).filter(
        Enrollment.student_id == student_id,
        Enrollment.status == EnrollmentStatus.active
    ).order_by(Course.course_code).all()

    rows = []
    for enrollment in enrollments:
        course = enrollment.course
        records = get_grades_of_student_in_course(db, student_id, course.course_id)
        result = _aggregate_records(student_id, course.course_id, records, get_weight_row(db, course.course_id))

        rows.append({
            "course": {
                "course_id": course.course_id,
                "course_code": course.course_code,
                "course_name": course.course_name,
                "semester": course.semester,
                "credits": course.credits,
            },
            "assessments": records,
            "weights": dict(result.weights),
            "result": result_to_dict(result),
        })

    return rows


# == Results of every active student in a course
def get_course_results(db: Session, course_id: int):
    course = get_course_or_404(db, course_id)
    weight_row = get_weight_row(db, course_id)
    overrides = override_map(db, course_id)

    student_ids = [
        e.student_id for e in db.query(Enrollment).filter(
            Enrollment.course_id == course_id,
            Enrollment.status == EnrollmentStatus.active
        ).order_by(Enrollment.student_id).all()
    ]

    by_student = {student_id: [] for student_id in student_ids}
    for grade in _grade_rows(db, course_id):
        if grade.student_id in by_student:
            by_student[grade.student_id].append(_grade_record(grade, overrides))

    results = [
        result_to_dict(_aggregate_records(student_id, course_id, by_student[student_id], weight_row))
        for student_id in student_ids
    ]

    return {
        "course_id": course.course_id,
        "course_name": course.course_name,
        "results": results,
    }
