from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel

# === Raw records ===

class GradeRecord(BaseModel):
    grade_id: int
    student_id: int
    course_id: int
    assessment_type: str
    assessment_id: Optional[int] = None
    score: float
    max_score: float
    weight: Optional[float] = None
    remarks: Optional[str] = None
    graded_at: Optional[datetime] = None

    class Config:
        from_attributes = True

# === Aggregation output ===

class CategoryBreakdownInfo(BaseModel):
    category: str
    weight: float
    item_count: int
    excluded_count: int
    mean_ratio: Optional[float] = None
    weighted: float

class AggregationResultInfo(BaseModel):
    course_id: int
    student_id: int
    category_weighted: Dict[str, float]
    final_percentage: float
    letter_grade: str
    weights: Dict[str, float]
    weight_sum: float
    categories: List[CategoryBreakdownInfo]
    excluded_items: int

class CourseInfo(BaseModel):
    course_id: int
    course_code: str
    course_name: str
    semester: Optional[str] = None
    credits: Optional[int] = None

    class Config:
        from_attributes = True

class StudentCourseGrades(BaseModel):
    """One row of the student's all-courses view."""
    course: CourseInfo
    assessments: List[GradeRecord]
    weights: Dict[str, float]
    result: AggregationResultInfo

class CourseResults(BaseModel):
    course_id: int
    course_name: str
    results: List[AggregationResultInfo]
