from datetime import datetime
from typing import Optional
from pydantic import BaseModel

class AssessmentWeightCreate(BaseModel):
    course_id: int
    assessment_type: str
    assessment_id: int
    weight: float

class AssessmentWeightInfo(BaseModel):
    assessment_weight_id: int
    course_id: int
    assessment_type: str
    assessment_id: int
    weight: float
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class AssessmentWeightValue(BaseModel):
    weight: float
