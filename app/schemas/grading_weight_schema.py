from typing import Dict, Optional
from pydantic import BaseModel, Field

class GradingWeightUpsert(BaseModel):
    """Body of POST /grading-weights/{course_id}. Missing fields take the default weight."""
    assignment_weight: Optional[float] = None
    quiz_weight: Optional[float] = None
    midterm_weight: Optional[float] = None
    final_weight: Optional[float] = None

    class Config:
        json_schema_extra = {
            "example": {
                "assignment_weight": 20,
                "quiz_weight": 20,
                "midterm_weight": 25,
                "final_weight": 35
            }
        }

class GradingWeightInfo(BaseModel):
    course_id: int
    configured: bool = Field(..., description="False when the course has no stored weights and defaults apply")
    professor_id: Optional[int] = None
    weights: Dict[str, float]
    weight_sum: float
