# Import every model so Base.metadata knows all tables before create_all()
from app.db.database import Base  # noqa: F401
from app.models.course import Course  # noqa: F401
from app.models.enrollment import Enrollment  # noqa: F401
from app.models.grade import Grade  # noqa: F401
from app.models.grading_weight import GradingWeight  # noqa: F401
from app.models.assessment_weight import AssessmentWeight  # noqa: F401
