from typing import Dict, List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    PROJECT_NAME: str = "Gradebook Aggregation"
    DATABASE_URL: str = "mysql+pymysql://root@localhost:3306/gradebook_db"
    JWT_SECRET_KEY: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    CORS_ORIGINS: List[str] = [
        "http://127.0.0.1:5500",
        "http://localhost:5500",
    ]
    LOG_LEVEL: str = "INFO"

    # Letter -> inclusive lower bound of the final percentage
    LETTER_GRADE_CUTOFFS: Dict[str, float] = {"A": 90, "B": 80, "C": 70, "D": 60}
    FAILING_LETTER: str = "F"

    # Allowed drift from 100 when a professor saves course weights
    WEIGHT_SUM_TOLERANCE: float = 0.001

    class Config:
        env_file = ".env"

settings = Settings()
