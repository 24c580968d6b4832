from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.api import routes_grades, routes_grading_weights, routes_assessment_weights
from app.db import base
from app.db import database
from app.core.config import settings
from app.core.logging_config import setup_logging

setup_logging(settings.LOG_LEVEL)

# Create tables
base.Base.metadata.create_all(bind=database.engine)

app = FastAPI(title=settings.PROJECT_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/")
def read_root():
    return {"message": "Welcome to the Gradebook Aggregation API"}

# Register routers
app.include_router(routes_grades.router, prefix="/grades", tags=["Grades"])
app.include_router(routes_grading_weights.router, prefix="/grading-weights", tags=["Grading Weights"])
app.include_router(routes_assessment_weights.router, prefix="/assessment-weights", tags=["Assessment Weights"])
