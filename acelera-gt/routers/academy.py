from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session
import datetime as dt
from typing import List, Literal

import config
import gamification
import training
from dependencies import get_db, get_store
from schemas import Course, Difficulty, Quiz, SalesTrendAnalysis, Seller
from store import DataStore

router = APIRouter(prefix="/academy")

# --- Pydantic Models ---
class QuizRequest(BaseModel):
    topic: str = Field(min_length=1)
    difficulty: Difficulty = Difficulty.MEDIO
    number_of_questions: int = Field(default=5, ge=1, le=10)

class QuizSubmission(BaseModel):
    seller_id: str
    score: int
    total: int
    difficulty: Difficulty = Difficulty.MEDIO

class CourseRequest(BaseModel):
    topic: str = Field(min_length=1)
    difficulty: Difficulty = Difficulty.MEDIO

class CourseCompletion(BaseModel):
    seller_id: str
    course_title: str
    difficulty: Difficulty = Difficulty.MEDIO

class PointsAwarded(BaseModel):
    seller: Seller
    points_earned: int

class SalesEntry(BaseModel):
    date: dt.date
    sales_value: float = Field(ge=0)
    ticket_average: float = Field(ge=0)
    products_per_service: float = Field(ge=0)

class SalesTrendsRequest(BaseModel):
    sales_data: List[SalesEntry]
    time_frame: Literal["weekly", "monthly"] = "monthly"


# --- API Endpoints ---
@router.get("/topics", response_model=List[str], tags=["Academy"])
def list_topics():
    return config.COURSE_TOPICS

@router.post("/quiz", response_model=Quiz, tags=["Academy"])
async def create_quiz(body: QuizRequest):
    return await training.generate_quiz(body.topic, body.difficulty, body.number_of_questions)

@router.post("/quiz/submit", response_model=PointsAwarded, tags=["Academy"])
def submit_quiz(body: QuizSubmission, store: DataStore = Depends(get_store), db: Session = Depends(get_db)):
    points = gamification.quiz_points(body.score, body.total, body.difficulty)
    seller = gamification.complete_quiz(store, body.seller_id, body.score, body.total, body.difficulty, db_session=db)
    return PointsAwarded(seller=seller, points_earned=points)

@router.post("/course", response_model=Course, tags=["Academy"])
async def create_course(body: CourseRequest):
    return await training.generate_course(body.topic, body.difficulty)

@router.post("/course/complete", response_model=PointsAwarded, tags=["Academy"])
def complete_course(body: CourseCompletion, store: DataStore = Depends(get_store), db: Session = Depends(get_db)):
    points = config.COURSE_POINTS[body.difficulty.value]
    seller = gamification.complete_course(store, body.seller_id, body.course_title, points, db_session=db)
    return PointsAwarded(seller=seller, points_earned=points)

@router.post("/sales-trends", response_model=SalesTrendAnalysis, tags=["Academy"])
def sales_trends(body: SalesTrendsRequest):
    return training.analyze_sales_trends([entry.model_dump(mode="json") for entry in body.sales_data], body.time_frame)
