from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field, model_validator
from sqlalchemy.orm import Session
from datetime import date
from typing import List

import gamification
from dependencies import get_db, get_store
from schemas import Mission, RewardType, Seller
from store import DataStore

router = APIRouter()

# --- Pydantic Models ---
class MissionCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str = ""
    start_date: date
    end_date: date
    reward_type: RewardType = RewardType.POINTS
    reward_value: float = Field(ge=0)

    @model_validator(mode="after")
    def check_period(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

class MissionCompletion(BaseModel):
    seller_id: str


# --- API Endpoints ---
@router.get("/missions", response_model=List[Mission], tags=["Missions"])
def list_missions(store: DataStore = Depends(get_store)):
    return store.get_state().missions

@router.post("/missions", response_model=Mission, status_code=201, tags=["Missions"])
def create_mission(body: MissionCreate, store: DataStore = Depends(get_store)):
    return store.add_mission(**body.model_dump())

@router.delete("/missions/{mission_id}", status_code=204, tags=["Missions"])
def delete_mission(mission_id: str, store: DataStore = Depends(get_store)):
    store.delete_mission(mission_id)
    return Response(status_code=204)

@router.post("/missions/{mission_id}/complete", response_model=Seller, tags=["Missions"])
def complete_mission(mission_id: str, body: MissionCompletion, store: DataStore = Depends(get_store), db: Session = Depends(get_db)):
    return gamification.complete_mission(store, body.seller_id, mission_id, db_session=db)
