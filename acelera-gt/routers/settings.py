from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session
from typing import List, Optional

import gamification
from dependencies import get_db, get_store
from models import PointEventType
from schemas import Criterion, GoalTier, Goals, Seller
from store import DataStore

router = APIRouter()

# --- Pydantic Models ---
class SellerCreate(BaseModel):
    name: str = Field(min_length=1)
    sales_value: float = Field(default=0, ge=0)
    ticket_average: float = Field(default=0, ge=0)
    pa: float = Field(default=0, ge=0)
    points: int = Field(default=0, ge=0)
    extra_points: int = Field(default=0, ge=0)

class SellerUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    sales_value: Optional[float] = Field(default=None, ge=0)
    ticket_average: Optional[float] = Field(default=None, ge=0)
    pa: Optional[float] = Field(default=None, ge=0)
    points: Optional[int] = Field(default=None, ge=0)
    extra_points: Optional[int] = Field(default=None, ge=0)

class GoalLevelUpdate(BaseModel):
    threshold: float = Field(ge=0)
    prize: float = Field(ge=0)


# --- Sellers ---
@router.get("/sellers", response_model=List[Seller], tags=["Sellers"])
def list_sellers(store: DataStore = Depends(get_store)):
    return store.get_state().sellers

@router.post("/sellers", response_model=Seller, status_code=201, tags=["Sellers"])
def create_seller(body: SellerCreate, store: DataStore = Depends(get_store)):
    fields = body.model_dump()
    return store.add_seller(fields.pop("name"), **fields)

@router.patch("/sellers/{seller_id}", response_model=Seller, tags=["Sellers"])
def update_seller(seller_id: str, body: SellerUpdate, store: DataStore = Depends(get_store), db: Session = Depends(get_db)):
    changes = {k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None}
    before, after = store.apply(seller_id, lambda seller: changes)

    delta = after.effective_points - before.effective_points
    if delta:
        gamification.record_points(db, seller_id, PointEventType.MANUAL_ADJUSTMENT, delta, "Manual adjustment by admin.")
    gamification.check_and_trigger_tier_alerts(before, after, store.get_state().goals)
    return after

@router.delete("/sellers/{seller_id}", status_code=204, tags=["Sellers"])
def delete_seller(seller_id: str, store: DataStore = Depends(get_store)):
    store.delete_seller(seller_id)
    return Response(status_code=204)


# --- Goals ---
@router.get("/goals", response_model=Goals, tags=["Goals"])
def get_goals(store: DataStore = Depends(get_store)):
    return store.get_state().goals

@router.put("/goals", response_model=Goals, tags=["Goals"])
def replace_goals(goals: Goals, store: DataStore = Depends(get_store)):
    return store.update_goals(goals)

@router.put("/goals/{criterion}/{tier}", response_model=Goals, tags=["Goals"])
def update_goal_level(criterion: Criterion, tier: GoalTier, body: GoalLevelUpdate, store: DataStore = Depends(get_store)):
    return store.update_goal_level(criterion, tier, body.threshold, body.prize)
