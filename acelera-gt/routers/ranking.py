from fastapi import APIRouter, Depends
from pydantic import BaseModel
from typing import Dict, List

import prize_engine
from dependencies import get_store
from schemas import Criterion, TeamGoalStatus
from store import DataStore
from utils import format_currency

router = APIRouter()

# --- Pydantic Models ---
class RankingRow(BaseModel):
    position: int
    seller_id: str
    name: str
    effective_points: int
    sales_value: float
    ticket_average: float
    pa: float
    prizes: Dict[Criterion, float]
    base_prize: float
    team_bonus: float
    top_scorer_bonus: float
    total_prize: float
    total_prize_formatted: str
    eligible: bool

class RankingResponse(BaseModel):
    has_performance: bool
    team_goal: TeamGoalStatus
    sellers: List[RankingRow]


def build_ranking(store: DataStore) -> RankingResponse:
    state = store.get_state()
    ranked = prize_engine.rank_sellers(state.sellers, state.goals)
    rows = [
        RankingRow(
            position=r.position,
            seller_id=r.seller.id,
            name=r.seller.name,
            effective_points=r.seller.effective_points,
            sales_value=r.seller.sales_value,
            ticket_average=r.seller.ticket_average,
            pa=r.seller.pa,
            prizes=r.prizes,
            base_prize=r.base_prize,
            team_bonus=r.team_bonus,
            top_scorer_bonus=r.top_scorer_bonus,
            total_prize=r.total_prize,
            total_prize_formatted=format_currency(r.total_prize),
            eligible=r.eligible,
        )
        for r in ranked
    ]
    return RankingResponse(
        has_performance=any(s.has_performance for s in state.sellers),
        team_goal=prize_engine.team_goal_status(state.sellers, state.goals),
        sellers=rows,
    )


# --- API Endpoints ---
@router.get("/ranking", response_model=RankingResponse, tags=["Ranking"])
def get_ranking(store: DataStore = Depends(get_store)):
    """Prize ranking for the whole roster, shared by the admin and seller views."""
    return build_ranking(store)

@router.get("/ranking/{seller_id}", response_model=RankingRow, tags=["Ranking"])
def get_seller_rank(seller_id: str, store: DataStore = Depends(get_store)):
    store.get_seller(seller_id)
    ranking = build_ranking(store)
    return next(row for row in ranking.sellers if row.seller_id == seller_id)
