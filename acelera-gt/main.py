import logging
from fastapi import FastAPI, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import List, Optional

import config
import prize_engine
from database import init_db
from dependencies import get_store
from exceptions import AceleraError, InvalidQuizScoreError, MissionNotFoundError, SellerNotFoundError
from routers import academy as academy_router
from routers import history as history_router
from routers import missions as missions_router
from routers import ranking as ranking_router
from routers import settings as settings_router
from schemas import Criterion, GoalProgress, GoalTier, Seller
from store import DataStore

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)

init_db()

app = FastAPI(title="Acelera GT", description="Metas, prêmios e academia de vendas.")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(ranking_router.router, prefix="/api")
app.include_router(settings_router.router, prefix="/api")
app.include_router(missions_router.router, prefix="/api")
app.include_router(academy_router.router, prefix="/api")
app.include_router(history_router.router, prefix="/api")

# --- Error Handlers ---
@app.exception_handler(AceleraError)
async def acelera_error_handler(request: Request, exc: AceleraError):
    if isinstance(exc, (SellerNotFoundError, MissionNotFoundError)):
        status_code = 404
    elif isinstance(exc, InvalidQuizScoreError):
        status_code = 422
    else:
        status_code = 409
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})

# --- Pydantic Models ---
class CriterionProgress(BaseModel):
    criterion: Criterion
    value: float
    achieved_tiers: List[GoalTier]
    progress: GoalProgress
    prize: float

class SellerDashboard(BaseModel):
    seller: Seller
    effective_points: int
    eligible: bool
    points_gate: float
    criteria: List[CriterionProgress]
    total_prize: float
    position: Optional[int]

# --- API Endpoints ---
@app.get("/")
def read_root():
    return {"status": "Acelera GT is running!"}

@app.get("/api/sellers/{seller_id}/dashboard", response_model=SellerDashboard, tags=["Dashboard"])
def get_seller_dashboard(seller_id: str, store: DataStore = Depends(get_store)):
    state = store.get_state()
    seller = store.get_seller(seller_id)
    breakdown = prize_engine.calculate_seller_prizes(seller, state.goals)

    criteria = []
    for criterion in Criterion:
        levels = state.goals.for_criterion(criterion)
        value = seller.metric(criterion)
        criteria.append(CriterionProgress(
            criterion=criterion,
            value=value,
            achieved_tiers=prize_engine.achieved_tiers(value, levels),
            progress=prize_engine.goal_progress(value, levels),
            prize=breakdown.prizes[criterion],
        ))

    ranked = prize_engine.rank_sellers(state.sellers, state.goals)
    mine = next((r for r in ranked if r.seller.id == seller_id), None)

    return SellerDashboard(
        seller=seller,
        effective_points=seller.effective_points,
        eligible=breakdown.eligible,
        points_gate=state.goals.points.metinha.threshold,
        criteria=criteria,
        total_prize=mine.total_prize if mine else breakdown.total_prize,
        position=mine.position if mine else None,
    )
