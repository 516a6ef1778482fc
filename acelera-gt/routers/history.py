import logging
from fastapi import APIRouter, Depends
from kombu.exceptions import OperationalError
from pydantic import BaseModel
from datetime import datetime
from typing import List

import prize_engine
from celery_worker import archive_cycle
from dependencies import get_store
from store import DataStore
from utils import format_currency, time_ago

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/history")

# --- Pydantic Models ---
class HistoryRow(BaseModel):
    position: int
    seller_id: str
    name: str
    effective_points: int
    sales_value: float
    total_prize: float
    total_prize_formatted: str

class CycleSummary(BaseModel):
    id: str
    ended_at: datetime
    ended_ago: str
    ranking: List[HistoryRow]


# --- API Endpoints ---
@router.get("", response_model=List[CycleSummary], tags=["History"])
def list_cycles(store: DataStore = Depends(get_store)):
    """Closed cycles, most recent first, each ranked with the goals it was closed under."""
    summaries = []
    for snapshot in reversed(store.get_state().cycle_history):
        ranked = prize_engine.rank_sellers(snapshot.sellers, snapshot.goals)
        summaries.append(CycleSummary(
            id=snapshot.id,
            ended_at=snapshot.ended_at,
            ended_ago=time_ago(snapshot.ended_at),
            ranking=[
                HistoryRow(
                    position=r.position,
                    seller_id=r.seller.id,
                    name=r.seller.name,
                    effective_points=r.seller.effective_points,
                    sales_value=r.seller.sales_value,
                    total_prize=r.total_prize,
                    total_prize_formatted=format_currency(r.total_prize),
                )
                for r in ranked
            ],
        ))
    return summaries

@router.post("/close-cycle", response_model=CycleSummary, status_code=201, tags=["History"])
def close_cycle(store: DataStore = Depends(get_store)):
    snapshot = store.close_cycle()
    # The cycle stays closed even when archival cannot be enqueued.
    try:
        archive_cycle.delay(snapshot.model_dump(mode="json"))
    except OperationalError:
        logger.exception("Could not enqueue archival of cycle %s", snapshot.id)
    return next(c for c in list_cycles(store) if c.id == snapshot.id)
