# acelera-gt/celery_worker.py
import logging
import re
from celery import Celery
from sqlalchemy.exc import SQLAlchemyError

import alert_client
import config
import prize_engine
from database import SessionLocal, init_db
from models import CycleArchive
from schemas import CycleSnapshot

logger = logging.getLogger(__name__)

def parse_azure_redis_url(azure_url: str) -> str:
    if not azure_url or not azure_url.startswith('redis-'): return azure_url
    try:
        host, params = azure_url.split(',', 1)
        password_match = re.search(r'password=([^,]+)', params)
        password = password_match.group(1) if password_match else ''
        return f"rediss://:{password}@{host}?ssl_cert_reqs=CERT_NONE"
    except (ValueError, AttributeError):
        logger.warning("Could not parse Azure Redis URL, falling back to original value.")
        return azure_url

parsed_redis_url = parse_azure_redis_url(config.REDIS_URL)
celery_app = Celery("acelera_gt", broker=parsed_redis_url, backend=parsed_redis_url)
celery_app.conf.task_always_eager = config.CELERY_ALWAYS_EAGER

PODIUM_SIZE = 3

def build_archive_payload(snapshot: CycleSnapshot) -> dict:
    """Snapshot plus the ranking it produced, ready to be stored as JSON."""
    ranking = prize_engine.rank_sellers(snapshot.sellers, snapshot.goals)
    return {
        "snapshot": snapshot.model_dump(mode="json"),
        "ranking": [
            {
                "position": row.position,
                "seller_id": row.seller.id,
                "seller_name": row.seller.name,
                "total_prize": row.total_prize,
                "eligible": row.eligible,
            }
            for row in ranking
        ],
    }

@celery_app.task
def archive_cycle(snapshot_data: dict):
    snapshot = CycleSnapshot.model_validate(snapshot_data)
    logger.info("Archiving cycle %s...", snapshot.id)
    payload = build_archive_payload(snapshot)

    init_db()
    db = SessionLocal()
    try:
        if db.query(CycleArchive).filter_by(snapshot_id=snapshot.id).first():
            return {"status": f"Cycle {snapshot.id} already archived."}
        db.add(CycleArchive(snapshot_id=snapshot.id, ended_at=snapshot.ended_at, payload=payload))
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("An error occurred while archiving cycle %s", snapshot.id)
        return {"status": "Error during archival."}
    finally:
        db.close()

    alert_client.trigger_cycle_closed_alert(snapshot.id, payload["ranking"][:PODIUM_SIZE])
    return {"status": f"Cycle {snapshot.id} archived with {len(payload['ranking'])} sellers."}
