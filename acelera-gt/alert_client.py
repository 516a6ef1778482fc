# acelera-gt/alert_client.py
import logging
import os
import requests
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

WEBHOOK_URL_CYCLE_CLOSED = os.getenv("WEBHOOK_URL_CYCLE_CLOSED")
WEBHOOK_URL_TIER_REACHED = os.getenv("WEBHOOK_URL_TIER_REACHED")

def _post(url: str, payload: dict, context: str) -> bool:
    try:
        response = requests.post(url, json=payload, timeout=5)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        logger.warning("Failed to trigger '%s' webhook: %s", context, e)
        return False
    logger.info("Successfully triggered '%s' webhook.", context)
    return True

def trigger_cycle_closed_alert(snapshot_id: str, podium: list) -> bool:
    if not WEBHOOK_URL_CYCLE_CLOSED:
        logger.info("WEBHOOK_URL_CYCLE_CLOSED is not set. Skipping.")
        return False

    payload = {
        "cycle_id": snapshot_id,
        "podium": [
            {"position": row["position"], "seller_name": row["seller_name"], "total_prize": row["total_prize"]}
            for row in podium
        ],
    }
    return _post(WEBHOOK_URL_CYCLE_CLOSED, payload, f"cycle closed {snapshot_id}")

def trigger_tier_reached_alert(seller_name: str, criterion: str, tier_label: str) -> bool:
    if not WEBHOOK_URL_TIER_REACHED:
        logger.info("WEBHOOK_URL_TIER_REACHED is not set. Skipping.")
        return False

    payload = {
        "seller_name": seller_name,
        "criterion": criterion,
        "tier": tier_label,
    }
    return _post(WEBHOOK_URL_TIER_REACHED, payload, f"tier reached for {seller_name}")
