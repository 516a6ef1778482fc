# acelera-gt/gamification.py
"""
Point-granting rules for quizzes, courses and missions.

Every grant updates the seller in the store, writes a row to the points
ledger and fires a tier-reached alert when the grant lifts the seller into a
new points tier.
"""
import logging
from datetime import date
from typing import Optional

import alert_client
import config
import prize_engine
from exceptions import (
    DailyCourseLimitError,
    InvalidQuizScoreError,
    MissionAlreadyCompletedError,
    MissionNotActiveError,
    QuizAlreadyCompletedError,
)
from models import PointEventType, PointsLedger
from schemas import TIERS, Criterion, Difficulty, Goals, RewardType, Seller
from store import DataStore
from utils import today_utc

logger = logging.getLogger(__name__)


def quiz_points(score: int, total: int, difficulty: Difficulty) -> int:
    if total <= 0 or score < 0 or score > total:
        raise InvalidQuizScoreError(f"Score {score} is not valid for a quiz with {total} questions.")
    return score * config.QUIZ_POINTS_PER_CORRECT_ANSWER[difficulty.value]


def record_points(db_session, seller_id: str, event_type: PointEventType, points: int, notes: str):
    if db_session is None:
        return
    db_session.add(PointsLedger(seller_id=seller_id, event_type=event_type, points=points, notes=notes))
    db_session.commit()


def check_and_trigger_tier_alerts(before: Seller, after: Seller, goals: Goals) -> list:
    """Alerts for every criterion whose resolved tier went up between two snapshots."""
    reached = []
    for criterion in Criterion:
        levels = goals.for_criterion(criterion)
        old_tier = prize_engine.resolve_tier(before.metric(criterion), levels)
        new_tier = prize_engine.resolve_tier(after.metric(criterion), levels)
        if new_tier is not None and (old_tier is None or TIERS.index(new_tier) > TIERS.index(old_tier)):
            alert_client.trigger_tier_reached_alert(after.name, criterion.value, new_tier.label)
            reached.append((criterion, new_tier))
    return reached


def complete_quiz(store: DataStore, seller_id: str, score: int, total: int, difficulty: Difficulty, db_session=None) -> Seller:
    points = quiz_points(score, total, difficulty)

    def grant(seller: Seller) -> dict:
        if seller.has_completed_quiz:
            raise QuizAlreadyCompletedError(f"{seller.name} already completed a quiz in this cycle.")
        return {"points": seller.points + points, "has_completed_quiz": True}

    seller, updated = store.apply(seller_id, grant)
    record_points(db_session, seller_id, PointEventType.QUIZ_COMPLETED, points, f"Quiz {difficulty.value}: {score}/{total} correct.")
    logger.info("%s earned %d points from a quiz.", seller.name, points)
    check_and_trigger_tier_alerts(seller, updated, store.get_state().goals)
    return updated


def complete_course(
    store: DataStore,
    seller_id: str,
    course_title: str,
    course_points: int,
    db_session=None,
    today: Optional[date] = None,
) -> Seller:
    today = today or today_utc()

    def grant(seller: Seller) -> dict:
        if seller.last_course_completion_date == today:
            raise DailyCourseLimitError(f"{seller.name} already completed a course today.")
        return {"points": seller.points + course_points, "last_course_completion_date": today}

    seller, updated = store.apply(seller_id, grant)
    record_points(db_session, seller_id, PointEventType.COURSE_COMPLETED, course_points, f"Course: {course_title}")
    logger.info("%s earned %d points for the course '%s'.", seller.name, course_points, course_title)
    check_and_trigger_tier_alerts(seller, updated, store.get_state().goals)
    return updated


def complete_mission(store: DataStore, seller_id: str, mission_id: str, db_session=None, today: Optional[date] = None) -> Seller:
    """Each seller completes a mission once, and only while it is running."""
    today = today or today_utc()
    mission = store.get_mission(mission_id)
    if not mission.start_date <= today <= mission.end_date:
        raise MissionNotActiveError(
            f"Mission '{mission.name}' runs from {mission.start_date} to {mission.end_date}."
        )

    # Cash rewards are paid outside the prize calculation.
    points = int(mission.reward_value) if mission.reward_type is RewardType.POINTS else 0

    def grant(seller: Seller) -> dict:
        if mission.id in seller.completed_missions:
            raise MissionAlreadyCompletedError(f"{seller.name} already completed mission '{mission.name}'.")
        return {
            "extra_points": seller.extra_points + points,
            "completed_missions": [*seller.completed_missions, mission.id],
        }

    seller, updated = store.apply(seller_id, grant)
    if mission.reward_type is RewardType.POINTS:
        notes = f"Mission: {mission.name}"
    else:
        notes = f"Mission: {mission.name} (cash reward {mission.reward_value:.2f})"

    record_points(db_session, seller_id, PointEventType.MISSION_COMPLETED, points, notes)
    check_and_trigger_tier_alerts(seller, updated, store.get_state().goals)
    return updated
