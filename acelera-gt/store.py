# acelera-gt/store.py
"""
In-process application state.

The store holds one frozen ``AppState`` snapshot. Every setter takes an
updater ``prev -> new`` and swaps the whole snapshot, so readers always see a
consistent view. The app builds a single store at startup and hands it to the
routers through ``Depends(get_store)``.

Writes run inside ``transaction()``: reads, rule checks and the swap that
depend on each other happen under one lock, and subscribers are notified once
the outermost transaction has released it.
"""
import logging
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

import config
from exceptions import MissionNotFoundError, SellerNotFoundError
from schemas import Criterion, CycleSnapshot, Frozen, GoalLevel, GoalTier, Goals, Mission, Seller

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class AppState(Frozen):
    sellers: List[Seller] = []
    goals: Goals = Goals()
    missions: List[Mission] = []
    cycle_history: List[CycleSnapshot] = []


def new_id() -> str:
    return uuid.uuid4().hex


class DataStore:
    def __init__(self, state: Optional[AppState] = None):
        self._state = state or AppState()
        self._lock = threading.RLock()
        self._listeners: List[Listener] = []
        # Guarded by _lock.
        self._depth = 0
        self._dirty = False

    @classmethod
    def with_defaults(cls) -> "DataStore":
        return cls(AppState(
            sellers=[Seller(**s) for s in config.DEFAULT_SELLERS],
            goals=Goals(**config.DEFAULT_GOALS),
            missions=[Mission(**m) for m in config.DEFAULT_MISSIONS],
        ))

    # --- Snapshot access ---
    def get_state(self) -> AppState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @contextmanager
    def transaction(self):
        """Hold the store lock; listeners fire after the outermost block exits."""
        self._lock.acquire()
        self._depth += 1
        try:
            yield self
        finally:
            self._depth -= 1
            notify = self._depth == 0 and self._dirty
            if notify:
                self._dirty = False
            self._lock.release()
            if notify:
                for listener in list(self._listeners):
                    listener()

    def _replace(self, **changes) -> AppState:
        with self.transaction():
            self._state = self._state.model_copy(update=changes)
            self._dirty = True
            return self._state

    def set_sellers(self, updater: Callable[[List[Seller]], List[Seller]]) -> AppState:
        with self.transaction():
            return self._replace(sellers=list(updater(self._state.sellers)))

    def set_goals(self, updater: Callable[[Goals], Goals]) -> AppState:
        with self.transaction():
            return self._replace(goals=updater(self._state.goals))

    def set_missions(self, updater: Callable[[List[Mission]], List[Mission]]) -> AppState:
        with self.transaction():
            return self._replace(missions=list(updater(self._state.missions)))

    def set_cycle_history(self, updater: Callable[[List[CycleSnapshot]], List[CycleSnapshot]]) -> AppState:
        with self.transaction():
            return self._replace(cycle_history=list(updater(self._state.cycle_history)))

    # --- Sellers ---
    def get_seller(self, seller_id: str) -> Seller:
        for seller in self._state.sellers:
            if seller.id == seller_id:
                return seller
        raise SellerNotFoundError(seller_id)

    def add_seller(self, name: str, **metrics) -> Seller:
        seller = Seller(id=new_id(), name=name, **metrics)
        self.set_sellers(lambda prev: [*prev, seller])
        logger.info("Seller %s (%s) added.", seller.name, seller.id)
        return seller

    def apply(self, seller_id: str, change: Callable[[Seller], Dict[str, Any]]) -> Tuple[Seller, Seller]:
        """Read a seller, compute changes from it and write them back atomically.

        ``change`` may raise to reject the update; nothing is written then.
        Returns the seller before and after the update.
        """
        with self.transaction():
            before = self.get_seller(seller_id)
            fields = change(before)
            # Re-validate so negative metrics are rejected like on creation.
            after = Seller(**{**before.model_dump(), **fields, "id": seller_id})
            self.set_sellers(lambda prev: [after if s.id == seller_id else s for s in prev])
        return before, after

    def update_seller(self, seller_id: str, **fields) -> Seller:
        return self.apply(seller_id, lambda seller: fields)[1]

    def delete_seller(self, seller_id: str) -> None:
        with self.transaction():
            self.get_seller(seller_id)
            self.set_sellers(lambda prev: [s for s in prev if s.id != seller_id])
        logger.info("Seller %s deleted.", seller_id)

    def grant_points(self, seller_id: str, points: int) -> Seller:
        return self.apply(seller_id, lambda seller: {"points": seller.points + points})[1]

    def grant_extra_points(self, seller_id: str, points: int) -> Seller:
        return self.apply(seller_id, lambda seller: {"extra_points": seller.extra_points + points})[1]

    # --- Goals ---
    def update_goals(self, goals: Goals) -> Goals:
        return self.set_goals(lambda prev: goals).goals

    def update_goal_level(self, criterion: Criterion, tier: GoalTier, threshold: float, prize: float) -> Goals:
        level = GoalLevel(threshold=threshold, prize=prize)

        def updater(prev: Goals) -> Goals:
            block = prev.for_criterion(criterion).model_copy(update={tier.value: level})
            return prev.model_copy(update={criterion.value: block})

        return self.set_goals(updater).goals

    # --- Missions ---
    def get_mission(self, mission_id: str) -> Mission:
        for mission in self._state.missions:
            if mission.id == mission_id:
                return mission
        raise MissionNotFoundError(mission_id)

    def add_mission(self, **fields) -> Mission:
        mission = Mission(id=new_id(), **fields)
        self.set_missions(lambda prev: [*prev, mission])
        return mission

    def delete_mission(self, mission_id: str) -> None:
        with self.transaction():
            self.get_mission(mission_id)
            self.set_missions(lambda prev: [m for m in prev if m.id != mission_id])

    # --- Cycles ---
    def close_cycle(self, ended_at: Optional[datetime] = None) -> CycleSnapshot:
        """Archive the current sellers and goals and start a fresh cycle."""
        with self.transaction():
            state = self._state
            snapshot = CycleSnapshot(
                id=new_id(),
                ended_at=ended_at or datetime.now(timezone.utc),
                sellers=state.sellers,
                goals=state.goals,
            )
            self.set_cycle_history(lambda prev: [*prev, snapshot])
            self.set_sellers(lambda prev: [_reset_for_new_cycle(s) for s in prev])
        logger.info("Cycle %s closed with %d sellers.", snapshot.id, len(snapshot.sellers))
        return snapshot


def _reset_for_new_cycle(seller: Seller) -> Seller:
    # completed_missions carries over; missions are dated and pay once per seller.
    return seller.model_copy(update={
        "sales_value": 0,
        "ticket_average": 0,
        "pa": 0,
        "points": 0,
        "extra_points": 0,
        "has_completed_quiz": False,
        "last_course_completion_date": None,
    })
