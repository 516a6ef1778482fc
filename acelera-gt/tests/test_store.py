import threading
from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

import config
from exceptions import MissionNotFoundError, QuizAlreadyCompletedError, SellerNotFoundError
from schemas import Criterion, GoalTier, RewardType
from store import DataStore


def test_with_defaults_seeds_sellers_goals_and_missions():
    store = DataStore.with_defaults()
    state = store.get_state()
    assert len(state.sellers) == len(config.DEFAULT_SELLERS)
    assert state.goals.sales_value.lendaria.threshold == 7000
    assert state.goals.points.top_scorer_prize == 50
    assert len(state.missions) == len(config.DEFAULT_MISSIONS)
    assert state.cycle_history == []


def test_setters_replace_the_snapshot(store):
    before = store.get_state()
    store.set_sellers(lambda prev: prev[:1])
    after = store.get_state()
    assert len(before.sellers) == 3
    assert len(after.sellers) == 1
    assert after is not before


def test_subscribers_are_notified_until_they_unsubscribe(store):
    calls = []
    unsubscribe = store.subscribe(lambda: calls.append(store.get_state()))
    store.grant_points("1", 10)
    assert len(calls) == 1
    assert calls[0].sellers[0].points == 910

    unsubscribe()
    store.grant_points("1", 10)
    assert len(calls) == 1


def test_get_seller_unknown_id(store):
    with pytest.raises(SellerNotFoundError):
        store.get_seller("nope")


def test_add_update_and_delete_seller(store):
    seller = store.add_seller("Davi", sales_value=1200)
    assert store.get_seller(seller.id).sales_value == 1200

    updated = store.update_seller(seller.id, pa=2.2, name="Davi Lima")
    assert updated.pa == 2.2
    assert updated.name == "Davi Lima"
    assert updated.sales_value == 1200

    store.delete_seller(seller.id)
    assert all(s.id != seller.id for s in store.get_state().sellers)
    with pytest.raises(SellerNotFoundError):
        store.delete_seller(seller.id)


def test_update_seller_rejects_negative_metrics(store):
    with pytest.raises(ValidationError):
        store.update_seller("1", sales_value=-1)
    assert store.get_seller("1").sales_value == 7500


def test_update_seller_keeps_the_id(store):
    assert store.update_seller("1", id="other").id == "1"


def test_grant_points_and_extra_points(store):
    assert store.grant_points("2", 150).points == 650
    assert store.grant_extra_points("2", 40).extra_points == 140
    assert store.get_seller("2").effective_points == 790


def test_update_goal_level_touches_a_single_tier(store):
    goals = store.update_goal_level(Criterion.PA, GoalTier.META, threshold=2.4, prize=45)
    assert goals.pa.meta.threshold == 2.4
    assert goals.pa.meta.prize == 45
    assert goals.pa.metinha.threshold == 2.0
    assert goals.sales_value == store.get_state().goals.sales_value
    # Sales goals keep their performance bonus block.
    goals = store.update_goal_level(Criterion.SALES_VALUE, GoalTier.METINHA, threshold=3500, prize=40)
    assert goals.sales_value.performance_bonus.per == 1000


def test_missions(store):
    mission = store.add_mission(
        name="Meta do fim de semana",
        start_date=date(2024, 7, 6),
        end_date=date(2024, 7, 7),
        reward_type=RewardType.CASH,
        reward_value=20,
    )
    assert store.get_mission(mission.id).reward_type is RewardType.CASH

    store.delete_mission(mission.id)
    with pytest.raises(MissionNotFoundError):
        store.get_mission(mission.id)


def test_close_cycle_archives_and_resets(store):
    store.update_seller("1", has_completed_quiz=True, last_course_completion_date=date(2024, 7, 1))
    ended_at = datetime(2024, 7, 31, 23, 0, tzinfo=timezone.utc)

    snapshot = store.close_cycle(ended_at=ended_at)

    state = store.get_state()
    assert state.cycle_history == [snapshot]
    assert snapshot.ended_at == ended_at
    assert [s.name for s in snapshot.sellers] == ["Ana", "Bruno", "Carla"]
    assert snapshot.sellers[0].sales_value == 7500
    assert snapshot.sellers[0].has_completed_quiz

    for seller in state.sellers:
        assert seller.sales_value == 0
        assert seller.effective_points == 0
        assert not seller.has_completed_quiz
        assert seller.last_course_completion_date is None
    assert [s.id for s in state.sellers] == ["1", "2", "3"]


def test_apply_returns_before_and_after(store):
    before, after = store.apply("1", lambda seller: {"points": seller.points + 5})
    assert before.points == 900
    assert after.points == 905
    assert store.get_seller("1") == after


def test_apply_writes_nothing_when_the_change_is_rejected(store):
    calls = []
    store.subscribe(lambda: calls.append(True))

    def reject(seller):
        raise QuizAlreadyCompletedError("done")

    with pytest.raises(QuizAlreadyCompletedError):
        store.apply("1", reject)
    assert store.get_seller("1").points == 900
    assert calls == []


def test_listeners_run_after_the_lock_is_released(store):
    lock_free = []

    def try_lock():
        acquired = store._lock.acquire(blocking=False)
        if acquired:
            store._lock.release()
        lock_free.append(acquired)

    def listener():
        other = threading.Thread(target=try_lock)
        other.start()
        other.join(timeout=5)

    store.subscribe(listener)
    store.grant_points("1", 10)
    store.close_cycle()
    assert lock_free == [True, True]


def test_nested_writes_notify_once(store):
    calls = []
    store.subscribe(lambda: calls.append(True))
    with store.transaction():
        store.grant_points("1", 10)
        store.grant_extra_points("1", 10)
        assert calls == []
    assert calls == [True]


def test_close_cycle_keeps_completed_missions(store):
    store.update_seller("2", completed_missions=["m1"])
    store.close_cycle()
    assert store.get_seller("2").completed_missions == ["m1"]
