# acelera-gt/prize_engine.py
"""
Goal and prize computation.

Turns a seller's metric snapshot and the active goal configuration into tier
attainment and prize amounts. Everything here is pure: no I/O, no shared state.

Rules:
- A threshold of 0 disables its tier. It is never "achieved", even though
  ``value >= 0`` would hold.
- Tier prizes are not cumulative: only the highest tier reached pays.
- Sellers whose effective points (points + extra points) are below the points
  metinha threshold earn nothing at all, bonuses included.
"""
import math
from typing import Iterable, List, Optional, Sequence

import config
from schemas import (
    TIERS,
    Criterion,
    GoalLevels,
    GoalProgress,
    GoalTier,
    Goals,
    PrizeBreakdown,
    RankedSeller,
    Seller,
    TeamGoalStatus,
)


# --- Tier resolution ---
def resolve_tier(value: float, levels: Optional[GoalLevels]) -> Optional[GoalTier]:
    """Highest enabled tier whose threshold ``value`` meets, or None."""
    if levels is None:
        return None
    for tier in reversed(TIERS):
        level = levels.level(tier)
        if level.threshold > 0 and value >= level.threshold:
            return tier
    return None


def resolve_tier_prize(value: float, levels: Optional[GoalLevels]) -> float:
    tier = resolve_tier(value, levels)
    if tier is None:
        return 0
    return levels.level(tier).prize


def achieved_tiers(value: float, levels: Optional[GoalLevels]) -> List[GoalTier]:
    if levels is None:
        return []
    return [t for t in TIERS if levels.level(t).threshold > 0 and value >= levels.level(t).threshold]


def sales_performance_bonus(sales_value: float, goals: Goals) -> float:
    """Extra prize for every full ``per`` of sales beyond the lendária threshold."""
    sales_goals = goals.sales_value
    bonus = sales_goals.performance_bonus
    lendaria = sales_goals.lendaria.threshold
    if bonus is None or bonus.per <= 0 or lendaria <= 0 or sales_value < lendaria:
        return 0
    units = math.floor((sales_value - lendaria) / bonus.per)
    return units * bonus.prize


# --- Per-seller aggregation ---
def is_eligible(seller: Seller, goals: Goals) -> bool:
    return seller.effective_points >= goals.points.metinha.threshold


def calculate_seller_prizes(seller: Seller, goals: Goals) -> PrizeBreakdown:
    if not is_eligible(seller, goals):
        return PrizeBreakdown(prizes={c: 0 for c in Criterion}, total_prize=0, eligible=False)

    prizes = {}
    for criterion in Criterion:
        prize = resolve_tier_prize(seller.metric(criterion), goals.for_criterion(criterion))
        if criterion is Criterion.SALES_VALUE:
            prize += sales_performance_bonus(seller.sales_value, goals)
        prizes[criterion] = prize

    return PrizeBreakdown(prizes=prizes, total_prize=sum(prizes.values()))


# --- Roster-level bonuses ---
def team_goal_status(sellers: Sequence[Seller], goals: Goals, bonus: float = config.TEAM_BONUS) -> TeamGoalStatus:
    threshold = goals.sales_value.metinha.threshold
    total = len(sellers)
    reached = sum(1 for s in sellers if threshold > 0 and s.sales_value >= threshold)
    achievable = total > 1 and threshold > 0
    return TeamGoalStatus(
        threshold=threshold,
        bonus=bonus,
        reached=reached,
        total=total,
        achievable=achievable,
        achieved=achievable and reached == total,
        progress=(reached / total) * 100 if achievable else 0,
    )


def find_top_scorer(sellers: Iterable[Seller]) -> Optional[Seller]:
    # Strict ">" keeps the first seller in roster order on ties.
    top = None
    for seller in sellers:
        if top is None or seller.effective_points > top.effective_points:
            top = seller
    return top


def rank_sellers(sellers: Sequence[Seller], goals: Goals, team_bonus: float = config.TEAM_BONUS) -> List[RankedSeller]:
    """Prize ranking for the whole roster, used by every view.

    Team and top-scorer bonuses are layered on the per-seller breakdown and
    only paid to sellers that pass the points gate.
    """
    team_met = team_goal_status(sellers, goals, team_bonus).achieved
    top_scorer_prize = goals.points.top_scorer_prize or 0
    top = find_top_scorer(sellers) if top_scorer_prize > 0 else None

    rows = []
    for seller in sellers:
        breakdown = calculate_seller_prizes(seller, goals)
        team = team_bonus if team_met and breakdown.eligible else 0
        scorer = top_scorer_prize if top is not None and seller.id == top.id and breakdown.eligible else 0
        rows.append((seller, breakdown, team, scorer))

    if any(s.has_performance for s in sellers):
        rows.sort(key=lambda r: (-(r[1].total_prize + r[2] + r[3]), r[0].name.casefold()))
    else:
        rows.sort(key=lambda r: r[0].name.casefold())

    return [
        RankedSeller(
            position=index + 1,
            seller=seller,
            prizes=breakdown.prizes,
            base_prize=breakdown.total_prize,
            team_bonus=team,
            top_scorer_bonus=scorer,
            total_prize=breakdown.total_prize + team + scorer,
            eligible=breakdown.eligible,
        )
        for index, (seller, breakdown, team, scorer) in enumerate(rows)
    ]


# --- Dashboard progress ---
def goal_progress(value: float, levels: Optional[GoalLevels]) -> GoalProgress:
    """How far ``value`` is from the next enabled tier."""
    current = resolve_tier(value, levels)
    if levels is None:
        return GoalProgress(value=value, percent=0)

    start = TIERS.index(current) + 1 if current is not None else 0
    next_tier = next((t for t in TIERS[start:] if levels.level(t).enabled), None)
    if next_tier is None:
        return GoalProgress(value=value, current_tier=current, percent=100 if current is not None else 0)

    base = levels.level(current).threshold if current is not None else 0
    target = levels.level(next_tier).threshold
    if target - base <= 0:
        percent = 100
    else:
        percent = min(100, max(0, (value - base) / (target - base) * 100))
    return GoalProgress(
        value=value,
        current_tier=current,
        next_tier=next_tier,
        next_threshold=target,
        percent=percent,
    )
