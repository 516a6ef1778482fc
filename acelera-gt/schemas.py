# acelera-gt/schemas.py
"""
Domain records shared by the prize engine, the store and the API.

Every record is frozen: updates go through ``model_copy(update=...)`` and
produce a new snapshot instead of mutating the old one.
"""
import enum
from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

import config


class Criterion(str, enum.Enum):
    SALES_VALUE = "sales_value"
    TICKET_AVERAGE = "ticket_average"
    PA = "pa"
    POINTS = "points"


class GoalTier(str, enum.Enum):
    METINHA = "metinha"
    META = "meta"
    METONA = "metona"
    LENDARIA = "lendaria"

    @property
    def label(self) -> str:
        return config.TIER_LABELS[self.value]


# Lowest to highest.
TIERS = (GoalTier.METINHA, GoalTier.META, GoalTier.METONA, GoalTier.LENDARIA)


class Difficulty(str, enum.Enum):
    FACIL = "facil"
    MEDIO = "medio"
    DIFICIL = "dificil"


class RewardType(str, enum.Enum):
    POINTS = "points"
    CASH = "cash"


class Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# --- Goal configuration ---
class GoalLevel(Frozen):
    threshold: float = Field(default=0, ge=0)
    prize: float = Field(default=0, ge=0)

    @property
    def enabled(self) -> bool:
        return self.threshold > 0


class GoalLevels(Frozen):
    metinha: GoalLevel = GoalLevel()
    meta: GoalLevel = GoalLevel()
    metona: GoalLevel = GoalLevel()
    lendaria: GoalLevel = GoalLevel()

    def level(self, tier: GoalTier) -> GoalLevel:
        return getattr(self, tier.value)


class PerformanceBonus(Frozen):
    per: float = 0
    prize: float = 0


class SalesValueGoals(GoalLevels):
    performance_bonus: Optional[PerformanceBonus] = None


class PointsGoals(GoalLevels):
    top_scorer_prize: Optional[float] = Field(default=None, ge=0)


class Goals(Frozen):
    sales_value: SalesValueGoals = SalesValueGoals()
    ticket_average: GoalLevels = GoalLevels()
    pa: GoalLevels = GoalLevels()
    points: PointsGoals = PointsGoals()

    def for_criterion(self, criterion: Criterion) -> GoalLevels:
        return getattr(self, _GOAL_FIELDS[criterion])


_GOAL_FIELDS = {
    Criterion.SALES_VALUE: "sales_value",
    Criterion.TICKET_AVERAGE: "ticket_average",
    Criterion.PA: "pa",
    Criterion.POINTS: "points",
}


# --- Sellers ---
class Seller(Frozen):
    id: str
    name: str
    sales_value: float = Field(default=0, ge=0)
    ticket_average: float = Field(default=0, ge=0)
    pa: float = Field(default=0, ge=0)
    points: int = Field(default=0, ge=0)
    extra_points: int = Field(default=0, ge=0)
    has_completed_quiz: bool = False
    last_course_completion_date: Optional[date] = None
    completed_missions: List[str] = []

    @property
    def effective_points(self) -> int:
        return self.points + self.extra_points

    def metric(self, criterion: Criterion) -> float:
        """Value compared against the goals of ``criterion``."""
        if criterion is Criterion.POINTS:
            return self.effective_points
        return getattr(self, _GOAL_FIELDS[criterion])

    @property
    def has_performance(self) -> bool:
        return any((self.sales_value, self.ticket_average, self.pa, self.points, self.extra_points))


# --- Derived results ---
class PrizeBreakdown(Frozen):
    prizes: Dict[Criterion, float]
    total_prize: float
    eligible: bool = True


class RankedSeller(Frozen):
    position: int
    seller: Seller
    prizes: Dict[Criterion, float]
    base_prize: float
    team_bonus: float = 0
    top_scorer_bonus: float = 0
    total_prize: float
    eligible: bool


class TeamGoalStatus(Frozen):
    threshold: float
    bonus: float
    reached: int
    total: int
    achievable: bool
    achieved: bool
    progress: float


class GoalProgress(Frozen):
    value: float
    current_tier: Optional[GoalTier] = None
    next_tier: Optional[GoalTier] = None
    next_threshold: Optional[float] = None
    percent: float


# --- Missions and cycles ---
class Mission(Frozen):
    id: str
    name: str
    description: str = ""
    start_date: date
    end_date: date
    reward_type: RewardType = RewardType.POINTS
    reward_value: float = Field(ge=0)


class CycleSnapshot(Frozen):
    id: str
    ended_at: datetime
    sellers: List[Seller]
    goals: Goals


# --- Academy payloads ---
class QuizQuestion(Frozen):
    question_text: str = Field(validation_alias=AliasChoices("question_text", "questionText"))
    options: List[str] = Field(min_length=4, max_length=4)
    correct_answer_index: int = Field(
        ge=0, le=3, validation_alias=AliasChoices("correct_answer_index", "correctAnswerIndex")
    )
    explanation: str = ""


class Quiz(Frozen):
    title: str
    questions: List[QuizQuestion] = Field(min_length=1)


class CourseModule(Frozen):
    title: str
    content: str


class Course(Frozen):
    title: str
    description: str
    points: int = 0
    difficulty: Difficulty = Difficulty.MEDIO
    modules: List[CourseModule] = Field(min_length=1)
    quiz: Quiz


class SalesTrendAnalysis(Frozen):
    summary: str
    top_products: str = Field(validation_alias=AliasChoices("top_products", "topProducts"))
    insights: str
