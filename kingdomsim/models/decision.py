from dataclasses import dataclass, field
from enum import Enum

from kingdomsim.models.cards import Hero, Title
from kingdomsim.models.failure import PurchaseOutcome
from kingdomsim.models.resources import ZERO, ResourceBundle


class PurchaseAction(str, Enum):
    """What the player does in the purchase step."""

    HERO = "hero"
    TITLE = "title"
    PASS = "pass"


@dataclass
class TitleOpportunity:
    """A title the player can buy, with the best battlefield subset found."""

    title: Title
    heroes: tuple[Hero, ...]
    retirement_hero: Hero
    column_bonuses: ResourceBundle
    base_points: int
    legend_bonus: int
    total_points: int
    adjusted_efficiency: float
    score: float
    emergency_bonus: ResourceBundle = ZERO

    @property
    def uses_emergency(self) -> bool:
        return self.emergency_bonus.total() > 0


@dataclass
class HeroOpportunity:
    """A market hero the player can afford with some battlefield subset."""

    hero: Hero
    heroes: tuple[Hero, ...]
    cost: int
    value: float
    score: float


@dataclass
class PurchaseDecision:
    """
    The strategy engine's choice for one purchase step.

    Attributes:
        action: hero, title or pass
        target: The hero or title to buy (None on pass)
        heroes: Battlefield subset used to pay
        retirement_hero: Hero retired for a title purchase
        use_emergency: Whether emergency resources are spent
        emergency_bonus: Resources granted by the emergency use
        score: Opportunity score that won the decision
        reason: Human-readable rationale
    """

    action: PurchaseAction
    target: Hero | Title | None = None
    heroes: tuple[Hero, ...] = ()
    retirement_hero: Hero | None = None
    use_emergency: bool = False
    emergency_bonus: ResourceBundle = ZERO
    score: float = 0.0
    reason: str = ""

    @classmethod
    def pass_turn(cls, reason: str = "No affordable options") -> "PurchaseDecision":
        return cls(action=PurchaseAction.PASS, reason=reason)

    @classmethod
    def for_title(cls, opportunity: TitleOpportunity, reason: str) -> "PurchaseDecision":
        return cls(
            action=PurchaseAction.TITLE,
            target=opportunity.title,
            heroes=opportunity.heroes,
            retirement_hero=opportunity.retirement_hero,
            use_emergency=opportunity.uses_emergency,
            emergency_bonus=opportunity.emergency_bonus,
            score=opportunity.score,
            reason=reason,
        )

    @classmethod
    def for_hero(cls, opportunity: HeroOpportunity, reason: str) -> "PurchaseDecision":
        return cls(
            action=PurchaseAction.HERO,
            target=opportunity.hero,
            heroes=opportunity.heroes,
            score=opportunity.score,
            reason=reason,
        )


@dataclass
class PurchaseResult:
    """What the executor did with a decision."""

    outcome: PurchaseOutcome
    decision: PurchaseDecision
    reason: str
    retired_hero: Hero | None = None
    points: int = 0
    notes: list[str] = field(default_factory=list)

    @property
    def completed(self) -> bool:
        return self.outcome == PurchaseOutcome.COMPLETED
