from kingdomsim.models.cards import PEASANT_ALLEGIANCE, EventCard, Hero, Title, make_peasants
from kingdomsim.models.decision import (
    HeroOpportunity,
    PurchaseAction,
    PurchaseDecision,
    PurchaseResult,
    TitleOpportunity,
)
from kingdomsim.models.failure import (
    BattlefieldLimitError,
    EmergencyLimitError,
    FailureKind,
    GameDataError,
    KnownError,
    MarketIntegrityError,
    PurchaseOutcome,
)
from kingdomsim.models.game_data import GameData
from kingdomsim.models.market import Market, hero_market_size, title_market_size
from kingdomsim.models.player import OwnedTitle, Player
from kingdomsim.models.resources import (
    ZERO,
    ResourceBundle,
    add,
    can_afford,
    cost_of,
    shortfall,
    total,
)

__all__ = [
    "PEASANT_ALLEGIANCE",
    "ZERO",
    "BattlefieldLimitError",
    "EmergencyLimitError",
    "EventCard",
    "FailureKind",
    "GameData",
    "GameDataError",
    "Hero",
    "HeroOpportunity",
    "KnownError",
    "Market",
    "MarketIntegrityError",
    "OwnedTitle",
    "Player",
    "PurchaseAction",
    "PurchaseDecision",
    "PurchaseOutcome",
    "PurchaseResult",
    "ResourceBundle",
    "Title",
    "TitleOpportunity",
    "add",
    "can_afford",
    "cost_of",
    "hero_market_size",
    "make_peasants",
    "shortfall",
    "title_market_size",
    "total",
]
