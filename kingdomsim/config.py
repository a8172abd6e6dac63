from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Game rules and AI tuning loaded from environment."""

    model_config = SettingsConfigDict(env_prefix="KINGDOMSIM_", env_file=".env", frozen=True)

    # Turn structure
    total_turns: int = 8
    max_cards_per_kingdom: int = 3

    # Emergency resources: +1 to two resources for a 1 point penalty
    max_emergency_uses: int = 3
    emergency_min_turn: int = 6
    emergency_penalty: int = 1

    # Market sizing (player count -> hero market size)
    hero_market_size: dict[int, int] = Field(default_factory=lambda: {2: 4, 3: 6, 4: 6})
    turn_one_hero_bonus: int = 2
    title_market_bonus: int = 2

    # AI decision policy
    early_game_last_turn: int = 3
    late_game_first_turn: int = 7
    early_hero_threshold: float = 0.8
    early_title_threshold: float = 8.0
    late_title_threshold: float = 3.0
    hero_score_weight: float = 5.0
    emergency_title_threshold: float = 5.0

    # "simulate" re-runs affordability with the emergency grant added,
    # "threshold_only" re-checks the best known title score without it
    emergency_mode: Literal["simulate", "threshold_only"] = "simulate"


settings = Settings()


# =============================================================================
# GAME VOCABULARY
# =============================================================================

RESOURCES: tuple[str, ...] = ("military", "influence", "supplies", "piety")

KINGDOMS: tuple[str, ...] = ("wei", "wu", "shu")

# Column bonus: 2+ cards deployed in a kingdom grant +1 of its resource
KINGDOM_BONUSES: dict[str, str] = {
    "wei": "influence",
    "wu": "supplies",
    "shu": "piety",
}

ROLES: tuple[str, ...] = ("General", "Advisor", "Tactician", "Administrator")

ALLEGIANCES: tuple[str, ...] = ("Shu", "Wei", "Wu", "Rebels", "Coalition", "Han", "Dong Zhuo")

# 3 kingdoms x 3 cards. Subset enumeration is exponential in this number.
MAX_BATTLEFIELD_HEROES = 9
