"""
KingdomSim services.

Purchase validation, scoring, execution and data loading.
"""

from kingdomsim.services.collection_scorer import (
    FinalScore,
    TitlePoints,
    calculate_final_score,
    calculate_majority_bonus,
    calculate_majority_bonuses,
    calculate_title_points,
)
from kingdomsim.services.game_data import (
    GameDataSource,
    InMemorySource,
    JsonDirectorySource,
    build_game_data,
    load_game_data,
)
from kingdomsim.services.purchase_executor import execute_purchase
from kingdomsim.services.purchase_validator import (
    TitlePurchaseCheck,
    available_resources,
    battlefield_resources,
    calculate_column_bonuses,
    can_afford_hero,
    can_purchase_title,
    find_clause_match,
    find_matching_hero,
)
from kingdomsim.services.turn_order import calculate_turn_order

__all__ = [
    "FinalScore",
    "GameDataSource",
    "InMemorySource",
    "JsonDirectorySource",
    "TitlePoints",
    "TitlePurchaseCheck",
    "available_resources",
    "battlefield_resources",
    "build_game_data",
    "calculate_column_bonuses",
    "calculate_final_score",
    "calculate_majority_bonus",
    "calculate_majority_bonuses",
    "calculate_title_points",
    "calculate_turn_order",
    "can_afford_hero",
    "can_purchase_title",
    "execute_purchase",
    "find_clause_match",
    "find_matching_hero",
    "load_game_data",
]
