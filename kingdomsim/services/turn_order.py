"""
Turn order for the purchase phase.

Players act in descending order of battlefield resources of the event's
leading resource. Ties break on Shu cards, then Wu cards, then Wei cards
deployed (more goes first), then seat order.
"""

import logging

from kingdomsim.config import RESOURCES
from kingdomsim.models.player import Player
from kingdomsim.services.purchase_validator import battlefield_resources

logger = logging.getLogger(__name__)


def calculate_turn_order(players: list[Player], leading_resource: str) -> list[Player]:
    """
    Order players for the purchase phase.

    Args:
        players: Players in seat order
        leading_resource: The current event's leading resource

    Returns:
        Players in acting order (a new list; input is not modified)

    Raises:
        ValueError: If the leading resource is not a known resource
    """
    resource = leading_resource.lower()
    if resource not in RESOURCES:
        raise ValueError(f"Unknown leading resource: {leading_resource}")

    def sort_key(seat: tuple[int, Player]) -> tuple[int, int, int, int, int]:
        index, player = seat
        return (
            -battlefield_resources(player).get(resource),
            -len(player.battlefield["shu"]),
            -len(player.battlefield["wu"]),
            -len(player.battlefield["wei"]),
            index,
        )

    ordered = [player for _, player in sorted(enumerate(players), key=sort_key)]

    for position, player in enumerate(ordered, start=1):
        logger.info(
            "%d. %s: %s %d",
            position,
            player.name,
            resource,
            battlefield_resources(player).get(resource),
        )
    return ordered
