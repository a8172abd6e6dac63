"""
Collection scoring.

Scores a title against everything a player has ever owned (hand,
battlefield and retired heroes; peasants never count) and computes the
end-of-game total.

Title points:
    base_points  = points[min(collection_size, len(points) - 1)]
    legend_bonus = owned named legends x legend_bonus (x1 when unset)
    total_points = base_points + legend_bonus

Final score:
    title points recorded at purchase
    + resource majority bonus
    - one point per emergency use

Malformed titles never raise: they score zero and log a warning.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from kingdomsim.config import RESOURCES
from kingdomsim.models.cards import EventCard, Hero, Title
from kingdomsim.models.player import Player
from kingdomsim.models.resources import ZERO, ResourceBundle, cost_of
from kingdomsim.parsers.requirements import matching_heroes, parse_requirement

logger = logging.getLogger(__name__)


@dataclass
class TitlePoints:
    """Breakdown of a title's value for one player."""

    base_points: int = 0
    legend_bonus: int = 0
    total_points: int = 0
    collection_size: int = 0
    matching_heroes: list[Hero] = field(default_factory=list)


@dataclass
class FinalScore:
    """End-of-game score breakdown."""

    title_points: int
    majority_bonus: int
    emergency_penalty: int
    final_score: int


# =============================================================================
# TITLE POINTS
# =============================================================================


def set_matching_heroes(heroes: list[Hero], title: Title) -> list[Hero]:
    """
    Heroes counting toward a title's set.

    Unrecognised or missing set text matches nothing.
    """
    text = title.set_requirement or title.requirement
    requirement = parse_requirement(text)
    if requirement is None or not requirement.is_recognized:
        logger.warning("Title %s has no recognisable set requirement: %r", title.name, text)
        return []
    return matching_heroes(heroes, requirement)


def base_points_for(title: Title, collection_size: int) -> int:
    """Points table lookup; sizes past the end of the table score the last entry."""
    if not title.points:
        return 0
    index = min(max(collection_size, 0), len(title.points) - 1)
    return title.points[index]


def count_owned_legends(heroes: list[Hero], title: Title) -> int:
    """Number of owned heroes named as legends on the title."""
    if not title.named_legends:
        return 0
    legends = {name.lower() for name in title.named_legends}
    return sum(1 for hero in heroes if hero.name.lower() in legends)


def calculate_title_points(player: Player, title: Title) -> TitlePoints:
    """
    Score a title against the player's whole collection.

    Args:
        player: Player whose owned heroes are counted
        title: Title to score

    Returns:
        TitlePoints breakdown; all zeros when the title has no points table
    """
    if not title.points:
        logger.warning("Title %s has no points table; scoring 0", title.name)
        return TitlePoints()

    owned = player.owned_heroes()
    matched = set_matching_heroes(owned, title)
    collection_size = len(matched)
    base = base_points_for(title, collection_size)

    legend_count = count_owned_legends(owned, title)
    multiplier = title.legend_bonus if title.legend_bonus is not None else 1
    legend_bonus = legend_count * multiplier

    return TitlePoints(
        base_points=base,
        legend_bonus=legend_bonus,
        total_points=base + legend_bonus,
        collection_size=collection_size,
        matching_heroes=matched,
    )


# =============================================================================
# RESOURCE MAJORITIES
# =============================================================================


def player_resource_totals(player: Player) -> ResourceBundle:
    """Sum of positive stats across every owned hero (peasants excluded)."""
    totals = ZERO
    for hero in player.owned_heroes():
        totals = totals + cost_of(hero)
    return totals


def leading_resource_counts(events: Iterable[EventCard]) -> dict[str, int]:
    """How many event cards lead with each resource."""
    counts = {res: 0 for res in RESOURCES}
    for event in events:
        resource = event.leading_resource.lower()
        if resource in counts:
            counts[resource] += 1
        else:
            logger.warning("Event %s leads with unknown resource %r", event.name, resource)
    return counts


def calculate_majority_bonuses(
    players: list[Player],
    events: Iterable[EventCard],
) -> dict[str, int]:
    """
    Resource majority bonuses for a whole table.

    For each resource, the player with the strictly highest total receives
    one point per event card leading with that resource. Ties and zero totals
    award nothing.

    Returns:
        Mapping of player id to bonus points (every player present)
    """
    counts = leading_resource_counts(events)
    totals = {player.id: player_resource_totals(player) for player in players}
    bonuses = {player.id: 0 for player in players}

    for resource in RESOURCES:
        if counts[resource] == 0:
            continue
        values = sorted(
            ((bundle.get(resource), player_id) for player_id, bundle in totals.items()),
            reverse=True,
        )
        if not values or values[0][0] <= 0:
            continue
        if len(values) > 1 and values[1][0] == values[0][0]:
            continue
        bonuses[values[0][1]] += counts[resource]

    return bonuses


def calculate_majority_bonus(player: Player, events: Iterable[EventCard]) -> int:
    """
    Majority bonus for a player scored on their own.

    Single-player convenience: any positive total counts as the majority.
    Use calculate_majority_bonuses for a multiplayer table.
    """
    return calculate_majority_bonuses([player], events)[player.id]


# =============================================================================
# FINAL SCORE
# =============================================================================


def calculate_final_score(
    player: Player,
    events: Iterable[EventCard],
    opponents: Iterable[Player] = (),
) -> FinalScore:
    """
    End-of-game score for a player.

    Args:
        player: Player to score
        events: The game's event cards
        opponents: Other players at the table, for majority comparison

    Returns:
        FinalScore breakdown
    """
    title_points = sum(owned.points for owned in player.titles)
    table = [player, *opponents]
    majority_bonus = calculate_majority_bonuses(table, list(events))[player.id]
    emergency_penalty = player.emergency_used
    final = title_points + majority_bonus - emergency_penalty

    logger.info(
        "%s final score %d (titles %d + majority %d - emergency %d)",
        player.name,
        final,
        title_points,
        majority_bonus,
        emergency_penalty,
    )
    return FinalScore(
        title_points=title_points,
        majority_bonus=majority_bonus,
        emergency_penalty=emergency_penalty,
        final_score=final,
    )
