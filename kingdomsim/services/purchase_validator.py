"""
Purchase validation.

Decides whether a title purchase is legal and which hero gets retired for it.

A title purchase needs:
1. The title is not already owned by this player
2. A hero in hand or on the battlefield to retire (find_matching_hero)
3. The chosen battlefield subset, plus its column bonuses, covers the cost

The subset passed in only pays for the title. Set scoring uses the player's
whole collection and lives in the collection scorer.
"""

import logging
from dataclasses import dataclass

from kingdomsim.config import KINGDOM_BONUSES, KINGDOMS, RESOURCES
from kingdomsim.models.cards import Hero, Title
from kingdomsim.models.player import Player
from kingdomsim.models.resources import (
    ZERO,
    ResourceBundle,
    can_afford,
    cost_of,
    shortfall,
)
from kingdomsim.parsers.requirements import (
    DUAL_ROLE_RE,
    detect_allegiances,
    detect_bare_threshold,
    detect_roles,
    detect_threshold,
    first_match,
)

logger = logging.getLogger(__name__)


@dataclass
class TitlePurchaseCheck:
    """Result of validating a title purchase."""

    can_purchase: bool
    retirement_hero: Hero | None
    reason: str
    available: ResourceBundle = ZERO
    column_bonuses: ResourceBundle = ZERO


# =============================================================================
# RESOURCES AND COLUMN BONUSES
# =============================================================================


def calculate_column_bonuses(selected_heroes: list[Hero] | tuple[Hero, ...]) -> ResourceBundle:
    """
    Column bonuses for a set of deployed heroes.

    Each kingdom with 2+ of the selected heroes grants +1 of its bonus
    resource (wei: influence, wu: supplies, shu: piety). Heroes must carry
    their kingdom tag.
    """
    bonuses = ZERO
    for kingdom in KINGDOMS:
        count = sum(1 for hero in selected_heroes if hero.kingdom == kingdom)
        if count >= 2:
            bonuses = bonuses.with_added(KINGDOM_BONUSES[kingdom], 1)
    return bonuses


def total_resources(heroes: list[Hero] | tuple[Hero, ...]) -> ResourceBundle:
    """Raw sum of card stats, negatives included."""
    total = ZERO
    for hero in heroes:
        total = total + hero.resources
    return total


def available_resources(
    heroes: list[Hero] | tuple[Hero, ...],
    temp_bonus: ResourceBundle = ZERO,
) -> ResourceBundle:
    """
    Resources a subset can spend: card stats, column bonuses and any
    temporary grant (emergency resources), floored at zero.
    """
    return (total_resources(heroes) + calculate_column_bonuses(heroes) + temp_bonus).clamped()


def battlefield_resources(player: Player, temp_bonus: ResourceBundle = ZERO) -> ResourceBundle:
    """Spendable resources of the player's whole battlefield."""
    return available_resources(player.battlefield_heroes(), temp_bonus)


# =============================================================================
# RETIREMENT HERO SELECTION
# =============================================================================


def find_clause_match(heroes: list[Hero], requirement_text: str | None) -> Hero | None:
    """
    First hero picked out by a clause of the requirement text.

    Tried in order, first hit wins:
    (a) a hero whose name appears in the text
    (b) a hero with a role named in the text (roles in vocabulary order)
    (c) a hero with an allegiance named in the text
    (d) a hero meeting an explicit "<N>+ <resource>" threshold
    (e) a hero with any resource at or above a bare number in the text
    (f) a dual-role hero, if the text asks for one

    Returns None when no clause picks anyone.
    """
    text = requirement_text or ""
    lowered = text.lower()

    if heroes and lowered:
        named = first_match(heroes, lambda h: bool(h.name) and h.name.lower() in lowered)
        if named:
            return named

        for role in detect_roles(text):
            hero = first_match(heroes, lambda h, r=role: r.lower() in (x.lower() for x in h.roles))
            if hero:
                return hero

        for allegiance in detect_allegiances(text):
            hero = first_match(
                heroes, lambda h, a=allegiance: h.allegiance.lower() == a.lower()
            )
            if hero:
                return hero

        threshold = detect_threshold(text)
        if threshold is not None:
            hero = first_match(heroes, threshold.matches)
            if hero:
                return hero

        bare = detect_bare_threshold(text)
        if bare is not None:
            hero = first_match(
                heroes, lambda h: any(h.resources.get(res) >= bare for res in RESOURCES)
            )
            if hero:
                return hero

        if DUAL_ROLE_RE.search(text):
            hero = first_match(heroes, lambda h: h.has_dual_role)
            if hero:
                return hero

    return None


def find_matching_hero(heroes: list[Hero], requirement_text: str | None) -> Hero | None:
    """
    Pick the hero to retire for a requirement.

    Uses find_clause_match, falling back to the first hero in the list when
    no clause picks anyone. Returns None only when `heroes` is empty.
    """
    if not heroes:
        return None
    matched = find_clause_match(heroes, requirement_text)
    if matched is not None:
        return matched
    logger.debug("No clause of %r matched; retiring first available hero", requirement_text)
    return heroes[0]


# =============================================================================
# TITLE PURCHASE
# =============================================================================


def can_purchase_title(
    player: Player,
    title: Title,
    candidate_heroes: list[Hero] | tuple[Hero, ...],
    emergency_bonus: ResourceBundle = ZERO,
) -> TitlePurchaseCheck:
    """
    Check whether the player can buy a title paying with `candidate_heroes`.

    Args:
        player: The buying player
        title: Title on offer
        candidate_heroes: Battlefield subset used to pay (kingdom-tagged)
        emergency_bonus: Emergency resources added to the subset

    Returns:
        TitlePurchaseCheck with the retirement hero when one exists
    """
    if player.owns_title(title.id):
        return TitlePurchaseCheck(
            can_purchase=False,
            retirement_hero=None,
            reason=f"Already owns {title.name}",
        )

    retirement_hero = find_matching_hero(player.retirable_heroes(), title.hero_requirement)
    if retirement_hero is None:
        return TitlePurchaseCheck(
            can_purchase=False,
            retirement_hero=None,
            reason=f"No hero available to retire for {title.name}",
        )

    bonuses = calculate_column_bonuses(candidate_heroes)
    available = available_resources(candidate_heroes, emergency_bonus)
    if not can_afford(title.total_cost, available):
        missing = shortfall(title.total_cost, available)
        parts = [f"{res} short {amount}" for res, amount in missing.as_dict().items() if amount]
        return TitlePurchaseCheck(
            can_purchase=False,
            retirement_hero=retirement_hero,
            reason=f"Insufficient resources: {', '.join(parts)}",
            available=available,
            column_bonuses=bonuses,
        )

    return TitlePurchaseCheck(
        can_purchase=True,
        retirement_hero=retirement_hero,
        reason="All requirements met",
        available=available,
        column_bonuses=bonuses,
    )


def can_afford_hero(
    hero: Hero,
    candidate_heroes: list[Hero] | tuple[Hero, ...],
    emergency_bonus: ResourceBundle = ZERO,
) -> bool:
    """True if the subset (plus bonuses) covers the hero's cost."""
    return can_afford(cost_of(hero), available_resources(candidate_heroes, emergency_bonus))
