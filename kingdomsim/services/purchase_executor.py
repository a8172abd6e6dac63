"""
Purchase execution.

Applies a PurchaseDecision to the player and the market. Every purchase is
re-validated against the exact state it is about to mutate, and all checks
run before the first mutation: a refused purchase leaves player and market
untouched.

INVARIANT: a retired hero appears in retired_heroes exactly once and in no
other zone afterwards.
INVARIANT: heroes are conserved across hand + battlefield + retired + market.
"""

import logging
from dataclasses import replace

from kingdomsim.config import Settings, settings
from kingdomsim.models.cards import Hero, Title
from kingdomsim.models.decision import PurchaseAction, PurchaseDecision, PurchaseResult
from kingdomsim.models.failure import EmergencyLimitError, PurchaseOutcome
from kingdomsim.models.market import Market
from kingdomsim.models.player import OwnedTitle, Player
from kingdomsim.services.collection_scorer import calculate_title_points
from kingdomsim.services.purchase_validator import can_afford_hero, can_purchase_title

logger = logging.getLogger(__name__)


def _refuse(decision: PurchaseDecision, reason: str) -> PurchaseResult:
    logger.info("Purchase refused: %s", reason)
    return PurchaseResult(outcome=PurchaseOutcome.REFUSED, decision=decision, reason=reason)


def _check_emergency(player: Player, decision: PurchaseDecision, config: Settings) -> None:
    if decision.use_emergency and player.emergency_used >= config.max_emergency_uses:
        raise EmergencyLimitError(used=player.emergency_used, limit=config.max_emergency_uses)


def _spend_emergency(player: Player, config: Settings) -> None:
    player.emergency_used += 1
    player.score -= config.emergency_penalty


def _deployed_payers(player: Player, decision: PurchaseDecision) -> tuple[Hero, ...] | None:
    """
    The player's own kingdom-tagged copies of the paying heroes.

    Returns None if any paying hero is no longer deployed or is listed twice.
    """
    deployed = {hero.id: hero for hero in player.battlefield_heroes()}
    ids = [hero.id for hero in decision.heroes]
    if len(set(ids)) != len(ids) or any(hero_id not in deployed for hero_id in ids):
        return None
    return tuple(deployed[hero_id] for hero_id in ids)


def execute_purchase(
    player: Player,
    decision: PurchaseDecision,
    market: Market,
    config: Settings = settings,
) -> PurchaseResult:
    """
    Apply a purchase decision.

    Args:
        player: Buying player (mutated on success)
        decision: Decision from the strategy engine
        market: Shared market (mutated on success)
        config: Game settings

    Returns:
        PurchaseResult with outcome COMPLETED, REFUSED or PASSED

    Raises:
        EmergencyLimitError: If the decision spends emergency resources the
            player no longer has
    """
    if decision.action == PurchaseAction.PASS:
        return PurchaseResult(
            outcome=PurchaseOutcome.PASSED,
            decision=decision,
            reason=decision.reason or "Passed",
        )

    _check_emergency(player, decision, config)

    if decision.action == PurchaseAction.TITLE:
        if not isinstance(decision.target, Title):
            return _refuse(decision, "Title purchase without a title")
        return _execute_title(player, decision, decision.target, market, config)

    if not isinstance(decision.target, Hero):
        return _refuse(decision, "Hero purchase without a hero")
    return _execute_hero(player, decision, decision.target, market, config)


def _execute_title(
    player: Player,
    decision: PurchaseDecision,
    title: Title,
    market: Market,
    config: Settings,
) -> PurchaseResult:
    if not market.has_title(title.id):
        return _refuse(decision, f"{title.name} is no longer in the market")

    payers = _deployed_payers(player, decision)
    if payers is None:
        return _refuse(decision, "Paying heroes are no longer deployed")

    check = can_purchase_title(player, title, payers, decision.emergency_bonus)
    if not check.can_purchase or check.retirement_hero is None:
        return _refuse(decision, check.reason)

    notes: list[str] = []
    if decision.retirement_hero and decision.retirement_hero.id != check.retirement_hero.id:
        notes.append(
            f"Retiring {check.retirement_hero.name} instead of {decision.retirement_hero.name}"
        )

    points = calculate_title_points(player, title).total_points

    # remove_hero is the first mutation; it changes nothing when the hero is missing
    removed = player.remove_hero(check.retirement_hero.id)
    if removed is None:
        return _refuse(decision, f"{check.retirement_hero.name} is not in hand or battlefield")
    retired = replace(removed, kingdom=None)
    player.retired_heroes.append(retired)
    player.titles.append(OwnedTitle(title=title, retired_hero=retired, points=points))
    market.take_title(title.id)

    if decision.use_emergency:
        _spend_emergency(player, config)
        notes.append("Emergency resources used")

    logger.info(
        "%s bought %s for %d points, retiring %s",
        player.name,
        title.name,
        points,
        retired.name,
    )
    return PurchaseResult(
        outcome=PurchaseOutcome.COMPLETED,
        decision=decision,
        reason=f"Bought {title.name}",
        retired_hero=retired,
        points=points,
        notes=notes,
    )


def _execute_hero(
    player: Player,
    decision: PurchaseDecision,
    hero: Hero,
    market: Market,
    config: Settings,
) -> PurchaseResult:
    if not market.has_hero(hero.id):
        return _refuse(decision, f"{hero.name} is no longer in the market")

    payers = _deployed_payers(player, decision)
    if payers is None:
        return _refuse(decision, "Paying heroes are no longer deployed")

    if not can_afford_hero(hero, payers, decision.emergency_bonus):
        return _refuse(decision, f"Cannot afford {hero.name}")

    taken = market.take_hero(hero.id)
    if taken is None:
        return _refuse(decision, f"{hero.name} is no longer in the market")
    player.hand.append(replace(taken, kingdom=None))

    notes: list[str] = []
    if decision.use_emergency:
        _spend_emergency(player, config)
        notes.append("Emergency resources used")

    logger.info("%s bought %s", player.name, taken.name)
    return PurchaseResult(
        outcome=PurchaseOutcome.COMPLETED,
        decision=decision,
        reason=f"Bought {taken.name}",
        notes=notes,
    )
