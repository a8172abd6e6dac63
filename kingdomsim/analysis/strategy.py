"""
AI purchase strategy.

Chooses one purchase per call: buy a title, buy a hero, spend emergency
resources on a title, or pass. No state is kept between calls.

Search is exhaustive: every non-empty subset of the battlefield is tried as
the paying basis for every market title and hero. Deployment rules cap the
battlefield at 9 cards, so the worst case is 511 subsets.

Title opportunity score:
    total_points * 2 + adjusted_efficiency * 3
    + 2 if the title is legendary
    - 0.5 * value of the retired hero

Hero opportunity score:
    value / max(1, cost)

INVARIANTS:
- Subsets are visited smallest first; on equal scores the first one wins
- An oversized battlefield raises BattlefieldLimitError instead of searching
- Emergency purchases are only offered while uses remain and from the
  configured turn onwards
"""

import logging
from collections.abc import Iterator
from dataclasses import replace
from itertools import combinations

from kingdomsim.config import MAX_BATTLEFIELD_HEROES, RESOURCES, Settings, settings
from kingdomsim.models.cards import Hero, Title
from kingdomsim.models.decision import HeroOpportunity, PurchaseDecision, TitleOpportunity
from kingdomsim.models.failure import BattlefieldLimitError
from kingdomsim.models.game_data import GameData
from kingdomsim.models.market import Market
from kingdomsim.models.player import Player
from kingdomsim.models.resources import ZERO, ResourceBundle, cost_of, shortfall
from kingdomsim.services.collection_scorer import calculate_title_points
from kingdomsim.services.purchase_validator import (
    available_resources,
    can_afford_hero,
    can_purchase_title,
    find_clause_match,
)

logger = logging.getLogger(__name__)

# Score weights
POINTS_WEIGHT = 2.0
EFFICIENCY_WEIGHT = 3.0
LEGENDARY_TITLE_BONUS = 2.0
RETIREMENT_COST_WEIGHT = 0.5

# Hero value weights
UNLOCK_WEIGHT = 0.5
STAT_WEIGHT = 0.2
LEGENDARY_HERO_BONUS = 3.0

# An emergency grant is +1 in at most this many resources
EMERGENCY_RESOURCE_SPREAD = 2


def enumerate_battlefield_subsets(heroes: list[Hero]) -> Iterator[tuple[Hero, ...]]:
    """
    Yield every non-empty subset of the battlefield.

    Subsets come in size order (singles first), and in input order within a
    size.

    Raises:
        BattlefieldLimitError: If more than 9 heroes are deployed
    """
    if len(heroes) > MAX_BATTLEFIELD_HEROES:
        raise BattlefieldLimitError(
            size=len(heroes),
            limit=MAX_BATTLEFIELD_HEROES,
            detail="Subset search is exponential in battlefield size",
        )
    for size in range(1, len(heroes) + 1):
        yield from combinations(heroes, size)


def emergency_grant(missing: ResourceBundle) -> ResourceBundle | None:
    """
    Emergency bonus closing a shortfall, or None if it cannot.

    The grant covers +1 in up to two resources, so each missing amount must
    be at most 1.
    """
    short = [res for res in RESOURCES if missing.get(res) > 0]
    if not short or len(short) > EMERGENCY_RESOURCE_SPREAD:
        return None
    if any(missing.get(res) > 1 for res in short):
        return None
    grant = ZERO
    for res in short:
        grant = grant.with_added(res, 1)
    return grant


class StrategyEngine:
    """
    Purchase decision engine.

    Holds only immutable collaborators (game data and settings), so one
    engine can serve any number of players and simulations.
    """

    def __init__(self, game_data: GameData, config: Settings = settings):
        self.game_data = game_data
        self.config = config

    # =========================================================================
    # TITLE OPPORTUNITIES
    # =========================================================================

    def _score_title(
        self,
        player: Player,
        title: Title,
        subset: tuple[Hero, ...],
        emergency_bonus: ResourceBundle = ZERO,
    ) -> TitleOpportunity | None:
        check = can_purchase_title(player, title, subset, emergency_bonus)
        if not check.can_purchase or check.retirement_hero is None:
            return None

        points = calculate_title_points(player, title)
        effective_cost = title.total_cost.total() - check.column_bonuses.total()
        efficiency = points.total_points / max(1, effective_cost)
        retirement_value = cost_of(check.retirement_hero).total()

        score = points.total_points * POINTS_WEIGHT + efficiency * EFFICIENCY_WEIGHT
        if title.is_legendary:
            score += LEGENDARY_TITLE_BONUS
        score -= RETIREMENT_COST_WEIGHT * retirement_value

        logger.debug(
            "%s: %s via %d heroes scores %.2f",
            player.name,
            title.name,
            len(subset),
            score,
        )
        return TitleOpportunity(
            title=title,
            heroes=subset,
            retirement_hero=check.retirement_hero,
            column_bonuses=check.column_bonuses,
            base_points=points.base_points,
            legend_bonus=points.legend_bonus,
            total_points=points.total_points,
            adjusted_efficiency=efficiency,
            score=score,
            emergency_bonus=emergency_bonus,
        )

    def evaluate_title_opportunities(
        self,
        player: Player,
        titles: list[Title],
    ) -> list[TitleOpportunity]:
        """
        Affordable titles with their best paying subset, best first.

        Args:
            player: Player buying
            titles: Titles on offer

        Returns:
            One opportunity per affordable title, sorted by score descending
        """
        subsets = list(enumerate_battlefield_subsets(player.battlefield_heroes()))
        opportunities: list[TitleOpportunity] = []

        for title in titles:
            if player.owns_title(title.id):
                continue
            best: TitleOpportunity | None = None
            for subset in subsets:
                opportunity = self._score_title(player, title, subset)
                if opportunity and (best is None or opportunity.score > best.score):
                    best = opportunity
            if best:
                opportunities.append(best)

        opportunities.sort(key=lambda o: o.score, reverse=True)
        return opportunities

    def evaluate_emergency_title_opportunities(
        self,
        player: Player,
        titles: list[Title],
    ) -> list[TitleOpportunity]:
        """
        Titles that become affordable with an emergency grant, best first.

        Only subsets that fall short are considered; each one is re-checked
        with the grant added to its resources.
        """
        subsets = list(enumerate_battlefield_subsets(player.battlefield_heroes()))
        opportunities: list[TitleOpportunity] = []

        for title in titles:
            if player.owns_title(title.id):
                continue
            best: TitleOpportunity | None = None
            for subset in subsets:
                grant = emergency_grant(shortfall(title.total_cost, available_resources(subset)))
                if grant is None:
                    continue
                opportunity = self._score_title(player, title, subset, grant)
                if opportunity and (best is None or opportunity.score > best.score):
                    best = opportunity
            if best:
                opportunities.append(best)

        opportunities.sort(key=lambda o: o.score, reverse=True)
        return opportunities

    # =========================================================================
    # HERO OPPORTUNITIES
    # =========================================================================

    def hero_value(self, player: Player, hero: Hero, titles: list[Title]) -> float:
        """
        Worth of a market hero to the player.

        Counts half the cost of each unowned title whose hero requirement the
        hero would newly satisfy (no retirable hero is picked out by any of its
        clauses, and this hero is), a fifth of its stat total, and a flat bonus
        for legends.
        """
        value = 0.0
        retirable = player.retirable_heroes()

        for title in titles:
            if player.owns_title(title.id):
                continue
            text = title.hero_requirement
            if find_clause_match(retirable, text) is not None:
                continue
            if find_clause_match([hero], text) is not None:
                value += title.total_cost.total() * UNLOCK_WEIGHT

        value += hero.resources.total() * STAT_WEIGHT
        if self.game_data.is_legendary_hero(hero):
            value += LEGENDARY_HERO_BONUS
        return value

    def evaluate_hero_opportunities(
        self,
        player: Player,
        heroes: list[Hero],
        titles: list[Title],
    ) -> list[HeroOpportunity]:
        """
        Affordable market heroes, best first.

        The paying subset is the first one (smallest first) that covers the
        hero's cost.
        """
        subsets = list(enumerate_battlefield_subsets(player.battlefield_heroes()))
        opportunities: list[HeroOpportunity] = []

        for hero in heroes:
            subset = next((s for s in subsets if can_afford_hero(hero, s)), None)
            if subset is None:
                continue
            cost = cost_of(hero).total()
            value = self.hero_value(player, hero, titles)
            opportunities.append(
                HeroOpportunity(
                    hero=hero,
                    heroes=subset,
                    cost=cost,
                    value=value,
                    score=value / max(1, cost),
                )
            )

        opportunities.sort(key=lambda o: o.score, reverse=True)
        return opportunities

    # =========================================================================
    # DECISION POLICY
    # =========================================================================

    def can_use_emergency(self, player: Player, turn: int) -> bool:
        return (
            player.emergency_used < self.config.max_emergency_uses
            and turn >= self.config.emergency_min_turn
        )

    def decide(self, player: Player, market: Market, turn: int) -> PurchaseDecision:
        """
        Choose the purchase for this step.

        Args:
            player: Player to act
            market: Current hero and title markets
            turn: Turn number, 1-based

        Returns:
            PurchaseDecision (action PASS when nothing qualifies)

        Raises:
            ValueError: If the turn is outside 1..total_turns
        """
        cfg = self.config
        if not 1 <= turn <= cfg.total_turns:
            raise ValueError(f"Turn {turn} is outside 1..{cfg.total_turns}")

        titles = self.evaluate_title_opportunities(player, market.titles)
        heroes = self.evaluate_hero_opportunities(player, market.heroes, market.titles)
        best_title = titles[0] if titles else None
        best_hero = heroes[0] if heroes else None

        decision = self._phase_decision(turn, best_title, best_hero)
        if decision is None and self.can_use_emergency(player, turn):
            decision = self._emergency_decision(player, market, titles)
        if decision is None:
            decision = PurchaseDecision.pass_turn(f"Nothing worth buying on turn {turn}")

        logger.info(
            "%s turn %d: %s %s (%s)",
            player.name,
            turn,
            decision.action.value,
            decision.target.name if decision.target else "-",
            decision.reason,
        )
        if decision.use_emergency:
            logger.info(
                "%s spends emergency resources (%d/%d used)",
                player.name,
                player.emergency_used,
                cfg.max_emergency_uses,
            )
        return decision

    def _phase_decision(
        self,
        turn: int,
        best_title: TitleOpportunity | None,
        best_hero: HeroOpportunity | None,
    ) -> PurchaseDecision | None:
        cfg = self.config

        if turn <= cfg.early_game_last_turn:
            if best_hero and best_hero.score > cfg.early_hero_threshold:
                return PurchaseDecision.for_hero(best_hero, "Early game: building the hand")
            if best_title and best_title.score > cfg.early_title_threshold:
                return PurchaseDecision.for_title(best_title, "Early game: exceptional title")

        if turn >= cfg.late_game_first_turn:
            if best_title and best_title.score > cfg.late_title_threshold:
                return PurchaseDecision.for_title(best_title, "Late game: securing points")
            # Late titles below the threshold are not worth a retirement
            best_title = None

        if best_title and best_hero:
            weighted_hero = best_hero.score * cfg.hero_score_weight
            if best_title.score > weighted_hero:
                return PurchaseDecision.for_title(
                    best_title, f"Title {best_title.score:.2f} beats hero {weighted_hero:.2f}"
                )
            return PurchaseDecision.for_hero(
                best_hero, f"Hero {weighted_hero:.2f} beats title {best_title.score:.2f}"
            )
        if best_title:
            return PurchaseDecision.for_title(best_title, "Only title available")
        if best_hero:
            return PurchaseDecision.for_hero(best_hero, "Only hero available")
        return None

    def _emergency_decision(
        self,
        player: Player,
        market: Market,
        titles: list[TitleOpportunity],
    ) -> PurchaseDecision | None:
        cfg = self.config

        if cfg.emergency_mode == "threshold_only":
            best = titles[0] if titles else None
            if best and best.score > cfg.emergency_title_threshold:
                decision = PurchaseDecision.for_title(best, "Emergency re-check passed")
                return replace(decision, use_emergency=True)
            return None

        candidates = self.evaluate_emergency_title_opportunities(player, market.titles)
        best = candidates[0] if candidates else None
        if best and best.score > cfg.emergency_title_threshold:
            return PurchaseDecision.for_title(best, "Emergency resources close the gap")
        return None
