"""
Hero and title markets.

The market is an owned collection mutated only through this API.
INVARIANT: ids are unique within each market.
INVARIANT: a purchased title leaves the market permanently (first buyer wins).
"""

import random
from collections.abc import Iterable
from dataclasses import dataclass, field

from kingdomsim.config import Settings, settings
from kingdomsim.models.cards import Hero, Title
from kingdomsim.models.failure import MarketIntegrityError


def hero_market_size(player_count: int, turn: int = 2, config: Settings = settings) -> int:
    """Hero market size: base size by player count, plus a bonus on turn 1."""
    base = config.hero_market_size.get(player_count, 4)
    return base + (config.turn_one_hero_bonus if turn == 1 else 0)


def title_market_size(player_count: int, config: Settings = settings) -> int:
    """Title market size: one per player plus a fixed bonus."""
    return player_count + config.title_market_bonus


@dataclass
class Market:
    """Heroes and titles currently offered for purchase."""

    heroes: list[Hero] = field(default_factory=list)
    titles: list[Title] = field(default_factory=list)

    def __post_init__(self) -> None:
        _check_unique("hero", (h.id for h in self.heroes))
        _check_unique("title", (t.id for t in self.titles))

    @classmethod
    def deal(
        cls,
        heroes: list[Hero],
        titles: list[Title],
        player_count: int,
        rng: random.Random,
        config: Settings = settings,
    ) -> "Market":
        """Deal opening markets from the pools (turn 1 sizing)."""
        hero_count = min(len(heroes), hero_market_size(player_count, turn=1, config=config))
        title_count = min(len(titles), title_market_size(player_count, config=config))
        return cls(
            heroes=rng.sample(heroes, hero_count),
            titles=rng.sample(titles, title_count),
        )

    def has_hero(self, hero_id: str) -> bool:
        return any(h.id == hero_id for h in self.heroes)

    def has_title(self, title_id: str) -> bool:
        return any(t.id == title_id for t in self.titles)

    def take_hero(self, hero_id: str) -> Hero | None:
        """Remove and return a hero, or None if it is not on offer."""
        for index, hero in enumerate(self.heroes):
            if hero.id == hero_id:
                return self.heroes.pop(index)
        return None

    def take_title(self, title_id: str) -> Title | None:
        """Remove and return a title, or None if it is not on offer."""
        for index, title in enumerate(self.titles):
            if title.id == title_id:
                return self.titles.pop(index)
        return None

    def discard_bottom(self, count: int = 2) -> list[Hero]:
        """Cleanup: discard the last `count` heroes (only if that many remain)."""
        if count <= 0 or len(self.heroes) < count:
            return []
        discarded = self.heroes[-count:]
        del self.heroes[-count:]
        return discarded

    def refill_heroes(
        self,
        pool: Iterable[Hero],
        target_size: int,
        rng: random.Random,
        excluded_ids: Iterable[str] = (),
    ) -> list[Hero]:
        """
        Refill the hero market to `target_size` with random pool heroes.

        Heroes already on offer or listed in `excluded_ids` (owned, retired,
        discarded) are never dealt. Returns the heroes added; fewer than
        needed when the pool runs dry.
        """
        blocked = {h.id for h in self.heroes} | set(excluded_ids)
        available = [hero for hero in pool if hero.id not in blocked]
        added: list[Hero] = []
        while len(self.heroes) < target_size and available:
            hero = available.pop(rng.randrange(len(available)))
            self.heroes.append(hero)
            added.append(hero)
        return added


def _check_unique(entity: str, ids: Iterable[str]) -> None:
    seen: set[str] = set()
    for entity_id in ids:
        if entity_id in seen:
            raise MarketIntegrityError(entity, entity_id)
        seen.add(entity_id)
