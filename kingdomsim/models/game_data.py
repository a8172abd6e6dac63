from dataclasses import dataclass, field

from kingdomsim.models.cards import EventCard, Hero, Title


@dataclass(frozen=True)
class GameData:
    """
    Immutable snapshot of the hero, title and event pools.

    Built once per data load and injected into the engine. Safe to share
    between independent simulations.
    """

    heroes: tuple[Hero, ...]
    titles: tuple[Title, ...]
    events: tuple[EventCard, ...]
    legend_names: frozenset[str] = field(init=False)

    def __post_init__(self) -> None:
        names = {legend.lower() for title in self.titles for legend in title.named_legends}
        object.__setattr__(self, "legend_names", frozenset(names))

    def is_legendary_hero(self, hero: Hero) -> bool:
        """A hero is legendary if some title names it as a legend."""
        return hero.name.lower() in self.legend_names

    def hero_by_id(self, hero_id: str) -> Hero | None:
        return next((hero for hero in self.heroes if hero.id == hero_id), None)

    def title_by_id(self, title_id: str) -> Title | None:
        return next((title for title in self.titles if title.id == title_id), None)
