"""
Player state.

A player exclusively owns its hand, battlefield, titles and retired heroes.
Heroes move between zones through the methods here so that every hero sits
in exactly one zone at a time:

    market -> hand           (hero purchase)
    hand -> battlefield      (deployment)
    battlefield -> hand      (cleanup)
    hand/battlefield -> retired   (title purchase, permanent)
"""

from dataclasses import dataclass, field, replace

from kingdomsim.config import KINGDOMS, settings
from kingdomsim.models.cards import Hero, Title, make_peasants
from kingdomsim.models.failure import BattlefieldLimitError


def _empty_battlefield() -> dict[str, list[Hero]]:
    return {kingdom: [] for kingdom in KINGDOMS}


@dataclass
class OwnedTitle:
    """A purchased title with the hero retired for it and its recorded points."""

    title: Title
    retired_hero: Hero
    points: int = 0


@dataclass
class Player:
    """
    A player's cards, titles and score.

    Attributes:
        id: Seat identifier
        name: Display name
        hand: Cards in hand
        battlefield: Cards deployed per kingdom (wei, wu, shu)
        titles: Purchased titles in purchase order
        retired_heroes: Heroes retired for titles (append-only)
        score: Running score (emergency penalties are deducted here)
        emergency_used: Emergency resource uses this game
    """

    id: str
    name: str = ""
    hand: list[Hero] = field(default_factory=list)
    battlefield: dict[str, list[Hero]] = field(default_factory=_empty_battlefield)
    titles: list[OwnedTitle] = field(default_factory=list)
    retired_heroes: list[Hero] = field(default_factory=list)
    score: int = 0
    emergency_used: int = 0

    def __post_init__(self) -> None:
        for kingdom in KINGDOMS:
            self.battlefield.setdefault(kingdom, [])
        if not self.name:
            self.name = f"Player {self.id}"

    @classmethod
    def with_starting_hand(cls, player_id: str, name: str = "") -> "Player":
        """New player holding the four starting peasants."""
        return cls(id=player_id, name=name, hand=make_peasants())

    # -------------------------------------------------------------------------
    # Zone views
    # -------------------------------------------------------------------------

    def battlefield_heroes(self) -> list[Hero]:
        """Deployed cards in kingdom order, each tagged with its kingdom."""
        deployed: list[Hero] = []
        for kingdom in KINGDOMS:
            for hero in self.battlefield[kingdom]:
                deployed.append(hero if hero.kingdom == kingdom else replace(hero, kingdom=kingdom))
        return deployed

    def battlefield_count(self) -> int:
        return sum(len(cards) for cards in self.battlefield.values())

    def owned_heroes(self) -> list[Hero]:
        """Every hero ever owned (hand, battlefield, retired), peasants excluded."""
        everything = [*self.hand, *self.battlefield_heroes(), *self.retired_heroes]
        return [hero for hero in everything if not hero.is_peasant]

    def retirable_heroes(self) -> list[Hero]:
        """Heroes that may be retired for a title: hand first, then battlefield."""
        return [hero for hero in [*self.hand, *self.battlefield_heroes()] if not hero.is_peasant]

    def owns_title(self, title_id: str) -> bool:
        return any(owned.title.id == title_id for owned in self.titles)

    def locate_hero(self, hero_id: str) -> str | None:
        """Zone holding a hero: "hand", a kingdom name, "retired", or None."""
        if any(h.id == hero_id for h in self.hand):
            return "hand"
        for kingdom in KINGDOMS:
            if any(h.id == hero_id for h in self.battlefield[kingdom]):
                return kingdom
        if any(h.id == hero_id for h in self.retired_heroes):
            return "retired"
        return None

    # -------------------------------------------------------------------------
    # Zone moves
    # -------------------------------------------------------------------------

    def deploy(self, hero_id: str, kingdom: str, max_per_kingdom: int | None = None) -> Hero:
        """
        Move a card from hand to a kingdom column.

        The column limit defaults to settings.max_cards_per_kingdom.

        Raises:
            KeyError: If the card is not in hand or the kingdom is unknown
            BattlefieldLimitError: If the kingdom column is already full
        """
        if kingdom not in self.battlefield:
            raise KeyError(f"Unknown kingdom: {kingdom}")
        limit = settings.max_cards_per_kingdom if max_per_kingdom is None else max_per_kingdom
        column = self.battlefield[kingdom]
        if len(column) >= limit:
            raise BattlefieldLimitError(
                size=len(column) + 1,
                limit=limit,
                detail=f"kingdom {kingdom} is full",
            )
        for index, hero in enumerate(self.hand):
            if hero.id == hero_id:
                del self.hand[index]
                deployed = replace(hero, kingdom=kingdom)
                column.append(deployed)
                return deployed
        raise KeyError(f"Card {hero_id} is not in hand")

    def remove_hero(self, hero_id: str) -> Hero | None:
        """
        Remove a hero from hand or battlefield (hand checked first).

        Returns the removed hero, or None if neither zone holds it.
        """
        for index, hero in enumerate(self.hand):
            if hero.id == hero_id:
                return self.hand.pop(index)
        for kingdom in KINGDOMS:
            column = self.battlefield[kingdom]
            for index, hero in enumerate(column):
                if hero.id == hero_id:
                    return column.pop(index)
        return None

    def return_battlefield_to_hand(self) -> None:
        """Cleanup: every deployed card goes back to hand, untagged."""
        for kingdom in KINGDOMS:
            self.hand.extend(replace(hero, kingdom=None) for hero in self.battlefield[kingdom])
            self.battlefield[kingdom] = []
