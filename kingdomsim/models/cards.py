from dataclasses import dataclass, field

from kingdomsim.models.resources import ResourceBundle

PEASANT_ALLEGIANCE = "Peasant"


@dataclass(frozen=True, slots=True)
class Hero:
    """
    A hero card.

    Attributes:
        id: Unique card id (identity within any market or collection)
        name: Display name, also used for named-legend matching
        allegiance: Faction (Shu, Wei, Wu, Rebels, Coalition, Han, Dong Zhuo)
        role: Primary role (General, Advisor, Tactician, Administrator)
        role2: Secondary role for dual-role heroes
        military: Military granted when deployed (negative drains)
        influence: Influence granted when deployed
        supplies: Supplies granted when deployed
        piety: Piety granted when deployed
        female: Female hero flag
        kingdom: Battlefield column this copy is deployed in, if any
    """

    id: str
    name: str
    allegiance: str = ""
    role: str = ""
    role2: str | None = None
    military: int = 0
    influence: int = 0
    supplies: int = 0
    piety: int = 0
    female: bool = False
    kingdom: str | None = None

    @property
    def roles(self) -> tuple[str, ...]:
        """Primary and secondary roles, primary first."""
        return tuple(r for r in (self.role, self.role2) if r)

    @property
    def has_dual_role(self) -> bool:
        return bool(self.role2)

    @property
    def is_peasant(self) -> bool:
        """Starting peasant cards never count as heroes for sets or retirement."""
        return self.allegiance == PEASANT_ALLEGIANCE or "peasant" in self.name.lower()

    @property
    def resources(self) -> ResourceBundle:
        """Raw card stats (may be negative)."""
        return ResourceBundle(
            military=self.military,
            influence=self.influence,
            supplies=self.supplies,
            piety=self.piety,
        )


@dataclass(frozen=True, slots=True)
class Title:
    """
    A title card: a scored set bought by retiring a hero.

    Attributes:
        id: Unique title id
        name: Display name
        total_cost: Resources needed to buy the title
        requirement: Free text describing the hero to retire
        set_requirement: Free text describing which owned heroes score
        points: Points by matching collection size (index clamps at the end)
        is_legendary: Legendary titles score bonus points for named legends
        named_legends: Hero names that earn the legend bonus
        legend_bonus: Points per owned legend (None means 1 per legend)
    """

    id: str
    name: str
    total_cost: ResourceBundle = field(default_factory=ResourceBundle)
    requirement: str = ""
    set_requirement: str = ""
    points: tuple[int, ...] = ()
    is_legendary: bool = False
    named_legends: tuple[str, ...] = ()
    legend_bonus: int | None = None

    @property
    def hero_requirement(self) -> str:
        """Requirement text for the retired hero, falling back to the set text."""
        return self.requirement or self.set_requirement


@dataclass(frozen=True, slots=True)
class EventCard:
    """An event card; its leading resource feeds turn order and majorities."""

    id: str
    name: str
    leading_resource: str = "military"


def make_peasants() -> list[Hero]:
    """The four peasant cards every player starts with."""
    names = {
        "military": "Military Peasant",
        "influence": "Influence Peasant",
        "supplies": "Supplies Peasant",
        "piety": "Piety Peasant",
    }
    return [
        Hero(
            id=f"peasant_{resource}",
            name=name,
            allegiance=PEASANT_ALLEGIANCE,
            role="Peasant",
            **{resource: 2},
        )
        for resource, name in names.items()
    ]
