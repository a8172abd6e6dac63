"""Card builders shared by the test modules."""

from kingdomsim.models.cards import Hero, Title
from kingdomsim.models.resources import ResourceBundle


def make_hero(
    hero_id: str,
    name: str | None = None,
    allegiance: str = "Shu",
    role: str = "General",
    role2: str | None = None,
    military: int = 0,
    influence: int = 0,
    supplies: int = 0,
    piety: int = 0,
    female: bool = False,
) -> Hero:
    return Hero(
        id=hero_id,
        name=name or hero_id.replace("_", " ").title(),
        allegiance=allegiance,
        role=role,
        role2=role2,
        military=military,
        influence=influence,
        supplies=supplies,
        piety=piety,
        female=female,
    )


def make_title(
    title_id: str,
    cost: dict[str, int] | None = None,
    requirement: str = "",
    set_requirement: str = "",
    points: tuple[int, ...] = (0, 1, 3, 6),
    named_legends: tuple[str, ...] = (),
    legend_bonus: int | None = None,
) -> Title:
    return Title(
        id=title_id,
        name=title_id.replace("_", " ").title(),
        total_cost=ResourceBundle.from_mapping(cost),
        requirement=requirement,
        set_requirement=set_requirement,
        points=points,
        is_legendary=bool(named_legends),
        named_legends=named_legends,
        legend_bonus=legend_bonus,
    )
