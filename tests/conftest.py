import pytest
from factories import make_hero, make_title

from kingdomsim.config import Settings
from kingdomsim.models.cards import EventCard, Hero
from kingdomsim.models.game_data import GameData


@pytest.fixture
def config() -> Settings:
    """Default rules, independent of any environment overrides."""
    return Settings(_env_file=None)


@pytest.fixture
def guan_yu() -> Hero:
    return make_hero("guan_yu", name="Guan Yu", role="General", military=3, piety=1)


@pytest.fixture
def zhuge_liang() -> Hero:
    return make_hero(
        "zhuge_liang",
        name="Zhuge Liang",
        role="Advisor",
        role2="Tactician",
        influence=3,
        piety=1,
    )


@pytest.fixture
def sun_shangxiang() -> Hero:
    return make_hero(
        "sun_shangxiang",
        name="Sun Shangxiang",
        allegiance="Wu",
        role="General",
        military=2,
        supplies=1,
        female=True,
    )


@pytest.fixture
def cao_cao() -> Hero:
    return make_hero(
        "cao_cao",
        name="Cao Cao",
        allegiance="Wei",
        role="Administrator",
        role2="General",
        military=1,
        influence=2,
        supplies=1,
    )


@pytest.fixture
def game_data(guan_yu: Hero, zhuge_liang: Hero, sun_shangxiang: Hero, cao_cao: Hero) -> GameData:
    """Small hero/title/event snapshot with one legendary title."""
    return GameData(
        heroes=(guan_yu, zhuge_liang, sun_shangxiang, cao_cao),
        titles=(
            make_title("five_tigers", cost={"military": 3}, set_requirement="Shu Generals"),
            make_title(
                "sleeping_dragon",
                cost={"influence": 2},
                set_requirement="Advisors",
                named_legends=("Zhuge Liang",),
                legend_bonus=2,
            ),
        ),
        events=(
            EventCard(id="e1", name="Yellow Turban Rebellion", leading_resource="military"),
            EventCard(id="e2", name="Battle of Red Cliffs", leading_resource="supplies"),
        ),
    )
