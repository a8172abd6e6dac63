import pytest
from factories import make_hero, make_title

from kingdomsim.analysis.strategy import (
    StrategyEngine,
    emergency_grant,
    enumerate_battlefield_subsets,
)
from kingdomsim.config import Settings
from kingdomsim.models.decision import PurchaseAction
from kingdomsim.models.failure import BattlefieldLimitError
from kingdomsim.models.game_data import GameData
from kingdomsim.models.market import Market
from kingdomsim.models.player import OwnedTitle, Player
from kingdomsim.models.resources import ZERO, ResourceBundle


@pytest.fixture
def empty_data() -> GameData:
    return GameData(heroes=(), titles=(), events=())


@pytest.fixture
def engine(empty_data: GameData, config: Settings) -> StrategyEngine:
    return StrategyEngine(empty_data, config)


@pytest.fixture
def hero_market_player() -> Player:
    """One 2-military General deployed in Shu, empty hand."""
    return Player(
        id="p1",
        battlefield={
            "wei": [],
            "wu": [],
            "shu": [make_hero("zhang_fei", name="Zhang Fei", military=2)],
        },
    )


@pytest.fixture
def advisor_market() -> Market:
    """A hero scoring exactly 0.85 for hero_market_player, and an unaffordable title."""
    pang_tong = make_hero(
        "pang_tong", name="Pang Tong", role="Advisor", military=2, influence=-1
    )
    phoenix = make_title(
        "phoenix_court", cost={"piety": 3}, requirement="Advisor", points=(0, 2)
    )
    return Market(heroes=[pang_tong], titles=[phoenix])


@pytest.fixture
def weak_title_player() -> Player:
    """Can afford a title that scores 2.5: 1 point, cost 1, retiring a 5-cost General."""
    return Player(
        id="p1",
        hand=[make_hero("xu_huang", name="Xu Huang", military=5)],
        battlefield={
            "wei": [make_hero("man_chong", role="Administrator", military=1)],
            "wu": [],
            "shu": [],
        },
    )


@pytest.fixture
def weak_title_market() -> Market:
    title = make_title(
        "minor_post",
        cost={"military": 1},
        requirement="General",
        set_requirement="Generals",
        points=(1,),
    )
    return Market(heroes=[], titles=[title])


@pytest.fixture
def emergency_player() -> Player:
    """Battlefield has 2 military; a 3 military + 1 piety title needs an emergency grant."""
    return Player(
        id="p1",
        hand=[make_hero("zhao_yun", name="Zhao Yun", military=2)],
        battlefield={
            "wei": [],
            "wu": [],
            "shu": [make_hero("huang_zhong", role="Tactician", military=2)],
        },
    )


@pytest.fixture
def emergency_market() -> Market:
    title = make_title(
        "grand_marshal",
        cost={"military": 3, "piety": 1},
        requirement="General",
        set_requirement="Generals",
        points=(6,),
    )
    return Market(heroes=[], titles=[title])


class TestEnumerateSubsets:
    def test_power_set_minus_empty(self) -> None:
        heroes = [make_hero("a"), make_hero("b"), make_hero("c")]

        subsets = list(enumerate_battlefield_subsets(heroes))

        assert len(subsets) == 7
        assert subsets[:3] == [(heroes[0],), (heroes[1],), (heroes[2],)]
        assert subsets[-1] == tuple(heroes)

    def test_empty_battlefield(self) -> None:
        assert list(enumerate_battlefield_subsets([])) == []

    def test_nine_heroes_is_the_limit(self) -> None:
        heroes = [make_hero(f"h{i}") for i in range(9)]

        assert sum(1 for _ in enumerate_battlefield_subsets(heroes)) == 511

    def test_oversized_battlefield_raises(self) -> None:
        heroes = [make_hero(f"h{i}") for i in range(10)]

        with pytest.raises(BattlefieldLimitError) as exc_info:
            list(enumerate_battlefield_subsets(heroes))

        assert exc_info.value.size == 10
        assert exc_info.value.limit == 9


class TestEmergencyGrant:
    def test_two_single_gaps(self) -> None:
        missing = ResourceBundle(military=1, piety=1)

        assert emergency_grant(missing) == missing

    def test_one_gap(self) -> None:
        assert emergency_grant(ResourceBundle(supplies=1)) == ResourceBundle(supplies=1)

    @pytest.mark.parametrize(
        "missing",
        [
            ResourceBundle(military=2),
            ResourceBundle(military=1, influence=1, supplies=1),
            ZERO,
        ],
    )
    def test_gaps_it_cannot_close(self, missing: ResourceBundle) -> None:
        assert emergency_grant(missing) is None


class TestTitleOpportunities:
    def test_prefers_subset_with_column_bonus(self, engine: StrategyEngine) -> None:
        player = Player(
            id="p1",
            hand=[make_hero("guard", military=0)],
            battlefield={
                "wei": [make_hero("cao_ren", military=2), make_hero("cao_hong", military=0)],
                "wu": [],
                "shu": [],
            },
        )
        title = make_title("post", cost={"military": 2}, requirement="General", points=(2,))

        [opportunity] = engine.evaluate_title_opportunities(player, [title])

        assert len(opportunity.heroes) == 2
        assert opportunity.retirement_hero.id == "guard"
        assert opportunity.column_bonuses == ResourceBundle(influence=1)
        assert opportunity.adjusted_efficiency == pytest.approx(2.0)
        # 2*2 + 2.0*3 - 0.5*0
        assert opportunity.score == pytest.approx(10.0)

    def test_equal_scores_keep_first_subset(self, engine: StrategyEngine) -> None:
        cao_ren = make_hero("cao_ren", military=1)
        lu_meng = make_hero("lu_meng", military=1)
        player = Player(
            id="p1",
            hand=[make_hero("guard")],
            battlefield={"wei": [cao_ren], "wu": [lu_meng], "shu": []},
        )
        title = make_title("post", cost={"military": 1}, requirement="General", points=(1,))

        [opportunity] = engine.evaluate_title_opportunities(player, [title])

        assert [h.id for h in opportunity.heroes] == ["cao_ren"]

    def test_owned_titles_skipped(self, engine: StrategyEngine) -> None:
        title = make_title("post", cost={}, requirement="General", points=(1,))
        player = Player(
            id="p1",
            hand=[make_hero("guard")],
            battlefield={"wei": [make_hero("cao_ren")], "wu": [], "shu": []},
            titles=[OwnedTitle(title=title, retired_hero=make_hero("old"))],
        )

        assert engine.evaluate_title_opportunities(player, [title]) == []

    def test_legendary_title_bonus(self, engine: StrategyEngine) -> None:
        player = Player(
            id="p1",
            hand=[make_hero("guard")],
            battlefield={"wei": [make_hero("cao_ren", military=1)], "wu": [], "shu": []},
        )
        plain = make_title("plain", cost={"military": 1}, requirement="General", points=(1,))
        legendary = make_title(
            "legendary",
            cost={"military": 1},
            requirement="General",
            points=(1,),
            named_legends=("Nobody Owned",),
        )

        opportunities = engine.evaluate_title_opportunities(player, [plain, legendary])

        assert [o.title.id for o in opportunities] == ["legendary", "plain"]
        assert opportunities[0].score - opportunities[1].score == pytest.approx(2.0)

    def test_sorted_best_first(
        self, engine: StrategyEngine, emergency_player: Player
    ) -> None:
        cheap = make_title("cheap", cost={"military": 1}, requirement="General", points=(1,))
        rich = make_title("rich", cost={"military": 2}, requirement="General", points=(4,))

        opportunities = engine.evaluate_title_opportunities(emergency_player, [cheap, rich])

        assert [o.title.id for o in opportunities] == ["rich", "cheap"]


class TestHeroOpportunities:
    def test_scores_value_over_cost(
        self,
        engine: StrategyEngine,
        hero_market_player: Player,
        advisor_market: Market,
    ) -> None:
        [opportunity] = engine.evaluate_hero_opportunities(
            hero_market_player, advisor_market.heroes, advisor_market.titles
        )

        assert opportunity.cost == 2
        # 0.5 * 3 (unlocks the Advisor title) + 0.2 * 1 (net stats)
        assert opportunity.value == pytest.approx(1.7)
        assert opportunity.score == pytest.approx(0.85)

    def test_no_unlock_value_when_already_met(
        self, engine: StrategyEngine, hero_market_player: Player, advisor_market: Market
    ) -> None:
        hero_market_player.hand.append(make_hero("xu_shu", role="Advisor"))

        [opportunity] = engine.evaluate_hero_opportunities(
            hero_market_player, advisor_market.heroes, advisor_market.titles
        )

        assert opportunity.value == pytest.approx(0.2)

    def test_named_requirement_unlocks(
        self, engine: StrategyEngine, hero_market_player: Player
    ) -> None:
        liu_bei = make_hero("liu_bei", name="Liu Bei", military=2)
        peach_garden = make_title("peach_garden", cost={"piety": 4}, requirement="Liu Bei")

        [opportunity] = engine.evaluate_hero_opportunities(
            hero_market_player, [liu_bei], [peach_garden]
        )

        # 0.5 * 4 (only Liu Bei can be retired for it) + 0.2 * 2
        assert opportunity.value == pytest.approx(2.4)

    def test_named_requirement_already_met(
        self, engine: StrategyEngine, hero_market_player: Player
    ) -> None:
        liu_bei = make_hero("liu_bei", name="Liu Bei", military=2)
        oath = make_title("oath", cost={"piety": 4}, requirement="Liu Bei or Zhang Fei")

        [opportunity] = engine.evaluate_hero_opportunities(hero_market_player, [liu_bei], [oath])

        assert opportunity.value == pytest.approx(0.4)

    def test_legendary_hero_bonus(
        self, hero_market_player: Player, advisor_market: Market, config: Settings
    ) -> None:
        legend_title = make_title("hermits", named_legends=("Pang Tong",))
        data = GameData(heroes=(), titles=(legend_title,), events=())
        engine = StrategyEngine(data, config)

        [opportunity] = engine.evaluate_hero_opportunities(
            hero_market_player, advisor_market.heroes, advisor_market.titles
        )

        assert opportunity.value == pytest.approx(4.7)

    def test_unaffordable_hero_skipped(
        self, engine: StrategyEngine, hero_market_player: Player
    ) -> None:
        lu_bu = make_hero("lu_bu", military=6)

        assert engine.evaluate_hero_opportunities(hero_market_player, [lu_bu], []) == []


class TestDecisionPolicy:
    def test_early_turn_buys_good_hero(
        self, engine: StrategyEngine, hero_market_player: Player, advisor_market: Market
    ) -> None:
        decision = engine.decide(hero_market_player, advisor_market, turn=1)

        assert decision.action == PurchaseAction.HERO
        assert decision.target is not None
        assert decision.target.id == "pang_tong"
        assert decision.score == pytest.approx(0.85)
        assert not decision.use_emergency

    def test_late_turn_weak_title_passes(
        self,
        engine: StrategyEngine,
        weak_title_player: Player,
        weak_title_market: Market,
        config: Settings,
    ) -> None:
        weak_title_player.emergency_used = config.max_emergency_uses
        [opportunity] = engine.evaluate_title_opportunities(
            weak_title_player, weak_title_market.titles
        )
        assert opportunity.score == pytest.approx(2.5)

        decision = engine.decide(weak_title_player, weak_title_market, turn=8)

        assert decision.action == PurchaseAction.PASS

    def test_mid_game_takes_only_title(
        self, engine: StrategyEngine, weak_title_player: Player, weak_title_market: Market
    ) -> None:
        decision = engine.decide(weak_title_player, weak_title_market, turn=5)

        assert decision.action == PurchaseAction.TITLE
        assert decision.retirement_hero is not None
        assert decision.retirement_hero.name == "Xu Huang"

    def test_late_turn_strong_title(
        self, engine: StrategyEngine, emergency_player: Player
    ) -> None:
        title = make_title("rich", cost={"military": 2}, requirement="General", points=(4,))

        decision = engine.decide(emergency_player, Market(titles=[title]), turn=8)

        assert decision.action == PurchaseAction.TITLE
        assert decision.target == title

    def test_mid_game_weights_heroes(
        self,
        engine: StrategyEngine,
        hero_market_player: Player,
        advisor_market: Market,
    ) -> None:
        """Title scoring 2.5 loses to a 0.85 hero weighted to 4.25."""
        hero_market_player.hand.append(make_hero("xu_huang", name="Xu Huang", military=5))
        advisor_market.titles.append(
            make_title("minor_post", cost={"military": 1}, requirement="General", points=(1,))
        )

        decision = engine.decide(hero_market_player, advisor_market, turn=5)

        assert decision.action == PurchaseAction.HERO

    @pytest.mark.parametrize("turn", [0, 9])
    def test_turn_out_of_range(
        self, engine: StrategyEngine, hero_market_player: Player, turn: int
    ) -> None:
        with pytest.raises(ValueError):
            engine.decide(hero_market_player, Market(), turn=turn)

    def test_nothing_affordable_passes(
        self, engine: StrategyEngine, hero_market_player: Player
    ) -> None:
        decision = engine.decide(hero_market_player, Market(), turn=4)

        assert decision.action == PurchaseAction.PASS
        assert decision.target is None


class TestEmergencyPolicy:
    def test_simulate_mode_buys_with_grant(
        self, empty_data: GameData, emergency_player: Player, emergency_market: Market
    ) -> None:
        engine = StrategyEngine(empty_data, Settings(_env_file=None, emergency_mode="simulate"))

        decision = engine.decide(emergency_player, emergency_market, turn=7)

        assert decision.action == PurchaseAction.TITLE
        assert decision.use_emergency
        assert decision.emergency_bonus == ResourceBundle(military=1, piety=1)
        assert decision.score > 5

    def test_threshold_only_mode_does_not_add_resources(
        self, empty_data: GameData, emergency_player: Player, emergency_market: Market
    ) -> None:
        engine = StrategyEngine(
            empty_data, Settings(_env_file=None, emergency_mode="threshold_only")
        )

        decision = engine.decide(emergency_player, emergency_market, turn=7)

        assert decision.action == PurchaseAction.PASS

    def test_not_before_emergency_turn(
        self, engine: StrategyEngine, emergency_player: Player, emergency_market: Market
    ) -> None:
        decision = engine.decide(emergency_player, emergency_market, turn=5)

        assert decision.action == PurchaseAction.PASS

    def test_not_past_max_uses(
        self,
        engine: StrategyEngine,
        emergency_player: Player,
        emergency_market: Market,
        config: Settings,
    ) -> None:
        emergency_player.emergency_used = config.max_emergency_uses

        decision = engine.decide(emergency_player, emergency_market, turn=8)

        assert decision.action == PurchaseAction.PASS

    @pytest.mark.parametrize(
        ("used", "turn", "expected"),
        [(0, 6, True), (2, 8, True), (3, 8, False), (0, 5, False)],
    )
    def test_can_use_emergency(
        self, engine: StrategyEngine, used: int, turn: int, expected: bool
    ) -> None:
        player = Player(id="p1", emergency_used=used)

        assert engine.can_use_emergency(player, turn) is expected
