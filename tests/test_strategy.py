"""Unit tests for the containment strategies."""

import pytest

from firefighter.model import FirefighterModel
from firefighter.node_data import NodeDataStore
from firefighter.strategy import (
    STRATEGIES,
    GreedyStrategy,
    MinDistanceGroupStrategy,
    PriorityStrategy,
    Strategy,
    build_strategy,
)


def burning_roots(*roots):
    node_data = NodeDataStore()
    node_data.mark_burning(list(roots), 0)
    return node_data


class TestBuildStrategy:
    """Test cases for strategy selection."""

    @pytest.mark.parametrize(
        "name, cls",
        [
            ("greedy", GreedyStrategy),
            ("min_distance_group", MinDistanceGroupStrategy),
            ("priority", PriorityStrategy),
        ],
    )
    def test_known_names(self, path_graph, name, cls):
        strategy = build_strategy(name, path_graph)
        assert isinstance(strategy, cls)
        assert strategy.graph is path_graph

    def test_registry(self):
        assert set(STRATEGIES) == {"greedy", "min_distance_group", "priority"}

    def test_unknown_name(self, path_graph):
        with pytest.raises(ValueError, match="Unknown strategy"):
            build_strategy("random", path_graph)

    def test_base_class_is_abstract(self, path_graph):
        with pytest.raises(TypeError):
            Strategy(path_graph)


class TestGreedyStrategy:
    """Test cases for the greedy frontier strategy."""

    @pytest.fixture
    def fan_graph(self, make_graph):
        # root 0 with frontier 1 (protects 3), 2 (protects 2), 3 (protects 4)
        return make_graph(10, [
            (0, 1, 1), (0, 2, 1), (0, 3, 5),
            (1, 4, 1), (1, 5, 1),
            (2, 6, 1),
            (3, 7, 1), (3, 8, 1), (3, 9, 1),
        ])

    def test_most_protected_first(self, fan_graph, settings_factory):
        node_data = burning_roots(0)
        chosen = GreedyStrategy(fan_graph).execute(settings_factory(num_ffs=1), node_data, 1)
        assert chosen == [3]
        assert node_data.is_defended_by(3, 1)

    def test_takes_top_num_ffs(self, fan_graph, settings_factory):
        node_data = burning_roots(0)
        chosen = GreedyStrategy(fan_graph).execute(settings_factory(num_ffs=2), node_data, 1)
        assert chosen == [3, 1]
        assert node_data.defended_at(1) == [1, 3]

    def test_budget_larger_than_frontier(self, fan_graph, settings_factory):
        node_data = burning_roots(0)
        chosen = GreedyStrategy(fan_graph).execute(settings_factory(num_ffs=10), node_data, 1)
        assert chosen == [3, 1, 2]

    def test_tie_broken_by_arrival(self, make_graph, settings_factory):
        graph = make_graph(5, [(0, 1, 3), (0, 2, 1), (1, 3, 1), (2, 4, 1)])
        chosen = GreedyStrategy(graph).execute(settings_factory(num_ffs=1), burning_roots(0), 1)
        assert chosen == [2]

    def test_tie_broken_by_node_id(self, make_graph, settings_factory):
        graph = make_graph(5, [(0, 2, 1), (0, 1, 1), (1, 3, 1), (2, 4, 1)])
        chosen = GreedyStrategy(graph).execute(settings_factory(num_ffs=1), burning_roots(0), 1)
        assert chosen == [1]

    def test_zero_weight_arrival_is_one_tick(self, make_graph, settings_factory):
        graph = make_graph(5, [(0, 2, 0), (0, 1, 1), (1, 3, 1), (2, 4, 1)])
        chosen = GreedyStrategy(graph).execute(settings_factory(num_ffs=1), burning_roots(0), 1)
        assert chosen == [1]

    def test_nodes_burning_this_tick_extend_frontier(self, make_graph, settings_factory):
        graph = make_graph(3, [(0, 1, 1), (1, 2, 1)])
        node_data = burning_roots(0)
        node_data.mark_burning([1], 1)
        chosen = GreedyStrategy(graph).execute(settings_factory(num_ffs=1), node_data, 1)
        assert chosen == [2]

    def test_only_undefended_children_count(self, make_graph, settings_factory):
        graph = make_graph(6, [(0, 1, 1), (0, 2, 1), (1, 3, 1), (1, 4, 1), (2, 5, 1)])
        node_data = burning_roots(0)
        node_data.mark_defended([3, 4], 0)
        chosen = GreedyStrategy(graph).execute(settings_factory(num_ffs=1), node_data, 1)
        assert chosen == [2]

    def test_no_frontier_is_noop(self, path_graph, settings_factory):
        node_data = burning_roots(0)
        node_data.mark_defended([1], 0)
        chosen = GreedyStrategy(path_graph).execute(settings_factory(num_ffs=3), node_data, 1)
        assert chosen == []
        assert node_data.num_defended == 1


class TestMinDistanceGroupStrategy:
    """Test cases for the distance group strategy."""

    @pytest.fixture
    def strategy(self, make_graph, settings_factory):
        graph = make_graph(7, [(0, 1, 1), (0, 2, 1), (1, 3, 1), (2, 4, 1), (2, 5, 1)])
        strategy = MinDistanceGroupStrategy(graph)
        strategy.precompute([0], settings_factory())
        return strategy

    def test_groups(self, strategy):
        # node 6 is unreachable and never scheduled
        assert strategy.groups == [[1, 2], [3, 4, 5]]

    def test_one_group_per_round(self, strategy, settings_factory):
        node_data = burning_roots(0)
        settings = settings_factory(num_ffs=3)
        assert strategy.execute(settings, node_data, 1) == [1, 2]
        assert strategy.execute(settings, node_data, 2) == [3, 4, 5]
        assert strategy.execute(settings, node_data, 3) == []
        assert node_data.num_defended == 5

    def test_budget_splits_group(self, strategy, settings_factory):
        node_data = burning_roots(0)
        settings = settings_factory(num_ffs=2)
        assert strategy.execute(settings, node_data, 1) == [1, 2]
        assert strategy.execute(settings, node_data, 2) == [3, 4]
        assert strategy.execute(settings, node_data, 3) == [5]

    def test_skips_burning_nodes(self, strategy, settings_factory):
        node_data = burning_roots(0)
        node_data.mark_burning([1, 2], 1)
        assert strategy.execute(settings_factory(num_ffs=1), node_data, 2) == [3]

    def test_without_precompute(self, path_graph, settings_factory):
        strategy = MinDistanceGroupStrategy(path_graph)
        assert strategy.execute(settings_factory(), burning_roots(0), 1) == []


class TestPriorityStrategy:
    """Test cases for the urgency queue strategy."""

    @pytest.fixture
    def graph(self, make_graph):
        return make_graph(4, [(0, 1, 5), (0, 2, 1), (2, 3, 1)])

    def test_most_urgent_first(self, graph, settings_factory):
        strategy = PriorityStrategy(graph)
        settings = settings_factory(num_ffs=1)
        strategy.precompute([0], settings)
        node_data = burning_roots(0)

        assert strategy.execute(settings, node_data, 1) == [2]
        assert strategy.execute(settings, node_data, 2) == [3]
        assert strategy.execute(settings, node_data, 3) == [1]
        assert strategy.execute(settings, node_data, 4) == []

    def test_skips_nodes_already_reached(self, graph, settings_factory):
        strategy = PriorityStrategy(graph)
        settings = settings_factory(num_ffs=1)
        strategy.precompute([0], settings)

        assert strategy.execute(settings, burning_roots(0), 3) == [1]
        assert len(strategy) == 0

    def test_higher_degree_first(self, make_graph, settings_factory):
        graph = make_graph(5, [(0, 1, 1), (0, 2, 1), (2, 3, 1), (2, 4, 1)])
        strategy = PriorityStrategy(graph)
        settings = settings_factory(num_ffs=1)
        strategy.precompute([0], settings)
        assert strategy.execute(settings, burning_roots(0), 1) == [2]

    def test_skips_burning_nodes(self, graph, settings_factory):
        strategy = PriorityStrategy(graph)
        settings = settings_factory(num_ffs=2)
        strategy.precompute([0], settings)
        node_data = burning_roots(0)
        node_data.mark_burning([2], 1)
        assert strategy.execute(settings, node_data, 2) == [3, 1]

    def test_zero_weight_edge_takes_a_tick(self, make_graph, settings_factory):
        graph = make_graph(3, [(0, 1, 0), (1, 2, 1)])
        strategy = PriorityStrategy(graph)
        settings = settings_factory(num_ffs=1)
        strategy.precompute([0], settings)

        assert strategy.execute(settings, burning_roots(0), 1) == [1]
        assert len(strategy) == 1


@pytest.mark.parametrize("strategy_name", sorted(STRATEGIES))
@pytest.mark.parametrize("seed", [1, 2, 3])
def test_strategy_contract(toy_graph, settings_factory, strategy_name, seed):
    """Every strategy stays within budget and never defends burning nodes."""
    settings = settings_factory(strategy_name=strategy_name, num_ffs=2, strategy_every=2)
    model = FirefighterModel(toy_graph, settings, seed=seed)
    node_data = model.node_data

    while model.is_active:
        model.step()
        t = model.global_time
        defended_now = node_data.defended_at(t)
        assert len(defended_now) <= settings.num_ffs
        if t % settings.strategy_every != 0:
            assert defended_now == []
        assert not set(node_data.burning) & set(node_data.defended)
