"""Firefighter problem model: weighted fire spread with periodic containment."""

import logging
from typing import Sequence

import numpy as np
from mesa import Model

from .graph import Graph
from .metrics import SimulationSummary, StepMetadata, simulation_summary, step_metadata, time_of_arrival
from .node_data import NodeDataStore
from .settings import SimulationSettings
from .strategy import Strategy, build_strategy

logger = logging.getLogger(__name__)


class FirefighterModel(Model):
    """A firefighter problem instance on a shared road graph."""

    def __init__(
        self,
        graph: Graph,
        settings: SimulationSettings,
        strategy: Strategy | None = None,
        seed: int | None = None,
        roots: Sequence[int] | None = None,
    ):
        """
        Ignite the fire roots and prepare the containment strategy.

        Args:
            graph: Graph to simulate on. It is only read, so one graph can be
                shared by many models.
            settings: Simulation settings.
            strategy: Containment strategy. Built from
                `settings.strategy_name` when omitted.
            seed: Seed of the random number generator used to pick the roots.
            roots: Explicit fire roots, replacing the random choice. Must hold
                `settings.num_roots` distinct node ids.
        """
        super().__init__(seed=seed)

        num_nodes = graph.num_nodes
        if settings.num_roots > num_nodes:
            logger.error(f"Requested {settings.num_roots} fire roots on a graph with {num_nodes} nodes")
            raise ValueError(f"Number of fire roots must not be greater than {num_nodes}")

        self.graph = graph
        self.settings = settings
        self.strategy = strategy if strategy is not None else build_strategy(settings.strategy_name, graph)
        self.node_data = NodeDataStore()
        self.global_time = 0

        if roots is None:
            self.roots = self._gen_fire_roots()
        else:
            self.roots = self._set_fire_roots(roots)
        self.strategy.precompute(self.roots, settings)
        self.running = self._has_frontier()

    @property
    def is_active(self) -> bool:
        """False once the fire can not spread any further."""
        return self.running

    def _gen_fire_roots(self) -> list[int]:
        """Ignite `num_roots` distinct random undefended nodes at time 0."""
        candidates = [v for v in range(self.graph.num_nodes) if self.node_data.is_undefended(v)]
        roots = self.random.sample(candidates, self.settings.num_roots)
        logger.debug(f"Setting nodes {roots} as fire roots")
        self.node_data.mark_burning(roots, self.global_time)
        return roots

    def _set_fire_roots(self, roots: Sequence[int]) -> list[int]:
        roots = list(roots)
        if len(set(roots)) != len(roots) or len(roots) != self.settings.num_roots:
            raise ValueError(f"Expected {self.settings.num_roots} distinct fire roots, got {roots}")
        if not all(0 <= v < self.graph.num_nodes for v in roots):
            raise ValueError(f"Fire roots {roots} are not all nodes of the graph")
        logger.debug(f"Setting nodes {roots} as fire roots")
        self.node_data.mark_burning(roots, self.global_time)
        return roots

    def contain_fire(self) -> list[int]:
        """Run the containment strategy if this is a decision tick."""
        if self.global_time % self.settings.strategy_every != 0:
            return []
        return self.strategy.execute(self.settings, self.node_data, self.global_time)

    def spread_fire(self) -> list[int]:
        """Burn every undefended neighbour the fire has reached by now.

        The fire crosses edge ``(b, v, w)`` once the global time is at least
        the time `b` caught fire plus `w`. Defended nodes never burn.
        """
        to_burn: dict[int, None] = {}
        for record in self.node_data.burning.values():
            for edge in self.graph.out_edges(record.node_id):
                if (
                    edge.tgt not in to_burn
                    and self.node_data.is_undefended(edge.tgt)
                    and self.global_time >= record.time + edge.dist
                ):
                    to_burn[edge.tgt] = None

        burned = sorted(to_burn)
        if burned:
            logger.debug(f"Burning nodes {burned} at time {self.global_time}")
        self.node_data.mark_burning(burned, self.global_time)
        return burned

    def _has_frontier(self) -> bool:
        """Is there a burning node with an undefended out-neighbour?"""
        return any(
            self.node_data.is_undefended(edge.tgt)
            for record in self.node_data.burning.values()
            for edge in self.graph.out_edges(record.node_id)
        )

    def step(self):
        """
        Execute one time step.

        Containment decisions of a tick are applied before the fire spreads in
        the same tick, so a node defended at time T is safe from fire arriving
        at time T.
        """
        self.global_time += 1
        self.contain_fire()
        self.spread_fire()
        self.running = self._has_frontier()

    def exec_step(self):
        self.step()

    def simulate(self) -> int:
        """Step until the fire stops spreading and return the end time."""
        while self.running:
            self.step()
        logger.debug(
            f"Simulation finished at time {self.global_time}: "
            f"{self.node_data.num_burning} burned, {self.node_data.num_defended} defended"
        )
        return self.global_time

    def simulation_summary(self) -> SimulationSummary:
        return simulation_summary(self.graph, self.node_data, self.global_time)

    def step_metadata(self, time: int) -> StepMetadata:
        return step_metadata(self.node_data, time)

    def time_of_arrival(self) -> np.ndarray:
        return time_of_arrival(self.node_data, self.graph.num_nodes)
