"""Run independent simulations concurrently on one shared graph."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

from .graph import Graph
from .metrics import SimulationSummary
from .model import FirefighterModel
from .settings import SimulationSettings

logger = logging.getLogger(__name__)


def simulate_once(graph: Graph, settings: SimulationSettings, seed: int | None = None) -> SimulationSummary:
    model = FirefighterModel(graph, settings, seed=seed)
    model.simulate()
    return model.simulation_summary()


def simulate_many(
    graph: Graph,
    settings: SimulationSettings,
    seeds: Sequence[int | None],
    max_workers: int | None = None,
) -> list[SimulationSummary]:
    """Simulate once per seed and return the summaries in seed order.

    The graph is only read by the models, so all workers share it. Every
    model owns its own node data and strategy state.
    """
    if max_workers is not None and max_workers <= 1:
        return [simulate_once(graph, settings, seed) for seed in seeds]

    logger.info(f"Running {len(seeds)} simulations of {settings.strategy_name} on {settings.graph_name}")
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = [pool.submit(simulate_once, graph, settings, seed) for seed in seeds]
        return [future.result() for future in futures]
