#!/usr/bin/env python3
"""Headless runner for firefighter simulations.

Edit the CONFIG block to tweak parameters. Every run logs its summary; the
`max_steps` budget stops runs that take too long between two ticks.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Dict

# Ensure src/ is on path when running from repo root
REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = REPO_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from firefighter import FirefighterModel, Graph, SimulationSettings

logger = logging.getLogger("run_simulation")


# ---- User-configurable parameters ----
CONFIG: Dict[str, Any] = {
    # Graph files are looked up as <data_dir>/<graph_name>.fmi
    "data_dir": REPO_ROOT / "data",

    "settings": {
        "graph_name": "toy",
        "strategy_name": "greedy",
        "num_roots": 1,
        "num_ffs": 1,
        "strategy_every": 2,
    },

    # Run control
    "seed": 42,
    "runs": 3,
    "max_steps": 10_000,
    "log_level": logging.INFO,
}


def graph_path(cfg: Dict[str, Any], graph_name: str) -> Path:
    return Path(cfg["data_dir"]) / f"{graph_name}.fmi"


def available_graphs(cfg: Dict[str, Any]) -> list[str]:
    return sorted(p.stem for p in Path(cfg["data_dir"]).glob("*.fmi"))


def run_once(graph: Graph, settings: SimulationSettings, seed: int, max_steps: int) -> FirefighterModel:
    model = FirefighterModel(graph, settings, seed=seed)
    for _ in range(max_steps):
        if not model.is_active:
            break
        model.step()
    else:
        if model.is_active:
            logger.warning(f"Run with seed {seed} stopped after {max_steps} steps")
    return model


def main() -> None:
    cfg = CONFIG
    logging.basicConfig(
        level=cfg["log_level"],
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    settings = SimulationSettings.from_dict(cfg["settings"])
    path = graph_path(cfg, settings.graph_name)
    if not path.exists():
        logger.error(f"Graph {settings.graph_name!r} not found, available: {available_graphs(cfg)}")
        sys.exit(1)

    graph = Graph.from_file(path)

    for i in range(cfg["runs"]):
        seed = cfg["seed"] + i
        model = run_once(graph, settings, seed, cfg["max_steps"])
        summary = model.simulation_summary()
        logger.info(
            f"Run {i + 1}/{cfg['runs']} (seed {seed}): roots {model.roots}, "
            f"{summary.nodes_burned}/{summary.nodes_total} burned, "
            f"{summary.nodes_defended} defended, end time {summary.end_time}"
        )


if __name__ == "__main__":
    main()
