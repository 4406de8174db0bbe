"""Settings of a firefighter simulation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any, Mapping

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationSettings:
    """Parameters of one simulation run.

    Args:
        graph_name: Name of the graph to simulate on.
        strategy_name: Name of the containment strategy (see `STRATEGIES`).
        num_roots: Number of fire roots ignited at time 0.
        num_ffs: Number of firefighters (nodes defended per decision round).
        strategy_every: The strategy runs every `strategy_every` ticks.
    """

    graph_name: str
    strategy_name: str
    num_roots: int
    num_ffs: int
    strategy_every: int

    def __post_init__(self):
        for name in ("graph_name", "strategy_name"):
            if not getattr(self, name):
                logger.error(f"Setting {name} must not be empty")
                raise ValueError(f"{name} must not be empty")
        for name in ("num_roots", "num_ffs", "strategy_every"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                logger.error(f"Setting {name} must be a positive integer, got {value!r}")
                raise ValueError(f"{name} must be a positive integer, got {value!r}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SimulationSettings:
        """Create settings from a mapping, ignoring unknown keys."""
        names = [f.name for f in fields(cls)]
        missing = [name for name in names if name not in data]
        if missing:
            raise ValueError(f"Missing simulation settings: {', '.join(missing)}")
        return cls(**{name: data[name] for name in names})
