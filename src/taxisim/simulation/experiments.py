"""
Batch experiments: run several independent simulations and aggregate them.

Every replication builds its own DispatchSimulation from a seeded copy of the
config, so runs never share taxis, requests or random state.
"""
import logging
from concurrent.futures import ProcessPoolExecutor
from typing import Dict, List, Optional

import numpy as np

from .config import SimulationConfig
from .simulation import DispatchSimulation, SimulationSummary

LOGGER = logging.getLogger(__name__)


def run_replication(config: SimulationConfig) -> SimulationSummary:
    """Run one isolated simulation to completion and return its final summary"""
    # Replications would flood the log with status lines, only report start and end
    sim = DispatchSimulation.from_config(config, log_every=None)
    return sim.run_to_completion()


def run_replications(config: SimulationConfig,
                     replications: int,
                     base_seed: int = 0,
                     max_workers: Optional[int] = None) -> List[SimulationSummary]:
    """
    Run `replications` simulations seeded `base_seed`, `base_seed + 1`, ...

    Returns the final summaries in seed order. With ``max_workers == 1`` the
    runs happen in this process, otherwise in a process pool.
    """
    if replications < 0:
        raise ValueError("replications must be non-negative")
    if max_workers is not None and max_workers < 1:
        raise ValueError("max_workers must be at least 1")

    configs = [config.with_seed(base_seed + i) for i in range(replications)]
    LOGGER.info("Running %d replications (base seed %d)", replications, base_seed)

    if max_workers == 1 or replications <= 1:
        return [run_replication(c) for c in configs]

    with ProcessPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(run_replication, configs))


def aggregate_summaries(summaries: List[SimulationSummary]) -> Dict[str, Dict[str, float]]:
    """Mean/min/max of the archive outcomes over a batch of runs"""
    if not summaries:
        return {}

    metrics = {
        'archived_requests': np.array([s.archived_requests for s in summaries]),
        'fulfilled_requests': np.array([s.fulfilled_requests for s in summaries]),
        'abandoned_requests': np.array([s.abandoned_requests for s in summaries]),
    }
    return {
        name: {
            'mean': float(values.mean()),
            'min': float(values.min()),
            'max': float(values.max()),
        }
        for name, values in metrics.items()
    }
