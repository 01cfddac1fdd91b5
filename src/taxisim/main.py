import argparse
import logging
from typing import List, Optional

from taxisim.simulation.config import LOG_EVERY, SimulationConfig
from taxisim.simulation.simulation import DispatchSimulation
from taxisim.simulation.experiments import run_replications, aggregate_summaries

LOGGER = logging.getLogger("taxisim")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    defaults = SimulationConfig.default()
    parser = argparse.ArgumentParser(description="Tick-driven taxi dispatch simulation")
    parser.add_argument("--runtime", type=int, default=defaults.runtime, help="Ticks to simulate")
    parser.add_argument("--spawn-chance", type=float, default=defaults.request_spawn_chance,
                        help="Chance to spawn one request per tick (clamped to [0, 1])")
    parser.add_argument("--max-active-requests", type=int, default=defaults.max_active_requests,
                        help="No requests spawn while this many are active")
    parser.add_argument("--taxis", type=int, default=defaults.number_of_taxis, help="Size of the taxi fleet")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the random source")
    parser.add_argument("--log-every", type=int, default=LOG_EVERY, help="Log the status line every n ticks")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--strict", action="store_true", help="Check occupancy invariants after every tick")
    parser.add_argument("--plot", action="store_true", help="Show a live plot instead of logging")
    parser.add_argument("--replications", type=int, default=0,
                        help="Run this many seeded replications and report aggregates")
    parser.add_argument("--workers", type=int, default=None, help="Worker processes for replications")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        config = SimulationConfig(
            runtime=args.runtime,
            request_spawn_chance=args.spawn_chance,
            max_active_requests=args.max_active_requests,
            number_of_taxis=args.taxis,
            seed=args.seed,
        )
    except ValueError as e:
        LOGGER.error("Invalid configuration: %s", e)
        return 2

    if args.replications < 0:
        LOGGER.error("Invalid configuration: --replications must be non-negative")
        return 2
    if args.workers is not None and args.workers < 1:
        LOGGER.error("Invalid configuration: --workers must be at least 1")
        return 2

    if args.replications > 0:
        base_seed = args.seed if args.seed is not None else 0
        summaries = run_replications(config, args.replications, base_seed=base_seed,
                                     max_workers=args.workers)
        for name, stats in aggregate_summaries(summaries).items():
            LOGGER.info("%s: mean %.2f, min %.0f, max %.0f", name, stats['mean'], stats['min'], stats['max'])
        return 0

    sim = DispatchSimulation.from_config(config, strict=args.strict, log_every=args.log_every)

    if args.plot:
        # Imported lazily so headless runs never need a display backend
        from taxisim.visualization.visualizer import DispatchVisualization
        vis = DispatchVisualization(sim)
        vis.show()
        return 0

    sim.run_to_completion()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
