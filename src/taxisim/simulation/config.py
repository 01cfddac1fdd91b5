import math
import operator
from typing import Optional

# Simulation parameters
RUNTIME = 10000  # Number of ticks the world updates for
REQUEST_SPAWN_CHANCE = 0.1  # Chance to spawn one request per tick
MAX_ACTIVE_REQUESTS = 200  # No new requests spawn once this many are active
NUMBER_OF_TAXIS = 5  # Size of the taxi fleet, fixed for the whole run
MAX_WAITING_TIME = 100  # Ticks a request waits for a taxi before it is abandoned
FULFILLMENT_TIME = 100  # Ticks a taxi needs to fulfil a request
LOG_EVERY = 1  # Log the status line every n ticks while running


def _as_int(name, value) -> int:
    """Accept any integral value (numpy integers included) but not bools"""
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer")
    try:
        return operator.index(value)
    except TypeError:
        raise ValueError(f"{name} must be an integer") from None


class SimulationConfig:
    """Validated parameters of a single simulation run.

    Args:
        runtime: Number of ticks to run for. Zero or negative runtimes are legal.
        request_spawn_chance: Per-tick chance of a new request, clamped into [0, 1].
        max_active_requests: Capacity ceiling of active requests. Zero or
            negative disables arrivals.
        number_of_taxis: Size of the fleet, must be a non-negative integer.
        seed: Optional seed for the default random source.
    """

    def __init__(self,
                 runtime: int = RUNTIME,
                 request_spawn_chance: float = REQUEST_SPAWN_CHANCE,
                 max_active_requests: int = MAX_ACTIVE_REQUESTS,
                 number_of_taxis: int = NUMBER_OF_TAXIS,
                 seed: Optional[int] = None):
        number_of_taxis = _as_int("number_of_taxis", number_of_taxis)
        if number_of_taxis < 0:
            raise ValueError("number_of_taxis must be non-negative")
        runtime = _as_int("runtime", runtime)
        max_active_requests = _as_int("max_active_requests", max_active_requests)
        request_spawn_chance = float(request_spawn_chance)
        if math.isnan(request_spawn_chance):
            raise ValueError("request_spawn_chance must be a number")

        self.runtime = runtime
        self.request_spawn_chance = max(0.0, min(1.0, request_spawn_chance))
        self.max_active_requests = max_active_requests
        self.number_of_taxis = number_of_taxis
        self.seed = seed

    @classmethod
    def default(cls) -> "SimulationConfig":
        return cls()

    def with_seed(self, seed: Optional[int]) -> "SimulationConfig":
        """Copy of this config drawing from a different seed"""
        return SimulationConfig(
            runtime=self.runtime,
            request_spawn_chance=self.request_spawn_chance,
            max_active_requests=self.max_active_requests,
            number_of_taxis=self.number_of_taxis,
            seed=seed,
        )

    def __repr__(self):
        return (f"SimulationConfig(runtime={self.runtime}, "
                f"request_spawn_chance={self.request_spawn_chance}, "
                f"max_active_requests={self.max_active_requests}, "
                f"number_of_taxis={self.number_of_taxis}, seed={self.seed})")
