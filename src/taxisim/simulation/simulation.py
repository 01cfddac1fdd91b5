import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from taxisim.models.request import Request
from taxisim.models.taxi import Taxi
from .config import (
    RUNTIME,
    REQUEST_SPAWN_CHANCE,
    MAX_ACTIVE_REQUESTS,
    NUMBER_OF_TAXIS,
    LOG_EVERY,
    SimulationConfig,
)

LOGGER = logging.getLogger(__name__)


class SimulationInvariantError(AssertionError):
    """Raised when the taxi occupancy no longer matches the request assignments."""


@dataclass(frozen=True)
class SimulationSummary:
    age: int
    runtime: int
    occupied_taxis: int
    total_taxis: int
    assigned_requests: int
    waiting_requests: int
    archived_requests: int
    fulfilled_requests: int = 0
    abandoned_requests: int = 0

    def __str__(self):
        return (f"Age: {self.age}/{self.runtime}, "
                f"Taxis: {self.occupied_taxis} Occ/{self.total_taxis} Tot, "
                f"Requests: {self.assigned_requests} Asnd/{self.waiting_requests} Wai/"
                f"{self.archived_requests} Arch")


class DispatchSimulation:
    def __init__(self,
                 runtime: int = RUNTIME,
                 request_spawn_chance: float = REQUEST_SPAWN_CHANCE,
                 max_active_requests: int = MAX_ACTIVE_REQUESTS,
                 number_of_taxis: int = NUMBER_OF_TAXIS,
                 *,
                 rng=None,
                 seed: Optional[int] = None,
                 strict: bool = False,
                 log_every: Optional[int] = LOG_EVERY):
        """Initialize the simulation
        Args:
            runtime: How many ticks the simulation runs for
            request_spawn_chance: Chance to spawn a request per tick
            max_active_requests: No requests spawn while this many are active
            number_of_taxis: Size of the fixed taxi fleet
            rng: Random source with a ``random()`` method, defaults to a numpy Generator
            seed: Seed for the default random source
            strict: Check the occupancy invariants after every tick
            log_every: Log the status line every n ticks in run_to_completion, None disables it
        """
        config = SimulationConfig(
            runtime=runtime,
            request_spawn_chance=request_spawn_chance,
            max_active_requests=max_active_requests,
            number_of_taxis=number_of_taxis,
            seed=seed,
        )
        self.runtime = config.runtime
        self.request_spawn_chance = config.request_spawn_chance
        self.max_active_requests = config.max_active_requests
        self.rng = rng if rng is not None else np.random.default_rng(config.seed)
        self.strict = strict
        self.log_every = max(1, int(log_every)) if log_every is not None else None

        self.age = 0

        # Initialize collections
        self.taxis: List[Taxi] = [Taxi() for _ in range(config.number_of_taxis)]
        self.active_requests: List[Request] = []
        self.archived_requests: List[Request] = []  # Append only
        self.fulfilled_count = 0
        self.abandoned_count = 0

    @classmethod
    def from_config(cls, config: SimulationConfig, **kwargs) -> "DispatchSimulation":
        return cls(
            config.runtime,
            config.request_spawn_chance,
            config.max_active_requests,
            config.number_of_taxis,
            seed=config.seed,
            **kwargs,
        )

    def maybe_spawn_request(self) -> Optional[Request]:
        """Spawn at most one request with `request_spawn_chance` while below capacity"""
        if len(self.active_requests) >= self.max_active_requests:
            return None
        if not self.rng.random() < self.request_spawn_chance:
            return None

        request = Request(created_at=self.age)
        self.active_requests.append(request)
        LOGGER.debug("Tick %d: request %s arrived", self.age, request.id)
        return request

    def match_waiting_requests(self) -> int:
        """Hand every waiting request, in arrival order, to the first unoccupied taxi"""
        free_taxis = (t for t in self.taxis if not t.is_occupied)
        matched = 0

        for request in self.active_requests:
            if request.is_assigned() or not request.is_alive():
                continue

            taxi = next(free_taxis, None)
            if taxi is None:
                break

            request.assign(taxi.id, self.age)
            taxi.occupy()
            matched += 1
            LOGGER.debug("Tick %d: taxi %s picked up request %s", self.age, taxi.id, request.id)

        return matched

    def update_requests(self):
        """Tick down the waiting or fulfillment budget of every active request"""
        for request in self.active_requests:
            request.tick()

    def archive_dead_requests(self) -> List[Request]:
        """Move dead requests to the archive and free their taxis"""
        # First pass: archive and release, second pass: drop them from the active set
        dead = [r for r in self.active_requests if not r.is_alive()]

        for request in dead:
            request.archived_at = self.age
            self.archived_requests.append(request)

            # Abandoned requests never had a taxi
            if request.assigned_taxi is not None:
                self._find_taxi(request.assigned_taxi).release()

            if request.was_fulfilled():
                self.fulfilled_count += 1
                outcome = "fulfilled"
            else:
                self.abandoned_count += 1
                outcome = "abandoned"

            LOGGER.debug("Tick %d: archived request %s (%s)", self.age, request.id, outcome)

        if dead:
            self.active_requests = [r for r in self.active_requests if r.is_alive()]
        return dead

    def _find_taxi(self, taxi_id) -> Taxi:
        for taxi in self.taxis:
            if taxi.id == taxi_id:
                return taxi
        raise SimulationInvariantError(f"Request references taxi {taxi_id} which is not in the fleet")

    def step(self) -> SimulationSummary:
        """Advance the simulation by one tick"""
        self.age += 1

        self.maybe_spawn_request()
        self.match_waiting_requests()
        self.update_requests()
        self.archive_dead_requests()

        if self.strict:
            self.check_invariants()
        return self.summary()

    def run_to_completion(self) -> SimulationSummary:
        """Step until `age` exceeds `runtime`"""
        LOGGER.info("Starting simulation: %d ticks, %d taxis, spawn chance %.3f, capacity %d",
                    self.runtime, len(self.taxis), self.request_spawn_chance,
                    self.max_active_requests)

        while self.age <= self.runtime:
            if self.log_every is not None and self.age % self.log_every == 0:
                LOGGER.info("%s", self.summary())
            self.step()

        summary = self.summary()
        LOGGER.info("Finished simulation: %s (%d fulfilled, %d abandoned)", summary,
                    summary.fulfilled_requests, summary.abandoned_requests)
        return summary

    def check_invariants(self):
        """Raise SimulationInvariantError if occupancy and assignments disagree"""
        assignments = {}
        for request in self.active_requests:
            if not request.is_alive():
                raise SimulationInvariantError(f"Dead request {request.id} is still active")
            if request.assigned_taxi is None:
                continue
            if request.assigned_taxi in assignments:
                raise SimulationInvariantError(
                    f"Taxi {request.assigned_taxi} is assigned to more than one request")
            assignments[request.assigned_taxi] = request

        fleet = {taxi.id: taxi for taxi in self.taxis}
        for taxi_id in assignments:
            if taxi_id not in fleet:
                raise SimulationInvariantError(f"Request references taxi {taxi_id} which is not in the fleet")

        for taxi in self.taxis:
            if taxi.is_occupied != (taxi.id in assignments):
                raise SimulationInvariantError(
                    f"Taxi {taxi.id} occupied={taxi.is_occupied} does not match its assignments")

    def summary(self) -> SimulationSummary:
        num_assigned = sum(1 for r in self.active_requests if r.is_assigned())
        return SimulationSummary(
            age=self.age,
            runtime=self.runtime,
            occupied_taxis=sum(1 for t in self.taxis if t.is_occupied),
            total_taxis=len(self.taxis),
            assigned_requests=num_assigned,
            waiting_requests=len(self.active_requests) - num_assigned,
            archived_requests=len(self.archived_requests),
            fulfilled_requests=self.fulfilled_count,
            abandoned_requests=self.abandoned_count,
        )

    def __str__(self):
        return str(self.summary())
