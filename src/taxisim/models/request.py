import uuid
from enum import Enum
from typing import Optional

from taxisim.simulation.config import MAX_WAITING_TIME, FULFILLMENT_TIME


class RequestState(Enum):
    WAITING = "waiting"
    ASSIGNED = "assigned"
    ARCHIVED = "archived"


class Request:
    """
    Somebody trying to hail a taxi issues a Request.

    A request waits at most `remaining_waiting_time` ticks for a taxi and is
    then driven for `fulfillment_time` ticks. Whichever budget runs out first
    ends its life and it gets archived.
    """
    def __init__(self, created_at: int = 0):
        self.id = uuid.uuid4()
        self.remaining_waiting_time = MAX_WAITING_TIME
        self.fulfillment_time = FULFILLMENT_TIME
        self.assigned_taxi: Optional[uuid.UUID] = None

        # Tick bookkeeping
        self.created_at = created_at
        self.assigned_at: Optional[int] = None
        self.archived_at: Optional[int] = None

    def is_alive(self) -> bool:
        return self.remaining_waiting_time > 0 and self.fulfillment_time > 0

    def is_assigned(self) -> bool:
        return self.assigned_taxi is not None

    @property
    def state(self) -> RequestState:
        # Dead requests leave the active set in the same tick they die
        if not self.is_alive():
            return RequestState.ARCHIVED
        if self.is_assigned():
            return RequestState.ASSIGNED
        return RequestState.WAITING

    def assign(self, taxi_id: uuid.UUID, current_tick: int):
        """Move from WAITING -> ASSIGNED."""
        self.assigned_taxi = taxi_id
        self.assigned_at = current_tick

    def tick(self):
        """Age the request by one tick, spending the budget of its current state"""
        if self.is_assigned():
            self.fulfillment_time -= 1
        else:
            self.remaining_waiting_time -= 1

    def was_fulfilled(self) -> bool:
        return self.is_assigned() and self.fulfillment_time <= 0

    def was_abandoned(self) -> bool:
        return not self.is_assigned() and self.remaining_waiting_time <= 0

    def __repr__(self):
        return (f"Request(id={self.id}, state={self.state.value}, "
                f"waiting={self.remaining_waiting_time}, fulfillment={self.fulfillment_time})")
