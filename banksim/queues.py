# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# queues.py
# -----------------------------------------------------------------------------
# Purpose:
#   Minimal discrete-event primitives: Event, the Future Event List
#   (EventQueue), and Station, a single-server desk with an unbounded FIFO
#   waiting line.
#
# Design notes:
#   - Events are plain tagged records; the Simulation dispatches on `kind`.
#   - Equal timestamps pop in insertion order (sequence number tie-break).
#   - Stations only hold clients; scheduling departures is the Simulation's
#     job because service times come from the model config.
#
# Usage:
#   from banksim.queues import Event, EventQueue, Station
# -----------------------------------------------------------------------------

from __future__ import annotations
import heapq, itertools
from collections import deque
from typing import Deque, List, Optional
from .entities import Client
from .errors import EmptyQueueError, InvariantViolation

RECEPTION_ARRIVAL = "reception_arrival"
RECEPTION_DEPARTURE = "reception_departure"
TELLER_ARRIVAL = "teller_arrival"
TELLER_DEPARTURE = "teller_departure"

EVENT_KINDS = (RECEPTION_ARRIVAL, RECEPTION_DEPARTURE, TELLER_ARRIVAL, TELLER_DEPARTURE)

class Event:
    """Minimal event object for the Future Event List (FEL)."""
    __slots__ = ("t", "kind", "client", "seq")
    def __init__(self, t: float, kind: str, client: Optional[Client] = None):
        self.t = t; self.kind = kind; self.client = client
        self.seq = -1  # assigned by EventQueue.push
    def __lt__(self, other: "Event"):
        return (self.t, self.seq) < (other.t, other.seq)
    def __repr__(self):
        cid = self.client.cid if self.client is not None else None
        return f"Event(t={self.t!r}, kind={self.kind!r}, cid={cid!r})"

class EventQueue:
    """Min-heap of pending events ordered by (time, insertion order)."""
    def __init__(self):
        self._heap: List[Event] = []
        self._counter = itertools.count()

    def push(self, ev: Event):
        if ev.kind not in EVENT_KINDS:
            raise ValueError(f"Unknown event kind: {ev.kind}")
        ev.seq = next(self._counter)
        heapq.heappush(self._heap, ev)

    def pop(self) -> Event:
        if not self._heap:
            raise EmptyQueueError("pop from an empty event queue")
        return heapq.heappop(self._heap)

    def peek(self) -> Event:
        if not self._heap:
            raise EmptyQueueError("peek at an empty event queue")
        return self._heap[0]

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

class Station:
    """Single-server FIFO desk (reception or teller).

    Parameters
    ----------
    name : str
        Station name for reports.

    Notes
    -----
    - `in_service` is the client at the desk, `waiting` the line behind it.
    - A client sits in `waiting` only while `in_service` is occupied.
    - Busy time is integrated on every occupancy change for utilization.
    """
    def __init__(self, name: str):
        self.name = name
        self.in_service: Optional[Client] = None
        self.waiting: Deque[Client] = deque()
        self.served: int = 0
        self.max_waiting: int = 0
        self.busy_time: float = 0.0
        self.last_change: float = 0.0

    @property
    def busy(self) -> bool:
        return self.in_service is not None

    def __len__(self) -> int:
        # clients held by the station, desk included
        return len(self.waiting) + (1 if self.busy else 0)

    def arrive(self, now: float, client: Client) -> bool:
        """Seat the client if the desk is free, else queue it.

        Returns True when the client went straight into service, in which
        case the caller must schedule its departure.
        """
        if self.in_service is None:
            self._mark_busy(now)
            self.in_service = client
            return True
        self.waiting.append(client)
        self.max_waiting = max(self.max_waiting, len(self.waiting))
        return False

    def depart(self, now: float) -> Client:
        """Release the client at the desk and pull the next one from the line."""
        client = self.in_service
        if client is None:
            raise InvariantViolation(f"departure from idle station {self.name!r}")
        self._mark_busy(now)
        self.served += 1
        self.in_service = self.waiting.popleft() if self.waiting else None
        return client

    def utilization(self, now: float) -> float:
        """Fraction of [0, now] the desk was occupied."""
        if now <= 0:
            return 0.0
        busy = self.busy_time
        if self.in_service is not None:
            busy += now - self.last_change
        return busy / now

    def _mark_busy(self, now: float):
        # Integrate busy time up to `now` before the occupancy changes
        if self.in_service is not None:
            self.busy_time += now - self.last_change
        self.last_change = now
