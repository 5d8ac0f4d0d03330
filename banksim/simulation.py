# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# simulation.py
# -----------------------------------------------------------------------------
# Purpose:
#   The bank model: clock, Future Event List, reception and teller stations,
#   transit slot, and the four event transitions. Also run_once(), which
#   simulates a single replication from a config dict.
#
# Design notes:
#   - Events carry only a timestamp, a kind and (for departures) nothing else;
#     all mutable state lives on the Simulation and handlers dispatch on kind.
#   - The horizon is half-open: an event at t >= max_time is left on the FEL
#     unprocessed, so a later run() with a larger horizon resumes the run.
#   - Reception -> teller hand-off is a separate zero-delay event.
#
# Usage:
#   from banksim.simulation import Simulation, run_once
#   sim = Simulation(); sim.run(90000); sim.statistics_snapshot()
#   results = run_once(cfg)
# -----------------------------------------------------------------------------

from __future__ import annotations
from typing import Dict, List, Optional, Tuple
from .config import DEFAULTS, apply_overrides, validate
from .entities import Client
from .errors import InvariantViolation
from .metrics import Statistics
from .queues import (
    Event, EventQueue, Station,
    RECEPTION_ARRIVAL, RECEPTION_DEPARTURE, TELLER_ARRIVAL, TELLER_DEPARTURE,
)
from .variates import RandomVariate

class Simulation:
    """Two-stage bank queue (reception feeding teller).

    Parameters
    ----------
    cfg : dict, optional
        Config overrides laid over DEFAULTS (only the `sim` block is read).
    variates : RandomVariate, optional
        Random source for every draw; defaults to one seeded from sim.seed.
    record_trace : bool
        Keep a (t, kind, cid) tuple for each processed event in `trace`.
    """
    def __init__(self, cfg: Optional[Dict] = None, variates: Optional[RandomVariate] = None,
                 record_trace: bool = False):
        self.cfg = apply_overrides(DEFAULTS, cfg or {})
        sim = validate(self.cfg)
        self.arrival_mean: float = float(sim["arrival_mean"])
        self.time_per_transaction: float = float(sim["time_per_transaction"])
        self.min_transactions: int = int(sim["min_transactions"])
        self.max_transactions: int = int(sim["max_transactions"])
        self.rv = variates if variates is not None else RandomVariate(seed=sim.get("seed"))

        self.t: float = 0.0
        self.FEL = EventQueue()
        self.reception = Station("reception")
        self.teller = Station("teller")
        self.transit: Optional[Client] = None
        self.stats = Statistics()

        self.clients_arrived = 0
        self.events_processed = 0
        self.record_trace = record_trace
        self.trace: List[Tuple[float, str, Optional[int]]] = []
        self._started = False

    @classmethod
    def new(cls) -> "Simulation":
        """Simulation with the default parameters and clock at 0."""
        return cls()

    def schedule(self, ev: Event):
        if ev.t < self.t:
            raise InvariantViolation(f"{ev!r} scheduled in the past (clock={self.t})")
        self.FEL.push(ev)

    def run(self, max_time: float):
        """Process every event with timestamp < max_time."""
        if max_time < 0:
            raise ValueError(f"max_time must be non-negative, got {max_time}")
        if not self._started:
            # Arrivals are a renewal process that re-schedules itself forever
            self._started = True
            self.schedule(Event(self.t + self.rv.exponential(self.arrival_mean), RECEPTION_ARRIVAL))
        while self.FEL.peek().t < max_time:
            ev = self.FEL.pop()
            self.t = ev.t
            kind = ev.kind
            if kind == RECEPTION_ARRIVAL:
                self._on_reception_arrival()
            elif kind == RECEPTION_DEPARTURE:
                self._on_reception_departure(ev)
            elif kind == TELLER_ARRIVAL:
                self._on_teller_arrival()
            elif kind == TELLER_DEPARTURE:
                self._on_teller_departure(ev)
            self.events_processed += 1

    # Event transitions ------------------------------------------------------

    def _on_reception_arrival(self):
        client = Client(
            cid=self.clients_arrived,
            arrival_time=self.t,
            transactions=self.rv.uniform_int(self.min_transactions, self.max_transactions),
        )
        self.clients_arrived += 1
        self._note(RECEPTION_ARRIVAL, client)
        if self.reception.arrive(self.t, client):
            self._schedule_departure(self.reception, RECEPTION_DEPARTURE)
        self.schedule(Event(self.t + self.rv.exponential(self.arrival_mean), RECEPTION_ARRIVAL))

    def _on_reception_departure(self, ev: Event):
        if self.transit is not None:
            raise InvariantViolation(f"transit slot still holds client {self.transit.cid}")
        self._check_departing(self.reception, ev)
        client = self.reception.depart(self.t)
        self._note(RECEPTION_DEPARTURE, client)
        # Zero transit delay: hand-off is processed at the same timestamp
        self.transit = client
        self.schedule(Event(self.t, TELLER_ARRIVAL))
        if self.reception.busy:
            self._schedule_departure(self.reception, RECEPTION_DEPARTURE)

    def _on_teller_arrival(self):
        client = self.transit
        if client is None:
            raise InvariantViolation("teller arrival with an empty transit slot")
        self.transit = None
        self._note(TELLER_ARRIVAL, client)
        if self.teller.arrive(self.t, client):
            self._schedule_departure(self.teller, TELLER_DEPARTURE)

    def _on_teller_departure(self, ev: Event):
        self._check_departing(self.teller, ev)
        client = self.teller.depart(self.t)
        self._note(TELLER_DEPARTURE, client)
        self.stats.record_completion(client.transactions, self.t - client.arrival_time)
        if self.teller.busy:
            self._schedule_departure(self.teller, TELLER_DEPARTURE)

    def _schedule_departure(self, station: Station, kind: str):
        client = station.in_service
        if client is None:
            raise InvariantViolation(f"departure scheduled for idle station {station.name!r}")
        self.schedule(Event(self.t + client.service_time(self.time_per_transaction), kind, client))

    def _check_departing(self, station: Station, ev: Event):
        # the departure must belong to whoever holds the desk
        if station.in_service is None or ev.client is not station.in_service:
            raise InvariantViolation(f"{ev!r} does not match the client at {station.name!r}")

    def _note(self, kind: str, client: Client):
        if self.record_trace:
            self.trace.append((self.t, kind, client.cid))

    # Reporting --------------------------------------------------------------

    def clients_in_system(self) -> int:
        return len(self.reception) + len(self.teller) + (1 if self.transit is not None else 0)

    def statistics_snapshot(self) -> Dict:
        return self.stats.snapshot()

    def summary(self) -> Dict:
        out = self.statistics_snapshot()
        out.update({
            "clock": self.t,
            "events_processed": self.events_processed,
            "clients_arrived": self.clients_arrived,
            "clients_in_system": self.clients_in_system(),
            "total_time_in_system": self.stats.total_time_in_system,
            "station_utilization": {
                st.name: st.utilization(self.t) for st in (self.reception, self.teller)
            },
            "max_queue_length": {
                st.name: st.max_waiting for st in (self.reception, self.teller)
            },
        })
        return out

def run_once(cfg: Dict) -> Dict:
    """Simulate one replication of `cfg` and return its summary."""
    sim = Simulation(cfg)
    sim.run(sim.cfg["sim"]["horizon"])
    return sim.summary()
