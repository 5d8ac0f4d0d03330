# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# metrics.py
# -----------------------------------------------------------------------------
# Purpose:
#   Collect and summarize KPIs: clients served, transactions completed and
#   time spent in the bank.
#
# Design notes:
#   - Counters only move forward and only at teller departure.
#   - snapshot() returns a JSON-serializable dict for easy tabulation; an
#     empty run reports NaN rather than raising.
#
# Usage:
#   stats = Statistics(); stats.record_completion(5, 600.0); stats.snapshot()
# -----------------------------------------------------------------------------

from __future__ import annotations
import math
from typing import Dict
from .errors import NoDataError

class Statistics:
    def __init__(self):
        self.clients_served = 0
        self.transactions_completed = 0
        self.total_time_in_system = 0.0

    def record_completion(self, transactions: int, time_in_system: float):
        """Account for one client leaving the teller desk."""
        if time_in_system < 0:
            raise ValueError(f"Negative time in system: {time_in_system}")
        self.clients_served += 1
        self.transactions_completed += transactions
        self.total_time_in_system += time_in_system

    def average_time_in_system(self) -> float:
        if self.clients_served == 0:
            raise NoDataError("no client has completed service yet")
        return self.total_time_in_system / self.clients_served

    def average_transactions(self) -> float:
        if self.clients_served == 0:
            raise NoDataError("no client has completed service yet")
        return self.transactions_completed / self.clients_served

    def snapshot(self) -> Dict:
        avg = self.average_time_in_system() if self.clients_served else math.nan
        return {
            "clients_served": self.clients_served,
            "transactions_completed": self.transactions_completed,
            "average_time_in_system": avg,
        }
