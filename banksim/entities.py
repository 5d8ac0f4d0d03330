# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# entities.py
# -----------------------------------------------------------------------------
# Purpose:
#   Entity definitions for the bank DES: Client.
#
# Design notes:
#   - A Client never changes after creation; the transaction count fixes its
#     service time at both reception and teller.
#   - Exactly one holder owns a Client at any time (a station's desk, a
#     station's line, or the transit slot between the two stations).
#
# Usage:
#   from banksim.entities import Client
# -----------------------------------------------------------------------------

from __future__ import annotations
from dataclasses import dataclass

@dataclass(frozen=True)
class Client:
    cid: int                 # sequential id, in order of arrival
    arrival_time: float      # clock value at reception arrival
    transactions: int        # drawn once, in [min_transactions, max_transactions]

    def service_time(self, time_per_transaction: float) -> float:
        """Time the client occupies a desk, identical at both stations."""
        return self.transactions * time_per_transaction
