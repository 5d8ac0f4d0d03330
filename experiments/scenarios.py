"""
experiments/scenarios.py

Holds scenario definitions (parameter overrides) to sweep during experiments.
Add arrival rates, transaction mixes and horizons here.
"""

from __future__ import annotations

BASELINE = {
    "name": "baseline",
    "overrides": {},  # override config keys here per scenario
}

# Fewer transactions per visit (ATM takes the small jobs)
QUICK_CLIENTS = {
    "name": "quick_clients",
    "overrides": {
        "sim": {"max_transactions": 20},
    },
}

# Trained staff: each transaction takes less desk time
FAST_STAFF = {
    "name": "fast_staff",
    "overrides": {
        "sim": {"time_per_transaction": 30.0},
    },
}

# Quiet branch: clients arrive half as often
QUIET_BRANCH = {
    "name": "quiet_branch",
    "overrides": {
        "sim": {"arrival_mean": 240.0},
    },
}

SCENARIOS = [
    BASELINE,
    QUICK_CLIENTS,
    FAST_STAFF,
    QUIET_BRANCH,
]
