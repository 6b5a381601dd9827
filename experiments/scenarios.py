"""
experiments/scenarios.py

Holds scenario definitions (arrival/service rates, run length) to sweep
during experiments. Overrides are merged onto config/baseline.yaml.
"""

from __future__ import annotations

BASELINE = {
    "name": "baseline",
    "overrides": {},  # override config keys here per scenario
}

FASTER_SERVER = {
    "name": "faster_server",
    "overrides": {
        "sim": {"service_rate": 1.25},
    },
}

# rho = 10/9 > 1: queue and wait must grow with the horizon.
# Set stop.limit to 10_000_000 for the full-length run (about 2e8 events).
UNSTABLE = {
    "name": "unstable",
    "overrides": {
        "sim": {
            "arrival_rate": 10.0,
            "service_rate": 9.0,
            "stop": {"by": "time", "limit": 100_000},
            "sample_interval": 5_000,
        },
    },
}

SCENARIOS = [BASELINE, FASTER_SERVER, UNSTABLE]
