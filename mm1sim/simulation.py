# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# simulation.py
# -----------------------------------------------------------------------------
# Purpose:
#   Simulate a single replication: build the station and arrival source,
#   seed the first arrival, run the event loop to a stop condition, and
#   return metrics.
#
# Design notes:
#   - Stop conditions: "time" (horizon), "events" (dispatched count) or
#     "customers" (served count). All are checked before each step.
#   - Arrival and service streams are seeded separately from sim.seed so
#     that scenarios compared under CRN see identical arrivals.
#
# Usage:
#   from mm1sim.simulation import run_one
#   results = run_one(cfg)
# -----------------------------------------------------------------------------

from __future__ import annotations
import time
from typing import Callable, Dict
from .queues import Env
from .stations import make_server
from .arrivals import make_client, schedule_arrivals
from .metrics import Statistics, TimeSeries, mm1_theory

STOP_CONDITIONS = ("time", "events", "customers")

def _stop_rule(cfg: Dict, env: Env, M: Statistics) -> Callable[[], bool]:
    """Return a predicate that is True while the driver should keep stepping."""
    stop = cfg["sim"].get("stop", {})
    by = stop.get("by", "time")
    if by not in STOP_CONDITIONS:
        raise ValueError(f"sim.stop.by must be one of {STOP_CONDITIONS}, got {by!r}")
    limit = float(stop.get("limit", 0.0))
    if limit <= 0.0:
        raise ValueError(f"sim.stop.limit must be > 0, got {limit}")
    if by == "time":
        return lambda: env.has_next_event() and env.peek_next_time() < limit
    if by == "events":
        return lambda: env.has_next_event() and env.event_count < limit
    return lambda: env.has_next_event() and M.served_count < limit

def run_one(cfg: Dict) -> Dict:
    seed = int(cfg["sim"].get("seed", 0))
    M = Statistics()
    server = make_server(cfg, M, seed=2 * seed + 1)
    client = make_client(cfg, server, seed=2 * seed)
    env = Env()
    keep_going = _stop_rule(cfg, env, M)
    interval = cfg["sim"].get("sample_interval")
    series = TimeSeries(float(interval)) if interval else None

    schedule_arrivals(env, client)
    wall_start = time.perf_counter()
    while keep_going():
        env.run_step()
        if series is not None and series.should_sample(env.now()):
            series.sample(env.now(), M)
    wall = time.perf_counter() - wall_start

    elapsed = env.now()
    out = M.summary(elapsed)
    out.update({
        "elapsed_time": elapsed,
        "events": env.event_count,
        "arrivals": client.generated,
        "backlog": len(server.backlog),
        "theory": mm1_theory(client.rate, server.rate),
        "wall_seconds": wall,
        "events_per_second": env.event_count / wall if wall > 0 else 0.0,
        "time_series": list(series.rows) if series is not None else [],
    })
    return out
