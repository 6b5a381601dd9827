# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# stations.py
# -----------------------------------------------------------------------------
# Purpose:
#   The single service station: FIFO backlog of arrival timestamps, a
#   busy/idle flag, exponential service, and a factory from config.
#
# Design notes:
#   - A customer leaves the backlog only when its service starts.
#   - Served count and busy time are booked at service start with the full
#     sampled duration, not at departure. This fixes the numeric output of
#     utilization and must not be moved to the departure handler.
#
# Usage:
#   from mm1sim.stations import Server, make_server
# -----------------------------------------------------------------------------

from __future__ import annotations
from collections import deque
from typing import Deque, Dict, Optional
from .queues import Env, Event, EventKind
from .metrics import Statistics
from .variates import ExponentialVariates

class Server:
    """Single FIFO server with an unlimited backlog.

    Parameters
    ----------
    rate : float
        Service rate mu (mean service time 1/mu). Must be > 0.
    stats : Statistics
        Accumulator notified of queue changes and services.
    variates : object, optional
        Anything with draw(rate) -> float. Defaults to an unseeded
        ExponentialVariates.

    Notes
    -----
    States are IDLE (busy=False) and BUSY; there is no terminal state.
    """
    def __init__(self, rate: float, stats: Statistics, variates=None, name: str = "server"):
        self.name = name
        self.rate = rate
        self.stats = stats
        self.variates = variates if variates is not None else ExponentialVariates()
        self.backlog: Deque[float] = deque()
        self.busy: bool = False

    def receive_customer(self, env: Env):
        now = env.now()
        self.backlog.append(now)
        self.stats.record_queue_change(now, len(self.backlog))
        if not self.busy:
            self.start_service(env)

    def start_service(self, env: Env):
        if not self.backlog:
            return
        now = env.now()
        arrived = self.backlog.popleft()
        self.stats.record_queue_change(now, len(self.backlog))
        self.busy = True
        self.stats.record_server_state(now, True)
        self.stats.record_service_start(now - arrived)
        st = self.variates.draw(self.rate)
        self.stats.record_service_end(st)
        env.schedule(Event(now + st, self, EventKind.DEPARTURE))

    def handle(self, event: Event, env: Env):
        if event.kind is not EventKind.DEPARTURE:
            return
        self.busy = False
        self.stats.record_server_state(env.now(), False)
        if self.backlog:
            self.start_service(env)

def make_server(cfg: Dict, stats: Statistics, seed: Optional[int] = None) -> Server:
    """
    Build the station from the `sim` section of a parsed config.

    Raises
    ------
    ValueError
        If sim.service_rate is missing or not strictly positive.
    """
    rate = float(cfg["sim"].get("service_rate", 0.0))
    if rate <= 0.0:
        raise ValueError(f"sim.service_rate must be > 0, got {rate}")
    return Server(rate, stats, variates=ExponentialVariates(seed))
