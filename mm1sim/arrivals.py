# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# arrivals.py
# -----------------------------------------------------------------------------
# Purpose:
#   Generate exogenous Poisson arrivals and hand each customer to the
#   downstream Server.
#
# Design notes:
#   - Open loop: every ARRIVAL schedules the next one, so the stream only
#     stops when the driver stops stepping the engine.
#   - Several Clients may feed one Server; they share no state.
#
# Usage:
#   client = Client(rate, server); schedule_arrivals(env, client)
# -----------------------------------------------------------------------------

from __future__ import annotations
from typing import Dict, Optional
from .queues import Env, Event, EventKind
from .stations import Server
from .variates import ExponentialVariates

class Client:
    """Poisson arrival source with rate lambda feeding `server`."""
    def __init__(self, rate: float, server: Server, variates=None):
        self.rate = rate
        self.server = server
        self.variates = variates if variates is not None else ExponentialVariates()
        self.generated = 0

    def handle(self, event: Event, env: Env):
        if event.kind is not EventKind.ARRIVAL:
            return
        self.generated += 1
        self.server.receive_customer(env)
        gap = self.variates.draw(self.rate)
        env.schedule(Event(env.now() + gap, self, EventKind.ARRIVAL))

def make_client(cfg: Dict, server: Server, seed: Optional[int] = None) -> Client:
    rate = float(cfg["sim"].get("arrival_rate", 0.0))
    if rate <= 0.0:
        raise ValueError(f"sim.arrival_rate must be > 0, got {rate}")
    return Client(rate, server, variates=ExponentialVariates(seed))

def schedule_arrivals(env: Env, client: Client, t0: float = 0.0):
    # First arrival at t0; the Client keeps the stream going from there.
    env.schedule(Event(t0, client, EventKind.ARRIVAL))
