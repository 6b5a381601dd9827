# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# queues.py
# -----------------------------------------------------------------------------
# Purpose:
#   Minimal discrete-event primitives: Event, EventKind and the engine Env
#   that owns the clock and the Future Event List (FEL).
#
# Design notes:
#   - The engine never looks inside an event; it pops the earliest one,
#     advances the clock and hands it to event.target.handle(event, env).
#   - Equal times are dispatched in scheduling order (sequence tie-break).
#   - There is no built-in horizon; callers drive run_step() themselves or
#     use run_until(horizon).
#
# Usage:
#   from mm1sim.queues import Env, Event, EventKind
# -----------------------------------------------------------------------------

from __future__ import annotations
import heapq, itertools, math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, List, Tuple

if TYPE_CHECKING:
    from .entities import Entity

class EventKind(str, Enum):
    ARRIVAL = "arrival"
    DEPARTURE = "departure"

@dataclass(frozen=True)
class Event:
    """Immutable (time, target, kind) record for the FEL."""
    time: float
    target: "Entity"
    kind: EventKind

class Env:
    """Simulation environment holding the clock and the FEL.

    Attributes
    ----------
    event_count : int
        Number of events dispatched so far.

    Notes
    -----
    schedule() expects ev.time >= now(). Scheduling into the past is a
    caller bug; it is only caught by an assertion.
    """
    def __init__(self):
        self._t: float = 0.0
        self._fel: List[Tuple[float, int, Event]] = []
        self._seq = itertools.count()
        self.event_count: int = 0

    def now(self) -> float:
        return self._t

    def schedule(self, ev: Event):
        assert ev.time >= self._t, f"event at {ev.time} scheduled before now={self._t}"
        heapq.heappush(self._fel, (ev.time, next(self._seq), ev))

    def has_next_event(self) -> bool:
        return bool(self._fel)

    def peek_next_time(self) -> float:
        return self._fel[0][0] if self._fel else math.inf

    def pending(self) -> int:
        return len(self._fel)

    def run_step(self):
        if not self._fel:
            return
        _, _, ev = heapq.heappop(self._fel)
        self._t = ev.time
        self.event_count += 1
        ev.target.handle(ev, self)

    def run_until(self, T_end: float):
        while self._fel and self._fel[0][0] < T_end:
            self.run_step()
