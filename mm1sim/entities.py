# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# entities.py
# -----------------------------------------------------------------------------
# Purpose:
#   The capability every event target must provide: handle(event, env).
#   Client (arrivals.py) and Server (stations.py) are the two variants.
#
# Design notes:
#   - The engine is passed into handle() on every call; entities never keep
#     a reference to it.
#
# Usage:
#   from mm1sim.entities import Entity
# -----------------------------------------------------------------------------

from __future__ import annotations
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .queues import Env, Event

class Entity(Protocol):
    def handle(self, event: "Event", env: "Env") -> None:
        ...
