import dataclasses
import math

import pytest

from mm1sim.queues import Env, Event, EventKind


class Recorder:
    def __init__(self, label=None):
        self.label = label
        self.seen = []

    def handle(self, event, env):
        self.seen.append((env.now(), event))


class Chain:
    """Schedules a follow-up arrival one time unit later, `left` times."""

    def __init__(self, left):
        self.left = left
        self.times = []

    def handle(self, event, env):
        self.times.append(env.now())
        if self.left > 0:
            self.left -= 1
            env.schedule(Event(env.now() + 1.0, self, EventKind.ARRIVAL))


def test_empty_engine():
    env = Env()
    assert not env.has_next_event()
    assert env.peek_next_time() == math.inf
    env.run_step()
    assert env.now() == 0.0
    assert env.event_count == 0


def test_dispatch_in_time_order_and_clock_follows_events():
    env = Env()
    rec = Recorder()
    for t in (3.0, 1.0, 2.5, 0.5):
        env.schedule(Event(t, rec, EventKind.ARRIVAL))
    prev = env.now()
    while env.has_next_event():
        nxt = env.peek_next_time()
        env.run_step()
        assert env.now() == nxt
        assert env.now() >= prev
        prev = env.now()
    assert [t for t, _ in rec.seen] == [0.5, 1.0, 2.5, 3.0]
    assert env.event_count == 4


def test_equal_times_dispatch_in_scheduling_order():
    env = Env()
    order = []

    class Tagged:
        def __init__(self, tag):
            self.tag = tag

        def handle(self, event, env):
            order.append(self.tag)

    for tag in ("a", "b", "c", "d"):
        env.schedule(Event(5.0, Tagged(tag), EventKind.DEPARTURE))
    env.run_until(math.inf)
    assert order == ["a", "b", "c", "d"]


def test_handlers_can_schedule_follow_ups():
    env = Env()
    chain = Chain(left=3)
    env.schedule(Event(0.0, chain, EventKind.ARRIVAL))
    env.run_until(100.0)
    assert chain.times == [0.0, 1.0, 2.0, 3.0]
    assert not env.has_next_event()


def test_run_until_stops_before_horizon():
    env = Env()
    rec = Recorder()
    for t in (1.0, 2.0, 5.0, 7.0):
        env.schedule(Event(t, rec, EventKind.ARRIVAL))
    env.run_until(5.0)
    assert env.now() == 2.0
    assert env.pending() == 2
    assert env.peek_next_time() == 5.0


def test_event_is_immutable():
    ev = Event(1.0, Recorder(), EventKind.ARRIVAL)
    with pytest.raises(dataclasses.FrozenInstanceError):
        ev.time = 2.0


def test_scheduling_in_the_past_is_rejected():
    env = Env()
    rec = Recorder()
    env.schedule(Event(4.0, rec, EventKind.ARRIVAL))
    env.run_step()
    with pytest.raises(AssertionError):
        env.schedule(Event(1.0, rec, EventKind.ARRIVAL))
