# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# metrics.py
# -----------------------------------------------------------------------------
# Purpose:
#   Collect and summarize KPIs for the single-server queue: mean wait,
#   time-averaged queue length, utilization, number in system, throughput.
#
# Design notes:
#   - Keep side-effect methods (record_*) for instrumentation from Server.
#   - The queue-length area is integrated on every queue change, so callers
#     must report changes in time order with the post-change length.
#   - Busy time and served count are booked when a service starts, using
#     the full sampled duration.
#   - Summaries return JSON-serializable dicts for easy tabulation.
#
# Usage:
#   M = Statistics(); ...; M.summary(env.now())
# -----------------------------------------------------------------------------

from __future__ import annotations
import math
from typing import Dict, List

class Statistics:
    def __init__(self):
        self.total_wait_time = 0.0
        self.served_count = 0
        self.total_busy_time = 0.0
        self.area_under_q = 0.0
        self.last_event_time = 0.0
        self.last_queue_length = 0
        # Actual server occupancy (0/1), integrated separately for L
        self.area_busy = 0.0
        self.last_busy_change = 0.0
        self.server_busy = False

    def record_queue_change(self, time: float, new_length: int):
        assert time >= self.last_event_time, "queue changes must arrive in time order"
        self.area_under_q += self.last_queue_length * (time - self.last_event_time)
        self.last_event_time = time
        self.last_queue_length = new_length

    def record_service_start(self, wait_time: float):
        self.total_wait_time += wait_time

    def record_service_end(self, service_duration: float):
        self.served_count += 1
        self.total_busy_time += service_duration

    def record_server_state(self, time: float, busy: bool):
        """Integrate the 0/1 occupancy indicator up to `time`, then switch it."""
        assert time >= self.last_busy_change, "server state changes must arrive in time order"
        if self.server_busy:
            self.area_busy += time - self.last_busy_change
        self.last_busy_change = time
        self.server_busy = busy

    @property
    def current_queue_length(self) -> int:
        return self.last_queue_length

    @property
    def customers_in_system(self) -> int:
        return self.last_queue_length + (1 if self.server_busy else 0)

    def mean_wait(self) -> float:
        return self.total_wait_time / self.served_count if self.served_count else 0.0

    def mean_queue_length(self, elapsed: float) -> float:
        return self.area_under_q / elapsed if elapsed > 0 else 0.0

    def utilization(self, elapsed: float) -> float:
        return self.total_busy_time / elapsed if elapsed > 0 else 0.0

    def mean_in_system(self, elapsed: float) -> float:
        return (self.area_under_q + self.area_busy) / elapsed if elapsed > 0 else 0.0

    def throughput(self, elapsed: float) -> float:
        return self.served_count / elapsed if elapsed > 0 else 0.0

    def summary(self, elapsed: float) -> Dict:
        return {
            "served_customers": self.served_count,
            "mean_wait": self.mean_wait(),
            "mean_queue_length": self.mean_queue_length(elapsed),
            "mean_in_system": self.mean_in_system(elapsed),
            "utilization": self.utilization(elapsed),
            "throughput": self.throughput(elapsed),
            "final_queue_length": self.current_queue_length,
        }

class TimeSeries:
    """
    Fixed-interval sampler of the running KPIs, used for warm-up and
    stability plots. Rows are plain dicts keyed like Statistics.summary().
    """
    def __init__(self, sample_interval: float):
        assert sample_interval > 0
        self.sample_interval = sample_interval
        self.next_sample_time = 0.0
        self.rows: List[Dict[str, float]] = []

    def should_sample(self, now: float) -> bool:
        return now >= self.next_sample_time

    def sample(self, now: float, stats: Statistics) -> bool:
        if not self.should_sample(now):
            return False
        self.rows.append({
            "time": now,
            "queue_length": stats.current_queue_length,
            "mean_wait": stats.mean_wait(),
            "utilization": stats.utilization(now),
            "served_customers": stats.served_count,
            "customers_in_system": stats.customers_in_system,
            "throughput": stats.throughput(now),
        })
        self.next_sample_time += self.sample_interval
        return True

def mm1_theory(arrival_rate: float, service_rate: float) -> Dict[str, float]:
    """
    Closed-form steady-state values for M/M/1.

    For rho >= 1 there is no steady state: queue metrics are inf and the
    server saturates, so throughput equals the service rate.
    """
    rho = arrival_rate / service_rate
    if rho >= 1.0:
        return {
            "rho": rho,
            "mean_wait": math.inf,
            "mean_queue_length": math.inf,
            "mean_in_system": math.inf,
            "mean_sojourn": math.inf,
            "utilization": 1.0,
            "throughput": service_rate,
        }
    return {
        "rho": rho,
        "mean_wait": rho / (service_rate - arrival_rate),
        "mean_queue_length": rho * rho / (1.0 - rho),
        "mean_in_system": rho / (1.0 - rho),
        "mean_sojourn": 1.0 / (service_rate - arrival_rate),
        "utilization": rho,
        "throughput": arrival_rate,
    }
