import pytest

from mm1sim.metrics import Statistics


class CountingStatistics(Statistics):
    """Statistics that remembers every queue change it was given."""

    def __init__(self):
        super().__init__()
        self.queue_changes = []

    def record_queue_change(self, time, new_length):
        self.queue_changes.append((time, new_length))
        super().record_queue_change(time, new_length)


@pytest.fixture
def counting_stats():
    return CountingStatistics()


@pytest.fixture
def base_cfg():
    return {
        "sim": {
            "seed": 7,
            "arrival_rate": 0.8,
            "service_rate": 1.0,
            "stop": {"by": "time", "limit": 1000.0},
            "sample_interval": 100.0,
        },
        "experiments": {"replications": 2, "confidence_level": 0.95},
    }
