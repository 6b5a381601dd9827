"""
mm1sim package initializer.

This package contains the discrete-event engine, the arrival source and
service station of a single-server (M/M/1) queue, random variate sources,
and metric collection.
"""
__all__ = [
    "queues", "entities", "variates", "stations",
    "arrivals", "metrics", "simulation",
]
