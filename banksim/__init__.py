"""
banksim package initializer.

This package contains the discrete-event engine, primitives (event list and
stations), client entities, random variates, and statistics used by the
two-stage bank (reception -> teller) queue model.
"""
__all__ = [
    "errors", "entities", "variates", "queues",
    "metrics", "config", "simulation",
]
