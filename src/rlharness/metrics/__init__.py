"""Metrics tracking for experiment runs.

Example usage:
    >>> from rlharness.metrics import MetricsTracker
    >>>
    >>> tracker = MetricsTracker()
    >>> tracker.add(stats)
    >>> avg = tracker.moving_average(window=100)
    >>> summary = tracker.summary()
"""

from .tracker import ExperimentSummary, MetricsTracker, MOVING_AVERAGE_WINDOW

__all__ = [
    'ExperimentSummary',
    'MetricsTracker',
    'MOVING_AVERAGE_WINDOW',
]
