"""
accessctl Time — Public API
===========================
"""

from accessctl.time.clock import Clock, FixedClock, SystemClock

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
]
