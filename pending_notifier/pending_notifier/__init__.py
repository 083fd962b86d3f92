"""
pending_notifier package.

Holds process-wide helpers for the notifier runtime.
"""

__all__ = [
    "logger",
]
