"""
Roster Guardian - support duty roster and day-scoped issue tracker.
"""

__version__ = "1.0.0"
