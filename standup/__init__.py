"""
Stand-up Session Engine

Roster, countdown timer and random speaker picker for stand-up meetings,
with state that survives the host UI being closed and reopened.
"""

__version__ = "0.1.0"
