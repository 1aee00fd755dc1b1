"""
Derived value models.

Immutable snapshots of the statistics and session progress computed from the
application state.
"""
