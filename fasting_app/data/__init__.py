"""
Plan registry and history log.

Immutable plans referenced by identifier, and the bounded most-recent-first
log of completed fasts.
"""
