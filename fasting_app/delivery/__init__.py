"""
Delivery module.

User-visible message sinks (the toast channel) and best-effort platform
notifiers for the goal-reached alert.
"""
