"""
Persistence module.

Snapshots the full application state to a durable key-value store.
"""
