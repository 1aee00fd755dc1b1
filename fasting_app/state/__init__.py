"""
Session state machine and runtime module.

Manages the fasting session lifecycle (IDLE → FASTING → IDLE) and owns the
single application state instance, persisting a snapshot after every change.
"""
