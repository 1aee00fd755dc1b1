"""
Clock module.

Repeating wall-clock sampler that drives recomputation of time-derived values.
"""
