"""
Utility functions module.

Time handling shared across the tracker.

Time Semantics:
- All stored timestamps are integer epoch milliseconds
- Wall-clock time is sampled fresh at the moment of use, never cached
- Calendar days (chart, streak) are local dates
- Exported timestamps are ISO-8601 UTC
"""
