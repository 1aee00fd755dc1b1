"""
Fasting Tracker - Intermittent Fasting Session Tracker

Starts and ends timed fasting windows against a selected plan, keeps a bounded
history of completed fasts, derives streak and average statistics and raises a
one-shot alert when the fasting goal is reached.
"""

__version__ = "0.1.0"
__author__ = "Fasting Tracker Team"
