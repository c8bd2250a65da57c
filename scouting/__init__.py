"""
FTC Scouting Analytics

Ratings, team performance profiles, match predictions and Monte Carlo
alliance analysis built from per-match scouting observations.
"""

__version__ = "0.1.0"
__author__ = "FTC Scouting Analytics Team"
