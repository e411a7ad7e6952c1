"""Simulation framework for Grapple.

Headless tools for running full matches between opponents, used for
difficulty tuning and balance checks.

Key classes:
- MatchRunner: Runs one match through the real MatchController
- MatchResult: Outcome of a single match
- BatchRunner: Runs many matches per matchup
- MatchupStats: Aggregate statistics for one matchup

Usage:
    from grapple.testing import BatchRunner, print_results_summary

    runner = BatchRunner()
    results = runner.run_matchups([("random", "hard")], num_games=100, seed=1)
    print_results_summary(results)
"""

from .batch_runner import (
    BatchResults,
    BatchRunner,
    MatchupStats,
    main,
    print_results_summary,
)
from .match_runner import MatchResult, MatchRunner, run_match

__all__ = [
    # Single match
    "MatchRunner",
    "MatchResult",
    "run_match",
    # Batches
    "BatchRunner",
    "BatchResults",
    "MatchupStats",
    # Utilities
    "print_results_summary",
    "main",
]
