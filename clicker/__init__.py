"""Ranked clicker simulation engine."""

__all__ = [
    "types",
    "config",
    "randomness",
    "clock",
    "ranks",
    "rating",
    "elite",
    "opponents",
    "clicks",
    "match",
    "titles",
    "progression",
    "tournament",
    "rccs",
    "leaderboard",
    "queue",
    "news",
    "state",
    "render",
]
