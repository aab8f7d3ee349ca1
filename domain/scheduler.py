"""
Goal-time scheduling for simulated matches.

The remote simulation only returns a final score ("2-1"); this module spreads
those goals across the match clock.
"""
from __future__ import annotations

import random
from typing import Optional, Tuple

from .models import GoalEvent, Side

MATCH_MINUTES = 90
# No goals in the last five minutes: stoppage time is not modelled
LAST_GOAL_MINUTE = 85

_DASHES = ("\u2013", "\u2014")


def _goals(raw: str) -> int:
    try:
        value = int(raw.strip())
    except ValueError:
        return 0
    return max(value, 0)


def parse_target_score(score: Optional[str]) -> Tuple[int, int]:
    """Parse "H-A" into (home, away); anything unparseable counts as 0 goals."""
    text = str(score or "")
    for dash in _DASHES:
        text = text.replace(dash, "-")
    parts = text.split("-")
    home = _goals(parts[0])
    away = _goals(parts[1]) if len(parts) > 1 else 0
    return home, away


def schedule_goals(home_goals: int, away_goals: int, rng: Optional[random.Random] = None) -> Tuple[GoalEvent, ...]:
    """Draw one uniform minute in [1, 85] per goal and return them sorted by minute.

    Two goals may share a minute.
    """
    rng = rng or random.Random()
    goals = [GoalEvent(rng.randint(1, LAST_GOAL_MINUTE), Side.HOME) for _ in range(max(home_goals, 0))]
    goals += [GoalEvent(rng.randint(1, LAST_GOAL_MINUTE), Side.AWAY) for _ in range(max(away_goals, 0))]
    return tuple(sorted(goals, key=lambda g: g.minute))
