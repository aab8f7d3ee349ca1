"""
Match Clock Engine: plays a simulated match from kickoff to full time.

Flow: ``load(score)`` -> Intro, ``start()`` -> Live, ninety ``tick()`` calls,
then ``finish()`` -> Finished. ``run()`` is the cooperative driver: it sleeps
``tick_seconds`` between minutes and ``settle_seconds`` before the final
screen. Each kickoff creates a RunToken; ``cancel()`` (or a new ``load``)
flips it, so a sleeping ``run()`` exits at its next wake-up without touching
the state of whatever replaced it.

Goal minutes are drawn once, when the target score is loaded, and never
recomputed during the run.
"""
from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol, Tuple

from .commentary import GOAL_TEXT, FLAVOR_EVENTS, CommentaryFeed, classify_flavor
from .models import ClockState, CommentaryEntry, CommentaryKind, GoalEvent, Side
from .scheduler import MATCH_MINUTES, parse_target_score, schedule_goals

logger = logging.getLogger(__name__)

DEFAULT_TICK_SECONDS = 0.1
DEFAULT_SETTLE_SECONDS = 2.0
DEFAULT_FLAVOR_PROBABILITY = 0.04


class AudioCues(Protocol):
    def play_whistle(self) -> None: ...

    def play_crowd_noise(self) -> None: ...


@dataclass(frozen=True)
class MatchRun:
    """Immutable configuration of one simulated match"""
    target_home: int
    target_away: int
    goals: Tuple[GoalEvent, ...]

    @classmethod
    def from_score(cls, score: Optional[str], rng: Optional[random.Random] = None) -> "MatchRun":
        home, away = parse_target_score(score)
        return cls(home, away, schedule_goals(home, away, rng))


class RunToken:
    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


UpdateCallback = Callable[["MatchClockEngine", List[CommentaryEntry]], None]


class MatchClockEngine:
    def __init__(
        self,
        audio: Optional[AudioCues] = None,
        rng: Optional[random.Random] = None,
        tick_seconds: float = DEFAULT_TICK_SECONDS,
        settle_seconds: float = DEFAULT_SETTLE_SECONDS,
        flavor_probability: float = DEFAULT_FLAVOR_PROBABILITY,
    ) -> None:
        self.audio = audio
        self.rng = rng or random.Random()
        self.tick_seconds = tick_seconds
        self.settle_seconds = settle_seconds
        self.flavor_probability = flavor_probability
        self.run_config: Optional[MatchRun] = None
        self.state: Optional[ClockState] = None
        self._token: Optional[RunToken] = None
        self._reset_counters()

    def _reset_counters(self) -> None:
        self.minute = 0
        self.home_score = 0
        self.away_score = 0
        self.feed = CommentaryFeed()

    @property
    def full_time(self) -> bool:
        return self.minute >= MATCH_MINUTES

    @property
    def progress(self) -> float:
        return self.minute / MATCH_MINUTES

    def load(self, score: Optional[str]) -> MatchRun:
        """Adopt a new target score and return to the intro screen."""
        self.cancel()
        self.run_config = MatchRun.from_score(score, self.rng)
        self.state = ClockState.INTRO
        logger.info(
            "Simulation loaded: target %s-%s, goal minutes %s",
            self.run_config.target_home,
            self.run_config.target_away,
            [g.minute for g in self.run_config.goals],
        )
        return self.run_config

    def start(self) -> RunToken:
        """Kick off: Intro -> Live."""
        if self.state != ClockState.INTRO or self.run_config is None:
            raise RuntimeError("The match can only kick off from the intro screen.")
        if self._token is not None:
            self._token.cancel()
        self._token = RunToken()
        self.state = ClockState.LIVE
        self._cue("play_whistle")
        return self._token

    def tick(self) -> List[CommentaryEntry]:
        """Advance one minute and return the commentary it produced."""
        if self.state != ClockState.LIVE or self.run_config is None or self.full_time:
            return []
        self.minute += 1
        produced: List[CommentaryEntry] = []
        for goal in self.run_config.goals:
            if goal.minute != self.minute:
                continue
            if goal.side == Side.HOME:
                self.home_score += 1
            else:
                self.away_score += 1
            produced.append(CommentaryEntry(self.minute, GOAL_TEXT, CommentaryKind.GOAL))
            self._cue("play_crowd_noise")
        if not produced and self.rng.random() < self.flavor_probability:
            text = self.rng.choice(FLAVOR_EVENTS)
            produced.append(CommentaryEntry(self.minute, text, classify_flavor(text)))
        for entry in produced:
            self.feed.append(entry)
        if self.full_time:
            logger.debug("Full time %s-%s", self.home_score, self.away_score)
            self._cue("play_whistle")
        return produced

    def finish(self) -> bool:
        """Live at minute 90 -> Finished. Returns False if the transition does not apply."""
        if self.state != ClockState.LIVE or not self.full_time:
            return False
        self.state = ClockState.FINISHED
        self._token = None
        logger.info("Simulation finished %s-%s", self.home_score, self.away_score)
        return True

    async def run(self, on_update: Optional[UpdateCallback] = None) -> bool:
        """Drive a live match to the final screen. Returns True if it finished."""
        token = self._token
        if token is None or self.state != ClockState.LIVE:
            return False
        while not self.full_time:
            await asyncio.sleep(self.tick_seconds)
            if token.cancelled:
                return False
            entries = self.tick()
            if on_update is not None:
                on_update(self, entries)
        await asyncio.sleep(self.settle_seconds)
        if token.cancelled or not self.finish():
            return False
        if on_update is not None:
            on_update(self, [])
        return True

    def cancel(self) -> None:
        """Stop any running clock and discard the run. Safe to call repeatedly."""
        if self._token is not None:
            self._token.cancel()
            self._token = None
            logger.debug("Simulation clock cancelled at minute %s", self.minute)
        self.run_config = None
        self.state = None
        self._reset_counters()

    def _cue(self, name: str) -> None:
        if self.audio is None:
            return
        try:
            getattr(self.audio, name)()
        except Exception:
            logger.debug("Audio cue %s failed", name, exc_info=True)
