"""
Domain Models for the TACTIX OSM assistant

These are pure data models with no Streamlit dependencies.
Team records and knowledge insights are pydantic models because they round-trip
through durable storage and the remote service; values that only live for one
simulated match are plain dataclasses.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from .formations import FormationCode, normalize_formation

MIN_RATING = 1
MAX_RATING = 150
FORM_LENGTH = 3


class Outcome(str, Enum):
    """Result of a past match"""
    WIN = "W"
    DRAW = "D"
    LOSS = "L"


class Venue(str, Enum):
    """Match venue"""
    HOME = "Home"
    AWAY = "Away"


class Side(str, Enum):
    """Scoreboard side in a simulated match (my team is always Home)"""
    HOME = "Home"
    AWAY = "Away"


class TeamSide(str, Enum):
    """Which of the two stored team records"""
    SELF = "self"
    OPPONENT = "opponent"


class Position(str, Enum):
    GK = "GK"
    DEF = "DEF"
    MID = "MID"
    FWD = "FWD"


class CommentaryKind(str, Enum):
    GOAL = "goal"
    CHANCE = "chance"
    CARD = "card"
    NORMAL = "normal"


class ClockState(str, Enum):
    """Presentation state of the simulation room"""
    INTRO = "intro"
    LIVE = "live"
    FINISHED = "finished"


class Language(str, Enum):
    EN = "en"
    TR = "tr"


class PlayerRef(BaseModel):
    id: str
    name: str
    position: Position
    rating: int = Field(ge=0, le=MAX_RATING)


class TeamRecord(BaseModel):
    """One of the two teams the user is preparing for"""
    name: str = Field(min_length=1)
    formation: FormationCode
    averageRating: int = Field(ge=MIN_RATING, le=MAX_RATING)
    recentForm: List[Outcome] = Field(min_length=FORM_LENGTH, max_length=FORM_LENGTH)
    venue: Venue = Venue.HOME
    # Carried for completeness; nothing downstream reads it yet
    keyPlayers: List[PlayerRef] = Field(default_factory=list)

    @property
    def form_string(self) -> str:
        return "-".join(o.value for o in self.recentForm)

    def __str__(self) -> str:
        return f"{self.name} ({self.formation.value}, {self.averageRating}, {self.venue.value})"


class ScanResult(BaseModel):
    """Partial team record read from a screenshot.

    Every field is optional. Values that could not produce a valid TeamRecord
    field (blank names, unknown formations, out-of-range ratings, short form
    sequences) are normalised to None here, so merging never has to validate.
    """
    teamName: Optional[str] = None
    formation: Optional[FormationCode] = None
    averageRating: Optional[int] = None
    recentForm: Optional[List[Outcome]] = None

    @field_validator("teamName", mode="before")
    @classmethod
    def _clean_name(cls, v: Any) -> Optional[str]:
        if not isinstance(v, str):
            return None
        return v.strip() or None

    @field_validator("formation", mode="before")
    @classmethod
    def _clean_formation(cls, v: Any) -> Optional[FormationCode]:
        return normalize_formation(v)

    @field_validator("averageRating", mode="before")
    @classmethod
    def _clean_rating(cls, v: Any) -> Optional[int]:
        if v is None or isinstance(v, bool):
            return None
        try:
            rating = int(round(float(v)))
        except (TypeError, ValueError):
            return None
        if rating < MIN_RATING or rating > MAX_RATING:
            return None
        return rating

    @field_validator("recentForm", mode="before")
    @classmethod
    def _clean_form(cls, v: Any) -> Optional[List[Outcome]]:
        if not isinstance(v, (list, tuple)):
            return None
        form: List[Outcome] = []
        for item in v:
            try:
                form.append(Outcome(str(getattr(item, "value", item)).strip().upper()))
            except ValueError:
                continue
        # A partial form line is not mergeable; keep the most recent three
        if len(form) < FORM_LENGTH:
            return None
        return form[:FORM_LENGTH]

    @property
    def is_empty(self) -> bool:
        return not (self.teamName or self.formation or self.averageRating or self.recentForm)


class KnowledgeInsight(BaseModel):
    """Tactical knowledge extracted from an uploaded document"""
    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:9])
    filename: str
    documentType: str = ""
    keyInsights: List[str] = Field(default_factory=list)
    tacticalRules: List[str] = Field(default_factory=list)
    createdAt: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class GoalEvent:
    minute: int
    side: Side


@dataclass(frozen=True)
class CommentaryEntry:
    minute: int
    text: str
    kind: CommentaryKind = CommentaryKind.NORMAL


def default_my_team() -> TeamRecord:
    return TeamRecord(
        name="My Team",
        formation=FormationCode.F433A,
        averageRating=85,
        recentForm=[Outcome.WIN, Outcome.WIN, Outcome.WIN],
        venue=Venue.HOME,
    )


def default_opponent() -> TeamRecord:
    return TeamRecord(
        name="Opponent FC",
        formation=FormationCode.F442B,
        averageRating=88,
        recentForm=[Outcome.WIN, Outcome.DRAW, Outcome.WIN],
        venue=Venue.HOME,
    )
