"""
Persisted state built on DurableStorage: the two team records and the
optional knowledge-base archive.

Every mutation is written through immediately; loads never raise and fall
back to defaults on missing or corrupt entries.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List

from pydantic import TypeAdapter, ValidationError

from domain.merge import merge_scan
from domain.models import (
    KnowledgeInsight,
    ScanResult,
    TeamRecord,
    TeamSide,
    default_my_team,
    default_opponent,
)
from services.repository import DurableStorage

logger = logging.getLogger(__name__)

MY_TEAM_KEY = "TACTIX_MY_TEAM"
OPPONENT_KEY = "TACTIX_OPPONENT"
KNOWLEDGE_KEY = "TACTIX_KNOWLEDGE_BASE"

STORAGE_KEYS = {
    TeamSide.SELF: MY_TEAM_KEY,
    TeamSide.OPPONENT: OPPONENT_KEY,
}

_INSIGHTS = TypeAdapter(List[KnowledgeInsight])


class PersistedTeamStore:
    def __init__(self, storage: DurableStorage) -> None:
        self.storage = storage
        self._records: Dict[TeamSide, TeamRecord] = {
            TeamSide.SELF: default_my_team(),
            TeamSide.OPPONENT: default_opponent(),
        }

    def load(self, key: str, default: TeamRecord) -> TeamRecord:
        raw = self.storage.get(key)
        if raw is None:
            return default
        try:
            return TeamRecord.model_validate_json(raw)
        except (ValidationError, ValueError):
            logger.warning("Stored team under %s is unreadable; using defaults", key)
            return default

    def save(self, key: str, record: TeamRecord) -> None:
        self.storage.set(key, record.model_dump_json().encode("utf-8"))

    def hydrate(self) -> None:
        self._records[TeamSide.SELF] = self.load(MY_TEAM_KEY, default_my_team())
        self._records[TeamSide.OPPONENT] = self.load(OPPONENT_KEY, default_opponent())

    def get(self, side: TeamSide) -> TeamRecord:
        return self._records[side]

    @property
    def my_team(self) -> TeamRecord:
        return self._records[TeamSide.SELF]

    @property
    def opponent(self) -> TeamRecord:
        return self._records[TeamSide.OPPONENT]

    def replace(self, side: TeamSide, record: TeamRecord) -> TeamRecord:
        self.save(STORAGE_KEYS[side], record)
        self._records[side] = record
        return record

    def update(self, side: TeamSide, **changes: Any) -> TeamRecord:
        """Apply user edits; raises ValidationError and keeps the old record if invalid."""
        current = self._records[side]
        record = TeamRecord.model_validate({**current.model_dump(), **changes})
        return self.replace(side, record)

    def apply_scan(self, side: TeamSide, scanned: ScanResult) -> TeamRecord:
        return self.replace(side, merge_scan(self._records[side], scanned))


def load_insights(storage: DurableStorage, key: str = KNOWLEDGE_KEY) -> List[KnowledgeInsight]:
    raw = storage.get(key)
    if raw is None:
        return []
    try:
        return _INSIGHTS.validate_json(raw)
    except (ValidationError, ValueError):
        logger.warning("Stored knowledge base under %s is unreadable; starting empty", key)
        return []


def save_insights(storage: DurableStorage, insights: List[KnowledgeInsight], key: str = KNOWLEDGE_KEY) -> None:
    storage.set(key, _INSIGHTS.dump_json(insights))
