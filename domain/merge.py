"""
Folds a screenshot scan into an existing team record.
"""
from __future__ import annotations

from .models import ScanResult, TeamRecord


def merge_scan(existing: TeamRecord, scanned: ScanResult) -> TeamRecord:
    """Return a new record where every field the scan read overrides the existing one.

    Fields the scan did not produce keep their current value, independently of
    each other. Recent form is all-or-nothing.
    """
    return existing.model_copy(
        deep=True,
        update={
            "name": scanned.teamName or existing.name,
            "formation": scanned.formation or existing.formation,
            "averageRating": scanned.averageRating or existing.averageRating,
            "recentForm": list(scanned.recentForm) if scanned.recentForm else list(existing.recentForm),
        },
    )
