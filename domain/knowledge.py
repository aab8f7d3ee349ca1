"""
Knowledge base built from uploaded tactical documents.

Insights are kept in upload order and flattened into free text that rides
along with analysis, coaching and simulation prompts.
"""
from __future__ import annotations

from typing import Iterable, Iterator, List, Optional

from .models import KnowledgeInsight


def insight_header(insight: KnowledgeInsight) -> str:
    return f"--- FROM DOC: {insight.filename} ({insight.documentType}) ---"


class KnowledgeBase:
    def __init__(self, insights: Optional[Iterable[KnowledgeInsight]] = None) -> None:
        self._insights: List[KnowledgeInsight] = list(insights or [])

    def add(self, insight: KnowledgeInsight) -> None:
        self._insights.append(insight)

    def remove(self, insight_id: str) -> bool:
        before = len(self._insights)
        self._insights = [i for i in self._insights if i.id != insight_id]
        return len(self._insights) != before

    def replace_all(self, insights: Iterable[KnowledgeInsight]) -> None:
        self._insights = list(insights)

    @property
    def insights(self) -> List[KnowledgeInsight]:
        return list(self._insights)

    def flatten_to_context(self) -> List[str]:
        """Header line per document, then its tactical rules, then its key insights."""
        lines: List[str] = []
        for insight in self._insights:
            lines.append(insight_header(insight))
            lines.extend(insight.tacticalRules)
            lines.extend(insight.keyInsights)
        return lines

    def __len__(self) -> int:
        return len(self._insights)

    def __iter__(self) -> Iterator[KnowledgeInsight]:
        return iter(list(self._insights))
