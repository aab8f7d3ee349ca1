from domain.knowledge import KnowledgeBase, insight_header
from domain.models import *


def make_insight(filename, **kwargs):
    return KnowledgeInsight(filename=filename, **kwargs)


def test_flatten_orders_header_rules_then_insights():
    kb = KnowledgeBase()
    kb.add(make_insight("guide.png", documentType="Tactical Guide", keyInsights=["i1", "i2"], tacticalRules=["r1"]))
    kb.add(make_insight("sheet.png", documentType="Player Database", keyInsights=["j1"]))
    assert kb.flatten_to_context() == [
        "--- FROM DOC: guide.png (Tactical Guide) ---",
        "r1",
        "i1",
        "i2",
        "--- FROM DOC: sheet.png (Player Database) ---",
        "j1",
    ]


def test_empty_base_flattens_to_nothing():
    assert KnowledgeBase().flatten_to_context() == []


def test_remove_by_id():
    first = make_insight("a.png")
    second = make_insight("b.png")
    kb = KnowledgeBase([first, second])
    assert kb.remove(first.id) is True
    assert kb.remove(first.id) is False
    assert [i.filename for i in kb] == ["b.png"]
    assert len(kb) == 1


def test_insights_property_is_a_copy():
    kb = KnowledgeBase([make_insight("a.png")])
    kb.insights.clear()
    assert len(kb) == 1


def test_generated_ids_are_unique():
    ids = {make_insight("x.png").id for _ in range(50)}
    assert len(ids) == 50


def test_header_format():
    insight = make_insight("plan.jpg", documentType="Notes")
    assert insight_header(insight) == "--- FROM DOC: plan.jpg (Notes) ---"
