from domain.formations import FormationCode
from domain.merge import merge_scan
from domain.models import *


def make_team(**kwargs):
    defaults = dict(
        name="FC A",
        formation=FormationCode.F442A,
        averageRating=80,
        recentForm=[Outcome.WIN, Outcome.DRAW, Outcome.LOSS],
        venue=Venue.AWAY,
    )
    defaults.update(kwargs)
    return TeamRecord(**defaults)


def test_null_scan_keeps_every_field():
    existing = make_team()
    merged = merge_scan(existing, ScanResult(averageRating=None))
    assert merged == existing
    assert merged is not existing


def test_each_present_field_overrides_independently():
    existing = make_team()
    cases = [
        (ScanResult(teamName="Galatasaray"), "name", "Galatasaray"),
        (ScanResult(formation="4-2-3-1"), "formation", FormationCode.F4231),
        (ScanResult(averageRating=101), "averageRating", 101),
        (ScanResult(recentForm=["L", "L", "W"]), "recentForm", [Outcome.LOSS, Outcome.LOSS, Outcome.WIN]),
    ]
    for scan, field, expected in cases:
        merged = merge_scan(existing, scan)
        for name in ("name", "formation", "averageRating", "recentForm"):
            if name == field:
                assert getattr(merged, name) == expected
            else:
                assert getattr(merged, name) == getattr(existing, name)
        assert merged.venue == Venue.AWAY


def test_full_scan_replaces_everything_but_venue():
    existing = make_team()
    scan = ScanResult(teamName="Fenerbahce", formation="433B", averageRating="92", recentForm=["w", "w", "d"])
    merged = merge_scan(existing, scan)
    assert merged.name == "Fenerbahce"
    assert merged.formation == FormationCode.F433B
    assert merged.averageRating == 92
    assert merged.form_string == "W-W-D"
    assert merged.venue == existing.venue


def test_blank_or_invalid_scan_values_are_absent():
    scan = ScanResult(teamName="   ", formation="9-9-9", averageRating=0, recentForm=["W", "D"])
    assert scan.is_empty
    existing = make_team()
    assert merge_scan(existing, scan) == existing


def test_scan_form_longer_than_three_keeps_first_three():
    scan = ScanResult(recentForm=["L", "W", "x", "D", "W"])
    assert scan.recentForm == [Outcome.LOSS, Outcome.WIN, Outcome.DRAW]


def test_scan_out_of_range_rating_is_dropped():
    assert ScanResult(averageRating=151).averageRating is None
    assert ScanResult(averageRating="n/a").averageRating is None
    assert ScanResult(averageRating=87.6).averageRating == 88


def test_merge_does_not_mutate_existing_form():
    existing = make_team()
    merged = merge_scan(existing, ScanResult(teamName="Other"))
    merged.recentForm.append(Outcome.WIN)
    assert len(existing.recentForm) == 3
