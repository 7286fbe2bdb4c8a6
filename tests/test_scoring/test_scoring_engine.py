"""Tests for ScoringEngine."""

import pytest
from datetime import timedelta

from route_notams.models.notam import NotamRecord, NotamCategory
from route_notams.models.route import RouteEndpoints
from route_notams.scoring.engine import ScoringEngine
from route_notams.scoring.rules import serious_fuel_rule


def create_notam(text="RWY 17L/35R CLSD", category=NotamCategory.RUNWAY, location="KOKC",
                 radius_nm=None, issued_at=None):
    """Helper to create test NOTAMs."""
    return NotamRecord(
        id="N123",
        number="01/045",
        category=category,
        location=location,
        issued_at=issued_at,
        radius_nm=radius_nm,
        text=text,
    )


class TestDefaultEngine:
    """Standard rule set."""

    def test_rule_names(self):
        assert ScoringEngine().rule_names == ["category", "keywords", "recency", "proximity"]

    def test_runway_closure_at_departure(self, now):
        record = create_notam(issued_at=now - timedelta(hours=2), radius_nm=5)
        scored = ScoringEngine().score(record, now, RouteEndpoints("KOKC", "KDFW"))

        assert scored.breakdown == {
            'category': 50.0,
            'keywords': 40.0,
            'recency': 20.0,
            'proximity': 35.0,
        }
        assert scored.score == 145.0
        assert scored.record is record

    def test_total_is_sum_of_breakdown(self, now):
        record = create_notam(text="ILS U/S", issued_at=now - timedelta(days=10), radius_nm=120)
        scored = ScoringEngine().score(record, now)
        assert scored.score == pytest.approx(sum(scored.breakdown.values()))

    def test_endpoints_optional(self, now):
        scored = ScoringEngine().score(create_notam(), now)
        assert scored.breakdown['proximity'] == 0.0


class TestCustomRules:
    """Composing engines."""

    def test_with_rule_returns_new_engine(self, now):
        base = ScoringEngine()
        extended = base.with_rule("serious_fuel", serious_fuel_rule)

        assert "serious_fuel" in extended.rule_names
        assert "serious_fuel" not in base.rule_names

        record = create_notam(text="ALL FUEL NOT AVBL", category=NotamCategory.UNKNOWN, location=None)
        assert extended.score(record, now).score - base.score(record, now).score == 65.0

    def test_with_rule_replaces_same_name(self, now):
        engine = ScoringEngine().with_rule("category", lambda record, now, endpoints: 1.0)
        assert engine.rule_names == ["category", "keywords", "recency", "proximity"]
        assert engine.score(create_notam(), now).breakdown['category'] == 1.0

    def test_without_rule(self, now):
        engine = ScoringEngine().without_rule("recency")
        assert engine.rule_names == ["category", "keywords", "proximity"]

    def test_empty_engine(self, now):
        assert ScoringEngine([]).score(create_notam(), now).score == 0.0

    def test_duplicate_names_rejected(self):
        rule = lambda record, now, endpoints: 0.0
        with pytest.raises(ValueError):
            ScoringEngine([("a", rule), ("a", rule)])

    @pytest.mark.parametrize("bad", [float('nan'), float('inf'), float('-inf')])
    def test_non_finite_contribution_rejected(self, now, bad):
        engine = ScoringEngine([("broken", lambda record, now, endpoints: bad)])
        with pytest.raises(ValueError):
            engine.score(create_notam(), now)


class TestRelativeImportance:
    """Closed runways outrank taxiway and plain information NOTAMs."""

    def test_runway_closure_beats_taxiway_and_plain(self, now):
        engine = ScoringEngine()
        issued = now - timedelta(hours=2)
        runway = engine.score(create_notam("RUNWAY 17L/35R CLOSED", issued_at=issued), now)
        taxiway = engine.score(create_notam("TWY A CLSD", NotamCategory.TAXIWAY, issued_at=issued), now)
        plain = engine.score(create_notam("AD HOURS OF OPS CHANGED", NotamCategory.UNKNOWN, issued_at=issued), now)

        assert runway.score > taxiway.score
        assert runway.score > plain.score
        assert taxiway.score > plain.score
