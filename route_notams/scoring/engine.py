"""Scoring engine combining named rules into one priority score."""

import math
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from route_notams.models.notam import NotamRecord, ScoredNotam
from route_notams.models.route import RouteEndpoints
from route_notams.scoring.base import NamedRule, ScoringRule
from route_notams.scoring.rules import default_rules


class ScoringEngine:
    """
    Sum the contributions of an ordered set of named rules.

    Engines are immutable: with_rule and without_rule return new engines,
    so one engine can be shared between threads and routes.

    Example:
        engine = ScoringEngine()
        scored = engine.score(record, now, RouteEndpoints("KOKC", "KDFW"))
        print(scored.score, scored.breakdown)

        # Add the serious fuel outage rule
        engine = engine.with_rule("serious_fuel", serious_fuel_rule)
    """

    def __init__(self, rules: Optional[Iterable[NamedRule]] = None):
        """
        Initialize engine with rules.

        Args:
            rules: (name, rule) pairs. If None, uses default_rules().

        Raises:
            ValueError: If two rules share a name
        """
        self._rules: List[NamedRule] = list(default_rules() if rules is None else rules)

        names = [name for name, _ in self._rules]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate scoring rule names: {', '.join(duplicates)}")

    @property
    def rules(self) -> List[NamedRule]:
        return list(self._rules)

    @property
    def rule_names(self) -> List[str]:
        return [name for name, _ in self._rules]

    def breakdown(
        self,
        record: NotamRecord,
        now: datetime,
        endpoints: Optional[RouteEndpoints] = None,
    ) -> Dict[str, float]:
        """
        Evaluate every rule against a record.

        Returns:
            Contribution per rule name, in rule order

        Raises:
            ValueError: If a rule returns NaN or an infinite value
        """
        endpoints = endpoints or RouteEndpoints()
        contributions: Dict[str, float] = {}
        for name, rule in self._rules:
            value = float(rule(record, now, endpoints))
            if not math.isfinite(value):
                raise ValueError(f"Scoring rule '{name}' returned {value} for NOTAM {record.id}")
            contributions[name] = value
        return contributions

    def score(
        self,
        record: NotamRecord,
        now: datetime,
        endpoints: Optional[RouteEndpoints] = None,
    ) -> ScoredNotam:
        """
        Score one record.

        Args:
            record: NOTAM to score
            now: Evaluation instant
            endpoints: Departure and destination, may be empty

        Returns:
            ScoredNotam carrying the total and its breakdown
        """
        contributions = self.breakdown(record, now, endpoints)
        return ScoredNotam(record=record, score=sum(contributions.values()), breakdown=contributions)

    def with_rule(self, name: str, rule: ScoringRule) -> 'ScoringEngine':
        """
        Return a new engine with a rule added, or replaced if the name exists.

        Args:
            name: Rule name used in breakdowns
            rule: Callable (record, now, endpoints) -> float
        """
        if name in self.rule_names:
            return ScoringEngine([(n, rule if n == name else r) for n, r in self._rules])
        return ScoringEngine(self._rules + [(name, rule)])

    def without_rule(self, name: str) -> 'ScoringEngine':
        """Return a new engine without the named rule."""
        return ScoringEngine([(n, r) for n, r in self._rules if n != name])

    def __repr__(self) -> str:
        return f"ScoringEngine(rules={self.rule_names})"
