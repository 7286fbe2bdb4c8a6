"""NOTAM scoring and prioritization."""

from route_notams.scoring.base import ScoringRule, NamedRule
from route_notams.scoring.engine import ScoringEngine
from route_notams.scoring.prioritizer import Prioritizer
from route_notams.scoring.rules import (
    default_rules,
    category_rule,
    keyword_rule,
    recency_rule,
    proximity_rule,
    serious_fuel_rule,
    make_category_rule,
    make_keyword_rule,
    make_recency_rule,
    make_proximity_rule,
    matched_keyword_classes,
)

__all__ = [
    'ScoringRule',
    'NamedRule',
    'ScoringEngine',
    'Prioritizer',
    'default_rules',
    'category_rule',
    'keyword_rule',
    'recency_rule',
    'proximity_rule',
    'serious_fuel_rule',
    'make_category_rule',
    'make_keyword_rule',
    'make_recency_rule',
    'make_proximity_rule',
    'matched_keyword_classes',
]
