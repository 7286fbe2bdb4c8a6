"""Ranking of scored NOTAMs."""

import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Tuple, Union

from route_notams.models.notam import NotamRecord, ScoredNotam
from route_notams.models.route import RouteEndpoints
from route_notams.scoring.base import as_utc, utc_now
from route_notams.scoring.engine import ScoringEngine

logger = logging.getLogger(__name__)


def _sort_key(scored: ScoredNotam) -> Tuple:
    # score desc, issued desc (missing last), id asc (missing last)
    issued = as_utc(scored.record.issued_at)
    issued_key = (0, -issued.timestamp()) if issued is not None else (1, 0.0)
    record_id = scored.record.id
    id_key = (0, record_id) if record_id else (1, "")
    return (-scored.score, issued_key, id_key)


class Prioritizer:
    """
    Score NOTAMs and order them most important first.

    Ordering is total and deterministic: score descending, then issue time
    descending with unknown issue times last, then id ascending with
    missing ids last. The result does not depend on input order.

    Example:
        prioritizer = Prioritizer()
        ranked = prioritizer.prioritize(records, endpoints=RouteEndpoints("KOKC", "KDFW"))
        for scored in ranked[:10]:
            print(scored.display_score, scored.record)
    """

    def __init__(
        self,
        engine: Optional[ScoringEngine] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            engine: Scoring engine. If None, uses the default rule set.
            clock: Source of the evaluation instant when none is given.
        """
        self.engine = engine or ScoringEngine()
        self.clock = clock or utc_now

    def prioritize(
        self,
        records: Iterable[Union[NotamRecord, ScoredNotam]],
        now: Optional[datetime] = None,
        endpoints: Optional[RouteEndpoints] = None,
    ) -> List[ScoredNotam]:
        """
        Score and sort records.

        Already scored entries are re-scored from their record, so feeding
        the output back in gives the same result for the same instant.

        Args:
            records: Records or previously scored records
            now: Evaluation instant, defaults to the clock
            endpoints: Departure and destination used by proximity scoring

        Returns:
            Scored records, most important first
        """
        now = now or self.clock()
        endpoints = endpoints or RouteEndpoints()

        scored: List[ScoredNotam] = []
        for item in records:
            if item is None:
                continue
            record = item.record if isinstance(item, ScoredNotam) else item
            scored.append(self.engine.score(record, now, endpoints))

        scored.sort(key=_sort_key)
        logger.debug(f"Prioritized {len(scored)} NOTAMs for {endpoints!r}")
        return scored
