"""Tests for NOTAM deduplication."""

import pytest
from datetime import datetime, timedelta, timezone

from route_notams.collections.deduplicator import Deduplicator, dedup_key, prefer, text_hash
from route_notams.models.notam import NotamRecord, NotamCategory

ISSUED = datetime(2025, 1, 15, 10, 30, 45, tzinfo=timezone.utc)


def create_notam(
    id: str = "N123",
    number: str = "01/045",
    location: str = "KOKC",
    category: NotamCategory = NotamCategory.RUNWAY,
    issued_at: datetime = ISSUED,
    radius_nm: float = None,
    text: str = "RWY 17L/35R CLSD",
) -> NotamRecord:
    """Helper to create test NOTAMs."""
    return NotamRecord(
        id=id,
        number=number,
        category=category,
        location=location,
        issued_at=issued_at,
        radius_nm=radius_nm,
        text=text,
    )


class TestDedupKey:
    """Key derivation."""

    def test_id_key(self):
        assert dedup_key(create_notam(id=" N123 ")) == "ID|N123"

    def test_number_location_text_key(self):
        key = dedup_key(create_notam(id=None, location="kokc"))
        assert key == f"NLT|01/045|KOKC|runway|{text_hash('RWY 17L/35R CLSD')}"

    def test_text_hash_ignores_case_and_spacing(self):
        assert text_hash("RWY 17L/35R   CLSD\n") == text_hash("rwy 17l/35r clsd")
        assert len(text_hash("RWY 17L/35R CLSD")) == 16

    def test_number_location_issued_key(self):
        key = dedup_key(create_notam(id=None, text=""))
        assert key == "NLI|01/045|KOKC|2025-01-15T10:30:00+00:00"

    def test_no_key(self):
        assert dedup_key(create_notam(id=None, number=None)) is None
        assert dedup_key(create_notam(id="", location=None)) is None
        assert dedup_key(create_notam(id=None, text="", issued_at=None)) is None


class TestPrefer:
    """Collision resolution."""

    def test_later_issue_wins(self):
        older = create_notam()
        newer = create_notam(issued_at=ISSUED + timedelta(hours=1))
        assert prefer(newer, older)
        assert not prefer(older, newer)

    def test_issued_beats_unknown(self):
        assert prefer(create_notam(), create_notam(issued_at=None))
        assert not prefer(create_notam(issued_at=None), create_notam())

    def test_radius_beats_no_radius(self):
        assert prefer(create_notam(radius_nm=5), create_notam())
        assert not prefer(create_notam(), create_notam(radius_nm=5))

    def test_longer_text_wins(self):
        assert prefer(create_notam(text="RWY 17L/35R CLSD EXC TAX"), create_notam())

    def test_tie_keeps_incumbent(self):
        assert not prefer(create_notam(), create_notam())


class TestDeduplicator:
    """Whole list deduplication."""

    def test_same_id_from_overlapping_waypoints(self):
        records = [
            create_notam(id="N123"),
            create_notam(id="N200", text="TWY A CLSD"),
            create_notam(id="N123"),
        ]
        unique = Deduplicator().dedup(records)
        assert [r.id for r in unique] == ["N123", "N200"]

    def test_replacement_keeps_first_slot(self):
        first = create_notam(id="N123")
        other = create_notam(id="N200")
        better = create_notam(id="N123", issued_at=ISSUED + timedelta(minutes=5))

        unique = Deduplicator().dedup([first, other, better])

        assert unique[0] is better
        assert unique[1] is other

    def test_keyless_records_are_all_kept(self):
        a = create_notam(id=None, number=None, text="A")
        b = create_notam(id=None, number=None, text="A")
        assert len(Deduplicator().dedup([a, b])) == 2

    def test_none_entries_skipped(self):
        assert Deduplicator().dedup([None, create_notam(), None]) == [create_notam()]

    def test_idempotent(self):
        records = [create_notam(id=f"N{i % 3}") for i in range(7)]
        once = Deduplicator().dedup(records)
        assert Deduplicator().dedup(once) == once

    def test_text_key_matches_across_formatting(self):
        a = create_notam(id=None, text="RWY 17L/35R CLSD")
        b = create_notam(id=None, text="rwy 17L/35R  clsd")
        assert len(Deduplicator().dedup([a, b])) == 1

    def test_different_category_not_merged(self):
        a = create_notam(id=None, category=NotamCategory.RUNWAY)
        b = create_notam(id=None, category=NotamCategory.TAXIWAY)
        assert len(Deduplicator().dedup([a, b])) == 2

    def test_merge_batches(self):
        unique = Deduplicator().merge(
            [create_notam(id="N1"), create_notam(id="N2")],
            [create_notam(id="N2"), create_notam(id="N3")],
        )
        assert [r.id for r in unique] == ["N1", "N2", "N3"]

    def test_empty(self):
        assert Deduplicator().dedup([]) == []


class TestNaiveIssueTimes:
    """Naive issue times are compared as UTC."""

    def test_prefer_mixed_naive_and_aware(self):
        aware = create_notam()
        naive_later = create_notam(issued_at=datetime(2025, 1, 15, 11, 30, 45))

        assert prefer(naive_later, aware)
        assert not prefer(aware, naive_later)

    def test_same_instant_same_key(self):
        naive = create_notam(id=None, text="", issued_at=ISSUED.replace(tzinfo=None))
        assert dedup_key(naive) == dedup_key(create_notam(id=None, text=""))

    def test_dedup_mixed_records(self):
        aware = create_notam(text="RWY 17L/35R CLSD")
        naive = create_notam(issued_at=datetime(2025, 1, 15, 12, 0), text="RWY 17L/35R CLSD")
        assert Deduplicator().dedup([aware, naive]) == [naive]
