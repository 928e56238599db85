from __future__ import annotations

import copy

from survey_geocode.common.models import GeocodeResult
from survey_geocode.enrich.pipeline import composite_address, enrich_responses, is_enriched


def make_result(state: str | None = "Lagos State") -> GeocodeResult:
    return GeocodeResult(
        latitude=6.45,
        longitude=3.39,
        formatted_address="12 Main St, Lagos, Nigeria",
        timezone="Africa/Lagos",
        state=state,
        country="Nigeria",
    )


class FakeGeocoder:
    def __init__(self, result: GeocodeResult | None = None):
        self.result = result
        self.calls: list[str] = []

    def lookup(self, address: str):
        self.calls.append(address)
        return self.result


class RecordingPacer:
    def __init__(self):
        self.pauses = 0

    def pause(self):
        self.pauses += 1


def test_composite_address_drops_empty_fields_in_fixed_order():
    record = {"physical_address": "12 Main St", "town": "", "city": "Lagos", "country": "Nigeria"}

    assert composite_address(record) == "12 Main St, Lagos, Nigeria"


def test_is_enriched_requires_both_coordinates():
    assert is_enriched({"latitude": 0.0, "longitude": 0.0})
    assert not is_enriched({"latitude": 1.0})
    assert not is_enriched({"latitude": 1.0, "longitude": None})


def test_enrich_skips_records_with_coordinates():
    record = {"id": 1, "latitude": 1.5, "longitude": 2.5, "city": "Lagos"}
    geocoder = FakeGeocoder(make_result())

    result = enrich_responses([record], geocoder, RecordingPacer())

    assert result.records == [record]
    assert result.stats.skipped == 1
    assert result.stats.geocoded == 0
    assert geocoder.calls == []


def test_enrich_merges_result_and_counts():
    record = {"id": 7, "physical_address": "12 Main St", "town": "", "city": "Lagos", "country": "Nigeria"}
    original = copy.deepcopy(record)
    geocoder = FakeGeocoder(make_result())

    result = enrich_responses([record], geocoder, RecordingPacer())

    assert geocoder.calls == ["12 Main St, Lagos, Nigeria"]
    assert result.records[0] == {
        **original,
        "latitude": 6.45,
        "longitude": 3.39,
        "state": "Lagos State",
        "timezone": "Africa/Lagos",
        "formatted_address": "12 Main St, Lagos, Nigeria",
    }
    assert record == original
    assert result.stats.geocoded == 1
    assert result.stats.total == 1


def test_enrich_keeps_original_state_when_result_has_none():
    record = {"id": 1, "city": "Lagos", "state": "Lagos"}

    result = enrich_responses([record], FakeGeocoder(make_result(state=None)), RecordingPacer())

    assert result.records[0]["state"] == "Lagos"
    assert result.records[0]["latitude"] == 6.45


def test_enrich_leaves_record_unchanged_when_lookup_fails():
    record = {"id": 1, "city": "Atlantis"}

    result = enrich_responses([record], FakeGeocoder(None), RecordingPacer())

    assert result.records == [record]
    assert result.stats.geocoded == 0
    assert result.stats.failed == 1


def test_enrich_leaves_record_without_address_unchanged():
    record = {"id": 1, "physical_address": "", "town": None, "notes": "n/a"}
    geocoder = FakeGeocoder(make_result())

    result = enrich_responses([record], geocoder, RecordingPacer())

    assert result.records == [record]
    assert geocoder.calls == []
    assert result.stats.no_address == 1
    assert result.stats.geocoded == 0
    assert result.stats.skipped == 0


def test_enrich_preserves_length_and_order():
    records = [
        {"id": 1, "latitude": 1, "longitude": 2},
        {"id": 2, "city": "Lagos"},
        {"id": 3},
        {"id": 4, "country": "Ghana"},
    ]

    result = enrich_responses(records, FakeGeocoder(make_result()), RecordingPacer())

    assert [r["id"] for r in result.records] == [1, 2, 3, 4]
    assert result.stats.total == 4
    assert result.stats.geocoded == 2
    assert result.stats.skipped == 1


def test_enrich_paces_after_every_record_by_default():
    records = [{"id": 1, "latitude": 1, "longitude": 2}, {"id": 2}, {"id": 3, "city": "Lagos"}]
    pacer = RecordingPacer()

    enrich_responses(records, FakeGeocoder(make_result()), pacer)

    assert pacer.pauses == 3


def test_enrich_paces_only_lookups_when_pace_skipped_disabled():
    records = [{"id": 1, "latitude": 1, "longitude": 2}, {"id": 2}, {"id": 3, "city": "Lagos"}]
    pacer = RecordingPacer()

    enrich_responses(records, FakeGeocoder(None), pacer, pace_skipped=False)

    assert pacer.pauses == 1
