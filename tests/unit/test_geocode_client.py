from __future__ import annotations

import logging

from survey_geocode.common.http import HttpRequestError, TimeoutConfig
from survey_geocode.enrich.pacing import FixedDelayPacer
from survey_geocode.enrich.pipeline import enrich_responses
from survey_geocode.geocode.client import GeocodingClient, parse_geocode_payload

NAIROBI_PAYLOAD = {
    "status": "OK",
    "results": [
        {
            "geometry": {"location": {"lat": -1.28, "lng": 36.82}},
            "formatted_address": "1 Test Rd, Nairobi, Kenya",
            "address_components": [
                {"long_name": "Nairobi County", "types": ["administrative_area_level_1"]},
                {"long_name": "Kenya", "types": ["country"]},
            ],
        }
    ],
}


class FakeHttpClient:
    def __init__(self, payload=None, error: Exception | None = None):
        self.payload = payload
        self.error = error
        self.calls: list[tuple[str, dict]] = []

    def get_json(self, url: str, **kwargs):
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.payload


def test_lookup_success_builds_result():
    http = FakeHttpClient(NAIROBI_PAYLOAD)
    client = GeocodingClient("test-key", http, base_url="https://maps.example/api/")

    result = client.lookup("1 Test Rd, Nairobi, Kenya")

    assert result is not None
    assert result.latitude == -1.28
    assert result.longitude == 36.82
    assert result.formatted_address == "1 Test Rd, Nairobi, Kenya"
    assert result.state == "Nairobi County"
    assert result.country == "Kenya"
    assert result.timezone == "Africa/Nairobi"
    assert len(result.address_components) == 2


def test_lookup_sends_address_key_and_timeout():
    http = FakeHttpClient(NAIROBI_PAYLOAD)
    timeout = TimeoutConfig(connect=1, read=2)
    client = GeocodingClient("test-key", http, base_url="https://maps.example/api", timeout=timeout)

    client.lookup("Lagos, Nigeria")

    url, kwargs = http.calls[0]
    assert url == "https://maps.example/api/geocode/json"
    assert kwargs["params"] == {"address": "Lagos, Nigeria", "key": "test-key"}
    assert kwargs["timeout"] == timeout


def test_lookup_non_ok_status_returns_none(caplog):
    client = GeocodingClient("k", FakeHttpClient({"status": "REQUEST_DENIED", "results": []}))

    with caplog.at_level(logging.WARNING):
        assert client.lookup("Nowhere") is None
    assert any("REQUEST_DENIED" in record.getMessage() for record in caplog.records)


def test_lookup_empty_results_returns_none():
    client = GeocodingClient("k", FakeHttpClient({"status": "OK", "results": []}))

    assert client.lookup("Nowhere") is None


def test_lookup_transport_error_returns_none():
    client = GeocodingClient("k", FakeHttpClient(error=HttpRequestError("HTTP status: 500")))

    assert client.lookup("Lagos") is None


def test_lookup_malformed_result_returns_none():
    payload = {"status": "OK", "results": [{"formatted_address": "x"}]}
    client = GeocodingClient("k", FakeHttpClient(payload))

    assert client.lookup("Lagos") is None


def test_parse_geocode_payload_unmapped_country_uses_utc():
    payload = {
        "status": "OK",
        "results": [
            {
                "geometry": {"location": {"lat": "51.5", "lng": "-0.12"}},
                "formatted_address": "London, UK",
                "address_components": [{"long_name": "United Kingdom", "types": ["country"]}],
            }
        ],
    }

    result = parse_geocode_payload(payload)

    assert result.latitude == 51.5
    assert result.state is None
    assert result.timezone == "UTC"


def test_lookup_non_mapping_component_returns_none():
    payload = {
        "status": "OK",
        "results": [
            {
                "geometry": {"location": {"lat": 6.45, "lng": 3.39}},
                "formatted_address": "Lagos, Nigeria",
                "address_components": ["Lagos"],
            }
        ],
    }
    client = GeocodingClient("k", FakeHttpClient(payload))

    assert client.lookup("Lagos") is None


def test_lookup_results_mapping_instead_of_list_returns_none():
    client = GeocodingClient("k", FakeHttpClient({"status": "OK", "results": {"first": {}}}))

    assert client.lookup("Lagos") is None


def test_malformed_result_leaves_only_that_record_unenriched():
    class SequencedHttpClient:
        def __init__(self, payloads):
            self.payloads = list(payloads)

        def get_json(self, url: str, **kwargs):
            return self.payloads.pop(0)

    bad = {"status": "OK", "results": [{"geometry": {"location": {"lat": 1, "lng": 2}}, "address_components": [1]}]}
    client = GeocodingClient("k", SequencedHttpClient([bad, NAIROBI_PAYLOAD]))
    records = [{"id": 1, "city": "Lagos"}, {"id": 2, "city": "Nairobi"}]

    result = enrich_responses(records, client, FixedDelayPacer(0))

    assert result.records[0] == {"id": 1, "city": "Lagos"}
    assert result.records[1]["latitude"] == -1.28
    assert result.stats.failed == 1
    assert result.stats.geocoded == 1
