"""Forward-geocoding client for the Google Maps Geocoding API."""

from __future__ import annotations

import logging
from typing import Any

import requests

from survey_geocode.common.constants import DEFAULT_CONFIG
from survey_geocode.common.errors import ProviderError
from survey_geocode.common.http import HttpClient, TimeoutConfig
from survey_geocode.common.logging import default_logger, log_event
from survey_geocode.common.models import GeocodeResult
from survey_geocode.geocode.components import parse_address_components
from survey_geocode.geocode.timezones import resolve_timezone

DEFAULT_BASE_URL = DEFAULT_CONFIG["provider"]["base_url"]


def _safe_float(value: object) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ProviderError(f"Invalid coordinate value: {value!r}") from exc


def parse_geocode_payload(payload: dict[str, Any]) -> GeocodeResult:
    status = payload.get("status")
    results = payload.get("results") or []
    if status != "OK":
        raise ProviderError(f"Provider status: {status}")
    if not isinstance(results, list):
        raise ProviderError("Provider results are not a list")
    if not results:
        raise ProviderError("Provider returned no results")

    first = results[0]
    if not isinstance(first, dict):
        raise ProviderError("Provider result is not an object")
    try:
        location = first["geometry"]["location"]
        lat, lng = location["lat"], location["lng"]
    except (KeyError, TypeError) as exc:
        raise ProviderError("Result has no geometry.location") from exc

    raw_components = first.get("address_components") or []
    if not isinstance(raw_components, list) or not all(isinstance(c, dict) for c in raw_components):
        raise ProviderError("Result address_components are malformed")
    parsed = parse_address_components(raw_components)
    country = parsed.get("country")
    return GeocodeResult(
        latitude=_safe_float(lat),
        longitude=_safe_float(lng),
        formatted_address=first.get("formatted_address") or "",
        timezone=resolve_timezone(country),
        state=parsed.get("state"),
        country=country,
        address_components=list(raw_components),
    )


class GeocodingClient:
    """Single-attempt address lookups; every provider failure becomes `None`."""

    def __init__(
        self,
        api_key: str,
        http_client: HttpClient,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: TimeoutConfig | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.api_key = api_key
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.logger = logger or default_logger()

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/geocode/json"

    def lookup(self, address: str) -> GeocodeResult | None:
        log_event(self.logger, f"geocoding {address}", level=logging.DEBUG, stage="geocode", event="LOOKUP")
        try:
            payload = self.http_client.get_json(
                self.endpoint,
                params={"address": address, "key": self.api_key},
                timeout=self.timeout,
            )
            return parse_geocode_payload(payload)
        except (ProviderError, requests.RequestException) as exc:
            log_event(
                self.logger,
                f"geocoding failed for {address!r}: {exc}",
                level=logging.WARNING,
                stage="geocode",
                event="LOOKUP_FAIL",
                status="error",
                error_code=getattr(exc, "error_code", ProviderError.error_code),
            )
            return None
