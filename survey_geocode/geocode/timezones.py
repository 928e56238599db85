"""Country name to timezone lookup."""

from __future__ import annotations

DEFAULT_TIMEZONE = "UTC"

TIMEZONE_BY_COUNTRY = {
    "Nigeria": "Africa/Lagos",
    "Ghana": "Africa/Accra",
    "Kenya": "Africa/Nairobi",
    "Uganda": "Africa/Kampala",
    "South Africa": "Africa/Johannesburg",
    "Ethiopia": "Africa/Addis_Ababa",
    "Tanzania": "Africa/Dar_es_Salaam",
    "Rwanda": "Africa/Kigali",
    "Zambia": "Africa/Lusaka",
    "Zimbabwe": "Africa/Harare",
}


def resolve_timezone(country: str | None) -> str:
    if not country:
        return DEFAULT_TIMEZONE
    return TIMEZONE_BY_COUNTRY.get(country, DEFAULT_TIMEZONE)
