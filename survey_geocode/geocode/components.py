"""Flatten provider address components into named fields."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

# Checked in order; the first type a component carries decides its field.
COMPONENT_FIELDS = (
    (("administrative_area_level_1",), "state"),
    (("country",), "country"),
    (("locality",), "city"),
    (("sublocality_level_1", "neighborhood"), "town"),
)


def _field_for(types: Iterable[str]) -> str | None:
    type_set = set(types or ())
    for candidates, field_name in COMPONENT_FIELDS:
        if type_set.intersection(candidates):
            return field_name
    return None


def parse_address_components(components: Iterable[Mapping[str, Any]] | None) -> dict[str, Any]:
    """Return `state`/`country`/`city`/`town` for the components that carry them.

    Later components overwrite earlier ones for the same field, so the result
    depends on the order the provider returned them in.
    """
    parsed: dict[str, Any] = {}
    for component in components or ():
        field_name = _field_for(component.get("types") or ())
        if field_name is None:
            continue
        parsed[field_name] = component.get("long_name")
    return parsed
