"""Stub entities served when no broker is configured.

Shapes match what ``GET /ngsi-ld/v1/entities`` returns with
``Accept: application/ld+json``.
"""

from __future__ import annotations

from typing import Any

STUB_ENTITIES: list[dict[str, Any]] = [
    {
        "id": "urn:ngsi-ld:Station:central",
        "type": "Station",
        "name": {"type": "Property", "value": "Central"},
        "status": {"type": "Property", "value": "active"},
        "location": {"type": "GeoProperty", "value": {"type": "Point", "coordinates": [18.0649, 59.3326]}},
    },
    {
        "id": "urn:ngsi-ld:Station:north",
        "type": "Station",
        "name": {"type": "Property", "value": "North"},
        "status": {"type": "Property", "value": "maintenance"},
        "location": {"type": "GeoProperty", "value": {"type": "Point", "coordinates": [18.035, 59.357]}},
    },
    {
        "id": "urn:ngsi-ld:Sensor:beta",
        "type": "Sensor",
        "name": {"type": "Property", "value": "Beta"},
        "status": {"type": "Property", "value": "active"},
        "location": {"type": "GeoProperty", "value": {"type": "Point", "coordinates": [18.09, 59.318]}},
    },
    {
        "id": "urn:ngsi-ld:WeatherObserved:sodermalm",
        "type": "WeatherObserved",
        "dateObserved": {
            "type": "Property",
            "value": {"@type": "DateTime", "@value": "2024-05-01T12:00:00Z"},
        },
        "temperature": {"type": "Property", "value": 14.5, "unitCode": "CEL"},
        "relativeHumidity": {"type": "Property", "value": 0.62},
        "location": {"type": "GeoProperty", "value": {"type": "Point", "coordinates": [18.0711, 59.3147]}},
    },
    {
        "id": "urn:ngsi-ld:Accident:e4-norrtull",
        "type": "Accident",
        "accidentDate": {"type": "Property", "value": "2024-05-01T07:45:00Z"},
        "dateObserved": {"type": "Property", "value": "2024-05-01T08:10:00Z"},
        "severity": {"type": "Property", "value": "minor"},
        "location": {"type": "GeoProperty", "value": {"type": "Point", "coordinates": [18.0453, 59.3498]}},
    },
    {
        "id": "urn:ngsi-ld:Route:line-4",
        "type": "Route",
        "name": {"type": "Property", "value": "Line 4"},
        "length": {"type": "Property", "value": 3.2, "unitCode": {"value": "KMT"}},
        "location": {
            "type": "GeoProperty",
            "value": {
                "type": "LineString",
                "coordinates": [[18.0649, 59.3326], [18.0711, 59.3147], [18.09, 59.318]],
            },
        },
    },
]


def stub_entities(entity_type: str | None = None, limit: int | None = None) -> list[dict[str, Any]]:
    """Fixture entities filtered the way the broker would filter them."""
    entities = [e for e in STUB_ENTITIES if entity_type is None or e["type"] == entity_type]
    if limit is not None:
        entities = entities[:limit]
    return [dict(e) for e in entities]


def stub_types() -> list[str]:
    return sorted({e["type"] for e in STUB_ENTITIES})
