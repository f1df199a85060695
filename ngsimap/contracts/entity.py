"""NGSI-LD entity shapes as received from a context broker.

Only ``id`` and ``type`` are structurally required. ``location`` is kept raw
because it has to survive malformed payloads until the geometry validator
has looked at it; every other key lands in the dynamic property bag.
"""

from typing import Annotated, Any, Literal

from pydantic import ConfigDict, Field

from ngsimap.contracts.common import ContractModel

RESERVED_KEYS = frozenset({"id", "type", "location"})


class PointGeometry(ContractModel):
    """GeoJSON Point, ``[lon, lat]``."""

    type: Literal["Point"] = "Point"
    coordinates: list[float]


class LineStringGeometry(ContractModel):
    """GeoJSON LineString, ``[[lon, lat], ...]``.

    Vertices are kept as received; ``Feature.latlngs()`` skips the ones that
    cannot be drawn.
    """

    type: Literal["LineString"] = "LineString"
    coordinates: list[Any]


Geometry = Annotated[PointGeometry | LineStringGeometry, Field(discriminator="type")]


class Entity(ContractModel):
    """A loosely-typed NGSI-LD entity.

    Dynamic keys (``temperature``, ``status``, ``dateObserved``...) are not
    known statically and are exposed through ``dynamic_items()`` in payload
    order.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    id: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    location: Any = None

    def dynamic_items(self) -> list[tuple[str, Any]]:
        """Ordered ``(key, raw_value)`` pairs beyond id/type/location."""
        extra = self.model_extra or {}
        return [(k, v) for k, v in extra.items() if k not in RESERVED_KEYS]

    def get_dynamic(self, key: str) -> Any:
        return (self.model_extra or {}).get(key)


class EntityQuery(ContractModel):
    """Query parameters accepted by ``GET /ngsi-ld/v1/entities``."""

    type: str | None = None
    q: str | None = None
    limit: int | None = Field(default=None, ge=1)
    georel: str | None = None
    geometry: str | None = None
    coordinates: str | None = None
    geoproperty: str | None = None
