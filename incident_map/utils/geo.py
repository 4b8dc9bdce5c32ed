"""Bounding-box helpers for map viewport queries."""

from __future__ import annotations

from dataclasses import dataclass

LatLng = tuple[float, float]


@dataclass(frozen=True)
class BoundingBox:
    """Map viewport given by its south-west and north-east corners.

    Bounds are inclusive on every side. Viewports crossing the antimeridian
    are not supported: ``sw_lng`` must not exceed ``ne_lng``.
    """

    sw_lat: float
    sw_lng: float
    ne_lat: float
    ne_lng: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.sw_lat <= self.ne_lat <= 90.0:
            raise ValueError("latitude bounds must satisfy -90 <= swLat <= neLat <= 90")
        if not -180.0 <= self.sw_lng <= self.ne_lng <= 180.0:
            raise ValueError("longitude bounds must satisfy -180 <= swLng <= neLng <= 180")

    def contains(self, point: LatLng) -> bool:
        lat, lng = point
        return self.sw_lat <= lat <= self.ne_lat and self.sw_lng <= lng <= self.ne_lng


def is_valid_coordinate(lat: float | None, lng: float | None) -> bool:
    if lat is None or lng is None:
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0


__all__ = ["BoundingBox", "LatLng", "is_valid_coordinate"]
