"""Geometry helpers."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

METERS_PER_DEGREE_LAT = 111_320.0


@dataclass
class SpatialReference:
    """Spatial reference given by well-known id or well-known text."""

    wkid: Optional[int] = None
    latest_wkid: Optional[int] = None
    wkt: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if self.wkid is not None:
            payload["wkid"] = self.wkid
        if self.latest_wkid is not None:
            payload["latestWkid"] = self.latest_wkid
        if self.wkt is not None:
            payload["wkt"] = self.wkt
        return payload


WGS84 = SpatialReference(wkid=4326)


@dataclass
class Geometry:
    """Opaque ArcGIS JSON geometry (point, multipoint, polyline, polygon or envelope)."""

    _data: Dict[str, Any]

    @property
    def geometry_type(self) -> Optional[str]:
        keys = self._data.keys()
        if {"xmin", "ymin", "xmax", "ymax"} <= keys:
            return "esriGeometryEnvelope"
        if "x" in keys and "y" in keys:
            return "esriGeometryPoint"
        if "points" in keys:
            return "esriGeometryMultipoint"
        if "paths" in keys:
            return "esriGeometryPolyline"
        if "rings" in keys:
            return "esriGeometryPolygon"
        return None

    @property
    def spatial_reference(self) -> Optional[Dict[str, Any]]:
        return self._data.get("spatialReference")

    def to_dict(self) -> Dict[str, Any]:  # pragma: no cover - simple passthrough
        return dict(self._data)


def envelope_around(lat: float, lng: float, radius_m: float) -> Geometry:
    """Construct a WGS84 envelope around the requested coordinate."""

    meters_per_degree_lng = METERS_PER_DEGREE_LAT * math.cos(math.radians(lat))

    if meters_per_degree_lng <= 1e-9:
        raise ValueError("Unable to compute longitude delta for the provided latitude")

    delta_lat = radius_m / METERS_PER_DEGREE_LAT
    delta_lng = radius_m / meters_per_degree_lng

    return Geometry(
        {
            "xmin": lng - delta_lng,
            "xmax": lng + delta_lng,
            "ymin": lat - delta_lat,
            "ymax": lat + delta_lat,
            "spatialReference": WGS84.to_dict(),
        }
    )
