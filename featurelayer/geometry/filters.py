"""Spatial filter helpers producing query parameters."""

from __future__ import annotations

from typing import Any, Dict, Optional

from . import Geometry


def _filter(geometry: Geometry, spatial_rel: str, in_sr: Optional[Any] = None) -> Dict[str, Any]:
    geometry_type = geometry.geometry_type
    if geometry_type is None:
        raise ValueError("Unable to determine the geometry type of the filter geometry")
    params: Dict[str, Any] = {
        "geometry": geometry.to_dict(),
        "geometryType": geometry_type,
        "spatialRel": spatial_rel,
    }
    if in_sr is None and geometry.spatial_reference:
        in_sr = geometry.spatial_reference
    if in_sr is not None:
        params["inSR"] = in_sr
    return params


def intersects(geometry: Geometry, in_sr: Optional[Any] = None) -> Dict[str, Any]:
    return _filter(geometry, "esriSpatialRelIntersects", in_sr)


def envelope_intersects(geometry: Geometry, in_sr: Optional[Any] = None) -> Dict[str, Any]:
    return _filter(geometry, "esriSpatialRelEnvelopeIntersects", in_sr)


def contains(geometry: Geometry, in_sr: Optional[Any] = None) -> Dict[str, Any]:
    return _filter(geometry, "esriSpatialRelContains", in_sr)


def within(geometry: Geometry, in_sr: Optional[Any] = None) -> Dict[str, Any]:
    return _filter(geometry, "esriSpatialRelWithin", in_sr)
