"""Typed request parameters for feature layer operations.

Each record converts to the mapping sent over the wire with ``to_params``.
Unset fields are omitted and snake_case names become the camelCase names the
REST API uses. Nothing is validated here; the feature service decides what it
accepts.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, Dict, List, Literal, Mapping, Optional, Union

from ..geometry import Geometry, SpatialReference

StatisticType = Literal["count", "sum", "min", "max", "avg", "stddev", "var"]
GeometryType = Literal[
    "esriGeometryPoint",
    "esriGeometryMultipoint",
    "esriGeometryPolyline",
    "esriGeometryPolygon",
    "esriGeometryEnvelope",
]
SpatialRelationship = Literal[
    "esriSpatialRelIntersects",
    "esriSpatialRelContains",
    "esriSpatialRelCrosses",
    "esriSpatialRelEnvelopeIntersects",
    "esriSpatialRelIndexIntersects",
    "esriSpatialRelOverlaps",
    "esriSpatialRelTouches",
    "esriSpatialRelWithin",
    "esriSpatialRelRelation",
]
Units = Literal[
    "esriSRUnit_Meter",
    "esriSRUnit_StatuteMile",
    "esriSRUnit_Foot",
    "esriSRUnit_Kilometer",
    "esriSRUnit_NauticalMile",
    "esriSRUnit_USNauticalMile",
]
# NOTE: either a WKID or a spatial reference object
SpatialReferenceLike = Union[int, str, SpatialReference, Dict[str, Any]]
GeometryLike = Union[Geometry, Dict[str, Any]]

# Wire names that do not follow plain camelCase conversion.
_WIRE_NAMES = {
    "in_sr": "inSR",
    "out_sr": "outSR",
    "return_z": "returnZ",
    "return_m": "returnM",
}


def wire_name(name: str) -> str:
    """Translate a python field name into the REST parameter name."""

    if name in _WIRE_NAMES:
        return _WIRE_NAMES[name]
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


class _Params:
    def to_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        for f in fields(self):
            if f.name == "extra":
                continue
            value = getattr(self, f.name)
            if value is not None:
                params[wire_name(f.name)] = value
        params.update(getattr(self, "extra", None) or {})
        return params


def as_params(params: Union["_Params", Mapping[str, Any], None]) -> Dict[str, Any]:
    """Return a fresh dict holding the wire parameters of ``params``.

    Plain mappings are shallow-copied so callers never see their own object
    change.
    """

    if params is None:
        return {}
    if isinstance(params, _Params):
        return params.to_params()
    return dict(params)


@dataclass
class StatisticDefinition(_Params):
    """One entry of ``outStatistics``.

    If ``out_statistic_field_name`` is empty the server assigns a name.
    """

    statistic_type: StatisticType
    on_statistic_field: str
    out_statistic_field_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return self.to_params()


@dataclass
class QueryParams(_Params):
    """Feature query parameters.

    See https://developers.arcgis.com/rest/services-reference/query-feature-service-layer-.htm
    """

    where: Optional[str] = None
    geometry: Optional[GeometryLike] = None
    geometry_type: Optional[GeometryType] = None
    in_sr: Optional[SpatialReferenceLike] = None
    spatial_rel: Optional[SpatialRelationship] = None
    object_ids: Optional[List[int]] = None
    relation_param: Optional[str] = None
    # NOTE: either one instant or a [start, end] pair
    time: Optional[Union[datetime, List[datetime]]] = None
    distance: Optional[float] = None
    units: Optional[Units] = None
    out_fields: Optional[Union[str, List[str]]] = None
    return_geometry: Optional[bool] = None
    max_allowable_offset: Optional[float] = None
    geometry_precision: Optional[int] = None
    out_sr: Optional[SpatialReferenceLike] = None
    gdb_version: Optional[str] = None
    return_distinct_values: Optional[bool] = None
    return_ids_only: Optional[bool] = None
    return_count_only: Optional[bool] = None
    return_extent_only: Optional[bool] = None
    order_by_fields: Optional[str] = None
    group_by_fields_for_statistics: Optional[str] = None
    out_statistics: Optional[List[StatisticDefinition]] = None
    return_z: Optional[bool] = None
    return_m: Optional[bool] = None
    multipatch_option: Optional[Literal["xyFootprint"]] = None
    result_offset: Optional[int] = None
    result_record_count: Optional[int] = None
    # Shape is not documented upstream; passed through untouched.
    quantization_parameters: Optional[Any] = None
    return_centroid: Optional[bool] = None
    result_type: Optional[Literal["none", "standard", "tile"]] = None
    # Epoch milliseconds or a datetime; passed through untouched.
    historic_moment: Optional[Any] = None
    return_true_curves: Optional[bool] = None
    sql_format: Optional[Literal["none", "standard", "native"]] = None
    return_exceeded_limit_features: Optional[bool] = None
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class EditParams(_Params):
    """Parameters shared by add, update and delete requests."""

    # The geodatabase version to apply the edits.
    gdb_version: Optional[str] = None
    # Report the time features were edited.
    return_edit_moment: Optional[bool] = None
    # Apply the edits only if all submitted edits succeed.
    rollback_on_failure: Optional[bool] = None
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class DeleteParams(_Params):
    """Edit parameters plus the filter fields a delete request also accepts."""

    gdb_version: Optional[str] = None
    return_edit_moment: Optional[bool] = None
    rollback_on_failure: Optional[bool] = None
    where: Optional[str] = None
    geometry: Optional[GeometryLike] = None
    geometry_type: Optional[GeometryType] = None
    in_sr: Optional[SpatialReferenceLike] = None
    spatial_rel: Optional[SpatialRelationship] = None
    extra: Dict[str, Any] = field(default_factory=dict)
