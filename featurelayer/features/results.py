"""Response payload shapes returned by the feature service."""

from __future__ import annotations

from typing import Any, Dict, List, TypedDict


class Feature(TypedDict, total=False):
    geometry: Dict[str, Any]
    attributes: Dict[str, Any]


class Field(TypedDict, total=False):
    name: str
    type: str
    alias: str
    length: int


class QueryFeaturesResponse(TypedDict, total=False):
    objectIdFieldName: str
    globalIdFieldName: str
    geometryType: str
    spatialReference: Dict[str, Any]
    fields: List[Field]
    features: List[Feature]
    exceededTransferLimit: bool
    # returnCountOnly / returnIdsOnly responses
    count: int
    objectIds: List[int]


class _EditFeatureResultBase(TypedDict):
    objectId: int
    success: bool


class EditFeatureResult(_EditFeatureResultBase, total=False):
    globalId: str
    error: Dict[str, Any]


class AddFeaturesResult(TypedDict, total=False):
    addResults: List[EditFeatureResult]


class UpdateFeaturesResult(TypedDict, total=False):
    updateResults: List[EditFeatureResult]


class DeleteFeaturesResult(TypedDict, total=False):
    deleteResults: List[EditFeatureResult]
