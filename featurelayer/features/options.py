"""Request options for each feature layer operation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Union

from .params import DeleteParams, EditParams, QueryParams
from .results import Feature

QueryParamsLike = Union[QueryParams, Mapping[str, Any]]
EditParamsLike = Union[EditParams, Mapping[str, Any]]
DeleteParamsLike = Union[DeleteParams, Mapping[str, Any]]


@dataclass
class RequestOptions:
    """Envelope handed to the request collaborator."""

    http_method: str = "POST"
    params: Optional[Dict[str, Any]] = None
    # seconds; None keeps the session timeout
    timeout: Optional[float] = None


@dataclass
class FeatureRequestOptions:
    """Parameters required to get a feature by id.

    url: layer service url
    id: feature id
    params: extra parameters such as returnGeometry or outSR
    """

    url: str
    id: int
    params: Optional[Mapping[str, Any]] = None
    http_method: Optional[str] = None
    timeout: Optional[float] = None


@dataclass
class QueryFeaturesRequestOptions:
    """Feature query request options.

    url: layer service url
    params: query parameters to be sent to the feature service
    """

    url: str
    params: Optional[QueryParamsLike] = None
    http_method: Optional[str] = None
    timeout: Optional[float] = None


@dataclass
class AddFeaturesRequestOptions:
    url: str
    adds: List[Feature]
    params: Optional[EditParamsLike] = None
    timeout: Optional[float] = None


@dataclass
class UpdateFeaturesRequestOptions:
    url: str
    updates: List[Feature]
    params: Optional[EditParamsLike] = None
    timeout: Optional[float] = None


@dataclass
class DeleteFeaturesRequestOptions:
    url: str
    # object ids to delete
    deletes: List[int]
    params: Optional[DeleteParamsLike] = None
    timeout: Optional[float] = None
