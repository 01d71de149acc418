"""Feature layer operations and their request/response shapes."""

from .layer import (
    FeatureLayer,
    add_features,
    delete_features,
    get_feature,
    query_features,
    update_features,
)
from .options import (
    AddFeaturesRequestOptions,
    DeleteFeaturesRequestOptions,
    FeatureRequestOptions,
    QueryFeaturesRequestOptions,
    RequestOptions,
    UpdateFeaturesRequestOptions,
)
from .params import DeleteParams, EditParams, QueryParams, StatisticDefinition
from .results import (
    AddFeaturesResult,
    DeleteFeaturesResult,
    EditFeatureResult,
    Feature,
    QueryFeaturesResponse,
    UpdateFeaturesResult,
)

__all__ = [
    "AddFeaturesRequestOptions",
    "AddFeaturesResult",
    "DeleteFeaturesRequestOptions",
    "DeleteFeaturesResult",
    "DeleteParams",
    "EditFeatureResult",
    "EditParams",
    "Feature",
    "FeatureLayer",
    "FeatureRequestOptions",
    "QueryFeaturesRequestOptions",
    "QueryFeaturesResponse",
    "QueryParams",
    "RequestOptions",
    "StatisticDefinition",
    "UpdateFeaturesRequestOptions",
    "UpdateFeaturesResult",
    "add_features",
    "delete_features",
    "get_feature",
    "query_features",
    "update_features",
]
