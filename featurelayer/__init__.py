"""Typed client for ArcGIS feature service layers."""

from .features import (
    AddFeaturesRequestOptions,
    DeleteFeaturesRequestOptions,
    DeleteParams,
    EditParams,
    FeatureLayer,
    FeatureRequestOptions,
    QueryFeaturesRequestOptions,
    QueryParams,
    StatisticDefinition,
    UpdateFeaturesRequestOptions,
    add_features,
    delete_features,
    get_feature,
    query_features,
    update_features,
)
from .session import ArcGISError, Requester, Session

__version__ = "0.1.0"
