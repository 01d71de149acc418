"""Feature layer operations: get, query, add, update and delete features."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from ..session import Requester, default_session
from .options import (
    AddFeaturesRequestOptions,
    DeleteFeaturesRequestOptions,
    DeleteParamsLike,
    EditParamsLike,
    FeatureRequestOptions,
    QueryFeaturesRequestOptions,
    QueryParamsLike,
    RequestOptions,
    UpdateFeaturesRequestOptions,
)
from .params import QueryParams, as_params
from .results import (
    AddFeaturesResult,
    DeleteFeaturesResult,
    Feature,
    QueryFeaturesResponse,
    UpdateFeaturesResult,
)

logger = logging.getLogger(__name__)


def _send(url: str, options: RequestOptions, session: Optional[Requester]) -> Dict[str, Any]:
    requester = session if session is not None else default_session()
    logger.debug("TRACE: %s %s", options.http_method, url)
    return requester.request(
        url, method=options.http_method, params=options.params, timeout=options.timeout
    )


def get_feature(
    request_options: FeatureRequestOptions, *, session: Optional[Requester] = None
) -> Optional[Feature]:
    """Get a feature by id.

    Returns the ``feature`` member of the response, without its siblings.
    """

    url = f"{request_options.url}/{request_options.id}"

    # default to a GET request
    options = RequestOptions(
        http_method=request_options.http_method or "GET",
        params=as_params(request_options.params),
        timeout=request_options.timeout,
    )
    response = _send(url, options, session)
    return response.get("feature")


def query_features(
    request_options: QueryFeaturesRequestOptions, *, session: Optional[Requester] = None
) -> QueryFeaturesResponse:
    """Query features.

    ``where`` defaults to ``1=1`` and ``outFields`` to ``*`` when the caller
    leaves them unset. The response is returned as the service sent it.
    """

    params = as_params(request_options.params)
    if not params.get("where"):
        params["where"] = "1=1"
    if not params.get("outFields"):
        params["outFields"] = "*"

    # default to a GET request
    options = RequestOptions(
        http_method=request_options.http_method or "GET",
        params=params,
        timeout=request_options.timeout,
    )
    return _send(f"{request_options.url}/query", options, session)


def add_features(
    request_options: AddFeaturesRequestOptions, *, session: Optional[Requester] = None
) -> AddFeaturesResult:
    """Add features request.

    Example::

        add_features(AddFeaturesRequestOptions(
            url="https://sampleserver6.arcgisonline.com/arcgis/rest/services/ServiceRequest/FeatureServer/0",
            adds=[{
                "geometry": {"x": -120, "y": 45, "spatialReference": {"wkid": 4326}},
                "attributes": {"status": "alive"},
            }],
        ))
    """

    params = as_params(request_options.params)
    # mixin, don't overwrite
    params["features"] = request_options.adds

    # edit operations are POST only
    options = RequestOptions(http_method="POST", params=params, timeout=request_options.timeout)
    return _send(f"{request_options.url}/addFeatures", options, session)


def update_features(
    request_options: UpdateFeaturesRequestOptions, *, session: Optional[Requester] = None
) -> UpdateFeaturesResult:
    """Update features request; ``updates`` must carry their object ids."""

    params = as_params(request_options.params)
    # mixin, don't overwrite
    params["features"] = request_options.updates

    # edit operations are POST only
    options = RequestOptions(http_method="POST", params=params, timeout=request_options.timeout)
    return _send(f"{request_options.url}/updateFeatures", options, session)


def delete_features(
    request_options: DeleteFeaturesRequestOptions, *, session: Optional[Requester] = None
) -> DeleteFeaturesResult:
    params = as_params(request_options.params)
    # mixin, don't overwrite
    params["objectIds"] = request_options.deletes

    # edit operations are POST only
    options = RequestOptions(http_method="POST", params=params, timeout=request_options.timeout)
    return _send(f"{request_options.url}/deleteFeatures", options, session)


class FeatureLayer:
    """Lightweight wrapper around an ArcGIS FeatureServer layer."""

    def __init__(self, url: str, *, session: Optional[Requester] = None) -> None:
        self.url = url.rstrip("/")
        self._session = session

    def __repr__(self) -> str:
        return f"<FeatureLayer url={self.url!r}>"

    def get(self, id: int, params: Optional[Mapping[str, Any]] = None) -> Optional[Feature]:
        return get_feature(
            FeatureRequestOptions(url=self.url, id=id, params=params), session=self._session
        )

    def query(
        self,
        params: Optional[QueryParamsLike] = None,
        *,
        http_method: Optional[str] = None,
        **kwargs: Any,
    ) -> QueryFeaturesResponse:
        """Query the layer.

        Keyword arguments are ``QueryParams`` fields, e.g.
        ``layer.query(where="STATUS = 'open'", return_geometry=False)``.
        They are merged over ``params``.
        """

        if kwargs:
            merged = as_params(params)
            merged.update(QueryParams(**kwargs).to_params())
            params = merged
        return query_features(
            QueryFeaturesRequestOptions(url=self.url, params=params, http_method=http_method),
            session=self._session,
        )

    def add(self, adds: List[Feature], params: Optional[EditParamsLike] = None) -> AddFeaturesResult:
        return add_features(
            AddFeaturesRequestOptions(url=self.url, adds=adds, params=params),
            session=self._session,
        )

    def update(
        self, updates: List[Feature], params: Optional[EditParamsLike] = None
    ) -> UpdateFeaturesResult:
        return update_features(
            UpdateFeaturesRequestOptions(url=self.url, updates=updates, params=params),
            session=self._session,
        )

    def delete(
        self, deletes: List[int], params: Optional[DeleteParamsLike] = None
    ) -> DeleteFeaturesResult:
        return delete_features(
            DeleteFeaturesRequestOptions(url=self.url, deletes=deletes, params=params),
            session=self._session,
        )
