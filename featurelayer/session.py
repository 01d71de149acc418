"""HTTP session used as the default ``request`` collaborator for feature calls."""

from __future__ import annotations

import json
import logging
import os
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, Mapping, Optional, Protocol
from urllib.parse import urlencode, urlparse
from urllib.request import ProxyHandler, Request, build_opener

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0
USER_AGENT = "featurelayer/0.1"


class ArcGISError(RuntimeError):
    """Raised when the ArcGIS REST API reports an error."""

    def __init__(self, error: Any) -> None:
        self.error = error
        if isinstance(error, Mapping):
            self.code = error.get("code")
            self.message = error.get("message")
            self.details = list(error.get("details") or [])
            text = json.dumps(dict(error), sort_keys=True)
        else:
            self.code = None
            self.message = str(error)
            self.details = []
            text = str(error)
        super().__init__(text)


class Requester(Protocol):
    """Anything that can send a feature service request and return parsed JSON."""

    def request(
        self,
        url: str,
        *,
        method: str = "POST",
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        ...


def _epoch_ms(value: date) -> int:
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    elif value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float, bool, date))


def _to_jsonable(value: Any) -> Any:
    if hasattr(value, "to_params"):
        return value.to_params()
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, date):
        return _epoch_ms(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _encode_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return json.dumps(value)
    if isinstance(value, date):
        return str(_epoch_ms(value))
    return str(value)


def encode_value(value: Any) -> str:
    """Encode one parameter value the way the REST API expects it."""

    if _is_scalar(value):
        return _encode_scalar(value)
    if isinstance(value, (list, tuple)):
        if all(_is_scalar(item) for item in value):
            return ",".join(_encode_scalar(item) for item in value)
        return json.dumps(list(value), default=_to_jsonable)
    return json.dumps(value, default=_to_jsonable)


def encode_params(params: Mapping[str, Any]) -> Dict[str, str]:
    """Return a copy of ``params`` with every value encoded as text.

    ``None`` values are dropped so optional parameters never reach the wire.
    """

    return {key: encode_value(value) for key, value in params.items() if value is not None}


class Session:
    """Minimal ArcGIS REST session that speaks ``f=json``."""

    def __init__(
        self,
        *,
        token: Optional[str] = None,
        referer: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = USER_AGENT,
    ) -> None:
        self._token = token
        self._referer = referer.rstrip("/") if referer else None
        self.timeout = timeout
        self._user_agent = user_agent
        self._opener = build_opener(ProxyHandler({}))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Session":
        """Build a session from ``ARCGIS_TOKEN``, ``ARCGIS_REFERER`` and ``ARCGIS_TIMEOUT``."""

        env = os.environ if environ is None else environ
        timeout = env.get("ARCGIS_TIMEOUT")
        return cls(
            token=env.get("ARCGIS_TOKEN") or None,
            referer=env.get("ARCGIS_REFERER") or None,
            timeout=float(timeout) if timeout else DEFAULT_TIMEOUT,
        )

    # ------------------------------------------------------------------
    # HTTP helpers
    def _prepare_params(self, params: Optional[Mapping[str, Any]]) -> Dict[str, str]:
        merged: Dict[str, Any] = {"f": "json"}
        if params:
            merged.update(params)
        if self._token:
            merged.setdefault("token", self._token)
        return encode_params(merged)

    def _default_headers(self, request_url: str) -> Dict[str, str]:
        headers = {"User-Agent": self._user_agent}
        if self._referer:
            headers["Referer"] = self._referer
        else:
            parsed = urlparse(request_url)
            if parsed.scheme and parsed.netloc:
                headers["Referer"] = f"{parsed.scheme}://{parsed.netloc}"
        return headers

    def _read_json(self, request: Request, timeout: Optional[float] = None) -> Dict[str, Any]:
        with self._opener.open(request, timeout=self.timeout if timeout is None else timeout) as response:
            body = response.read().decode("utf-8")
        return json.loads(body)

    def _post(self, url: str, params: Dict[str, str], timeout: Optional[float] = None) -> Dict[str, Any]:
        encoded = urlencode(params).encode("utf-8")
        headers = self._default_headers(url)
        headers["Content-Type"] = "application/x-www-form-urlencoded"
        return self._read_json(Request(url, data=encoded, headers=headers, method="POST"), timeout)

    def _get(self, url: str, params: Dict[str, str], timeout: Optional[float] = None) -> Dict[str, Any]:
        query = urlencode(params)
        request_url = f"{url}?{query}" if query else url
        return self._read_json(Request(request_url, headers=self._default_headers(request_url)), timeout)

    def request(
        self,
        url: str,
        *,
        method: str = "POST",
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        prepared = self._prepare_params(params)
        verb = method.upper()
        logger.debug("TRACE: Session.request(%s %s, params=%s)", verb, url, _safe_keys(prepared))
        if verb == "GET":
            payload = self._get(url, prepared, timeout)
        else:
            payload = self._post(url, prepared, timeout)
        if isinstance(payload, dict) and "error" in payload:
            logger.debug("TRACE: Session.request(%s) -> error %s", url, payload["error"])
            raise ArcGISError(payload["error"])
        return payload


def _safe_keys(params: Iterable[str]) -> list:
    return sorted(key for key in params if key != "token")


_default_session: Optional[Requester] = None


def default_session() -> Requester:
    """Return the lazily created module session configured from the environment."""

    global _default_session
    if _default_session is None:
        _default_session = Session.from_env()
    return _default_session


def set_default_session(session: Optional[Requester]) -> None:
    global _default_session
    _default_session = session
