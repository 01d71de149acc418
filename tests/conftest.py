"""Shared fixtures: a recording stand-in for the request collaborator."""

from typing import Any, Dict, List, Optional

import pytest

LAYER_URL = "https://svc/arcgis/rest/services/Requests/FeatureServer/0"


class FakeSession:
    """Records every request and answers with a canned payload or error."""

    def __init__(self, payload: Optional[Dict[str, Any]] = None, error: Optional[Exception] = None):
        self.payload = payload if payload is not None else {}
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def request(self, url, *, method="POST", params=None, timeout=None):
        self.calls.append({"url": url, "method": method, "params": params, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.payload

    @property
    def last(self) -> Dict[str, Any]:
        return self.calls[-1]


@pytest.fixture
def fake_session():
    return FakeSession()
