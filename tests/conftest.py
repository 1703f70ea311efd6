import numpy as np
import pytest
import requests

from ccvi_map.data.provider import DataProvider


class FakeResponse:
    def __init__(self, payload=None, status_code=200, invalid_json=False):
        self.payload = payload
        self.status_code = status_code
        self.invalid_json = invalid_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if self.invalid_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self.payload


class FakeSession:
    """Answers GET requests by endpoint name, records every call."""

    def __init__(self, responses=None, error=None):
        self.responses = responses or {}
        self.error = error
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        if self.error is not None:
            raise self.error
        endpoint = url.rsplit('/', 1)[-1]
        return self.responses[endpoint]


def square(x0=0.0, y0=0.0, size=1.0):
    return {
        'type': 'Polygon',
        'coordinates': [[[x0, y0], [x0 + size, y0], [x0 + size, y0 + size], [x0, y0 + size], [x0, y0]]],
    }


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def failing_provider(rng):
    session = FakeSession(error=requests.ConnectionError("connection refused"))
    return DataProvider(base_url='http://ccvi.test', session=session, rng=rng)
