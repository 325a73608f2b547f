import pytest
import requests

from city_dashboard.core.exceptions import GatewayError
from city_dashboard.services.api_client import GatewayClient


class _FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class _FakeSession:
    def __init__(self, response=None, error=None):
        self.headers = {}
        self.calls = []
        self.closed = False
        self._response = response
        self._error = error

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self._error is not None:
            raise self._error
        return self._response

    def close(self):
        self.closed = True


def test_base_url_trailing_slash_is_stripped():
    session = _FakeSession(_FakeResponse(payload={"total_cities": 3}))
    client = GatewayClient("http://gateway.test/", session=session)

    assert client.get_overview() == {"total_cities": 3}
    assert session.calls[0]["url"] == "http://gateway.test/api/overview"
    assert session.headers["Accept"] == "application/json"


@pytest.mark.parametrize(
    "method, path",
    [
        ("get_geographic", "/api/geographic"),
        ("get_correlations", "/api/correlations"),
        ("get_cities_by_country", "/api/cities/by-country"),
        ("get_filters", "/api/filters"),
    ],
)
def test_endpoint_paths(method, path):
    session = _FakeSession(_FakeResponse(payload={}))
    client = GatewayClient("http://gateway.test", session=session, timeout=2.5)

    getattr(client, method)()

    assert session.calls[0]["url"] == f"http://gateway.test{path}"
    assert session.calls[0]["timeout"] == 2.5


def test_top_cities_sends_top_n_query():
    session = _FakeSession(_FakeResponse(payload={"cities": []}))
    client = GatewayClient("http://gateway.test", session=session)

    client.get_top_cities("avg_income", 5)

    call = session.calls[0]
    assert call["url"] == "http://gateway.test/api/cities/top/avg_income"
    assert call["params"] == {"top_n": 5}


def test_non_2xx_raises_gateway_error_with_body():
    session = _FakeSession(_FakeResponse(status_code=404, text="not found"))
    client = GatewayClient("http://gateway.test", session=session)

    with pytest.raises(GatewayError) as excinfo:
        client.get_overview()

    assert str(excinfo.value) == "API 404: not found"
    assert excinfo.value.status_code == 404
    assert excinfo.value.body == "not found"


def test_transport_failure_raises_gateway_error():
    session = _FakeSession(error=requests.ConnectionError("connection refused"))
    client = GatewayClient("http://gateway.test", session=session)

    with pytest.raises(GatewayError, match="connection refused"):
        client.get_filters()


def test_invalid_json_raises_gateway_error():
    session = _FakeSession(_FakeResponse(payload=ValueError("bad json"), text="<html>"))
    client = GatewayClient("http://gateway.test", session=session)

    with pytest.raises(GatewayError, match="invalid JSON"):
        client.get_overview()


def test_close_closes_the_session():
    session = _FakeSession()
    GatewayClient("http://gateway.test", session=session).close()
    assert session.closed
