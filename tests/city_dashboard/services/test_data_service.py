import threading

from city_dashboard.core.exceptions import GatewayError
from city_dashboard.services.data_service import DashboardLoader, LoadResult, LoadStatus


class _FakeClient:
    """Serves canned payloads; any endpoint listed in `fail` raises GatewayError."""

    base_url = "http://gateway.test"

    def __init__(self, payloads, fail=(), top=None):
        self._payloads = payloads
        self._fail = set(fail)
        self._top = top
        self.top_calls = []
        self._lock = threading.Lock()

    def _serve(self, name):
        if name in self._fail:
            raise GatewayError(f"API 500: {name} exploded", status_code=500)
        return self._payloads[name]

    def get_overview(self):
        return self._serve("overview")

    def get_geographic(self):
        return self._serve("geographic")

    def get_filters(self):
        return self._serve("filters")

    def get_correlations(self):
        return self._serve("correlations")

    def get_cities_by_country(self):
        return self._serve("by_country")

    def get_top_cities(self, metric, top_n=10):
        with self._lock:
            self.top_calls.append((metric, top_n))
        if "top" in self._fail:
            raise GatewayError("API 503: unavailable", status_code=503)
        return self._top


def test_load_success_builds_snapshot(snapshot_payloads):
    loader = DashboardLoader(_FakeClient(snapshot_payloads))

    result = loader.load()

    assert result.status is LoadStatus.READY
    assert result.error is None
    assert len(result.snapshot.geo) == 3
    assert result.snapshot.base_url == "http://gateway.test"


def test_one_failed_request_fails_the_whole_load(snapshot_payloads):
    loader = DashboardLoader(_FakeClient(snapshot_payloads, fail=["correlations"]))

    result = loader.load()

    assert result.status is LoadStatus.ERROR
    assert result.snapshot is None
    assert result.error == "API 500: correlations exploded"


def test_malformed_payload_is_an_error(snapshot_payloads):
    snapshot_payloads["geographic"]["avg_rent"] = [1]
    result = DashboardLoader(_FakeClient(snapshot_payloads)).load()

    assert result.status is LoadStatus.ERROR
    assert result.snapshot is None
    assert "same length" in result.error


def test_load_result_to_dict(snapshot_payloads):
    assert LoadResult.loading().to_dict() == {"status": "loading", "snapshot": None, "error": None}

    ready = DashboardLoader(_FakeClient(snapshot_payloads)).load().to_dict()
    assert ready["status"] == "ready"
    assert ready["snapshot"]["filters"] == {"countries": ["X", "Y"]}


def test_fetch_top_cities_clamps_and_parses(snapshot_payloads):
    top = {"cities": ["A", "C"], "countries": ["X", "X"], "metric_values": [95, 90]}
    client = _FakeClient(snapshot_payloads, top=top)

    outcome = DashboardLoader(client).fetch_top_cities("internet_penetration", 50)

    assert client.top_calls == [("internet_penetration", 15)]
    assert outcome.error is None
    assert outcome.ranking.cities == ("A", "C")
    assert outcome.ranking.metric == "internet_penetration"


def test_fetch_top_cities_reports_failures(snapshot_payloads):
    client = _FakeClient(snapshot_payloads, fail=["top"])

    outcome = DashboardLoader(client).fetch_top_cities("avg_income", 5)

    assert outcome.ranking is None
    assert outcome.error == "API 503: unavailable"


def test_fetch_top_cities_rejects_unknown_metric(snapshot_payloads):
    client = _FakeClient(snapshot_payloads)

    outcome = DashboardLoader(client).fetch_top_cities("population_density", 5)

    assert outcome.ranking is None
    assert client.top_calls == []


def test_scalar_geographic_array_is_an_error(snapshot_payloads):
    snapshot_payloads["geographic"]["latitude"] = 5
    result = DashboardLoader(_FakeClient(snapshot_payloads)).load()

    assert result.status is LoadStatus.ERROR
    assert result.snapshot is None
    assert "latitude" in result.error


def test_non_finite_country_count_is_an_error(snapshot_payloads):
    snapshot_payloads["by_country"]["city_count"] = [float("nan"), 1]
    result = DashboardLoader(_FakeClient(snapshot_payloads)).load()

    assert result.status is LoadStatus.ERROR
    assert result.snapshot is None
    assert "city_count" in result.error


def test_nested_values_in_geographic_array_are_an_error(snapshot_payloads):
    snapshot_payloads["geographic"]["avg_rent"] = [[900], 400, 700]
    result = DashboardLoader(_FakeClient(snapshot_payloads)).load()

    assert result.status is LoadStatus.ERROR
    assert "avg_rent" in result.error
