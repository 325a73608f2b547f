from __future__ import annotations

import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

from city_dashboard.core.exceptions import CityDashboardError
from city_dashboard.core.pipeline import RANKING_METRICS, clamp_top_n
from city_dashboard.core.snapshot import DashboardSnapshot, RankedCities
from city_dashboard.services.api_client import GatewayClient

logger = logging.getLogger(__name__)


class LoadStatus(str, Enum):
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class LoadResult:
    """Outcome of one initial load. snapshot is set iff status is READY."""
    status: LoadStatus
    snapshot: Optional[DashboardSnapshot] = None
    error: Optional[str] = None

    @classmethod
    def loading(cls) -> LoadResult:
        return cls(status=LoadStatus.LOADING)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "snapshot": self.snapshot.to_dict() if self.snapshot is not None else None,
            "error": self.error,
        }


@dataclass(frozen=True)
class TopCitiesResult:
    ranking: Optional[RankedCities] = None
    error: Optional[str] = None


def _error_message(exc: BaseException) -> str:
    return str(exc) or exc.__class__.__name__


class DashboardLoader:
    """
    Fetches the initial dashboard data from the gateway.

    load() fans out the five startup requests on a thread pool and joins them
    with fail-fast semantics: the first failure wins, partial results are
    discarded and no snapshot is exposed. Requests still in flight are left to
    finish on their own; nothing is retried.
    """

    def __init__(self, client: GatewayClient):
        self.client = client

    def _requests(self) -> Dict[str, Callable[[], Any]]:
        return {
            "overview": self.client.get_overview,
            "geographic": self.client.get_geographic,
            "filters": self.client.get_filters,
            "correlations": self.client.get_correlations,
            "by_country": self.client.get_cities_by_country,
        }

    def load(self) -> LoadResult:
        requests_by_name = self._requests()
        logger.info("dashboard_load_start", extra={"base_url": self.client.base_url})

        executor = ThreadPoolExecutor(max_workers=len(requests_by_name), thread_name_prefix="gateway")
        try:
            futures = {executor.submit(fn): name for name, fn in requests_by_name.items()}
            done, _pending = wait(futures, return_when=FIRST_EXCEPTION)

            failed = [f for f in done if f.exception() is not None]
            if failed:
                # Several may have failed by the time wait() returns; report one of them
                exc = failed[0].exception()
                logger.error(
                    "dashboard_load_failed",
                    extra={"request": futures[failed[0]], "error": _error_message(exc)},
                )
                return LoadResult(status=LoadStatus.ERROR, error=_error_message(exc))

            payloads = {futures[f]: f.result() for f in done}
        finally:
            executor.shutdown(wait=False)

        try:
            snapshot = DashboardSnapshot.from_payloads(base_url=self.client.base_url, **payloads)
        except CityDashboardError as exc:
            logger.error("dashboard_payload_invalid", extra={"error": _error_message(exc)})
            return LoadResult(status=LoadStatus.ERROR, error=_error_message(exc))

        logger.info(
            "dashboard_load_ready",
            extra={"n_cities": len(snapshot.geo), "n_groups": len(snapshot.filter_options)},
        )
        return LoadResult(status=LoadStatus.READY, snapshot=snapshot)

    def fetch_top_cities(self, metric: str, top_n: int) -> TopCitiesResult:
        """
        Secondary fetch of the server-side ranking. Failures are reported, not raised,
        so the caller can keep whatever ranking it already shows.
        """
        if metric not in RANKING_METRICS:
            return TopCitiesResult(error=f"Unknown ranking metric '{metric}'")

        top_n = clamp_top_n(top_n)
        try:
            payload = self.client.get_top_cities(metric, top_n)
            ranking = RankedCities.from_payload(payload, metric=metric)
        except CityDashboardError as exc:
            logger.warning(
                "top_cities_fetch_failed",
                extra={"metric": metric, "top_n": top_n, "error": _error_message(exc)},
            )
            return TopCitiesResult(error=_error_message(exc))
        return TopCitiesResult(ranking=ranking)
