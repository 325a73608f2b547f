from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from city_dashboard.core.exceptions import GatewayError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5000"


class GatewayClient:
    """
    Thin JSON client for the read-only city data gateway.

    Every method issues one GET and returns the decoded JSON body.
    Non-2xx responses and transport failures raise GatewayError.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
        )

    def _fetch_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("gateway_request", extra={"url": url, "params": params})

        try:
            res = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("gateway_unreachable", extra={"url": url, "error": str(exc)})
            raise GatewayError(f"Request to {url} failed: {exc}") from exc

        if not res.ok:
            text = res.text
            logger.warning(
                "gateway_error_response",
                extra={"url": url, "status_code": res.status_code},
            )
            raise GatewayError(f"API {res.status_code}: {text}", status_code=res.status_code, body=text)

        try:
            return res.json()
        except ValueError as exc:
            raise GatewayError(
                f"API {res.status_code}: invalid JSON from {url}",
                status_code=res.status_code,
                body=res.text,
            ) from exc

    def get_overview(self) -> Any:
        return self._fetch_json("/api/overview")

    def get_geographic(self) -> Any:
        return self._fetch_json("/api/geographic")

    def get_correlations(self) -> Any:
        return self._fetch_json("/api/correlations")

    def get_cities_by_country(self) -> Any:
        return self._fetch_json("/api/cities/by-country")

    def get_top_cities(self, metric: str, top_n: int = 10) -> Any:
        return self._fetch_json(f"/api/cities/top/{metric}", params={"top_n": top_n})

    def get_filters(self) -> Any:
        return self._fetch_json("/api/filters")

    def close(self) -> None:
        self.session.close()
