"""HTTP-клиент для WP REST API: одна попытка GET, проверка статуса, заголовки пагинации."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple
from urllib.parse import quote

import requests

from errors import WP_DATA_FORMAT_ERROR, WP_FETCH_ERROR, WP_NETWORK_ERROR

from .config import WPContentConfig

logger = logging.getLogger("wp.client")

API_PREFIX = "/wp-json/wp/v2"

# Параметр со значением None пишется в query без "=" (например, _embed).
QueryParams = Sequence[Tuple[str, Any]]


def build_query(params: Optional[QueryParams]) -> str:
    """Собрать query string с сохранением порядка параметров."""
    parts: List[str] = []
    for key, value in params or ():
        if value is None:
            parts.append(quote(key))
        else:
            parts.append(f"{quote(key)}={quote(str(value), safe='')}")
    return "&".join(parts)


def is_success_status(status_code: int) -> bool:
    return 200 <= status_code < 300


class WPClientError(Exception):
    """Ошибка запроса к WP API с привязкой к error_code для логов."""

    def __init__(
        self,
        message: str,
        error_code: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ):
        super().__init__(message)
        self.error_code = error_code
        self.status_code = status_code
        self.url = url


class WPRestClient:
    """Клиент к WordPress REST API без авторизации и без повторов.

    Каждый вызов — ровно один GET. Неуспешный статус -> WPClientError;
    сетевые ошибки requests и ошибки разбора JSON пробрасываются как есть.
    """

    def __init__(self, base_url: str, timeout_sec: Optional[float] = None):
        self.base_url = (base_url or "").rstrip("/")
        self.timeout_sec = timeout_sec

    @classmethod
    def from_config(cls, config: WPContentConfig) -> "WPRestClient":
        return cls(base_url=config.base_url, timeout_sec=config.timeout_sec)

    def build_url(self, path: str, params: Optional[QueryParams] = None) -> str:
        url = f"{self.base_url}{API_PREFIX}{path}"
        query = build_query(params)
        if query:
            url += f"?{query}"
        return url

    def _request(
        self,
        path: str,
        params: Optional[QueryParams] = None,
        expect_status: Optional[int] = None,
        run_id: Optional[str] = None,
    ) -> Tuple[Any, requests.Response]:
        """GET без повторов. expect_status задаёт точное сравнение вместо диапазона 2xx."""
        url = self.build_url(path, params)
        logger.debug("WP API GET %s", url, extra={"run_id": run_id})

        try:
            resp = requests.get(
                url,
                timeout=self.timeout_sec,
                headers={"Accept": "application/json"},
            )
        except requests.exceptions.RequestException as e:
            logger.warning(
                "WP API request error: %s %s",
                url,
                e,
                extra={"run_id": run_id, "error_code": WP_NETWORK_ERROR},
            )
            raise

        if expect_status is not None:
            ok = resp.status_code == expect_status
        else:
            ok = is_success_status(resp.status_code)
        if not ok:
            logger.warning(
                "WP API fetch failed: %s status=%s",
                url,
                resp.status_code,
                extra={"run_id": run_id, "error_code": WP_FETCH_ERROR},
            )
            raise WPClientError(
                f"WordPress API fetch error: {url} (code: {resp.status_code})",
                WP_FETCH_ERROR,
                status_code=resp.status_code,
                url=url,
            )

        try:
            data = resp.json()
        except ValueError as e:
            logger.warning(
                "Invalid JSON from WP API: %s %s",
                url,
                e,
                extra={"run_id": run_id, "error_code": WP_DATA_FORMAT_ERROR},
            )
            raise
        return data, resp

    def get(
        self,
        path: str,
        params: Optional[QueryParams] = None,
        expect_status: Optional[int] = None,
        run_id: Optional[str] = None,
    ) -> Any:
        data, _ = self._request(path, params=params, expect_status=expect_status, run_id=run_id)
        return data

    def get_with_headers(
        self,
        path: str,
        params: Optional[QueryParams] = None,
        run_id: Optional[str] = None,
    ) -> Tuple[Any, Dict[str, str]]:
        """GET с возвратом заголовков для пагинации (X-WP-Total, X-WP-TotalPages)."""
        data, resp = self._request(path, params=params, run_id=run_id)
        return data, dict(resp.headers)
