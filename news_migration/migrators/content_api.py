"""
Client for the destination content API.

Two endpoints are used: the paged news listing (to learn which titles are
already migrated) and the news create call.  Both use bearer-token
authentication.  Requests are never retried; a non-success answer raises
:class:`DestinationRequestError` with the status code and response text.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Set

import requests

from news_migration.config import DestinationConfig, MigrationConfig
from news_migration.utils.errors import DestinationRequestError
from news_migration.utils.http import build_session

NEWS_ENDPOINT = "/api/content/news"


def api_headers(cfg: DestinationConfig) -> Dict[str, str]:
    """
    Construct the default headers required for content API requests.

    :param cfg: Destination configuration with the ``access_token``.
    :return: A dictionary of headers including Authorization.
    """
    return {
        "Authorization": f"Bearer {cfg.access_token}",
        "Accept": "application/json",
    }


def _error_message(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body)
    return str(body)


class ContentApiClient:
    def __init__(self, config: MigrationConfig, session: Optional[requests.Session] = None) -> None:
        self.cfg = config.destination
        self.timeout = config.migration.timeout
        self.session = session or build_session()

    @property
    def news_url(self) -> str:
        return f"{self.cfg.api_base}{NEWS_ENDPOINT}"

    def _send(self, method: str, **kwargs: Any) -> requests.Response:
        try:
            resp = self.session.request(
                method,
                self.news_url,
                headers=api_headers(self.cfg),
                timeout=self.timeout,
                **kwargs,
            )
        except requests.RequestException as e:
            raise DestinationRequestError(None, str(e)) from e
        if not 200 <= resp.status_code < 300:
            raise DestinationRequestError(resp.status_code, _error_message(resp))
        return resp

    def list_titles(self) -> Set[str]:
        """Titles of every article already present at the destination."""
        resp = self._send("GET", params={"page": 1, "pageSize": self.cfg.page_size})
        try:
            items = resp.json().get("items") or []
        except (ValueError, AttributeError) as e:
            raise DestinationRequestError(resp.status_code, f"unexpected listing body: {e}") from e
        return {item["title"] for item in items if isinstance(item, dict) and item.get("title") is not None}

    def create_news(self, payload: Dict[str, Any]) -> str:
        """Create one article and return its identifier."""
        resp = self._send("POST", json=payload)
        try:
            body = resp.json()
        except ValueError:
            return resp.text.strip().strip('"')
        if isinstance(body, dict):
            return str(body.get("id") or body.get("contentId") or "")
        return str(body)
