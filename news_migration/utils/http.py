"""
Blocking HTTP helpers shared by the legacy-site readers and the image
pipeline.  Every request carries an explicit timeout; timeouts, connection
errors and non-success statuses all surface as :class:`FetchError`.
"""

from __future__ import annotations

import requests

from .errors import FetchError

USER_AGENT = "news-migration/1.0"


def build_session() -> requests.Session:
    session = requests.Session()
    session.headers.update({"User-Agent": USER_AGENT})
    return session


def fetch_response(session: requests.Session, url: str, *, timeout: float, params=None) -> requests.Response:
    try:
        resp = session.get(url, params=params, timeout=timeout)
        resp.raise_for_status()
    except requests.HTTPError as e:
        raise FetchError(url, f"HTTP {e.response.status_code}") from e
    except requests.RequestException as e:
        raise FetchError(url, str(e)) from e
    return resp


def fetch_html(session: requests.Session, url: str, *, timeout: float, params=None) -> str:
    """Return the decoded body of ``url`` or raise :class:`FetchError`."""
    return fetch_response(session, url, timeout=timeout, params=params).text
