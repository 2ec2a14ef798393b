"""
Harvesting of article URLs from the paginated legacy archive index.
"""

from __future__ import annotations

import re
from typing import Optional, Set
from urllib.parse import urldefrag, urljoin, urlparse

import requests
from bs4 import BeautifulSoup

from news_migration.config import MigrationConfig
from news_migration.utils.errors import log_message
from news_migration.utils.http import build_session, fetch_html


class UrlDiscoverer:
    """Collects article links from archive pages ``1..max_page``.

    Only anchors resolving to ``{domain}/{segment}/news/...`` are kept.
    Relative links are resolved against the legacy base URL first, so
    links pointing at another host never match.
    """

    def __init__(self, config: MigrationConfig, session: Optional[requests.Session] = None) -> None:
        self.base_url = config.legacy.base_url
        self.archive_url = urljoin(self.base_url + "/", config.legacy.archive_path.lstrip("/"))
        self.timeout = config.migration.timeout
        self.session = session or build_session()
        host = re.escape(urlparse(self.base_url).netloc)
        self.pattern = re.compile(rf"^https?://{host}/[^/]+/news/.+")

    def urls_in_page(self, html: str) -> Set[str]:
        soup = BeautifulSoup(html, "html.parser")
        found: Set[str] = set()
        for anchor in soup.find_all("a", href=True):
            href = anchor["href"].strip()
            if not href:
                continue
            absolute = urldefrag(urljoin(self.base_url + "/", href)).url
            if self.pattern.match(absolute):
                found.add(absolute)
        return found

    def discover(self, max_page: int) -> Set[str]:
        """Return every matching article URL on archive pages ``1..max_page``.

        :raises FetchError: if any archive page cannot be fetched.  Discovery
            has no partial-page recovery.
        """
        if max_page < 1:
            raise ValueError("max_page must be a positive integer")
        urls: Set[str] = set()
        for page in range(1, max_page + 1):
            html = fetch_html(self.session, self.archive_url, timeout=self.timeout, params={"page": page})
            page_urls = self.urls_in_page(html)
            log_message(f"Archive page {page}: {len(page_urls)} article links", level="DEBUG")
            urls.update(page_urls)
        log_message(f"Discovered {len(urls)} article URLs across {max_page} archive pages")
        return urls
