"""
Extraction of one legacy article page into a :class:`NormalizedDocument`.

The legacy site renders every article with the same template::

    <div class="newscontent">
      <h1>Title</h1>
      <img src="/media/main.jpg">
      <p>Body paragraph</p>
      ...
      <section class="contentBlocks">
        <section class="contentBlock">
          <span class="date">01 January 2024</span>
          <img class="imagesize_large imageposition_right" src="...">
          <div class="content">...</div>
        </section>
      </section>
    </div>

Body paragraphs are the direct ``<p>`` children of the container that
appear before the ``contentBlocks`` section; everything structured lives in
the blocks.
"""

from __future__ import annotations

import datetime as dt
from typing import List, Optional, Tuple
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup, Tag

from news_migration.config import MigrationConfig
from news_migration.models import ContentBlock, ImagePosition, ImageSize, NormalizedDocument
from news_migration.parsers.sanitizer import clean_up, is_blank_text
from news_migration.utils.errors import DateParseError, log_message, report_error
from news_migration.utils.http import build_session, fetch_html
from news_migration.utils.outcome import Outcome, attempt
from news_migration.utils.slugs import article_identity

CONTENT_CLASS = "newscontent"
BLOCKS_CLASS = "contentBlocks"
BLOCK_CLASS = "contentBlock"
BLOCK_CONTENT_CLASS = "content"
DATE_CLASS = "date"
DATE_FORMAT = "%d %B %Y"
HEADINGS = ["h1", "h2", "h3", "h4", "h5", "h6"]
SIZE_PREFIX = "imagesize"
POSITION_PREFIX = "imageposition"


def parse_block_date(text: str) -> dt.date:
    """Parse ``"01 January 2024"`` style dates.

    :raises DateParseError: if ``text`` does not follow the legacy format.
    """
    try:
        return dt.datetime.strptime((text or "").strip(), DATE_FORMAT).date()
    except ValueError as e:
        raise DateParseError(text) from e


def _class_token(img: Tag, prefix: str) -> Optional[str]:
    for cls in img.get("class") or []:
        parts = cls.split("_")
        if len(parts) > 1 and parts[0].lower() == prefix:
            return parts[1]
    return None


def image_size_of(img: Optional[Tag]) -> ImageSize:
    if img is None:
        return ImageSize.DEFAULT
    return ImageSize.parse(_class_token(img, SIZE_PREFIX))


def image_position_of(img: Optional[Tag]) -> ImagePosition:
    if img is None:
        return ImagePosition.DEFAULT
    return ImagePosition.parse(_class_token(img, POSITION_PREFIX))


def _inner_html(el: Optional[Tag]) -> str:
    if el is None:
        return ""
    return "".join(str(child) for child in el.contents)


class PageExtractor:
    """Fetches article pages and distills them into normalized documents."""

    def __init__(self, config: MigrationConfig, session: Optional[requests.Session] = None) -> None:
        self.base_url = config.legacy.base_url
        self.timeout = config.migration.timeout
        self.session = session or build_session()

    def _absolute(self, src: Optional[str], page_url: str) -> Optional[str]:
        if not src or not src.strip():
            return None
        return urljoin(page_url or self.base_url + "/", src.strip())

    def extract(self, url: str) -> NormalizedDocument:
        """Fetch ``url`` and parse it.

        :raises FetchError: if the page cannot be retrieved.
        """
        html = fetch_html(self.session, url, timeout=self.timeout)
        return self.parse(html, url)

    def try_extract(self, url: str) -> Outcome[NormalizedDocument]:
        return attempt(lambda: self.extract(url))

    def parse(self, html: str, url: str = "") -> NormalizedDocument:
        soup = BeautifulSoup(html, "html.parser")
        container = soup.find("div", class_=CONTENT_CLASS)
        if container is None:
            log_message(f"No '{CONTENT_CLASS}' container in {url}", level="WARNING")
            return NormalizedDocument(url=url)

        heading = container.find(HEADINGS)
        title = heading.get_text().strip() if heading is not None else None

        main_img = container.find("img")
        main_image_url = self._absolute(main_img.get("src"), url) if main_img is not None else None

        blocks, block_dates = self._content_blocks(container, url)
        doc_date = next((d for d in block_dates if d is not None), None)

        return NormalizedDocument(
            url=url,
            title=title,
            date=doc_date,
            main_image_url=main_image_url,
            body_html=self._body(container),
            content_blocks=tuple(blocks),
        )

    def _body(self, container: Tag) -> str:
        paragraphs: List[str] = []
        for child in container.find_all(recursive=False):
            if child.name == "section" and BLOCKS_CLASS in (child.get("class") or []):
                break
            if child.name == "p" and not is_blank_text(child.get_text()):
                paragraphs.append(str(child))
        return clean_up("".join(paragraphs))

    def _content_blocks(self, container: Tag, url: str) -> Tuple[List[ContentBlock], List[Optional[dt.date]]]:
        section = container.find("section", class_=BLOCKS_CLASS)
        if section is None:
            return [], []
        blocks: List[ContentBlock] = []
        dates: List[Optional[dt.date]] = []
        for priority, block in enumerate(section.find_all("section", class_=BLOCK_CLASS, recursive=False)):
            content_el = block.find(class_=BLOCK_CONTENT_CLASS)

            block_date = None
            date_el = block.find(class_=DATE_CLASS)
            if date_el is not None:
                try:
                    block_date = parse_block_date(date_el.get_text())
                except DateParseError as e:
                    report_error("DATE_PARSE", {"url": url, "slug": f"{article_identity(url)}#{priority}"}, e)
            dates.append(block_date)

            img = block.find("img")
            blocks.append(
                ContentBlock(
                    content_html=clean_up(_inner_html(content_el)),
                    image_url=self._absolute(img.get("src"), url) if img is not None else None,
                    image_size=image_size_of(img),
                    image_position=image_position_of(img),
                    priority=priority,
                )
            )
        return blocks, dates
