"""
Mapping of normalized documents onto the destination schema.

Images are re-hosted while transforming: the main image, every inline
``<img>`` left in the body, and each content-block image go through the
:class:`ImageRenditionPipeline` under a name derived from the article
identity.  A failed image is logged and dropped; the article itself is
still transformed.
"""

from __future__ import annotations

from typing import List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from news_migration.config import MigrationConfig
from news_migration.migrators.image_renditions import ImageRenditionPipeline
from news_migration.models import (
    ContentBlock,
    ContentItem,
    DestinationPayload,
    ImageAsset,
    NormalizedDocument,
)
from news_migration.utils.errors import ImageFetchError, log_message, report_error
from news_migration.utils.slugs import article_slug


def main_name_root(identity: str) -> str:
    return f"{identity}-main"


def inline_name_root(identity: str, index: int) -> str:
    return f"{identity}-inline-{index}"


def block_name_root(identity: str, priority: int) -> str:
    return f"{identity}-block-{priority}"


class ArticleTransformer:
    """Builds :class:`DestinationPayload` objects.

    With ``pipeline=None`` (dry run) no image is fetched or stored; image
    fields stay unset and inline sources are left untouched.
    """

    def __init__(self, config: MigrationConfig, pipeline: Optional[ImageRenditionPipeline]) -> None:
        self.base_url = config.legacy.base_url
        self.pipeline = pipeline

    def _render(self, doc: NormalizedDocument, source_url: str, name_root: str) -> Optional[ImageAsset]:
        if self.pipeline is None:
            log_message(f"Dry-run: would render {source_url} as {name_root}", level="DEBUG")
            return None
        outcome = self.pipeline.try_process(source_url, name_root)
        if not outcome.ok:
            code = "IMAGE_FETCH" if isinstance(outcome.error, ImageFetchError) else "IMAGE_PROCESS"
            report_error(code, {"title": doc.title, "slug": name_root}, outcome.error)
            return None
        return outcome.value

    def rehost_inline_images(
        self, doc: NormalizedDocument, identity: str, main_asset: Optional[ImageAsset] = None
    ) -> str:
        """Point inline ``<img>`` tags of the body at their smallest rendition.

        An inline reference to the main image reuses ``main_asset`` and is
        not rendered a second time.
        """
        if "<img" not in doc.body_html.lower():
            return doc.body_html
        soup = BeautifulSoup(doc.body_html, "html.parser")
        changed = False
        index = 0
        for img in soup.find_all("img"):
            src = (img.get("src") or "").strip()
            if not src:
                continue
            source_url = urljoin(doc.url or self.base_url + "/", src)
            if doc.main_image_url and source_url == doc.main_image_url:
                asset = main_asset
            else:
                asset = self._render(doc, source_url, inline_name_root(identity, index))
                index += 1
            new_src = self.pipeline.url_of(asset) if asset is not None else None
            if new_src:
                img["src"] = new_src
                changed = True
        # Untouched bodies keep their original markup
        return str(soup) if changed else doc.body_html

    def _content_item(self, doc: NormalizedDocument, block: ContentBlock, identity: str) -> ContentItem:
        image_file = None
        if block.image_url:
            asset = self._render(doc, block.image_url, block_name_root(identity, block.priority))
            if asset is not None:
                image_file = asset.name_root
        return ContentItem(
            image_file=image_file,
            image_size=int(block.image_size),
            image_position=int(block.image_position),
            content=block.content_html,
            priority=block.priority,
        )

    def transform(self, doc: NormalizedDocument, identity: str) -> DestinationPayload:
        main_root: Optional[str] = None
        main_asset: Optional[ImageAsset] = None
        if doc.main_image_url:
            main_asset = self._render(doc, doc.main_image_url, main_name_root(identity))
            if main_asset is not None:
                main_root = main_asset.name_root

        body = self.rehost_inline_images(doc, identity, main_asset)
        content: List[ContentItem] = [self._content_item(doc, b, identity) for b in doc.content_blocks]

        return DestinationPayload(
            date=doc.date.isoformat() if doc.date else None,
            title=doc.title,
            slug=article_slug(doc.title or "", identity),
            body=body,
            image_thumbnail=main_root,
            image_main=main_root,
            content=content,
            source_url=doc.url or None,
        )
