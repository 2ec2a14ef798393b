"""
Responsive image renditions.

For one source image the pipeline stores a re-encoded JPEG at original
resolution (``{name_root}.jpg``) followed by one WebP per configured width,
widest first (``{name_root}-{width}.webp``).  Heights keep the source aspect
ratio.  Renditions of the same ``name_root`` overwrite each other, so
re-running an image is harmless but two images sharing a root clobber one
another.
"""

from __future__ import annotations

import io
from typing import List, Optional

import requests
from PIL import Image, UnidentifiedImageError

from news_migration.config import ImageConfig, MigrationConfig
from news_migration.models import ImageAsset, Rendition, RenditionKind
from news_migration.utils.errors import ImageFetchError, ImageProcessError, log_message
from news_migration.utils.http import build_session
from news_migration.utils.outcome import Outcome, attempt

from .blob_storage import BlobStorage


def original_blob_name(name_root: str) -> str:
    return f"{name_root}.jpg"


def responsive_blob_name(name_root: str, width: int) -> str:
    return f"{name_root}-{width}.webp"


def scaled_height(width: int, height: int, target_width: int) -> int:
    return max(1, round(height * target_width / width))


def _encode(img: Image.Image, fmt: str, quality: int) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format=fmt, quality=quality)
    return buf.getvalue()


class ImageRenditionPipeline:
    def __init__(
        self,
        config: MigrationConfig,
        storage: BlobStorage,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.images: ImageConfig = config.images
        self.timeout = config.migration.timeout
        self.storage = storage
        self.session = session or build_session()

    def fetch(self, source_url: str) -> bytes:
        try:
            resp = self.session.get(source_url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.HTTPError as e:
            raise ImageFetchError(source_url, f"HTTP {e.response.status_code}") from e
        except requests.RequestException as e:
            raise ImageFetchError(source_url, str(e)) from e
        if not resp.content:
            raise ImageFetchError(source_url, "empty response")
        return resp.content

    def decode(self, source_url: str, data: bytes) -> Image.Image:
        try:
            img = Image.open(io.BytesIO(data))
            img.load()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
            raise ImageProcessError(source_url, f"cannot decode image: {e}") from e
        # JPEG has no alpha or palette modes
        if img.mode != "RGB":
            img = img.convert("RGB")
        return img

    def render(self, source_url: str, img: Image.Image, name_root: str) -> ImageAsset:
        quality = self.images.quality
        width, height = img.size
        renditions: List[Rendition] = []

        blob = original_blob_name(name_root)
        try:
            data = _encode(img, "JPEG", quality)
        except (OSError, ValueError) as e:
            raise ImageProcessError(source_url, f"JPEG encoding failed: {e}") from e
        self.storage.upload(blob, data, "image/jpeg")
        renditions.append(Rendition(kind=RenditionKind.ORIGINAL, width=width, height=height, blob_name=blob))

        for target_width in self.images.widths:
            target_height = scaled_height(width, height, target_width)
            try:
                resized = img.resize((target_width, target_height), Image.Resampling.LANCZOS)
                data = _encode(resized, "WEBP", quality)
            except (OSError, ValueError) as e:
                raise ImageProcessError(source_url, f"{target_width}px rendition failed: {e}") from e
            blob = responsive_blob_name(name_root, target_width)
            self.storage.upload(blob, data, "image/webp")
            renditions.append(
                Rendition(kind=RenditionKind.RESPONSIVE, width=target_width, height=target_height, blob_name=blob)
            )

        return ImageAsset(source_url=source_url, name_root=name_root, renditions=tuple(renditions))

    def process(self, source_url: str, name_root: str) -> ImageAsset:
        """Fetch ``source_url`` and store all its renditions under ``name_root``.

        :raises ImageFetchError: if the image cannot be downloaded.
        :raises ImageProcessError: if it cannot be decoded, encoded or stored.
        """
        data = self.fetch(source_url)
        img = self.decode(source_url, data)
        asset = self.render(source_url, img, name_root)
        log_message(f"Stored {len(asset.renditions)} renditions for {name_root}", level="DEBUG")
        return asset

    def try_process(self, source_url: str, name_root: str) -> Outcome[ImageAsset]:
        return attempt(lambda: self.process(source_url, name_root))

    def url_of(self, asset: ImageAsset) -> Optional[str]:
        """Public URL of the smallest responsive rendition of ``asset``."""
        smallest = asset.smallest
        return self.storage.url_for(smallest.blob_name) if smallest else None
