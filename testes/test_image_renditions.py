import io

import pytest
import requests
from PIL import Image

from fakes import FakeResponse, FakeSession, MemoryStorage, image_bytes
from news_migration.migrators.image_renditions import ImageRenditionPipeline, scaled_height
from news_migration.models import RenditionKind
from news_migration.utils.errors import ImageFetchError, ImageProcessError

SRC = "https://www.example.org/media/photo.jpg"
WIDTHS = [1920, 1600, 1280, 1024, 800, 640, 320]


def pipeline(config, payload, status=200):
    storage = MemoryStorage()
    session = FakeSession({SRC: FakeResponse(status, content=payload)})
    return ImageRenditionPipeline(config, storage, session), storage


def test_original_and_seven_responsive_renditions(config):
    pipe, storage = pipeline(config, image_bytes(400, 300))
    asset = pipe.process(SRC, "harbour-main")

    assert storage.uploads == ["harbour-main.jpg"] + [f"harbour-main-{w}.webp" for w in WIDTHS]
    assert asset.name_root == "harbour-main"
    assert asset.renditions[0].kind is RenditionKind.ORIGINAL
    assert (asset.renditions[0].width, asset.renditions[0].height) == (400, 300)
    assert [r.width for r in asset.renditions[1:]] == WIDTHS
    assert storage.blobs["harbour-main.jpg"][1] == "image/jpeg"
    assert storage.blobs["harbour-main-320.webp"][1] == "image/webp"


def test_renditions_keep_aspect_ratio(config):
    pipe, storage = pipeline(config, image_bytes(333, 250))
    pipe.process(SRC, "ratio")
    source_ratio = 250 / 333
    for width in WIDTHS:
        data, _ = storage.blobs[f"ratio-{width}.webp"]
        with Image.open(io.BytesIO(data)) as img:
            assert img.format == "WEBP"
            assert img.size[0] == width
            assert abs(img.size[1] - width * source_ratio) <= 1


def test_scaled_height_rounds():
    assert scaled_height(1000, 750, 320) == 240
    assert scaled_height(333, 250, 320) == round(250 * 320 / 333)


def test_png_with_alpha_is_accepted(config):
    pipe, storage = pipeline(config, image_bytes(64, 64, fmt="PNG", mode="RGBA"))
    asset = pipe.process(SRC, "alpha")
    assert len(asset.renditions) == 8
    with Image.open(io.BytesIO(storage.blobs["alpha.jpg"][0])) as img:
        assert img.format == "JPEG"


def test_unreachable_image_is_a_fetch_error(config):
    pipe, storage = pipeline(config, b"", status=404)
    with pytest.raises(ImageFetchError):
        pipe.process(SRC, "missing")
    assert storage.uploads == []


def test_connection_error_is_a_fetch_error(config):
    storage = MemoryStorage()
    pipe = ImageRenditionPipeline(config, storage, FakeSession({SRC: requests.ConnectionError("down")}))
    outcome = pipe.try_process(SRC, "down")
    assert not outcome.ok
    assert isinstance(outcome.error, ImageFetchError)


def test_undecodable_image_is_a_process_error(config):
    pipe, storage = pipeline(config, b"<html>not an image</html>")
    outcome = pipe.try_process(SRC, "broken")
    assert isinstance(outcome.error, ImageProcessError)
    assert storage.uploads == []


def test_rerun_overwrites_same_blobs(config):
    pipe, storage = pipeline(config, image_bytes(100, 50))
    pipe.process(SRC, "again")
    pipe.process(SRC, "again")
    assert len(storage.blobs) == 8
    assert len(storage.uploads) == 16


def test_url_of_points_at_smallest_rendition(config):
    pipe, _ = pipeline(config, image_bytes(100, 50))
    asset = pipe.process(SRC, "small")
    assert pipe.url_of(asset) == "https://cdn.example.org/news/small-320.webp"
