import csv
import json

import pytest

from fakes import FakeContentClient, FakeResponse, FakeSession, MemoryStorage, image_bytes
from news_migration.config import load_config
from news_migration.extractors.archive_file import read_archive
from news_migration.migration_tool import NewsMigrationTool
from news_migration.models import LoadStatus
from news_migration.utils.errors import DestinationRequestError

BASE = "https://www.example.org"

ARCHIVE = """
<a href="/culture/news/festival">Festival</a>
<a href="/sport/news/regatta">Regatta</a>
<a href="/sport/news/gone">Gone</a>
<a href="/contact">Contact</a>
"""

FESTIVAL = """
<div class="newscontent"><h1>Festival</h1>
<img src="/media/festival.jpg">
<p>Body with <img src="/media/inline.png"></p>
<section class="contentBlocks">
  <section class="contentBlock"><span class="date">02 February 2024</span>
    <img class="imagesize_medium imageposition_center" src="/media/block.jpg">
    <div class="content"><p>Block</p></div></section>
</section></div>
"""

REGATTA = """
<div class="newscontent"><h1>Regatta</h1><p>No images here.</p></div>
"""


def site_session():
    return FakeSession(
        {
            f"{BASE}/news?page=1": FakeResponse(200, ARCHIVE),
            f"{BASE}/culture/news/festival": FakeResponse(200, FESTIVAL),
            f"{BASE}/sport/news/regatta": FakeResponse(200, REGATTA),
            f"{BASE}/sport/news/gone": FakeResponse(404, "gone"),
            f"{BASE}/media/festival.jpg": FakeResponse(content=image_bytes(120, 80)),
            f"{BASE}/media/inline.png": FakeResponse(content=image_bytes(60, 60, fmt="PNG")),
            f"{BASE}/media/block.jpg": FakeResponse(content=image_bytes(90, 120)),
        }
    )


def make_tool(config, client=None, storage=None):
    return NewsMigrationTool(
        config,
        session=site_session(),
        storage=storage or MemoryStorage(),
        client=client or FakeContentClient(),
    )


@pytest.fixture
def site_config(raw_config):
    raw_config["migration"]["site_url"] = "https://new.example.org"
    return load_config(raw_config)


def test_full_run_creates_articles_and_renditions(site_config, report_dir):
    client = FakeContentClient()
    storage = MemoryStorage()
    report = make_tool(site_config, client, storage).run(max_page=1)

    assert report.created == 2
    assert report.failed == 0
    titles = sorted(p["title"] for p in client.created)
    assert titles == ["Festival", "Regatta"]

    festival = next(p for p in client.created if p["title"] == "Festival")
    assert festival["date"] == "2024-02-02"
    assert festival["imageMain"] == festival["imageThumbnail"] == "culture-news-festival-main"
    assert festival["content"][0]["imageFile"] == "culture-news-festival-block-0"
    assert festival["content"][0]["imageSize"] == 1
    assert festival["content"][0]["imagePosition"] == 2
    assert "https://cdn.example.org/news/culture-news-festival-inline-0-320.webp" in festival["body"]
    assert {"culture-news-festival-main.jpg", "culture-news-festival-inline-0.jpg", "culture-news-festival-block-0-320.webp"} <= set(storage.blobs)

    regatta = next(p for p in client.created if p["title"] == "Regatta")
    assert "date" not in regatta
    assert "imageMain" not in regatta

    errors = (report_dir / "errors.jsonl").read_text(encoding="utf-8").splitlines()
    assert any(json.loads(line)["code"] == "FETCH" for line in errors)

    with open(report_dir.parent / "redirect_map.csv", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[0] == ["OldURL", "NewURL"]
    assert [f"{BASE}/sport/news/regatta", "https://new.example.org/news/regatta"] in rows


def test_rerun_is_idempotent(site_config):
    client = FakeContentClient()
    make_tool(site_config, client).run(max_page=1)
    storage = MemoryStorage()
    second = make_tool(site_config, client, storage).run(max_page=1)

    assert second.created == 0
    assert second.skipped == 2
    assert len(client.created) == 2
    assert storage.uploads == []


def test_limit_caps_migrated_articles(raw_config):
    raw_config["migration"]["limit"] = 1
    client = FakeContentClient()
    report = make_tool(load_config(raw_config), client).run(max_page=1)
    assert len(report.outcomes) == 1
    assert len(client.created) == 1


def test_dry_run_writes_payloads_only(raw_config, report_dir):
    raw_config["migration"]["dry_run"] = True
    client = FakeContentClient()
    storage = MemoryStorage()
    report = make_tool(load_config(raw_config), client, storage).run(max_page=1)

    assert client.created == []
    assert storage.uploads == []
    assert report.created == 0
    assert all(o.reason == "dry-run" for o in report.outcomes)
    lines = (report_dir / "payloads.jsonl").read_text(encoding="utf-8").splitlines()
    assert sorted(json.loads(line)["title"] for line in lines) == ["Festival", "Regatta"]


def test_listing_failure_skips_transform(site_config):
    client = FakeContentClient(listing_error=DestinationRequestError(500, "down"))
    storage = MemoryStorage()
    report = make_tool(site_config, client, storage).run(max_page=1)

    assert report.failed == 2
    assert all(o.status is LoadStatus.FAILED for o in report.outcomes)
    assert storage.uploads == []


def test_extract_then_load_from_archive(site_config, tmp_path):
    path = str(tmp_path / "archive.json")
    tool = make_tool(site_config)
    tool.extract_to_archive(1, path)

    documents = read_archive(path)
    assert sorted(d.title for d in documents) == ["Festival", "Regatta"]

    client = FakeContentClient(titles=["Regatta"])
    report = make_tool(site_config, client).migrate_archive(path)
    assert report.created == 1
    assert report.skipped == 1
    assert [p["title"] for p in client.created] == ["Festival"]
