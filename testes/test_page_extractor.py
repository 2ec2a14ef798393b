import datetime as dt

import pytest

from fakes import FakeResponse, FakeSession
from news_migration.extractors.page_extractor import PageExtractor, parse_block_date
from news_migration.models import ContentBlock, ImagePosition, ImageSize, NormalizedDocument
from news_migration.utils.errors import DateParseError, FetchError

URL = "https://www.example.org/culture/news/harbour-festival"

ARTICLE = """
<html><body>
<div class="header"><h1>Site name</h1><img src="/logo.png"></div>
<div class="newscontent">
<h1> Harbour Festival Returns </h1>
<img src="/media/festival-main.jpg" alt="Festival">
<p>The festival is back.</p>
<p>&nbsp;</p>
<p>   </p>
<div><p>Nested, not a body paragraph.</p></div>
<p>Second <strong>paragraph</strong>.</p>
<section class="contentBlocks">
<section class="contentBlock">
<span class="date">01 January 2024</span>
<img class="imagesize_large imageposition_right" src="/media/block-1.jpg">
<div class="content"><p>Block one text.</p>
</div>
</section>
<section class="contentBlock">
<div class="content"><p>Second block.</p><p>&nbsp;</p></div>
</section>
<section class="contentBlock">
<span class="date">not a date</span>
<img class="imagesize_bogus" src="https://cdn.example.org/block-3.jpg">
</section>
</section>
<p>After the blocks.</p>
</div>
</body></html>
"""

GOLDEN = NormalizedDocument(
    url=URL,
    title="Harbour Festival Returns",
    date=dt.date(2024, 1, 1),
    main_image_url="https://www.example.org/media/festival-main.jpg",
    body_html="<p>The festival is back.</p><p>Second <strong>paragraph</strong>.</p>",
    content_blocks=(
        ContentBlock(
            content_html="<p>Block one text.</p>",
            image_url="https://www.example.org/media/block-1.jpg",
            image_size=ImageSize.LARGE,
            image_position=ImagePosition.RIGHT,
            priority=0,
        ),
        ContentBlock(content_html="<p>Second block.</p>", priority=1),
        ContentBlock(
            content_html="",
            image_url="https://cdn.example.org/block-3.jpg",
            image_size=ImageSize.SMALL,
            image_position=ImagePosition.LEFT,
            priority=2,
        ),
    ),
)


def extractor(config, html=ARTICLE, status=200):
    return PageExtractor(config, FakeSession({URL: FakeResponse(status, html)}))


def test_article_matches_golden_document(config):
    assert extractor(config).extract(URL) == GOLDEN


def test_body_stops_at_content_blocks(config):
    doc = extractor(config).extract(URL)
    assert "After the blocks" not in doc.body_html
    assert "Nested" not in doc.body_html


def test_priorities_follow_source_order(config):
    doc = extractor(config).extract(URL)
    assert [b.priority for b in doc.content_blocks] == [0, 1, 2]


def test_image_size_class_resolution(config):
    blocks = extractor(config).extract(URL).content_blocks
    assert int(blocks[0].image_size) == 2
    assert int(blocks[2].image_size) == 0


def test_unparseable_block_date_leaves_date_unset(config):
    html = """
    <div class="newscontent"><h2>Dateless</h2>
    <section class="contentBlocks">
      <section class="contentBlock"><span class="date">not a date</span>
        <div class="content">Text</div></section>
    </section></div>
    """
    doc = extractor(config, html).extract(URL)
    assert doc.title == "Dateless"
    assert doc.date is None
    assert doc.content_blocks[0].content_html == "Text"


def test_page_without_optional_parts(config):
    html = '<div class="newscontent"><p>Only text.</p></div>'
    doc = extractor(config, html).extract(URL)
    assert doc.title is None
    assert doc.main_image_url is None
    assert doc.date is None
    assert doc.content_blocks == ()
    assert doc.body_html == "<p>Only text.</p>"


def test_page_without_container(config):
    doc = extractor(config, "<html><body><p>Moved</p></body></html>").extract(URL)
    assert doc == NormalizedDocument(url=URL)


def test_unreachable_page_raises_fetch_error(config):
    with pytest.raises(FetchError):
        extractor(config, status=404).extract(URL)


def test_try_extract_returns_failed_outcome(config):
    outcome = extractor(config, status=503).try_extract(URL)
    assert not outcome.ok
    assert isinstance(outcome.error, FetchError)


def test_parse_block_date():
    assert parse_block_date("01 January 2024").isoformat() == "2024-01-01"
    assert parse_block_date(" 15 March 2019 ") == dt.date(2019, 3, 15)
    with pytest.raises(DateParseError):
        parse_block_date("not a date")
