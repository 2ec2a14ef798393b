"""
Readers for the legacy site.

* :mod:`news_migration.extractors.url_discoverer` – archive index crawling
* :mod:`news_migration.extractors.page_extractor` – article page parsing
* :mod:`news_migration.extractors.archive_file` – intermediate JSON archive
"""

from .archive_file import read_archive, write_archive
from .page_extractor import PageExtractor, parse_block_date
from .url_discoverer import UrlDiscoverer

__all__ = ["PageExtractor", "UrlDiscoverer", "parse_block_date", "read_archive", "write_archive"]
