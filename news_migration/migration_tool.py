"""
High-level orchestration of the legacy news migration.

This module defines a :class:`NewsMigrationTool` class that ties together
the extractors, parsers, migrators and utilities into a complete pipeline.
It discovers article URLs on the legacy archive index, extracts each
article, optionally stores the extracted documents in an intermediate
archive file, re-hosts images as responsive renditions, creates the
articles at the destination without duplicating earlier runs, writes log
files and generates a redirect CSV.

Articles are processed strictly one after the other: each is extracted,
transformed (including all of its images) and loaded before the next one
starts.
"""

from __future__ import annotations

import json
import os
from itertools import islice
from typing import Dict, Iterable, Iterator, List, Optional

import requests

from news_migration.config import MigrationConfig
from news_migration.extractors.archive_file import read_archive, write_archive
from news_migration.extractors.page_extractor import PageExtractor
from news_migration.extractors.url_discoverer import UrlDiscoverer
from news_migration.migrators.blob_storage import BlobStorage, build_storage
from news_migration.migrators.content_api import ContentApiClient
from news_migration.migrators.image_renditions import ImageRenditionPipeline
from news_migration.migrators.migration_loader import MigrationLoader
from news_migration.models import LoadOutcome, LoadReport, LoadStatus, NormalizedDocument
from news_migration.parsers.article_transformer import ArticleTransformer
from news_migration.utils.errors import log_message, report_dir, report_error, report_ok
from news_migration.utils.http import build_session
from news_migration.utils.redirects import generate_redirects_csv
from news_migration.utils.slugs import article_identity, article_slug


class NewsMigrationTool:
    """
    Encapsulates all state required to migrate legacy news articles.  The
    collaborators are built from the configuration unless supplied
    explicitly, which is how the tests swap in fakes.
    """

    def __init__(
        self,
        config: MigrationConfig,
        *,
        session: Optional[requests.Session] = None,
        storage: Optional[BlobStorage] = None,
        client: Optional[ContentApiClient] = None,
    ) -> None:
        self.config = config
        self.session = session or build_session()
        self.dry_run = config.migration.dry_run
        self.discoverer = UrlDiscoverer(config, self.session)
        self.extractor = PageExtractor(config, self.session)

        pipeline = None
        if not self.dry_run:
            pipeline = ImageRenditionPipeline(config, storage or build_storage(config.storage), self.session)
        self.transformer = ArticleTransformer(config, pipeline)
        self.loader = MigrationLoader(client or ContentApiClient(config, self.session))

    def log_message(self, message: str, level: str = "INFO") -> None:
        log_message(message, level)

    def discover_urls(self, max_page: int) -> List[str]:
        return sorted(self.discoverer.discover(max_page))

    def iter_documents(self, urls: Iterable[str]) -> Iterator[NormalizedDocument]:
        """Extract URLs one at a time, skipping articles whose page cannot be fetched."""
        for url in urls:
            outcome = self.extractor.try_extract(url)
            if not outcome.ok:
                report_error("FETCH", {"url": url, "slug": article_identity(url)}, outcome.error)
                continue
            doc = outcome.value
            report_ok("EXTRACTED", {"title": doc.title, "slug": article_identity(url, doc.title or "")})
            yield doc

    def extract_documents(self, urls: Iterable[str]) -> List[NormalizedDocument]:
        return list(self.iter_documents(urls))

    def extract_to_archive(self, max_page: int, path: Optional[str] = None) -> str:
        path = path or self.config.migration.archive_file
        documents = self.extract_documents(self.discover_urls(max_page))
        write_archive(documents, path)
        self.log_message(f"Wrote {len(documents)} articles to {path}")
        return path

    def migrate_document(self, doc: NormalizedDocument) -> LoadOutcome:
        identity = article_identity(doc.url, doc.title or "")
        if not self.dry_run:
            # Checked before transforming so duplicates never re-upload images
            if not self.loader.has_snapshot():
                return self.loader.unavailable(doc.title, identity)
            if self.loader.is_duplicate(doc.title):
                report_ok("DUPLICATE", {"title": doc.title, "slug": identity})
                return LoadOutcome.skipped(doc.title)

        payload = self.transformer.transform(doc, identity)
        if self.dry_run:
            self._dump_payload(payload.to_api_payload())
            self.log_message(f"Dry-run: would create '{doc.title}'")
            return LoadOutcome.skipped(doc.title, reason="dry-run")
        return self.loader.submit(payload)

    def migrate_documents(self, documents: Iterable[NormalizedDocument]) -> LoadReport:
        limit = self.config.migration.limit
        report = LoadReport()
        redirects: List[Dict[str, str]] = []

        if limit is not None:
            documents = islice(documents, limit)
        for doc in documents:
            self.log_message(f"Migrating '{doc.title}' ({doc.url})")
            outcome = self.migrate_document(doc)
            report.outcomes.append(outcome)
            if outcome.status is not LoadStatus.FAILED and outcome.reason != "dry-run":
                slug = article_slug(doc.title or "", article_identity(doc.url, doc.title or ""))
                redirects.append({"url": doc.url, "slug": slug})

        site_url = self.config.migration.site_url
        if site_url and redirects:
            path = generate_redirects_csv(
                redirects,
                new_base=site_url,
                out_path=os.path.join(os.path.dirname(report_dir()) or ".", "redirect_map.csv"),
            )
            self.log_message(f"Redirect CSV generated with {len(redirects)} entries at {path}")

        self.log_message(
            f"Migration finished: {report.created} created, {report.skipped} skipped, {report.failed} failed"
        )
        return report

    def migrate_urls(self, urls: Iterable[str]) -> LoadReport:
        # Lazy extraction: each article is loaded before the next page is fetched
        return self.migrate_documents(self.iter_documents(urls))

    def migrate_archive(self, path: Optional[str] = None) -> LoadReport:
        path = path or self.config.migration.archive_file
        documents = read_archive(path)
        self.log_message(f"Loaded {len(documents)} articles from {path}")
        return self.migrate_documents(documents)

    def run(self, max_page: int) -> LoadReport:
        return self.migrate_urls(self.discover_urls(max_page))

    def _dump_payload(self, payload: dict) -> None:
        path = os.path.join(report_dir(), "payloads.jsonl")
        os.makedirs(report_dir(), exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False)
            f.write("\n")
