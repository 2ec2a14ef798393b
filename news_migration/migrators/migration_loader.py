"""
Idempotent submission of transformed articles.

The loader reads the destination's existing titles once, then creates only
the payloads whose title is not already there.  Titles are compared
exactly (case-sensitive).  Every created title is added to the snapshot, so
a batch containing the same title twice still yields a single create.

The title is a weak identity: two distinct articles sharing a title collide
and the second one is skipped.
"""

from __future__ import annotations

from typing import Iterable, Optional, Set

from news_migration.models import DestinationPayload, LoadOutcome, LoadReport
from news_migration.utils.errors import DestinationRequestError, log_message, report_error, report_ok

from .content_api import ContentApiClient


class MigrationLoader:
    def __init__(self, client: ContentApiClient) -> None:
        self.client = client
        self.existing_titles: Optional[Set[str]] = None
        self.listing_error: Optional[DestinationRequestError] = None

    def prime(self) -> bool:
        """Snapshot existing destination titles.  Returns False on failure."""
        try:
            self.existing_titles = set(self.client.list_titles())
            self.listing_error = None
            log_message(f"Destination already holds {len(self.existing_titles)} articles")
            return True
        except DestinationRequestError as e:
            self.existing_titles = None
            self.listing_error = e
            log_message(f"Could not list destination articles: {e}", level="ERROR")
            return False

    def has_snapshot(self) -> bool:
        if self.existing_titles is None and self.listing_error is None:
            self.prime()
        return self.existing_titles is not None

    def is_duplicate(self, title: Optional[str]) -> bool:
        return self.has_snapshot() and title in self.existing_titles

    def unavailable(self, title: Optional[str], slug: str = "") -> LoadOutcome:
        """Outcome for an article that cannot be checked against the destination."""
        err = self.listing_error
        report_error("DESTINATION", {"title": title, "slug": slug}, err)
        return LoadOutcome.failed(title, err.status_code if err else None, f"duplicate check unavailable: {err}")

    def submit(self, payload: DestinationPayload) -> LoadOutcome:
        article = {"title": payload.title, "slug": payload.slug}
        if not self.has_snapshot():
            return self.unavailable(payload.title, payload.slug)
        if payload.title in self.existing_titles:
            report_ok("DUPLICATE", article)
            return LoadOutcome.skipped(payload.title)
        try:
            new_id = self.client.create_news(payload.to_api_payload())
        except DestinationRequestError as e:
            report_error("DESTINATION", article, e)
            return LoadOutcome.failed(payload.title, e.status_code, e.message)
        if payload.title is not None:
            self.existing_titles.add(payload.title)
        report_ok("CREATED", article, {"id": new_id})
        return LoadOutcome.created(payload.title, new_id)

    def load(self, payloads: Iterable[DestinationPayload]) -> LoadReport:
        """Submit ``payloads`` in order, skipping titles already migrated."""
        report = LoadReport()
        self.prime()
        for payload in payloads:
            report.outcomes.append(self.submit(payload))
        log_message(
            f"Load finished: {report.created} created, {report.skipped} skipped, {report.failed} failed"
        )
        return report
