"""Offline stand-ins for the HTTP session, blob storage and content API."""

import io
import json
from urllib.parse import urlencode

import requests
from PIL import Image

from news_migration.migrators.blob_storage import BlobStorage
from news_migration.utils.errors import DestinationRequestError


class FakeResponse:
    def __init__(self, status_code=200, text="", content=None, json_body=None):
        self.status_code = status_code
        if json_body is not None:
            text = json.dumps(json_body)
        self.text = text
        self.content = content if content is not None else text.encode("utf-8")
        self.headers = {}

    def json(self):
        return json.loads(self.text)

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


def route_key(url, params=None):
    if not params:
        return url
    return f"{url}?{urlencode(params)}"


class FakeSession:
    """Serves canned responses keyed by URL (plus query string).

    A value may be a :class:`FakeResponse`, an exception instance to raise,
    or a callable receiving the request keyword arguments.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []
        self.headers = {}

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        key = route_key(url, kwargs.get("params"))
        handler = self.routes.get((method, key), self.routes.get(key))
        if handler is None:
            return FakeResponse(404, "not found")
        if isinstance(handler, Exception):
            raise handler
        if callable(handler):
            return handler(**kwargs)
        return handler

    def get(self, url, **kwargs):
        return self.request("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self.request("POST", url, **kwargs)


class MemoryStorage(BlobStorage):
    def __init__(self, public_base_url="https://cdn.example.org/news"):
        super().__init__(public_base_url)
        self.blobs = {}
        self.uploads = []

    def upload(self, blob_name, data, content_type):
        self.blobs[blob_name] = (data, content_type)
        self.uploads.append(blob_name)


class FakeContentClient:
    """Destination with an in-memory title list."""

    def __init__(self, titles=(), fail_titles=(), listing_error=None):
        self.titles = list(titles)
        self.fail_titles = set(fail_titles)
        self.listing_error = listing_error
        self.created = []
        self.list_calls = 0

    def list_titles(self):
        self.list_calls += 1
        if self.listing_error is not None:
            raise self.listing_error
        return set(self.titles)

    def create_news(self, payload):
        if payload.get("title") in self.fail_titles:
            raise DestinationRequestError(400, "title rejected")
        self.created.append(payload)
        self.titles.append(payload.get("title"))
        return f"id-{len(self.created)}"


def image_bytes(width=100, height=75, fmt="JPEG", mode="RGB", color=(200, 30, 30)):
    img = Image.new(mode, (width, height), color=color if mode == "RGB" else color + (128,))
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()
