"""
Intermediate archive file.

Extraction and loading can run as separate invocations: the extract step
writes every :class:`NormalizedDocument` to a JSON file holding one object
per article, and the load step reads it back::

    [
      {"url": "...", "title": "...", "date": "2024-01-01", "image": "...",
       "body": "<p>...</p>",
       "contentBlocks": [{"content": "...", "img-src": "...", "img-pos": "Left",
                          "img-size": "Large", "order": 0}]}
    ]
"""

from __future__ import annotations

import json
import os
from typing import Iterable, List

from news_migration.models import NormalizedDocument


def write_archive(documents: Iterable[NormalizedDocument], path: str) -> str:
    """Write ``documents`` to ``path`` and return the path."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    data = [doc.to_archive_dict() for doc in documents]
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    return path


def read_archive(path: str) -> List[NormalizedDocument]:
    """Read documents written by :func:`write_archive`.

    Raises:
        FileNotFoundError: if ``path`` does not exist.
        ValueError: if an entry cannot be turned into a document.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise ValueError(f"{path} does not hold a list of articles")
    documents: List[NormalizedDocument] = []
    for index, item in enumerate(data):
        try:
            documents.append(NormalizedDocument.from_archive_dict(item))
        except Exception as e:
            raise ValueError(f"Error processing entry {index} in {path}: {e}") from e
    return documents
