from __future__ import annotations

from urllib.parse import urlparse


def slugify(value: str) -> str:
    text = (value or "").strip().lower()
    out = []
    prev_dash = False
    for ch in text:
        if ch.isalnum():
            out.append(ch)
            prev_dash = False
        else:
            if not prev_dash:
                out.append("-")
            prev_dash = True
    slug = "".join(out).strip("-")
    return slug[:200]


def article_identity(url: str, title: str = "") -> str:
    """Stable identity of an article, used as the prefix of its image names.

    Built from the whole path of the legacy URL plus its query string, so
    ``/en/news/harbour`` and ``/fr/news/harbour`` (or ``view?id=1`` and
    ``view?id=2``) stay apart.  The title is only used when the URL carries
    neither.
    """
    parts = urlparse(url or "")
    identity = slugify(parts.path)
    if parts.query:
        identity = "-".join(p for p in (identity, slugify(parts.query)) if p)
    return identity or slugify(title) or "article"


def article_slug(title: str, identity: str) -> str:
    return slugify(title or "") or identity
