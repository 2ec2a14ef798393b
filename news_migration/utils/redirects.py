"""
Generation of redirect mapping CSV files.

The :func:`generate_redirects_csv` helper writes a CSV file containing the
mapping of legacy article URLs to their new counterparts.  The resulting file
is used to configure 301 redirects so that existing links continue to work
after migration.
"""

from __future__ import annotations

import csv
import os
from typing import Dict, Iterable


def new_article_url(site_url: str, slug: str) -> str:
    return f"{site_url.rstrip('/')}/news/{slug}"


def generate_redirects_csv(
    articles: Iterable[Dict[str, str]], *, new_base: str, out_path: str = "reports/redirect_map.csv"
) -> str:
    """Generate a CSV mapping legacy URLs to new URLs.

    Parameters
    ----------
    articles:
        Iterable of dictionaries with at least ``url`` and ``slug`` keys.
        Entries without a legacy ``url`` are skipped.
    new_base:
        Base URL of the new site; combined with the slug when ``new_url`` is
        not provided.
    out_path:
        Location of the CSV file to be written.  The parent directory is
        created automatically.

    Returns
    -------
    str
        The path of the generated CSV file.
    """
    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    with open(out_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["OldURL", "NewURL"])
        for article in articles:
            old_url = article.get("url")
            if not old_url:
                continue
            new_url = article.get("new_url") or new_article_url(new_base, article.get("slug", ""))
            writer.writerow([old_url, new_url])
    return out_path
