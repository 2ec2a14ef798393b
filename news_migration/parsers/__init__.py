"""
Converters between the legacy markup and the destination schema.

This subpackage exposes :func:`clean_up` from
:mod:`news_migration.parsers.sanitizer` and :class:`ArticleTransformer` from
:mod:`news_migration.parsers.article_transformer`.
"""

from .article_transformer import ArticleTransformer
from .sanitizer import clean_up

__all__ = ["ArticleTransformer", "clean_up"]
