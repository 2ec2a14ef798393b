"""
Top-level package for the legacy news migration utility.

This package bundles all components required to lift articles out of the
legacy template-rendered website, normalize them, regenerate their images
as responsive renditions and create them in the new content API without
duplicating earlier runs.  Modules are split into subpackages:

* :mod:`news_migration.extractors` – archive crawling and page extraction
* :mod:`news_migration.parsers` – HTML cleanup and schema mapping
* :mod:`news_migration.migrators` – image renditions, storage and API load
* :mod:`news_migration.utils` – error kinds, logging and redirect CSVs

Each layer receives its configuration explicitly; orchestration is handled
in :mod:`news_migration.migration_tool`.
"""

__version__ = "1.0.0"
