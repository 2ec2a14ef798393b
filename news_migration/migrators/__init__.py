"""
Writers for the destination side of the migration.

This subpackage renders and stores image renditions, talks to the
destination content API and performs the duplicate-aware load.
"""

from .blob_storage import BlobStorage, LocalBlobStorage, S3BlobStorage, build_storage
from .content_api import ContentApiClient
from .image_renditions import ImageRenditionPipeline
from .migration_loader import MigrationLoader

__all__ = [
    "BlobStorage",
    "ContentApiClient",
    "ImageRenditionPipeline",
    "LocalBlobStorage",
    "MigrationLoader",
    "S3BlobStorage",
    "build_storage",
]
