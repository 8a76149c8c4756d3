"""Repository discovery and metadata extraction."""

from .extractor import MetadataExtractor, extract
from .locator import RepositoryHandle, locate
from .models import CommitRecord, PropertyMap

__all__ = ["CommitRecord", "MetadataExtractor", "PropertyMap", "RepositoryHandle", "extract", "locate"]
