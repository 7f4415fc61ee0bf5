"""
Resource Extractor - copy embedded resources out to plain files.

Resources bundled inside a Python package, a zip archive or an in-memory
mapping are addressed by dotted logical names and copied byte for byte into
a flat destination directory, or parsed as JSON into a typed object.
"""

__version__ = "1.0.0"

from .bundle import MappingBundle, PackageBundle, ResourceBundle, ZipBundle, open_bundle
from .config import ExtractionJob, ExtractionManifest, ExtractorSettings
from .errors import (
    ErrorKind,
    ResourceDecodeError,
    ResourceError,
    ResourceIOError,
    ResourceNotFoundError,
    ResourceParseError,
)
from .extractor import ResourceExtractor
from .results import BatchResult, ExtractionResult, LoadResult
from . import safe

__all__ = [
    "ResourceExtractor",
    "ResourceBundle",
    "MappingBundle",
    "PackageBundle",
    "ZipBundle",
    "open_bundle",
    "ExtractorSettings",
    "ExtractionJob",
    "ExtractionManifest",
    "ExtractionResult",
    "BatchResult",
    "LoadResult",
    "ErrorKind",
    "ResourceError",
    "ResourceNotFoundError",
    "ResourceIOError",
    "ResourceDecodeError",
    "ResourceParseError",
    "safe",
]
