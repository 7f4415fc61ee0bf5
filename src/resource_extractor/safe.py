"""
Fire-and-forget wrappers around ResourceExtractor.

These functions never raise. Failures are logged at ERROR and the call
returns ``None``, for host processes that must keep running whatever
happens to a resource.

Example:
    >>> from resource_extractor import PackageBundle, safe
    >>> bundle = PackageBundle("app")
    >>> safe.extract_resources(bundle, "app.html", ["index.html", "app.js"], "www")
"""

import logging
from pathlib import Path
from typing import Any, Iterable, Optional, Union

from .bundle import ResourceBundle
from .config import ExtractorSettings
from .extractor import ResourceExtractor
from .results import BatchResult

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _log_batch(batch: BatchResult, operation: str) -> None:
    if batch.error_kind is not None:
        logger.error(
            f"Failed to list embedded resources under '{batch.prefix}': "
            f"[{batch.error_kind.value}] {batch.error_message}"
        )
    for result in batch.failed:
        logger.error(
            f"Failed to {operation} {result.resource_name}: "
            f"[{result.error_kind.value}] {result.error_message}"
        )


def extract_resource(
    bundle: ResourceBundle,
    prefix: str,
    file_name: str,
    output_dir: PathLike,
    settings: Optional[ExtractorSettings] = None,
) -> None:
    """Extract one resource to ``output_dir / file_name``."""
    try:
        result = ResourceExtractor(settings).extract_one(
            bundle, prefix, file_name, output_dir
        )
    except Exception:
        logger.exception(f"Failed to convert embedded resource {file_name} to a file")
        return

    if not result.success:
        logger.error(
            f"Failed to convert embedded resource {result.resource_name} to a file: "
            f"[{result.error_kind.value}] {result.error_message}"
        )


def extract_directory(
    bundle: ResourceBundle,
    prefix: str,
    output_dir: PathLike,
    settings: Optional[ExtractorSettings] = None,
) -> None:
    """Extract every resource under ``prefix`` into ``output_dir``."""
    try:
        batch = ResourceExtractor(settings).extract_all(bundle, prefix, output_dir)
    except Exception:
        logger.exception(f"Failed to convert embedded resources under '{prefix}'")
        return

    _log_batch(batch, "convert embedded resource")


def extract_resources(
    bundle: ResourceBundle,
    prefix: str,
    file_names: Iterable[str],
    output_dir: PathLike,
    settings: Optional[ExtractorSettings] = None,
) -> None:
    """Extract the named resources under ``prefix`` into ``output_dir``."""
    try:
        batch = ResourceExtractor(settings).extract_list(
            bundle, prefix, file_names, output_dir
        )
    except Exception:
        logger.exception(f"Failed to convert embedded resources under '{prefix}'")
        return

    _log_batch(batch, "convert embedded resource")


def load_json(
    bundle: ResourceBundle,
    name: str,
    shape: Any = Any,
    settings: Optional[ExtractorSettings] = None,
) -> Optional[Any]:
    """Load a JSON resource into ``shape``; None on any failure."""
    try:
        result = ResourceExtractor(settings).load_object(bundle, name, shape)
    except Exception:
        logger.exception(f"Failed to convert embedded resource {name} to an object")
        return None

    if not result.success:
        logger.error(
            f"Failed to convert embedded resource {name} to an object: "
            f"[{result.error_kind.value}] {result.error_message}"
        )
        return None
    return result.value
