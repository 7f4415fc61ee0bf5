"""Result models returned by extraction operations."""

from pathlib import Path
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from .errors import (
    ErrorKind,
    ResourceDecodeError,
    ResourceError,
    ResourceIOError,
    ResourceNotFoundError,
    ResourceParseError,
)


def _build_error(kind: ErrorKind, name: str, message: str) -> ResourceError:
    if kind is ErrorKind.RESOURCE_NOT_FOUND:
        return ResourceNotFoundError(name)
    if kind is ErrorKind.DECODE_FAILURE:
        return ResourceDecodeError(message)
    if kind is ErrorKind.PARSE_FAILURE:
        return ResourceParseError(message)
    return ResourceIOError(message)


class ExtractionResult(BaseModel):
    """Outcome of copying a single resource to a file."""

    resource_name: str
    file_name: str
    destination: Optional[Path] = None
    success: bool = False
    bytes_written: int = 0
    error_kind: Optional[ErrorKind] = None
    error_message: Optional[str] = None

    @classmethod
    def failed(
        cls, resource_name: str, file_name: str, error: ResourceError
    ) -> "ExtractionResult":
        return cls(
            resource_name=resource_name,
            file_name=file_name,
            error_kind=error.kind,
            error_message=str(error),
        )

    def raise_for_error(self) -> None:
        """Raise the matching ResourceError if this extraction failed."""
        if self.error_kind is not None:
            raise _build_error(
                self.error_kind, self.resource_name, self.error_message or ""
            )


class BatchResult(BaseModel):
    """Outcome of extracting several resources into one directory."""

    prefix: str
    output_directory: Path
    results: List[ExtractionResult] = Field(default_factory=list)
    error_kind: Optional[ErrorKind] = None
    error_message: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error_kind is None and all(r.success for r in self.results)

    @property
    def succeeded(self) -> List[ExtractionResult]:
        return [r for r in self.results if r.success]

    @property
    def failed(self) -> List[ExtractionResult]:
        return [r for r in self.results if not r.success]

    @property
    def files(self) -> List[Path]:
        """Destination paths written, in extraction order."""
        return [r.destination for r in self.succeeded if r.destination is not None]

    def raise_for_error(self) -> None:
        """Raise for a batch-level failure, then for the first failed entry."""
        if self.error_kind is not None:
            raise _build_error(
                self.error_kind, self.prefix, self.error_message or ""
            )
        for result in self.failed:
            result.raise_for_error()


class LoadResult(BaseModel):
    """Outcome of deserializing a resource into an object."""

    resource_name: str
    value: Any = None
    success: bool = False
    error_kind: Optional[ErrorKind] = None
    error_message: Optional[str] = None

    def raise_for_error(self) -> None:
        """Raise the matching ResourceError if loading failed."""
        if self.error_kind is not None:
            raise _build_error(
                self.error_kind, self.resource_name, self.error_message or ""
            )
