"""Error taxonomy for resource extraction."""

from enum import Enum


class ErrorKind(str, Enum):
    """Category of a failed extraction or load."""

    RESOURCE_NOT_FOUND = "resource_not_found"
    IO_FAILURE = "io_failure"
    DECODE_FAILURE = "decode_failure"
    PARSE_FAILURE = "parse_failure"


class ResourceError(Exception):
    """Base class for embedded resource errors."""

    kind: ErrorKind = ErrorKind.IO_FAILURE


class ResourceNotFoundError(ResourceError):
    """The bundle has no resource with the requested name."""

    kind = ErrorKind.RESOURCE_NOT_FOUND

    def __init__(self, name: str) -> None:
        super().__init__(f"Embedded resource not found: {name}")
        self.name = name


class ResourceIOError(ResourceError):
    """Reading the resource or writing the destination file failed."""

    kind = ErrorKind.IO_FAILURE


class ResourceDecodeError(ResourceError):
    """Resource bytes could not be decoded as text."""

    kind = ErrorKind.DECODE_FAILURE


class ResourceParseError(ResourceError):
    """Resource text did not parse into the requested shape."""

    kind = ErrorKind.PARSE_FAILURE
