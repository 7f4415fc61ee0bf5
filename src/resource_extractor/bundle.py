"""Bundles of embedded resources addressed by logical name."""

import fnmatch
import io
import logging
import zipfile
import zlib
from importlib import resources
from pathlib import Path
from types import ModuleType
from typing import (
    IO,
    Any,
    BinaryIO,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Protocol,
    Union,
    runtime_checkable,
)

from .errors import ResourceIOError, ResourceNotFoundError

logger = logging.getLogger(__name__)

ARCHIVE_SUFFIXES = (".zip", ".whl", ".pyz")

DEFAULT_EXCLUDES = ("*.py", "*.pyc", "*.pyo", "__pycache__")

# Raised by zipfile for corrupt member data.
ZIP_DATA_ERRORS = (zipfile.BadZipFile, zlib.error, EOFError)


@runtime_checkable
class ResourceBundle(Protocol):
    """Anything that can enumerate and open embedded resources."""

    def list_names(self) -> List[str]:
        ...

    def open(self, name: str) -> IO[bytes]:
        ...


class MappingBundle:
    """Resources held in memory as a mapping of logical name to bytes."""

    def __init__(self, resources: Mapping[str, bytes]) -> None:
        self._resources = dict(resources)

    def list_names(self) -> List[str]:
        return list(self._resources)

    def open(self, name: str) -> BinaryIO:
        try:
            return io.BytesIO(self._resources[name])
        except KeyError:
            raise ResourceNotFoundError(name) from None

    def __len__(self) -> int:
        return len(self._resources)


class PackageBundle:
    """
    Data files shipped inside an importable Python package.

    Logical names are the package name followed by the file's relative path
    segments, joined with the separator: ``assets/html/index.html`` inside
    package ``app`` becomes ``app.assets.html.index.html``.
    """

    def __init__(
        self,
        anchor: Union[str, ModuleType],
        separator: str = ".",
        exclude_patterns: Iterable[str] = DEFAULT_EXCLUDES,
    ) -> None:
        """
        Initialize package bundle.

        Args:
            anchor: Package name or imported package module
            separator: Separator placed between name segments
            exclude_patterns: fnmatch patterns for files and directories
                that are not resources
        """
        self.anchor = anchor if isinstance(anchor, str) else anchor.__name__
        self.separator = separator
        self.exclude_patterns = list(exclude_patterns)
        self._root = resources.files(anchor)
        self._index: Optional[Dict[str, Any]] = None

    def _is_excluded(self, entry_name: str) -> bool:
        return any(
            fnmatch.fnmatch(entry_name, pattern) for pattern in self.exclude_patterns
        )

    def _walk(self, directory: Any, segments: List[str], index: Dict[str, Any]) -> None:
        for entry in sorted(directory.iterdir(), key=lambda e: e.name):
            if self._is_excluded(entry.name):
                continue
            if entry.is_dir():
                self._walk(entry, segments + [entry.name], index)
                continue

            name = self.separator.join([self.anchor, *segments, entry.name])
            if name in index:
                logger.warning(
                    f"Resource name {name} is ambiguous in {self.anchor}, keeping first"
                )
                continue
            index[name] = entry

    def _build_index(self) -> Dict[str, Any]:
        if self._index is None:
            index: Dict[str, Any] = {}
            try:
                self._walk(self._root, [], index)
            except OSError as e:
                raise ResourceIOError(
                    f"Failed to enumerate resources in {self.anchor}: {e}"
                ) from e
            self._index = index
        return self._index

    def list_names(self) -> List[str]:
        return list(self._build_index())

    def open(self, name: str) -> IO[bytes]:
        entry = self._build_index().get(name)
        if entry is None:
            raise ResourceNotFoundError(name)
        return entry.open("rb")


class _MemberStream(io.RawIOBase):
    """Zip member reader that reports corrupt data as ResourceIOError."""

    def __init__(self, member: IO[bytes], name: str) -> None:
        super().__init__()
        self._member = member
        self._name = name

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        try:
            return self._member.read(size)
        except ZIP_DATA_ERRORS as e:
            raise ResourceIOError(f"Corrupt archive member {self._name}: {e}") from e

    def close(self) -> None:
        try:
            self._member.close()
        finally:
            super().close()


class ZipBundle:
    """Members of a zip archive (wheel, zipapp or plain zip)."""

    def __init__(
        self,
        archive: Union[str, Path, BinaryIO],
        separator: str = ".",
        namespace: str = "",
    ) -> None:
        """
        Open a zip archive as a bundle.

        Args:
            archive: Path to the archive or a seekable binary file object
            separator: Separator replacing ``/`` in member paths
            namespace: Optional prefix placed before every member name
        """
        self.separator = separator
        self.namespace = namespace
        try:
            self._zip = zipfile.ZipFile(archive, "r")
        except (OSError, zipfile.BadZipFile) as e:
            raise ResourceIOError(f"Failed to open archive {archive}: {e}") from e
        self._members: Dict[str, str] = {}
        for info in self._zip.infolist():
            if info.is_dir():
                continue
            name = info.filename.replace("/", separator)
            if namespace:
                name = f"{namespace}{separator}{name}"
            self._members.setdefault(name, info.filename)

    def list_names(self) -> List[str]:
        return list(self._members)

    def open(self, name: str) -> IO[bytes]:
        member = self._members.get(name)
        if member is None:
            raise ResourceNotFoundError(name)
        try:
            return _MemberStream(self._zip.open(member, "r"), name)
        except ZIP_DATA_ERRORS as e:
            raise ResourceIOError(f"Corrupt archive member {name}: {e}") from e

    def close(self) -> None:
        self._zip.close()

    def __enter__(self) -> "ZipBundle":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def open_bundle(source: str, separator: str = ".") -> ResourceBundle:
    """
    Open a bundle from a command-line style source string.

    Args:
        source: Path to a zip archive, or the name of an importable package

    Returns:
        A ZipBundle for existing archive paths, a PackageBundle otherwise
    """
    path = Path(source)
    if path.suffix.lower() in ARCHIVE_SUFFIXES and path.is_file():
        return ZipBundle(path, separator=separator)

    try:
        return PackageBundle(source, separator=separator)
    except (ImportError, TypeError) as e:
        raise ResourceNotFoundError(source) from e
