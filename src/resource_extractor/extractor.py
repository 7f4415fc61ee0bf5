"""Copy embedded resources out of a bundle into plain files."""

import logging
from pathlib import Path
from typing import IO, Any, Iterable, Optional, Union

from pydantic import TypeAdapter, ValidationError

from .bundle import ResourceBundle
from .config import ExtractorSettings
from .errors import (
    ResourceDecodeError,
    ResourceError,
    ResourceIOError,
    ResourceParseError,
)
from .results import BatchResult, ExtractionResult, LoadResult

PathLike = Union[str, Path]


class ResourceExtractor:
    """Extracts embedded resources to a flat destination directory."""

    def __init__(self, settings: Optional[ExtractorSettings] = None) -> None:
        """
        Initialize resource extractor.

        Args:
            settings: Extractor settings, defaults when omitted
        """
        self.settings = settings or ExtractorSettings()
        self.logger = logging.getLogger(__name__)

    def extract_one(
        self,
        bundle: ResourceBundle,
        prefix: str,
        file_name: str,
        output_dir: PathLike,
    ) -> ExtractionResult:
        """
        Copy one resource to ``output_dir / file_name``.

        Args:
            bundle: Bundle holding the resource
            prefix: Namespace prefix of the resource
            file_name: Trailing name segment, also used as the output file name
            output_dir: Existing destination directory

        Returns:
            ExtractionResult describing the copy
        """
        resource_name = self.settings.resource_name(prefix, file_name)
        return self._extract(bundle, resource_name, file_name, Path(output_dir))

    def extract_all(
        self, bundle: ResourceBundle, prefix: str, output_dir: PathLike
    ) -> BatchResult:
        """
        Copy every resource living under a namespace prefix.

        Names outside the prefix are skipped. A failure while enumerating the
        bundle aborts the whole batch.

        Args:
            bundle: Bundle holding the resources
            prefix: Namespace prefix; empty matches every resource
            output_dir: Existing destination directory

        Returns:
            BatchResult with one entry per attempted resource
        """
        output_dir = Path(output_dir)
        batch = BatchResult(prefix=prefix, output_directory=output_dir)

        try:
            names = bundle.list_names()
        except ResourceError as e:
            return self._abort(batch, e)
        except OSError as e:
            error = ResourceIOError(f"Failed to list resources: {e}")
            return self._abort(batch, error)

        matches = []
        for name in names:
            file_name = self.settings.relative_name(prefix, name)
            if file_name is not None:
                matches.append((name, file_name))

        self.logger.info(
            f"Extracting {len(matches)} of {len(names)} resources under "
            f"'{prefix}' to {output_dir}"
        )

        for name, file_name in matches:
            result = self._extract(bundle, name, file_name, output_dir)
            if not self._record(batch, result):
                break

        return batch

    def extract_list(
        self,
        bundle: ResourceBundle,
        prefix: str,
        file_names: Iterable[str],
        output_dir: PathLike,
    ) -> BatchResult:
        """
        Copy a list of resources, in list order.

        Args:
            bundle: Bundle holding the resources
            prefix: Namespace prefix shared by the resources
            file_names: Trailing name segments to extract
            output_dir: Existing destination directory

        Returns:
            BatchResult with one entry per attempted resource
        """
        output_dir = Path(output_dir)
        batch = BatchResult(prefix=prefix, output_directory=output_dir)

        for file_name in file_names:
            result = self.extract_one(bundle, prefix, file_name, output_dir)
            if not self._record(batch, result):
                break

        return batch

    def load_object(
        self, bundle: ResourceBundle, name: str, shape: Any = Any
    ) -> LoadResult:
        """
        Deserialize a JSON resource into ``shape``.

        Args:
            bundle: Bundle holding the resource
            name: Full logical name of the resource
            shape: Anything pydantic can validate (model, dataclass,
                TypedDict, builtin container); plain JSON values by default

        Returns:
            LoadResult carrying the parsed value on success
        """
        try:
            data = self._read_bytes(bundle, name)
            try:
                text = data.decode(self.settings.encoding)
            except UnicodeDecodeError as e:
                raise ResourceDecodeError(
                    f"Resource {name} is not valid {self.settings.encoding} text: {e}"
                ) from e
            try:
                value = TypeAdapter(shape).validate_json(text)
            except ValidationError as e:
                raise ResourceParseError(
                    f"Resource {name} does not match the expected shape: {e}"
                ) from e
        except ResourceError as e:
            self.logger.debug(f"Failed to load {name}: {e}")
            return LoadResult(
                resource_name=name, error_kind=e.kind, error_message=str(e)
            )

        return LoadResult(resource_name=name, value=value, success=True)

    def _open(self, bundle: ResourceBundle, name: str) -> IO[bytes]:
        try:
            return bundle.open(name)
        except OSError as e:
            raise ResourceIOError(f"Failed to open resource {name}: {e}") from e

    def _read_bytes(self, bundle: ResourceBundle, name: str) -> bytes:
        stream = self._open(bundle, name)
        try:
            with stream:
                return stream.read()
        except OSError as e:
            raise ResourceIOError(f"Failed to read resource {name}: {e}") from e

    def _extract(
        self,
        bundle: ResourceBundle,
        resource_name: str,
        file_name: str,
        output_dir: Path,
    ) -> ExtractionResult:
        """Copy a resource stream to a file, reporting failures as a result."""
        try:
            destination = self._destination(output_dir, file_name)
            written = self._copy(bundle, resource_name, destination)
        except ResourceError as e:
            self.logger.debug(f"Failed to extract {resource_name}: {e}")
            return ExtractionResult.failed(resource_name, file_name, e)

        self.logger.debug(
            f"Extracted {resource_name} -> {destination} ({written} bytes)"
        )
        return ExtractionResult(
            resource_name=resource_name,
            file_name=file_name,
            destination=destination,
            success=True,
            bytes_written=written,
        )

    def _destination(self, output_dir: Path, file_name: str) -> Path:
        """Resolve the output path, rejecting names that leave the directory."""
        if (
            not file_name
            or file_name in (".", "..")
            or "/" in file_name
            or "\\" in file_name
            or "\x00" in file_name
        ):
            raise ResourceIOError(f"Invalid output file name: {file_name!r}")
        if not output_dir.is_dir():
            raise ResourceIOError(f"Output directory does not exist: {output_dir}")
        return output_dir / file_name

    def _copy(
        self, bundle: ResourceBundle, resource_name: str, destination: Path
    ) -> int:
        """
        Stream a resource into a file.

        The resource is opened before the destination so a missing resource
        never creates a file. A failed copy removes the partial file.
        """
        written = 0
        with self._open(bundle, resource_name) as stream:
            try:
                f = destination.open("wb")
            except OSError as e:
                raise ResourceIOError(f"Cannot write {destination}: {e}") from e

            try:
                with f:
                    for chunk in iter(
                        lambda: stream.read(self.settings.chunk_size), b""
                    ):
                        f.write(chunk)
                        written += len(chunk)
            except ResourceError:
                self._discard(destination)
                raise
            except OSError as e:
                self._discard(destination)
                raise ResourceIOError(
                    f"Failed to copy {resource_name} to {destination}: {e}"
                ) from e
        return written

    def _discard(self, destination: Path) -> None:
        try:
            destination.unlink(missing_ok=True)
        except OSError:
            self.logger.warning(f"Could not remove partial file {destination}")

    def _record(self, batch: BatchResult, result: ExtractionResult) -> bool:
        """Append a result; return False when the batch should stop."""
        batch.results.append(result)
        if not result.success and self.settings.stop_on_error:
            self.logger.info(
                f"Stopping batch under '{batch.prefix}' after failure of "
                f"{result.resource_name}"
            )
            return False
        return True

    def _abort(self, batch: BatchResult, error: ResourceError) -> BatchResult:
        self.logger.debug(f"Aborting batch under '{batch.prefix}': {error}")
        batch.error_kind = error.kind
        batch.error_message = str(error)
        return batch
