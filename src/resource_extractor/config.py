"""Configuration models with Pydantic validation."""

import codecs
import json
from pathlib import Path
from typing import List, Optional, Union

from pydantic import (
    BaseModel,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)


class ExtractorSettings(BaseModel):
    """Settings shared by every extraction operation."""

    separator: str = Field(
        default=".", min_length=1, description="Separator between name segments"
    )
    chunk_size: int = Field(
        default=64 * 1024,
        ge=1,
        le=64 * 1024 * 1024,
        description="Bytes copied per read from a resource stream",
    )
    encoding: str = Field(
        default="utf-8-sig", description="Text encoding used when loading objects"
    )
    stop_on_error: bool = Field(
        default=False,
        description="Stop a batch at the first failed resource instead of continuing",
    )
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v.upper()

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        """Reject codecs Python does not know about."""
        try:
            codecs.lookup(v)
        except LookupError:
            raise ValueError(f"Unknown text encoding: {v}")
        return v

    def resource_name(self, prefix: str, file_name: str) -> str:
        """Join a namespace prefix and a file name into a logical name."""
        if not prefix:
            return file_name
        return f"{prefix}{self.separator}{file_name}"

    def relative_name(self, prefix: str, name: str) -> Optional[str]:
        """
        Strip a namespace prefix from a logical name.

        Args:
            prefix: Namespace prefix, possibly empty
            name: Full logical resource name

        Returns:
            The remainder after the prefix and separator, or None when the
            name does not live under the prefix
        """
        if not prefix:
            return name or None
        head = prefix + self.separator
        if not name.startswith(head) or len(name) == len(head):
            return None
        return name[len(head) :]


class ExtractionJob(BaseModel):
    """One extraction run against a single bundle."""

    source: str = Field(..., min_length=1, description="Package name or archive path")
    prefix: str = Field(default="", description="Namespace prefix of the resources")
    files: Optional[List[str]] = Field(
        default=None, description="Specific file names; all matching when omitted"
    )
    output_directory: Path = Field(..., description="Existing destination directory")
    description: Optional[str] = Field(None, description="Human-readable description")

    @field_validator("files")
    @classmethod
    def validate_files(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is not None and not v:
            raise ValueError("files must not be empty when given")
        return v

    @field_validator("output_directory")
    @classmethod
    def resolve_output_directory(cls, v: Path, info: ValidationInfo) -> Path:
        """Anchor relative directories at the manifest's own directory."""
        base_dir = (info.context or {}).get("base_dir")
        if base_dir is not None and not v.is_absolute():
            return Path(base_dir) / v
        return v


class ExtractionManifest(BaseModel):
    """Complete extraction configuration."""

    settings: ExtractorSettings = Field(
        default_factory=ExtractorSettings, description="Global extractor settings"
    )
    jobs: List[ExtractionJob] = Field(
        ..., min_length=1, description="List of extraction jobs"
    )

    @model_validator(mode="after")
    def validate_unique_targets(self) -> "ExtractionManifest":
        """Ensure two jobs never write the same source/prefix into one directory."""
        keys = [(job.source, job.prefix, job.output_directory) for job in self.jobs]
        if len(keys) != len(set(keys)):
            raise ValueError("Jobs must not repeat the same source, prefix and output")
        return self

    @classmethod
    def from_json(cls, config_path: Union[str, Path]) -> "ExtractionManifest":
        """
        Load a manifest file.

        Relative output directories are taken relative to the manifest's
        directory, not the current working directory.

        Raises:
            FileNotFoundError: If the manifest does not exist
            ValueError: If the file is not valid JSON or not a valid manifest
        """
        config_path = Path(config_path)
        try:
            text = config_path.read_text(encoding="utf-8-sig")
        except FileNotFoundError:
            raise FileNotFoundError(f"Manifest not found: {config_path}") from None

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(
                f"Invalid JSON in manifest {config_path} at line {e.lineno}: {e.msg}"
            ) from e

        base_dir = config_path.parent.absolute()
        return cls.model_validate(data, context={"base_dir": base_dir})

    def to_json(self, config_path: Union[str, Path], indent: int = 2) -> None:
        """Save the manifest, writing output directories under it as relative."""
        config_path = Path(config_path)
        base_dir = config_path.parent.absolute()

        data = self.model_dump(mode="json", exclude_none=True)
        for job in data["jobs"]:
            output = Path(job["output_directory"])
            if output.is_absolute() and output.is_relative_to(base_dir):
                job["output_directory"] = output.relative_to(base_dir).as_posix()

        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(json.dumps(data, indent=indent) + "\n", encoding="utf-8")
