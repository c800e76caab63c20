"""
Pydantic models for DocDig.

These models define the schemas for:
- Platform capabilities and the artifact being staged
- Build directives and staging/build reports
- Extracted documents returned by the extraction entry points

All models are frozen; reports are built once and never mutated.
"""

from datetime import datetime
from enum import Enum
from hashlib import sha256
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, computed_field


# ==============================================================================
# Platform Models
# ==============================================================================


class PlatformFamily(str, Enum):
    """Operating-system families the staging pipeline distinguishes."""

    LINUX = "linux"
    APPLE = "apple"
    OTHER = "other"


class PlatformCapability(BaseModel):
    """
    What the target platform offers for shipping shared libraries.

    Resolved once per pipeline run; every platform-dependent decision
    (extension filtering, loader configuration) reads from this model.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    family: PlatformFamily = Field(
        ...,
        description="Operating-system family",
    )

    library_extension: str = Field(
        ...,
        min_length=1,
        description="Shared-library file extension without the leading dot",
    )

    supports_origin_rpath: bool = Field(
        ...,
        description="Whether the loader resolves $ORIGIN to the loaded binary's directory",
    )

    def matches(self, file_path: Path) -> bool:
        """Check if a file carries this platform's shared-library extension."""
        return file_path.suffix == f".{self.library_extension}"


class ArtifactDescriptor(BaseModel):
    """
    Logical identity of the primary shared library produced upstream.

    The filename is the fixed stem plus the platform's extension, e.g.
    `libtika_native.so` on Linux and `libtika_native.dylib` on macOS.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    stem: str = Field(
        default="libtika_native",
        min_length=1,
        description="File stem of the primary artifact",
    )

    extension: str = Field(
        ...,
        min_length=1,
        description="Platform shared-library extension without the leading dot",
    )

    dependency_prefix: str = Field(
        default="extractous-",
        min_length=1,
        description="Directory name prefix of the upstream dependency's build output",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def primary_filename(self) -> str:
        """Filename searched for by the locator and checked by the fast path."""
        return f"{self.stem}.{self.extension}"

    @classmethod
    def for_platform(
        cls,
        platform: PlatformCapability,
        stem: str = "libtika_native",
        dependency_prefix: str = "extractous-",
    ) -> "ArtifactDescriptor":
        """Build the descriptor for a resolved platform."""
        return cls(
            stem=stem,
            extension=platform.library_extension,
            dependency_prefix=dependency_prefix,
        )


# ==============================================================================
# Build Output Models
# ==============================================================================


class BuildDirective(BaseModel):
    """A single line of build-tool metadata, rendered as `cargo:key=value`."""

    model_config = ConfigDict(frozen=True, strict=True)

    key: str = Field(..., min_length=1)
    value: str = Field(..., min_length=1)

    def render(self) -> str:
        return f"cargo:{self.key}={self.value}"

    @classmethod
    def rerun_if_changed(cls, path: Path) -> "BuildDirective":
        return cls(key="rerun-if-changed", value=str(path))

    @classmethod
    def link_arg(cls, arg: str) -> "BuildDirective":
        return cls(key="rustc-link-arg", value=arg)


class StagingReport(BaseModel):
    """Outcome of staging shared libraries into the runtime directory."""

    model_config = ConfigDict(frozen=True, strict=True)

    dest_dir: Path = Field(
        ...,
        description="Runtime staging directory",
    )

    fast_path: bool = Field(
        ...,
        description="True when the primary artifact was already staged",
    )

    copied: tuple[Path, ...] = Field(
        default=(),
        description="Source files copied on this run, in copy order",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def copied_count(self) -> int:
        """Return the number of files copied on this run."""
        return len(self.copied)


class BuildReport(BaseModel):
    """Outcome of one full staging pipeline run."""

    model_config = ConfigDict(frozen=True, strict=True)

    platform: PlatformCapability
    descriptor: ArtifactDescriptor

    staging_dir: Path = Field(
        ...,
        description="Runtime staging directory",
    )

    artifact_path: Path | None = Field(
        default=None,
        description="Located upstream artifact; None on the fast path",
    )

    staging: StagingReport

    directives: tuple[BuildDirective, ...] = Field(
        default=(),
        description="Build directives to emit, in order",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def fast_path(self) -> bool:
        """Whether the run short-circuited on an already staged artifact."""
        return self.staging.fast_path


# ==============================================================================
# Document Extraction Models
# ==============================================================================


class SourceKind(str, Enum):
    """Where extracted content came from."""

    FILE = "file"
    URL = "url"
    BYTES = "bytes"


class ExtractedDocument(BaseModel):
    """
    Result of extracting text from a document.

    Contains the extracted text and the metadata reported by the
    extraction library.
    """

    model_config = ConfigDict(frozen=True)

    content: str = Field(
        ...,
        description="Extracted text content",
    )

    metadata: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Document metadata as reported by the extraction library",
    )

    source: str = Field(
        ...,
        description="Path or URL of the source document, or '<bytes>'",
    )

    source_kind: SourceKind = Field(
        ...,
        description="Kind of source the content was extracted from",
    )

    extraction_timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the extraction was performed",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def character_count(self) -> int:
        """Number of characters in extracted content."""
        return len(self.content)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def content_hash(self) -> str:
        """Compute SHA-256 hash of the content for verification."""
        return sha256(self.content.encode("utf-8")).hexdigest()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_empty(self) -> bool:
        """Check if extracted content is empty or whitespace-only."""
        return len(self.content.strip()) == 0
