"""
Artifact stager.

Copies the platform's shared libraries from the upstream build output into
the runtime staging directory that ships with the compiled extension.
"""

import shutil
from pathlib import Path

from loguru import logger

from doc_dig.models import ArtifactDescriptor, PlatformCapability, StagingReport
from doc_dig.native.base import NativeBuildError


class StagingError(NativeBuildError):
    """
    Raised when staging fails on I/O.

    Partial staging is never silently accepted: a missing sibling library
    only shows up later as a runtime load failure.
    """

    def __init__(
        self,
        message: str,
        source: Path | None,
        destination: Path,
        cause: Exception | None = None,
    ):
        self.source = source
        self.destination = destination
        self.cause = cause
        origin = f"'{source}' -> " if source is not None else ""
        super().__init__(f"Failed to stage {origin}'{destination}': {message}")


class ArtifactStager:
    """
    Stages shared libraries into the runtime directory.

    Idempotent across invocations: once the primary artifact is staged,
    later runs return without reading the source directory.
    """

    def __init__(self, descriptor: ArtifactDescriptor):
        """
        Initialize the stager.

        Args:
            descriptor: The primary artifact gating the fast path.
        """
        self._descriptor = descriptor

    def is_staged(self, dest_dir: Path) -> bool:
        """Check whether the primary artifact is already in the staging directory."""
        return (dest_dir / self._descriptor.primary_filename).is_file()

    def ensure_dest_dir(self, dest_dir: Path) -> None:
        """
        Create the staging directory if it is missing.

        Raises:
            StagingError: If the directory cannot be created.
        """
        try:
            dest_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StagingError("cannot create staging directory", None, dest_dir, cause=e) from e

    def stage(
        self,
        source_dir: Path | None,
        dest_dir: Path,
        platform: PlatformCapability,
    ) -> StagingReport:
        """
        Copy every platform shared library from source_dir into dest_dir.

        Args:
            source_dir: Directory holding the upstream libraries. May be None
                when the destination is already populated.
            dest_dir: Runtime staging directory; created if missing.
            platform: Resolved target platform.

        Returns:
            StagingReport describing what was copied.

        Raises:
            StagingError: If the source cannot be read or a copy fails.
        """
        self.ensure_dest_dir(dest_dir)

        if self.is_staged(dest_dir):
            logger.info(f"{self._descriptor.primary_filename} already staged in {dest_dir}")
            return StagingReport(dest_dir=dest_dir, fast_path=True)

        if source_dir is None:
            raise StagingError("no source directory to stage from", None, dest_dir)

        try:
            entries = sorted(source_dir.iterdir())
        except OSError as e:
            raise StagingError("cannot read source directory", source_dir, dest_dir, cause=e) from e

        copied: list[Path] = []
        for path in entries:
            if not platform.matches(path) or not path.is_file():
                continue

            target = dest_dir / path.name
            try:
                shutil.copy(path, target)
            except OSError as e:
                raise StagingError(str(e), path, target, cause=e) from e

            logger.info(f"Staged {path.name} -> {dest_dir}")
            copied.append(path)

        return StagingReport(dest_dir=dest_dir, fast_path=False, copied=tuple(copied))
