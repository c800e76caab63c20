"""
Native payload staging pipeline - the build-time orchestrator.

On every build invocation:
1. Ensure the staging directory exists.
2. If the primary artifact is already staged, skip discovery entirely.
3. Otherwise locate the upstream artifact and stage its sibling libraries.
4. Always produce the loader directive, since it belongs to this build's link.
"""

import sys
from pathlib import Path
from typing import TextIO

from loguru import logger

from doc_dig.config import ConfigurationError, Settings, get_settings
from doc_dig.models import ArtifactDescriptor, BuildDirective, BuildReport, PlatformCapability
from doc_dig.native.linker import LinkerConfigurer
from doc_dig.native.locator import ArtifactLocator
from doc_dig.native.platform import resolve_platform
from doc_dig.native.stager import ArtifactStager


class NativeStagingPipeline:
    """
    Stages the upstream native libraries next to the compiled extension.

    The staging directory is an explicit parameter so that tests can point
    the pipeline at a temporary directory.
    """

    def __init__(
        self,
        staging_dir: Path,
        out_dir: Path | None = None,
        platform: PlatformCapability | None = None,
        descriptor: ArtifactDescriptor | None = None,
        locator: ArtifactLocator | None = None,
        linker: LinkerConfigurer | None = None,
    ):
        """
        Initialize the pipeline.

        Args:
            staging_dir: Runtime staging directory (e.g. `priv/native`).
            out_dir: Output directory of the current build invocation. Only
                needed when the staging directory is not yet populated.
            platform: Target platform. Resolved from the host when not provided.
            descriptor: Primary artifact. Derived from the platform when not provided.
            locator: Artifact locator. Uses the standard search order when not provided.
            linker: Loader configurer.
        """
        self._staging_dir = staging_dir
        self._out_dir = out_dir
        self._platform = platform or resolve_platform()
        self._descriptor = descriptor or ArtifactDescriptor.for_platform(self._platform)
        self._locator = locator or ArtifactLocator()
        self._stager = ArtifactStager(self._descriptor)
        self._linker = linker or LinkerConfigurer()

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "NativeStagingPipeline":
        """
        Build a pipeline from build-tool environment settings.

        Raises:
            ConfigurationError: If the staging directory cannot be determined.
        """
        settings = settings or get_settings()
        platform = resolve_platform(settings.target_os)
        descriptor = ArtifactDescriptor.for_platform(
            platform,
            stem=settings.artifact_stem,
            dependency_prefix=settings.dependency_prefix,
        )
        return cls(
            staging_dir=settings.resolve_staging_dir(),
            out_dir=settings.out_dir,
            platform=platform,
            descriptor=descriptor,
        )

    @property
    def platform(self) -> PlatformCapability:
        return self._platform

    @property
    def descriptor(self) -> ArtifactDescriptor:
        return self._descriptor

    def run(self) -> BuildReport:
        """
        Run the full staging pipeline.

        Returns:
            BuildReport with the directives to emit.

        Raises:
            ConfigurationError: If discovery is needed but no output directory was given.
            ArtifactNotFoundError: If the upstream artifact cannot be found.
            StagingError: If staging fails on I/O.
        """
        self._stager.ensure_dest_dir(self._staging_dir)
        directives: list[BuildDirective] = []
        artifact_path: Path | None = None

        if self._stager.is_staged(self._staging_dir):
            staging = self._stager.stage(None, self._staging_dir, self._platform)
            directives.append(
                BuildDirective.rerun_if_changed(self._staging_dir / self._descriptor.primary_filename)
            )
        else:
            if self._out_dir is None:
                raise ConfigurationError(
                    "out_dir",
                    f"{self._descriptor.primary_filename} is not staged in {self._staging_dir} "
                    "and no build output directory was given (set OUT_DIR)",
                )

            artifact_path = self._locator.locate(self._out_dir, self._descriptor)
            staging = self._stager.stage(artifact_path.parent, self._staging_dir, self._platform)
            directives.extend(BuildDirective.rerun_if_changed(p) for p in staging.copied)
            logger.info(f"Staged {staging.copied_count} libraries into {self._staging_dir}")

        directives.extend(self._linker.configure(self._platform))

        return BuildReport(
            platform=self._platform,
            descriptor=self._descriptor,
            staging_dir=self._staging_dir,
            artifact_path=artifact_path,
            staging=staging,
            directives=tuple(directives),
        )


def emit_directives(report: BuildReport, stream: TextIO | None = None) -> None:
    """Write each directive of a report as one line of build-tool metadata."""
    out = stream or sys.stdout
    for directive in report.directives:
        out.write(directive.render() + "\n")
    out.flush()
