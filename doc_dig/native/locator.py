"""
Artifact locator.

Finds the primary shared library built by the upstream dependency. Its
location depends on build profile, target triple and incremental-build
state, so several candidate regions are searched in a fixed order and the
first hit wins.

Expected build tree shape:

    {root}/{triple}/{profile}/build/{dependency}-{hash}/out/...
"""

import os
from collections import deque
from pathlib import Path
from typing import ClassVar, Iterable, Sequence

from loguru import logger

from doc_dig.models import ArtifactDescriptor
from doc_dig.native.base import CandidateRegion, NativeBuildError

_OPPOSITE_PROFILES = {"release": "debug", "debug": "release"}


class ArtifactNotFoundError(NativeBuildError):
    """
    Raised when no candidate region contains the primary artifact.

    Names the missing file and the searched roots so the operator can tell
    whether the upstream dependency was built at all.
    """

    def __init__(self, descriptor: ArtifactDescriptor, searched: Sequence[Path]):
        self.descriptor = descriptor
        self.searched = tuple(searched)
        roots = ", ".join(str(p) for p in self.searched) or "<no candidate roots>"
        dependency = descriptor.dependency_prefix.rstrip("-_")
        super().__init__(
            f"Could not locate {descriptor.primary_filename} built by '{dependency}' "
            f"(searched: {roots}). Build the '{dependency}' dependency first."
        )


def breadth_first_search(roots: Iterable[Path], filename: str) -> Path | None:
    """
    Breadth-first search for a file by exact name.

    All roots share one queue, so shallow matches under any root are found
    before deep ones. Unreadable directories are treated as empty. Symlinked
    directories are followed, but each physical directory is listed once so
    link cycles terminate.

    Args:
        roots: Directories to start from.
        filename: Exact file name to look for.

    Returns:
        Path to the first match, or None.
    """
    queue: deque[Path] = deque(roots)
    visited: set[tuple[int, int]] = set()

    while queue:
        directory = queue.popleft()
        try:
            stat = directory.stat()
            identity = (stat.st_dev, stat.st_ino)
            if identity in visited:
                continue
            visited.add(identity)
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            logger.debug(f"Skipping unreadable directory {directory}: {e}")
            continue

        for entry in entries:
            try:
                if entry.is_dir():
                    queue.append(Path(entry.path))
                elif entry.name == filename and entry.is_file():
                    return Path(entry.path)
            except OSError as e:
                logger.debug(f"Skipping unreadable entry {entry.path}: {e}")

    return None


# ==============================================================================
# Candidate Regions
# ==============================================================================


class OutDirRegion(CandidateRegion):
    """The invocation's own output directory (vendored or cached artifact)."""

    NAME: ClassVar[str] = "out-dir"

    def roots(self, out_dir: Path, descriptor: ArtifactDescriptor) -> list[Path]:
        return [out_dir]

    def search(self, out_dir: Path, descriptor: ArtifactDescriptor) -> Path | None:
        candidate = out_dir / descriptor.primary_filename
        return candidate if candidate.is_file() else None


class DependencyTreeRegion(CandidateRegion):
    """Sibling `{dependency}-{hash}` directories under the same profile's build root."""

    NAME: ClassVar[str] = "dependency-tree"

    def roots(self, out_dir: Path, descriptor: ArtifactDescriptor) -> list[Path]:
        # out_dir -> .../build/{crate}-{hash}/out
        build_root = out_dir.parent.parent
        try:
            with os.scandir(build_root) as it:
                names = sorted(
                    e.name
                    for e in it
                    if e.name.startswith(descriptor.dependency_prefix) and e.is_dir()
                )
        except OSError as e:
            logger.debug(f"Cannot list build root {build_root}: {e}")
            return []
        return [build_root / name for name in names]

    def search(self, out_dir: Path, descriptor: ArtifactDescriptor) -> Path | None:
        return breadth_first_search(self.roots(out_dir, descriptor), descriptor.primary_filename)


class OppositeProfileRegion(CandidateRegion):
    """
    The other profile's build root (release <-> debug).

    The upstream dependency may have been built once in the other profile
    and not rebuilt for this one.
    """

    NAME: ClassVar[str] = "opposite-profile"

    def roots(self, out_dir: Path, descriptor: ArtifactDescriptor) -> list[Path]:
        parents = out_dir.parents
        if len(parents) < 4:
            return []

        profile_dir = parents[2]
        opposite = _OPPOSITE_PROFILES.get(profile_dir.name)
        if opposite is None:
            return []

        sibling = profile_dir.parent / opposite / "build"
        return [sibling] if sibling.is_dir() else []

    def search(self, out_dir: Path, descriptor: ArtifactDescriptor) -> Path | None:
        return breadth_first_search(self.roots(out_dir, descriptor), descriptor.primary_filename)


class BuildRootRegion(CandidateRegion):
    """Everything under the nearest ancestor directory named `build`."""

    NAME: ClassVar[str] = "build-root"

    def roots(self, out_dir: Path, descriptor: ArtifactDescriptor) -> list[Path]:
        for candidate in (out_dir, *out_dir.parents):
            if candidate.name == "build":
                return [candidate]
        return []

    def search(self, out_dir: Path, descriptor: ArtifactDescriptor) -> Path | None:
        return breadth_first_search(self.roots(out_dir, descriptor), descriptor.primary_filename)


# Search order: most specific and cheapest first
_REGIONS: tuple[type[CandidateRegion], ...] = (
    OutDirRegion,
    DependencyTreeRegion,
    OppositeProfileRegion,
    BuildRootRegion,
)


class ArtifactLocator:
    """
    Locates the upstream primary artifact across the candidate regions.

    Regions are tried strictly in order; the first hit wins.
    """

    def __init__(self, regions: Sequence[CandidateRegion] | None = None):
        """
        Initialize the locator.

        Args:
            regions: Regions to search, in order. Uses the standard four when not provided.
        """
        self._regions: tuple[CandidateRegion, ...] = (
            tuple(regions) if regions is not None else tuple(cls() for cls in _REGIONS)
        )

    def find(self, out_dir: Path, descriptor: ArtifactDescriptor) -> Path | None:
        """
        Search every region in order.

        Returns:
            Path to the artifact, or None if no region holds it.
        """
        for region in self._regions:
            hit = region.search(out_dir, descriptor)
            if hit is not None:
                logger.info(f"Found {descriptor.primary_filename} via {region.NAME}: {hit}")
                return hit
            logger.debug(f"No {descriptor.primary_filename} in region {region.NAME}")
        return None

    def locate(self, out_dir: Path, descriptor: ArtifactDescriptor) -> Path:
        """
        Locate the artifact or fail.

        Args:
            out_dir: Output directory of the current build invocation.
            descriptor: The artifact being sought.

        Returns:
            Path to the artifact.

        Raises:
            ArtifactNotFoundError: If all regions are exhausted without a hit.
        """
        hit = self.find(out_dir, descriptor)
        if hit is not None:
            return hit

        searched: list[Path] = []
        for region in self._regions:
            for root in region.roots(out_dir, descriptor):
                if root not in searched:
                    searched.append(root)
        raise ArtifactNotFoundError(descriptor, searched)
