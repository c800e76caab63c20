"""
Base classes for native artifact discovery.

Defines the error raised by the staging subsystem and the abstract
interface every candidate search region implements.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar

from doc_dig.models import ArtifactDescriptor


class NativeBuildError(Exception):
    """
    Raised when the native payload cannot be staged.

    Every subclass is fatal to the build invocation.
    """


class CandidateRegion(ABC):
    """
    Abstract filesystem region hypothesized to contain the upstream artifact.

    Regions are tried in order of decreasing specificity; the first one
    that yields a path wins.
    """

    # Short human-readable name used in logs and failure summaries
    NAME: ClassVar[str] = ""

    @abstractmethod
    def roots(self, out_dir: Path, descriptor: ArtifactDescriptor) -> list[Path]:
        """
        Compute the directories this region would search.

        Returns an empty list when the build tree does not have the shape
        the region relies on.
        """
        ...

    @abstractmethod
    def search(self, out_dir: Path, descriptor: ArtifactDescriptor) -> Path | None:
        """
        Search the region for the descriptor's primary file.

        Args:
            out_dir: Output directory of the current build invocation.
            descriptor: The artifact being sought.

        Returns:
            Path to the artifact, or None if the region holds no match.
        """
        ...
