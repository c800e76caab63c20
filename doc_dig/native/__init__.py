"""
Native Payload Staging Module.

Locates the shared libraries built by the upstream extraction crate,
stages them into the runtime directory shipped with the extension, and
configures the dynamic loader to find them there.
"""

from doc_dig.native.base import CandidateRegion, NativeBuildError
from doc_dig.native.linker import LinkerConfigurer
from doc_dig.native.locator import ArtifactLocator, ArtifactNotFoundError, breadth_first_search
from doc_dig.native.pipeline import NativeStagingPipeline, emit_directives
from doc_dig.native.platform import resolve_platform
from doc_dig.native.stager import ArtifactStager, StagingError

__all__ = [
    "ArtifactLocator",
    "ArtifactNotFoundError",
    "ArtifactStager",
    "CandidateRegion",
    "LinkerConfigurer",
    "NativeBuildError",
    "NativeStagingPipeline",
    "StagingError",
    "breadth_first_search",
    "emit_directives",
    "resolve_platform",
]
