"""
Target platform resolution.

Maps an operating-system name (as reported by the build tool or the running
interpreter) to one of a small, closed set of platform capabilities.
"""

import sys

from doc_dig.models import PlatformCapability, PlatformFamily

LINUX = PlatformCapability(
    family=PlatformFamily.LINUX,
    library_extension="so",
    supports_origin_rpath=True,
)

APPLE = PlatformCapability(
    family=PlatformFamily.APPLE,
    library_extension="dylib",
    supports_origin_rpath=False,
)

# Everything else gets the ELF-style extension and no loader directive.
OTHER = PlatformCapability(
    family=PlatformFamily.OTHER,
    library_extension="so",
    supports_origin_rpath=False,
)

_APPLE_OS_NAMES = frozenset({"macos", "darwin", "ios", "tvos", "watchos", "visionos"})


def resolve_platform(target_os: str | None = None) -> PlatformCapability:
    """
    Resolve the capability set for a target operating system.

    Args:
        target_os: Build-tool target OS name (e.g. "linux", "macos").
            Falls back to `sys.platform` when None or empty.

    Returns:
        The matching PlatformCapability.
    """
    name = (target_os or sys.platform).strip().lower()

    if name.startswith("linux"):
        return LINUX
    if name in _APPLE_OS_NAMES:
        return APPLE
    return OTHER
