"""
Loader configuration for the compiled extension.
"""

from loguru import logger

from doc_dig.models import BuildDirective, PlatformCapability

# Resolved by the dynamic loader to the directory of the binary being loaded
ORIGIN_RPATH_ARG = "-Wl,-rpath,$ORIGIN"


class LinkerConfigurer:
    """Produces the runtime search-path directive for the final link."""

    def configure(self, platform: PlatformCapability) -> list[BuildDirective]:
        """
        Build the loader directives for a platform.

        Returns exactly one `$ORIGIN` rpath directive where the platform's
        loader supports it, and nothing otherwise.
        """
        if platform.supports_origin_rpath:
            return [BuildDirective.link_arg(ORIGIN_RPATH_ARG)]

        logger.debug(f"No loader search-path directive for platform family {platform.family.value}")
        return []
