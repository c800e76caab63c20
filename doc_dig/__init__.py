"""
DocDig - document text extraction with a self-contained native payload.

This package stages the shared libraries built by the upstream
`extractous` crate next to the compiled extension, and exposes thin
extraction entry points on top of the `extractous` Python bindings.
"""

__version__ = "0.1.0"
__author__ = "DocDig Team"
