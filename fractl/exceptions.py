"""
Exception types raised by fractl.

Validation failures derive from ValueError so callers that already guard
against bad parameters keep working.
"""


class FractlError(Exception):
    """Base class for all fractl errors."""


class ConfigurationError(FractlError, ValueError):
    """A render configuration violates an invariant the renderer depends on."""


class ExportError(FractlError):
    """A finished pixel buffer could not be written to disk."""
