"""Domain-specific errors for gocopycat."""

from __future__ import annotations


class GoCopycatError(Exception):
    """Base error for gocopycat."""


class ParseError(GoCopycatError):
    """Raised when a Go source directory cannot be parsed."""


class ResolutionError(GoCopycatError):
    """Raised when a source directory cannot be mapped to a Go import path."""


class CreateError(GoCopycatError):
    """Raised when a destination file cannot be created."""


class UnsupportedSignatureError(GoCopycatError):
    """Raised when a Go function signature cannot be forwarded by name."""
