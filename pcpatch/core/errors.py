"""Exception hierarchy for patch construction, mutation and wire decoding.

Every error is raised at the point of detection and aborts the operation;
no constructor hands back a partially built patch.
"""

from __future__ import annotations


__all__ = [
    "PatchError",
    "InvalidSchemaError",
    "EmptyInputError",
    "NullArgumentError",
    "SchemaMismatchError",
    "ReadOnlyViolationError",
    "CompressedViolationError",
    "SizeMismatchError",
    "UnsupportedCompressionError",
    "MalformedWireError",
]


class PatchError(Exception):
    """Base exception for all pcpatch errors."""

    pass


class InvalidSchemaError(PatchError, ValueError):
    """Raised when a schema is missing or describes a zero-width point.

    Examples:
        - ``Patch.make_empty(None)``
        - a schema without dimensions
        - an unknown dimension interpretation
    """

    pass


class EmptyInputError(PatchError, ValueError):
    """Raised for an empty point list or a zero-length wire buffer."""

    pass


class NullArgumentError(PatchError, TypeError):
    """Raised when a required argument is ``None``."""

    pass


class SchemaMismatchError(PatchError, ValueError):
    """Raised when collaborating values disagree on pcid, compression or schema."""

    pass


class ReadOnlyViolationError(PatchError):
    """Raised when mutating a patch that does not own its buffer."""

    pass


class CompressedViolationError(PatchError):
    """Raised when inserting points into a compressed encoding."""

    pass


class SizeMismatchError(PatchError, ValueError):
    """Raised when a byte length disagrees with the declared point layout."""

    pass


class UnsupportedCompressionError(PatchError, NotImplementedError):
    """Raised when a compression kind has no working strategy."""

    pass


class MalformedWireError(PatchError, ValueError):
    """Raised when a wire buffer is truncated or carries an invalid endianness flag."""

    pass
