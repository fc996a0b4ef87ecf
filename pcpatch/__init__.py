"""pcpatch – point-cloud patches and their binary wire format.

This package contains the core components of a patch store:
- Schema, Dimension & CompressionKind (core.schema)
- Point & PointList (core.point)
- Bounds tracking (core.bounds)
- Owned / borrowed buffers (core.buffer)
- Patch container (core.patch)
- Compression strategy registry (core.compression)
- Wire codec (core.wire)
- Diagnostic rendering (core.display)

Errors live in core.errors; YAML configuration in config; the `pcpatch`
command line in cli.main.
"""

from .core.schema import CompressionKind, Dimension, Schema
from .core.point import Point, PointList
from .core.bounds import Bounds
from .core.buffer import OwnedBuffer, BorrowedBuffer
from .core.patch import Patch, DEFAULT_MAXPOINTS
from .core.compression import (
    CompressionStrategy, NoneStrategy, GhtStrategy, DimensionalStrategy,
    register_strategy, get_strategy
)
from .core.wire import decode, encode, to_hex, from_hex
from .core.display import to_display_string
from .core.errors import (
    PatchError, InvalidSchemaError, EmptyInputError, NullArgumentError,
    SchemaMismatchError, ReadOnlyViolationError, CompressedViolationError,
    SizeMismatchError, UnsupportedCompressionError, MalformedWireError
)
