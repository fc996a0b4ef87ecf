from __future__ import annotations
from typing import Callable, Optional, Sequence

from .bounds import Bounds
from .buffer import OwnedBuffer, PatchBuffer
from .compression import get_strategy
from .display import to_display_string
from .errors import (
    CompressedViolationError,
    EmptyInputError,
    InvalidSchemaError,
    NullArgumentError,
    ReadOnlyViolationError,
    SchemaMismatchError,
)
from .point import Point, PointList
from .schema import CompressionKind, Schema
from .utils import get_logger

_log = get_logger()

DEFAULT_MAXPOINTS = 64


class Patch:
    """A schema-typed run of point records in one contiguous buffer.

    While uncompressed the buffer holds ``maxpoints`` slots of
    ``schema.point_size`` bytes, the first ``npoints`` of them in use. Once
    ``compressed`` is set the buffer holds whatever encoding the schema's
    compression produces and only ``npoints`` stays meaningful.

    Patches do not own their schema. Whether they own their buffer is
    decided by the buffer type: ``OwnedBuffer`` or ``BorrowedBuffer``.
    """

    def __init__(
        self,
        schema: Schema,
        buffer: PatchBuffer,
        *,
        npoints: int = 0,
        maxpoints: int = 0,
        compressed: bool = False,
        bounds: Optional[Bounds] = None,
    ) -> None:
        self._schema = schema
        self._buffer = buffer
        self.npoints = npoints
        self.maxpoints = maxpoints
        self.compressed = compressed
        self.bounds = bounds if bounds is not None else Bounds()

    # -- constructors --
    @classmethod
    def make_empty(cls, schema: Schema, maxpoints: int = DEFAULT_MAXPOINTS) -> "Patch":
        if schema is None:
            raise InvalidSchemaError("null schema passed into Patch.make_empty")
        if not schema.point_size:
            raise InvalidSchemaError(f"schema {schema.pcid} has zero point size")
        if maxpoints <= 0:
            raise ValueError(f"maxpoints must be positive, got {maxpoints}")
        buffer = OwnedBuffer(maxpoints * schema.point_size)
        return cls(schema, buffer, maxpoints=maxpoints)

    @classmethod
    def from_points(
        cls,
        points: Sequence[Optional[Point]],
        on_warning: Optional[Callable[[str], None]] = None,
    ) -> "Patch":
        """Copy ``points`` into a new patch sized exactly for them.

        ``None`` entries are skipped and reported through ``on_warning``
        (the package logger when not given), so the result can hold fewer
        points than were passed in.
        """
        if points is None or len(points) == 0:
            raise EmptyInputError("zero point count passed into Patch.from_points")
        warn = on_warning if on_warning is not None else _log.warning

        schema = next((p.schema for p in points if p is not None), None)
        if schema is None:
            raise EmptyInputError("only null points passed into Patch.from_points")
        if not schema.point_size:
            raise InvalidSchemaError(f"schema {schema.pcid} has zero point size")

        size = schema.point_size
        buffer = OwnedBuffer(size * len(points))
        bounds = Bounds()
        npoints = 0
        for i, pt in enumerate(points):
            if pt is None:
                warn(f"encountered null point at index {i} in Patch.from_points")
                continue
            if pt.schema is not schema:
                raise SchemaMismatchError(
                    f"point {i} has schema {pt.schema.pcid}, expected the schema of the first point ({schema.pcid})"
                )
            buffer.write(npoints * size, pt.data)
            bounds.extend(pt.get_x(), pt.get_y())
            npoints += 1
        return cls(schema, buffer, npoints=npoints, maxpoints=len(points), bounds=bounds)

    @classmethod
    def from_wire_bytes(cls, schema: Schema, data, *, copy: bool = True) -> "Patch":
        from .wire import decode
        return decode(schema, data, copy=copy)

    # -- properties --
    @property
    def schema(self) -> Schema:
        return self._schema

    @property
    def buffer(self) -> PatchBuffer:
        return self._buffer

    @property
    def data(self) -> memoryview:
        """View of the whole buffer. Invalidated by the next ``add_point``."""
        return self._buffer.view

    @property
    def datasize(self) -> int:
        return len(self._buffer)

    @property
    def readonly(self) -> bool:
        return self._buffer.readonly

    @property
    def payload(self) -> memoryview:
        """The bytes that carry the points: used records, or the whole encoding."""
        if not self.compressed or self._schema.compression is CompressionKind.NONE:
            return self.data[: self.npoints * self._schema.point_size]
        return self.data

    @property
    def xmin(self) -> float:
        return self.bounds.xmin

    @property
    def ymin(self) -> float:
        return self.bounds.ymin

    @property
    def xmax(self) -> float:
        return self.bounds.xmax

    @property
    def ymax(self) -> float:
        return self.bounds.ymax

    # -- mutation --
    def add_point(self, point: Point) -> None:
        if point is None:
            raise NullArgumentError("Patch.add_point: null point argument")
        if self._schema.pcid != point.schema.pcid:
            raise SchemaMismatchError(
                f"Patch.add_point: pcids of point ({point.schema.pcid}) and patch ({self._schema.pcid}) not equal"
            )
        if self.readonly:
            raise ReadOnlyViolationError("Patch.add_point: cannot add point to readonly patch")
        if self.compressed and self._schema.compression is not CompressionKind.NONE:
            raise CompressedViolationError("Patch.add_point: cannot add point to compressed patch")

        size = self._schema.point_size
        if self.npoints >= self.maxpoints:
            self.maxpoints = max(1, self.maxpoints * 2)
            self._buffer.resize(self.maxpoints * size)
            _log.debug("Grew patch (pcid=%d) to %d points", self._schema.pcid, self.maxpoints)

        self._buffer.write(self.npoints * size, point.data)
        self.npoints += 1
        self.bounds.extend(point.get_x(), point.get_y())

    def recompute_bounds(self) -> Bounds:
        self.bounds = get_strategy(self._schema.compression).compute_bounds(self)
        return self.bounds

    # -- lifecycle --
    def clone(self) -> "Patch":
        """Deep copy; the clone always owns its buffer."""
        return Patch(
            self._schema,
            self._buffer.copy(),
            npoints=self.npoints,
            maxpoints=self.maxpoints,
            compressed=self.compressed,
            bounds=self.bounds.copy(),
        )

    def with_buffer(self, buffer: PatchBuffer, *, compressed: bool) -> "Patch":
        """Sibling patch over ``buffer`` with the same schema, count and bounds."""
        return Patch(
            self._schema,
            buffer,
            npoints=self.npoints,
            maxpoints=self.npoints if compressed else self.maxpoints,
            compressed=compressed,
            bounds=self.bounds.copy(),
        )

    def release(self) -> None:
        self._buffer.release()
        self.npoints = 0
        self.maxpoints = 0
        self.bounds.reset()

    def __enter__(self) -> "Patch":
        return self

    def __exit__(self, *exc) -> None:
        self.release()

    # -- compression dispatch --
    def to_points(self) -> PointList:
        if not self.compressed:
            return PointList.from_buffer(self._schema, self.payload, self.npoints)
        return get_strategy(self._schema.compression).to_points(self)

    def compress(self) -> "Patch":
        if self.compressed:
            return self.clone()
        return get_strategy(self._schema.compression).compress(self)

    # -- encoding / display --
    def to_wire_bytes(self, byteorder: Optional[str] = None) -> bytes:
        from .wire import encode
        return encode(self, byteorder=byteorder)

    def to_string(self) -> str:
        return to_display_string(self)

    def __str__(self) -> str:
        return self.to_string()

    def __len__(self) -> int:
        return self.npoints

    def __repr__(self) -> str:
        return (
            f"Patch(pcid={self._schema.pcid}, npoints={self.npoints}, maxpoints={self.maxpoints}, "
            f"compressed={self.compressed}, readonly={self.readonly})"
        )
