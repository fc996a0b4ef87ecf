from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterator, List, Sequence, Tuple
import numpy as np

from .errors import NullArgumentError, SizeMismatchError
from .schema import Schema


@dataclass
class Point:
    """A single packed point record bound to a schema."""
    schema: Schema
    data: bytes

    def __post_init__(self) -> None:
        if self.schema is None:
            raise NullArgumentError("Point requires a schema")
        self.data = bytes(self.data)
        if len(self.data) != self.schema.point_size:
            raise SizeMismatchError(
                f"Point record is {len(self.data)} bytes, schema {self.schema.pcid} expects {self.schema.point_size}"
            )

    @classmethod
    def from_values(cls, schema: Schema, values: Sequence[float]) -> "Point":
        """Pack scaled values (one per dimension) into a record."""
        if len(values) != schema.ndims:
            raise SizeMismatchError(f"Expected {schema.ndims} values, got {len(values)}")
        rec = np.zeros(1, dtype=schema.dtype)
        for dim, value in zip(schema.dimensions, values):
            raw = (float(value) - dim.offset) / dim.scale
            rec[dim.name] = np.round(raw) if dim.is_integer else raw
        return cls(schema=schema, data=rec.tobytes())

    def _record(self) -> np.ndarray:
        return np.frombuffer(self.data, dtype=self.schema.dtype, count=1)

    def get_double_by_index(self, index: int) -> float:
        return float(self.schema.field_values(self._record(), index)[0])

    def get_double(self, name: str) -> float:
        names = [d.name for d in self.schema.dimensions]
        if name not in names:
            raise KeyError(f"Dimension '{name}' not found. Available: {names}")
        return self.get_double_by_index(names.index(name))

    def get_x(self) -> float:
        return self.get_double_by_index(self.schema.x_position)

    def get_y(self) -> float:
        return self.get_double_by_index(self.schema.y_position)

    def values(self) -> Tuple[float, ...]:
        rec = self._record()
        return tuple(float(self.schema.field_values(rec, i)[0]) for i in range(self.schema.ndims))


@dataclass
class PointList:
    """Ordered collection of points, e.g. the expansion of a patch."""
    points: List[Point] = field(default_factory=list)

    @classmethod
    def from_buffer(cls, schema: Schema, data, npoints: int) -> "PointList":
        size = schema.point_size
        view = memoryview(data)
        return cls([Point(schema, view[i * size:(i + 1) * size]) for i in range(npoints)])

    def add_point(self, point: Point) -> None:
        self.points.append(point)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self.points)

    def __getitem__(self, index: int) -> Point:
        return self.points[index]
