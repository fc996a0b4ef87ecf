from __future__ import annotations
from dataclasses import dataclass
import math
import numpy as np

from .schema import Schema


@dataclass
class Bounds:
    """Axis-aligned XY box. ``xmin > xmax`` means no points were seen."""
    xmin: float = math.inf
    ymin: float = math.inf
    xmax: float = -math.inf
    ymax: float = -math.inf

    def reset(self) -> None:
        self.xmin = self.ymin = math.inf
        self.xmax = self.ymax = -math.inf

    def extend(self, x: float, y: float) -> None:
        self.xmin = min(self.xmin, x)
        self.ymin = min(self.ymin, y)
        self.xmax = max(self.xmax, x)
        self.ymax = max(self.ymax, y)

    @property
    def is_empty(self) -> bool:
        return self.xmin > self.xmax

    def copy(self) -> "Bounds":
        return Bounds(self.xmin, self.ymin, self.xmax, self.ymax)

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.xmin, self.ymin, self.xmax, self.ymax)

    @classmethod
    def from_buffer(cls, schema: Schema, data, npoints: int) -> "Bounds":
        """Bounds over ``npoints`` raw records at the start of ``data``."""
        bounds = cls()
        if npoints == 0:
            return bounds
        records = np.frombuffer(data, dtype=schema.dtype, count=npoints)
        xs = schema.field_values(records, schema.x_position)
        ys = schema.field_values(records, schema.y_position)
        # NaN coordinates are skipped, as in extend()
        xs, ys = xs[~np.isnan(xs)], ys[~np.isnan(ys)]
        if xs.size:
            bounds.xmin, bounds.xmax = float(xs.min()), float(xs.max())
        if ys.size:
            bounds.ymin, bounds.ymax = float(ys.min()), float(ys.max())
        return bounds
