from __future__ import annotations
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, Sequence, Tuple
import numpy as np

from .errors import InvalidSchemaError


class CompressionKind(IntEnum):
    """Compression applied to a schema's patches. Values are the wire tags."""
    NONE = 0
    DIMENSIONAL = 1
    GHT = 2

    @classmethod
    def from_name(cls, name: str) -> "CompressionKind":
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(f"Unknown compression '{name}'") from None


# pcid travels as a uint32 in the wire header
MAX_PCID = 0xFFFFFFFF

# interpretation name -> numpy type code (byte order applied by Schema.dtype)
INTERPRETATIONS: Dict[str, str] = {
    "int8_t": "i1",
    "uint8_t": "u1",
    "int16_t": "i2",
    "uint16_t": "u2",
    "int32_t": "i4",
    "uint32_t": "u4",
    "int64_t": "i8",
    "uint64_t": "u8",
    "float": "f4",
    "double": "f8",
}


@dataclass(frozen=True)
class Dimension:
    name: str
    interpretation: str = "double"
    scale: float = 1.0
    offset: float = 0.0

    def __post_init__(self) -> None:
        if self.interpretation not in INTERPRETATIONS:
            raise InvalidSchemaError(
                f"Dimension '{self.name}' has unknown interpretation '{self.interpretation}'"
            )
        if self.scale == 0:
            raise InvalidSchemaError(f"Dimension '{self.name}' has zero scale")

    @property
    def size(self) -> int:
        return np.dtype(INTERPRETATIONS[self.interpretation]).itemsize

    @property
    def is_integer(self) -> bool:
        return INTERPRETATIONS[self.interpretation][0] in "iu"


@dataclass(frozen=True, eq=False)
class Schema:
    """Immutable description of a point record.

    Records are packed (no alignment padding) in dimension order, in host
    byte order while held in memory. Two schemas are the same schema only if
    they are the same object; patches compare ``pcid`` where a looser match
    is wanted.
    """
    pcid: int
    dimensions: Tuple[Dimension, ...]
    compression: CompressionKind = CompressionKind.NONE
    dtype: np.dtype = field(init=False, repr=False)
    x_position: int = field(init=False, repr=False)
    y_position: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not 0 <= self.pcid <= MAX_PCID:
            raise InvalidSchemaError(f"pcid {self.pcid} is outside the uint32 range")
        object.__setattr__(self, "dimensions", tuple(self.dimensions))
        object.__setattr__(self, "compression", CompressionKind(self.compression))
        names = [d.name for d in self.dimensions]
        if len(set(names)) != len(names):
            raise InvalidSchemaError(f"Duplicate dimension names in schema {self.pcid}: {names}")
        dtype = np.dtype([(d.name, "=" + INTERPRETATIONS[d.interpretation]) for d in self.dimensions])
        object.__setattr__(self, "dtype", dtype)
        upper = [n.upper() for n in names]
        # Fall back to the first two dimensions when X/Y are not named
        object.__setattr__(self, "x_position", upper.index("X") if "X" in upper else 0)
        object.__setattr__(self, "y_position", upper.index("Y") if "Y" in upper else min(1, max(len(names) - 1, 0)))

    @classmethod
    def from_dimensions(
        cls,
        pcid: int,
        dimensions: Sequence[Dimension | str],
        compression: CompressionKind = CompressionKind.NONE,
    ) -> "Schema":
        """Build a schema, accepting bare names as ``double`` dimensions."""
        dims = tuple(d if isinstance(d, Dimension) else Dimension(d) for d in dimensions)
        return cls(pcid=pcid, dimensions=dims, compression=compression)

    @property
    def point_size(self) -> int:
        return self.dtype.itemsize

    @property
    def ndims(self) -> int:
        return len(self.dimensions)

    def field_values(self, records: np.ndarray, index: int) -> np.ndarray:
        """Scaled float64 values of dimension ``index`` for a record array."""
        dim = self.dimensions[index]
        return records[dim.name].astype(np.float64) * dim.scale + dim.offset

    def __repr__(self) -> str:
        dims = ", ".join(f"{d.name}:{d.interpretation}" for d in self.dimensions)
        return f"Schema(pcid={self.pcid}, size={self.point_size}, compression={self.compression.name}, dims=[{dims}])"
