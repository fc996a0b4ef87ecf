from __future__ import annotations
from typing import TYPE_CHECKING, Dict, Optional, Type

from .bounds import Bounds
from .buffer import BorrowedBuffer, OwnedBuffer, PatchBuffer
from .errors import SizeMismatchError, UnsupportedCompressionError
from .point import PointList
from .schema import CompressionKind, Schema
from .utils import flip_endian, get_logger

if TYPE_CHECKING:  # pragma: no cover
    from .patch import Patch

_log = get_logger()


class CompressionStrategy:
    """Encode/decode contract for one compression kind.

    A strategy turns a raw patch into its compressed sibling (``compress``),
    expands a compressed patch back to points (``to_points``), rebuilds a
    buffer from a wire payload (``decode_payload``) and computes bounds over
    its own encoding (``compute_bounds``).
    """
    name: str = "base"
    kind: Optional[CompressionKind] = None

    def compress(self, patch: "Patch") -> "Patch":  # pragma: no cover - abstract
        raise NotImplementedError

    def to_points(self, patch: "Patch") -> PointList:  # pragma: no cover - abstract
        raise NotImplementedError

    def decode_payload(
        self, schema: Schema, payload: memoryview, npoints: int, swap: bool, copy: bool
    ) -> PatchBuffer:  # pragma: no cover - abstract
        raise NotImplementedError

    def compute_bounds(self, patch: "Patch") -> Bounds:  # pragma: no cover - abstract
        raise NotImplementedError


class NoneStrategy(CompressionStrategy):
    """Identity compression: the compressed bytes are the raw records."""
    name = "none"
    kind = CompressionKind.NONE

    def compress(self, patch: "Patch") -> "Patch":
        newpatch = patch.clone()
        newpatch.compressed = True
        return newpatch

    def to_points(self, patch: "Patch") -> PointList:
        return PointList.from_buffer(patch.schema, patch.payload, patch.npoints)

    def decode_payload(
        self, schema: Schema, payload: memoryview, npoints: int, swap: bool, copy: bool
    ) -> PatchBuffer:
        expected = npoints * schema.point_size
        if len(payload) != expected:
            raise SizeMismatchError(
                f"Wire payload is {len(payload)} bytes, expected {npoints} points x {schema.point_size} bytes = {expected}"
            )
        if swap:
            return OwnedBuffer.from_bytes(flip_endian(payload, schema.dtype, npoints))
        if copy:
            return OwnedBuffer.from_bytes(payload)
        return BorrowedBuffer(payload)

    def compute_bounds(self, patch: "Patch") -> Bounds:
        return Bounds.from_buffer(patch.schema, patch.data, patch.npoints)


class UnimplementedStrategy(CompressionStrategy):
    """Placeholder for a kind whose codec is not available yet."""

    def _unsupported(self, what: str) -> UnsupportedCompressionError:
        return UnsupportedCompressionError(f"{what}: {self.name} compression is not supported")

    def compress(self, patch: "Patch") -> "Patch":
        raise self._unsupported("compress")

    def to_points(self, patch: "Patch") -> PointList:
        raise self._unsupported("to_points")

    def decode_payload(
        self, schema: Schema, payload: memoryview, npoints: int, swap: bool, copy: bool
    ) -> PatchBuffer:
        raise self._unsupported("decode")

    def compute_bounds(self, patch: "Patch") -> Bounds:
        raise self._unsupported("compute_bounds")


class GhtStrategy(UnimplementedStrategy):
    name = "ght"
    kind = CompressionKind.GHT


class DimensionalStrategy(UnimplementedStrategy):
    name = "dimensional"
    kind = CompressionKind.DIMENSIONAL


_STRATEGY_FACTORY: Dict[CompressionKind, Type[CompressionStrategy]] = {
    CompressionKind.NONE: NoneStrategy,
    CompressionKind.DIMENSIONAL: DimensionalStrategy,
    CompressionKind.GHT: GhtStrategy,
}


def register_strategy(
    kind: CompressionKind, strategy_cls: Type[CompressionStrategy]
) -> Optional[Type[CompressionStrategy]]:
    """Install ``strategy_cls`` for ``kind``; returns the strategy it replaced."""
    kind = CompressionKind(kind)
    previous = _STRATEGY_FACTORY.get(kind)
    _STRATEGY_FACTORY[kind] = strategy_cls
    _log.debug("Registered %s for %s compression", strategy_cls.__name__, kind.name)
    return previous


def get_strategy(kind: int) -> CompressionStrategy:
    try:
        return _STRATEGY_FACTORY[CompressionKind(kind)]()
    except (KeyError, ValueError):
        raise UnsupportedCompressionError(f"Unknown compression type {kind}") from None
