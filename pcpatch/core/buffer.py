from __future__ import annotations
from typing import Union

from .errors import ReadOnlyViolationError


class OwnedBuffer:
    """Zero-filled storage owned by a single patch.

    ``resize`` reallocates: views taken before the call keep referring to
    the old storage and no longer track the patch.
    """
    readonly = False

    def __init__(self, size: int = 0) -> None:
        self._data = bytearray(size)

    @classmethod
    def from_bytes(cls, data) -> "OwnedBuffer":
        buf = cls()
        buf._data = bytearray(data)
        return buf

    @property
    def view(self) -> memoryview:
        return memoryview(self._data)

    def resize(self, size: int) -> None:
        new = bytearray(size)
        keep = min(size, len(self._data))
        new[:keep] = self._data[:keep]
        self._data = new

    def write(self, offset: int, data: bytes) -> None:
        end = offset + len(data)
        if end > len(self._data):
            raise IndexError(f"Write of {len(data)} bytes at {offset} overruns buffer of {len(self._data)}")
        self._data[offset:end] = data

    def copy(self) -> "OwnedBuffer":
        return OwnedBuffer.from_bytes(self._data)

    def release(self) -> None:
        self._data = bytearray()

    def __len__(self) -> int:
        return len(self._data)


class BorrowedBuffer:
    """Read-only view over memory owned by the caller.

    Releasing only drops the reference; the caller's memory is never touched.
    """
    readonly = True

    def __init__(self, data) -> None:
        self._view = memoryview(data).toreadonly()

    @property
    def view(self) -> memoryview:
        return self._view

    def resize(self, size: int) -> None:
        raise ReadOnlyViolationError("cannot reallocate a borrowed buffer")

    def write(self, offset: int, data: bytes) -> None:
        raise ReadOnlyViolationError("cannot write into a borrowed buffer")

    def copy(self) -> OwnedBuffer:
        return OwnedBuffer.from_bytes(self._view)

    def release(self) -> None:
        self._view = memoryview(b"")

    def __len__(self) -> int:
        return self._view.nbytes


PatchBuffer = Union[OwnedBuffer, BorrowedBuffer]
