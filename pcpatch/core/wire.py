"""
Binary wire format for patches.

    Offset | Size | Type   | Description
    -------|------|--------|------------
    0      | 1    | uint8  | Endianness (1 = NDR/little, 0 = XDR/big)
    1      | 4    | uint32 | pcid
    5      | 4    | uint32 | Compression (0 = none, 1 = dimensional, 2 = ght)
    9      | 4    | uint32 | Point count
    13     | ...  | bytes  | Payload, interpreted by pcid and compression

Header integers and the fields of uncompressed records use the byte order
named by the first byte. Encoding and decoding share this header.
"""
from __future__ import annotations
import struct
from typing import Optional

from .compression import get_strategy
from .errors import (
    EmptyInputError,
    MalformedWireError,
    NullArgumentError,
    SchemaMismatchError,
    UnsupportedCompressionError,
)
from .patch import Patch
from .schema import CompressionKind, Schema
from .utils import NDR, XDR, endian_flag, flip_endian, get_logger, machine_endian

_log = get_logger()

HEADER_SIZE = 13


def _header_struct(endian: int) -> struct.Struct:
    return struct.Struct("<BIII" if endian == NDR else ">BIII")


def decode(schema: Schema, data, *, copy: bool = True) -> Patch:
    """Build a patch from wire bytes.

    With ``copy=False`` a payload already in host byte order is not copied:
    the patch borrows it and is ``readonly``.
    """
    if schema is None:
        raise NullArgumentError("decode: null schema")
    if data is None:
        raise NullArgumentError("decode: null wire buffer")
    view = memoryview(data).cast("B")
    if len(view) == 0:
        raise EmptyInputError("decode: zero length wire buffer")
    if len(view) < HEADER_SIZE:
        raise MalformedWireError(f"decode: {len(view)} bytes is shorter than the {HEADER_SIZE} byte header")
    endian = view[0]
    if endian not in (NDR, XDR):
        raise MalformedWireError(f"decode: invalid endianness flag {endian}")

    _, pcid, compression, npoints = _header_struct(endian).unpack_from(view, 0)
    if compression != schema.compression:
        raise SchemaMismatchError(
            f"decode: wire compression ({compression}) not consistent with schema compression ({int(schema.compression)})"
        )
    if pcid != schema.pcid:
        raise SchemaMismatchError(f"decode: wire pcid ({pcid}) not consistent with schema pcid ({schema.pcid})")

    strategy = get_strategy(compression)
    swap = endian != machine_endian()
    buffer = strategy.decode_payload(schema, view[HEADER_SIZE:], npoints, swap=swap, copy=copy)
    # The payload stays in whatever encoding it arrived in
    patch = Patch(schema, buffer, npoints=npoints, maxpoints=npoints, compressed=True)
    patch.recompute_bounds()
    _log.debug(
        "Decoded patch pcid=%d npoints=%d (%d payload bytes, swapped=%s, borrowed=%s)",
        pcid, npoints, len(buffer), swap, patch.readonly,
    )
    return patch


def encode(patch: Patch, byteorder: Optional[str] = None) -> bytes:
    """Serialise ``patch`` in the schema's compression.

    ``byteorder`` is ``None`` for the host order, or ``"little"``/``"big"``.
    """
    if patch is None:
        raise NullArgumentError("encode: null patch")
    schema = patch.schema
    if not patch.compressed and schema.compression is not CompressionKind.NONE:
        patch = patch.compress()

    endian = endian_flag(byteorder)
    payload = patch.payload
    if endian != machine_endian():
        if schema.compression is not CompressionKind.NONE:
            raise UnsupportedCompressionError(
                f"encode: cannot change byte order of a {schema.compression.name} payload"
            )
        payload = flip_endian(payload, schema.dtype, patch.npoints)

    header = _header_struct(endian).pack(endian, schema.pcid, int(schema.compression), patch.npoints)
    return header + bytes(payload)


def to_hex(patch: Patch, byteorder: Optional[str] = None) -> str:
    return encode(patch, byteorder=byteorder).hex().upper()


def from_hex(schema: Schema, text: str) -> Patch:
    if text is None:
        raise NullArgumentError("from_hex: null text")
    try:
        data = bytes.fromhex(text.strip())
    except ValueError as exc:
        raise MalformedWireError(f"from_hex: {exc}") from None
    return decode(schema, data)
