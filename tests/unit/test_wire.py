import struct
import sys

import numpy as np
import pytest

from pcpatch.core.errors import (
    EmptyInputError,
    MalformedWireError,
    NullArgumentError,
    SchemaMismatchError,
    SizeMismatchError,
    UnsupportedCompressionError,
)
from pcpatch.core.patch import Patch
from pcpatch.core.point import Point
from pcpatch.core.schema import CompressionKind, Dimension, Schema
from pcpatch.core.wire import HEADER_SIZE, decode, encode, from_hex, to_hex

HOST_FLAG = 1 if sys.byteorder == "little" else 0


def mixed_schema(pcid: int = 5, compression: CompressionKind = CompressionKind.NONE) -> Schema:
    return Schema.from_dimensions(
        pcid,
        [
            Dimension("X", "int32_t", scale=0.01),
            Dimension("Y", "int32_t", scale=0.01),
            Dimension("Z", "double"),
            Dimension("Intensity", "uint16_t"),
            Dimension("Class", "uint8_t"),
        ],
        compression=compression,
    )


COORDS = [(1.5, -2.25, 10.0, 300, 2), (-7.0, 4.0, 0.5, 65535, 9), (0.0, 0.0, -1.0, 0, 0)]


def make_patch(schema: Schema) -> Patch:
    return Patch.from_points([Point.from_values(schema, c) for c in COORDS])


def test_encode_writes_thirteen_byte_header() -> None:
    schema = mixed_schema()
    patch = make_patch(schema)
    wire = encode(patch)
    assert len(wire) == HEADER_SIZE + 3 * schema.point_size
    fmt = "<BIII" if HOST_FLAG else ">BIII"
    assert struct.unpack_from(fmt, wire) == (HOST_FLAG, 5, 0, 3)
    assert wire[HEADER_SIZE:] == bytes(patch.data)


def test_encode_omits_unused_capacity() -> None:
    schema = mixed_schema()
    patch = Patch.make_empty(schema)
    patch.add_point(Point.from_values(schema, COORDS[0]))
    assert len(encode(patch)) == HEADER_SIZE + schema.point_size


@pytest.mark.parametrize("byteorder", [None, "little", "big"])
def test_round_trip(byteorder) -> None:
    schema = mixed_schema()
    patch = make_patch(schema)
    decoded = decode(schema, encode(patch, byteorder=byteorder))
    assert decoded.npoints == 3
    assert decoded.maxpoints == 3
    assert decoded.compressed
    assert not decoded.readonly
    assert decoded.datasize == 3 * schema.point_size
    assert bytes(decoded.data) == bytes(patch.data)
    for got, want in zip(decoded.to_points(), COORDS):
        np.testing.assert_allclose(got.values(), want)
    assert decoded.bounds.as_tuple() == pytest.approx((-7.0, -2.25, 1.5, 4.0))


def test_big_endian_fields_are_flipped_per_field() -> None:
    schema = mixed_schema()
    patch = make_patch(schema)
    wire = encode(patch, byteorder="big")
    assert wire[0] == 0
    assert struct.unpack_from(">I", wire, 1)[0] == 5
    first = np.frombuffer(wire, dtype=schema.dtype.newbyteorder(">"), count=1, offset=HEADER_SIZE)
    assert first["X"][0] == 150
    assert first["Intensity"][0] == 300
    assert first["Z"][0] == 10.0


def test_zero_copy_decode_borrows_payload() -> None:
    schema = mixed_schema()
    wire = encode(make_patch(schema))
    view = decode(schema, wire, copy=False)
    assert view.readonly
    assert bytes(view.data) == wire[HEADER_SIZE:]


def test_swapped_payload_is_always_copied() -> None:
    schema = mixed_schema()
    other = "big" if HOST_FLAG else "little"
    decoded = decode(schema, encode(make_patch(schema), byteorder=other), copy=False)
    assert not decoded.readonly


def test_decode_empty_patch() -> None:
    schema = mixed_schema()
    decoded = decode(schema, encode(Patch.make_empty(schema)))
    assert decoded.npoints == 0
    assert decoded.bounds.is_empty
    assert decoded.to_string() == "[ 5 :  ]"


def test_decode_rejects_bad_input() -> None:
    schema = mixed_schema()
    wire = encode(make_patch(schema))
    with pytest.raises(EmptyInputError):
        decode(schema, b"")
    with pytest.raises(NullArgumentError):
        decode(schema, None)
    with pytest.raises(NullArgumentError):
        decode(None, wire)
    with pytest.raises(MalformedWireError):
        decode(schema, wire[:7])
    with pytest.raises(MalformedWireError):
        decode(schema, b"\x07" + wire[1:])
    with pytest.raises(SizeMismatchError):
        decode(schema, wire[:-1])
    with pytest.raises(SizeMismatchError):
        decode(schema, wire + b"\x00")


def test_decode_rejects_schema_disagreement() -> None:
    schema = mixed_schema()
    wire = encode(make_patch(schema))
    with pytest.raises(SchemaMismatchError):
        decode(mixed_schema(pcid=6), wire)
    with pytest.raises(SchemaMismatchError):
        decode(mixed_schema(compression=CompressionKind.GHT), wire)


@pytest.mark.parametrize("kind", [CompressionKind.GHT, CompressionKind.DIMENSIONAL])
def test_unimplemented_compression_on_the_wire(kind: CompressionKind) -> None:
    schema = mixed_schema(compression=kind)
    header = struct.pack("<BIII" if HOST_FLAG else ">BIII", HOST_FLAG, schema.pcid, int(kind), 0)
    with pytest.raises(UnsupportedCompressionError):
        decode(schema, header)
    with pytest.raises(UnsupportedCompressionError):
        encode(make_patch(schema))


def test_encode_rejects_unknown_byteorder() -> None:
    with pytest.raises(ValueError):
        encode(make_patch(mixed_schema()), byteorder="middle")


def test_hex_round_trip() -> None:
    schema = mixed_schema()
    patch = make_patch(schema)
    text = to_hex(patch, byteorder="big")
    assert text.startswith("00")
    assert text == text.upper()
    decoded = from_hex(schema, text)
    assert bytes(decoded.data) == bytes(patch.data)
    with pytest.raises(MalformedWireError):
        from_hex(schema, "zz")


def test_patch_methods_delegate_to_codec() -> None:
    schema = mixed_schema()
    patch = make_patch(schema)
    decoded = Patch.from_wire_bytes(schema, patch.to_wire_bytes())
    assert decoded.npoints == patch.npoints
    assert bytes(decoded.data) == bytes(patch.data)
