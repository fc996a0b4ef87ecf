"""Logging and byte-order helpers shared by the patch modules."""
from __future__ import annotations
import logging
import sys

import numpy as np

NDR = 1  # little endian
XDR = 0  # big endian

def get_logger(name: str = "pcpatch") -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        fmt = logging.Formatter("[%(levelname)s] %(message)s")
        handler.setFormatter(fmt)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger

def machine_endian() -> int:
    return NDR if sys.byteorder == "little" else XDR

def endian_flag(byteorder: str | None) -> int:
    """Map ``None``/``"little"``/``"big"`` to the wire endianness flag."""
    if byteorder is None:
        return machine_endian()
    if byteorder == "little":
        return NDR
    if byteorder == "big":
        return XDR
    raise ValueError(f"Unknown byte order '{byteorder}' (expected 'little' or 'big')")

def flip_endian(data, dtype: np.dtype, npoints: int) -> bytes:
    """Swap the byte order of every field of ``npoints`` packed records."""
    if npoints == 0:
        return b""
    swapped = np.frombuffer(data, dtype=dtype.newbyteorder("S"), count=npoints)
    return swapped.astype(dtype).tobytes()
