from __future__ import annotations

from typing import BinaryIO, Dict, Protocol

import numpy as np


class Cell(Protocol):
    """What a virtual machine needs from its memory cells."""

    dtype: np.dtype

    def zero(self) -> np.integer: ...

    def increment(self, value: np.integer) -> np.integer: ...

    def decrement(self, value: np.integer) -> np.integer: ...

    def read(self, stream: BinaryIO) -> np.integer: ...

    def write(self, stream: BinaryIO, value: np.integer) -> None: ...


class IntCell:
    """Unsigned wraparound counter backed by a numpy integer dtype.

    Arithmetic is done on Python ints and reduced modulo the dtype range, so
    it never trips numpy's scalar overflow warnings.
    """

    def __init__(self, dtype) -> None:
        self.dtype = np.dtype(dtype)
        info = np.iinfo(self.dtype)
        if info.min != 0:
            raise ValueError(f"cell dtype must be unsigned, got {self.dtype}")
        self.modulus = int(info.max) + 1
        self.bits = self.dtype.itemsize * 8

    def __repr__(self) -> str:
        return f"IntCell({self.dtype.name})"

    def zero(self) -> np.integer:
        return self.dtype.type(0)

    def increment(self, value: np.integer) -> np.integer:
        return self.dtype.type((int(value) + 1) % self.modulus)

    def decrement(self, value: np.integer) -> np.integer:
        return self.dtype.type((int(value) - 1) % self.modulus)

    def read(self, stream: BinaryIO) -> np.integer:
        data = stream.read(1)
        if not data:
            raise EOFError("end of input stream")
        return self.dtype.type(data[0])

    def write(self, stream: BinaryIO, value: np.integer) -> None:
        stream.write(bytes((int(value) & 0xFF,)))


U8 = IntCell(np.uint8)
U16 = IntCell(np.uint16)
U32 = IntCell(np.uint32)

_BY_WIDTH: Dict[int, IntCell] = {cell.bits: cell for cell in (U8, U16, U32)}

CELL_WIDTHS = tuple(sorted(_BY_WIDTH))


def cell_for_width(bits: int) -> IntCell:
    try:
        return _BY_WIDTH[bits]
    except KeyError:
        raise ValueError(f"unsupported cell width {bits}; expected one of {CELL_WIDTHS}") from None
