# fmm/dat/stream.py
from __future__ import annotations

import struct

from fmm.core.errors import DatFormatError

__all__ = ["DatReader", "DatWriter", "OPTIMIZED_ESCAPE"]



# First byte of an optimized integer that announces the full-width form.
OPTIMIZED_ESCAPE = 255

_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_F64 = struct.Struct("<d")



class DatReader:
    """
    Little-endian cursor over the game's binary .dat data.

    Every read past the end of the buffer raises DatFormatError.
    """

    def __init__(self, data: bytes) -> None:
        self.data = data
        self.pos = 0

    def read(self, n: int) -> bytes:
        if n < 0 or self.pos + n > len(self.data):
            raise DatFormatError(f"Unexpected end of data, need {n} bytes", offset=self.pos)
        result = self.data[self.pos:self.pos + n]
        self.pos += n
        return result

    def skip(self, n: int) -> None:
        self.read(n)

    def remaining(self) -> int:
        return len(self.data) - self.pos

    # Fixed width

    def u8(self) -> int:
        return self.read(1)[0]

    def bool(self) -> bool:
        offset = self.pos
        value = self.u8()
        if value not in (0, 1):
            raise DatFormatError(f"Invalid boolean representation {value}", offset=offset)
        return value == 1

    def u16(self) -> int:
        return _U16.unpack(self.read(2))[0]

    def u32(self) -> int:
        return _U32.unpack(self.read(4))[0]

    def f64(self) -> float:
        return _F64.unpack(self.read(8))[0]

    # Optimized (1 byte below 255, else 255 followed by the full width)

    def u16Optimized(self) -> int:
        value = self.u8()
        return self.u16() if value == OPTIMIZED_ESCAPE else value

    def u32Optimized(self) -> int:
        value = self.u8()
        return self.u32() if value == OPTIMIZED_ESCAPE else value

    # Strings

    def string(self) -> str:
        """Length-prefixed string; invalid UTF-8 is replaced, never fatal."""
        length = self.u32Optimized()
        return self.read(length).decode("utf-8", errors="replace")

    def treeString(self) -> str | None:
        """String with a leading 'absent' flag, as used inside property trees."""
        if self.bool():
            return None
        return self.string()



class DatWriter:
    """Growing little-endian buffer, the counterpart of DatReader."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    def getvalue(self) -> bytes:
        return bytes(self._buffer)

    def write(self, data: bytes) -> None:
        self._buffer += data

    def u8(self, value: int) -> None:
        self._buffer.append(value)

    def bool(self, value: bool) -> None:
        self._buffer.append(1 if value else 0)

    def u16(self, value: int) -> None:
        self._buffer += _U16.pack(value)

    def u32(self, value: int) -> None:
        self._buffer += _U32.pack(value)

    def f64(self, value: float) -> None:
        self._buffer += _F64.pack(value)

    def u16Optimized(self, value: int) -> None:
        if value < OPTIMIZED_ESCAPE:
            self.u8(value)
        else:
            self.u8(OPTIMIZED_ESCAPE)
            self.u16(value)

    def u32Optimized(self, value: int) -> None:
        if value < OPTIMIZED_ESCAPE:
            self.u8(value)
        else:
            self.u8(OPTIMIZED_ESCAPE)
            self.u32(value)

    def string(self, value: str) -> None:
        encoded = value.encode("utf-8")
        self.u32Optimized(len(encoded))
        self.write(encoded)

    def treeString(self, value: str | None) -> None:
        if value is None:
            self.bool(True)
        else:
            self.bool(False)
            self.string(value)
