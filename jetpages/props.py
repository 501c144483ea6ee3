"""Parsing of KKD/MR2 property blocks into named property sets."""

import sys
import warnings
from dataclasses import dataclass, field

from .byteutil import get_int16, get_int32
from .model import ColumnType
from .options import Option, debug

_SIGNATURES = (b"KKD\0", b"MR2\0")
_NAMES_BLOCK = 0x80
_VALUE_BLOCKS = (0x00, 0x01, 0x02)
_CHUNK_HEADER = 6
_ENTRY_HEADER = 8


class PropertyFormatError(ValueError):
    """A property buffer is not in a recognised or consistent format."""


@dataclass
class Properties:
    """One block of properties; ``name`` is None for the owning object itself."""

    name: str | None = None
    values: dict = field(default_factory=dict)

    def get(self, key, default=None):
        """Return the property ``key``, or ``default`` if it is absent."""
        return self.values.get(key, default)

    def __getitem__(self, key):
        return self.values[key]

    def __contains__(self, key):
        return key in self.values

    def __iter__(self):
        return iter(self.values)

    def __len__(self):
        return len(self.values)

    def dump(self, out=None, show_name=True):
        """Write the properties to ``out`` (standard output by default)."""
        stream = sys.stdout if out is None else out
        if show_name:
            stream.write(f"name: {self.name if self.name else '(none)'}\n")
        for key, value in self.values.items():
            stream.write(f"\t{key}: {value}\n")
        if show_name:
            stream.write("\n")


def _read_names(data, decode_text):
    names = []
    pos = 0
    while pos < len(data):
        if pos + 2 > len(data):
            raise PropertyFormatError("truncated property name list")
        length = get_int16(data, pos)
        pos += 2
        names.append(decode_text(data[pos:pos + length]))
        pos += length
    return names


def _read_values(names, data, decode_text, format_value):
    if len(data) < 6:
        raise PropertyFormatError("truncated property block header")
    name_len = get_int16(data, 4)
    pos = 6
    props = Properties(name=decode_text(data[pos:pos + name_len]) if name_len else None)
    if props.name is not None:
        debug(Option.DEBUG_PROPS, f"prop block named: {props.name}")
    pos += name_len

    while pos + _ENTRY_HEADER <= len(data):
        record_len = get_int16(data, pos)
        dtype = data[pos + 3]
        elem = get_int16(data, pos + 4)
        if elem >= len(names):
            break
        dsize = get_int16(data, pos + 6)
        start = pos + _ENTRY_HEADER
        if start + dsize > len(data):
            break
        key = names[elem]
        debug(Option.DEBUG_PROPS, f"elem {elem} ({key}) dsize {dsize} dtype {dtype}")

        if dtype == ColumnType.MEMO:
            dtype = ColumnType.TEXT
        elif dtype == ColumnType.BINARY and dsize == 16 and key == "GUID":
            dtype = ColumnType.REPID

        if dtype == ColumnType.BOOL:
            value = "yes" if start < len(data) and data[start] else "no"
        elif dtype in (ColumnType.BINARY, ColumnType.OLE):
            value = f"(binary data of length {dsize})"
        else:
            value = format_value(data, start, dtype, dsize)
        props.values[key] = value

        if record_len == 0:
            break
        pos += record_len
    return props


def parse_kkd(buffer, decode_text, format_value):
    """Parse a raw KKD/MR2 property buffer into a list of :class:`Properties`.

    ``decode_text(raw)`` turns stored name bytes into a string;
    ``format_value(data, start, dtype, size)`` renders a value of the given
    column type found at ``start`` within ``data``.
    """
    buffer = bytes(buffer)
    if buffer[:4] not in _SIGNATURES:
        raise PropertyFormatError("unrecognized property format")

    result = []
    names = None
    pos = 4
    while pos < len(buffer):
        if pos + _CHUNK_HEADER > len(buffer):
            raise PropertyFormatError(f"truncated chunk header at offset {pos}")
        record_len = get_int32(buffer, pos)
        record_type = get_int16(buffer, pos + 4)
        if record_len < _CHUNK_HEADER:
            raise PropertyFormatError(f"invalid chunk length {record_len} at offset {pos}")
        debug(Option.DEBUG_PROPS, f"prop chunk type:0x{record_type:04x} len:{record_len}")
        chunk = buffer[pos + _CHUNK_HEADER:pos + record_len]
        if record_type == _NAMES_BLOCK:
            names = _read_names(chunk, decode_text)
        elif record_type in _VALUE_BLOCKS:
            if names is None:
                warnings.warn("property values precede their name list", UserWarning, stacklevel=2)
            else:
                result.append(_read_values(names, chunk, decode_text, format_value))
        else:
            warnings.warn(f"Unknown record type {record_type}", UserWarning, stacklevel=2)
        pos += record_len
    return result