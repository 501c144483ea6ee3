"""Little- and big-endian integer access on page buffers."""

_MASK16 = 0xFFFF
_MASK32 = 0xFFFFFFFF


def _check_bounds(buf, offset, size):
    if offset < 0 or offset + size > len(buf):
        raise IndexError(
            f"{size}-byte access at offset {offset} is outside a buffer of {len(buf)} bytes"
        )


def get_int16(buf, offset):
    """Read an unsigned little-endian 16-bit integer."""
    _check_bounds(buf, offset, 2)
    return int.from_bytes(buf[offset:offset + 2], "little")


def get_int32(buf, offset):
    """Read an unsigned little-endian 32-bit integer."""
    _check_bounds(buf, offset, 4)
    return int.from_bytes(buf[offset:offset + 4], "little")


def get_int32_msb(buf, offset):
    """Read an unsigned big-endian 32-bit integer."""
    _check_bounds(buf, offset, 4)
    return int.from_bytes(buf[offset:offset + 4], "big")


def put_int16(buf, offset, value):
    """Store the low 16 bits of ``value`` little-endian into ``buf``."""
    _check_bounds(buf, offset, 2)
    buf[offset:offset + 2] = (value & _MASK16).to_bytes(2, "little")


def put_int32(buf, offset, value):
    """Store the low 32 bits of ``value`` little-endian into ``buf``."""
    _check_bounds(buf, offset, 4)
    buf[offset:offset + 4] = (value & _MASK32).to_bytes(4, "little")


def put_int32_msb(buf, offset, value):
    """Store the low 32 bits of ``value`` big-endian into ``buf``."""
    _check_bounds(buf, offset, 4)
    buf[offset:offset + 4] = (value & _MASK32).to_bytes(4, "big")