"""Decimal rendering of currency and numeric column values."""

MONEY_PRECISION = 20
NUMERIC_PRECISION = 40
MONEY_SCALE = 4


def _take(data, start, size):
    if start < 0 or start + size > len(data):
        raise ValueError(
            f"need {size} bytes at offset {start}, buffer holds {len(data)}"
        )
    return bytes(data[start:start + size])


def _digits_to_string(magnitude, width, point, negative):
    """Render ``magnitude`` in ``width`` decimal digits with ``point`` after the dot."""
    if point < 0:
        raise ValueError("the number of digits after the point must not be negative")
    digits = str(magnitude % 10 ** width)
    digits = digits.rjust(min(width, point + 1), "0")
    if 1 <= point <= len(digits):
        digits = f"{digits[:-point]}.{digits[-point:]}"
    return f"-{digits}" if negative else digits


def money_to_string(data, start):
    """Render the 8-byte currency value at ``start`` with four decimal places."""
    value = int.from_bytes(_take(data, start, 8), "little", signed=True)
    return _digits_to_string(abs(value), MONEY_PRECISION, MONEY_SCALE, value < 0)


def numeric_to_string(data, start, scale, prec):
    """Render the 17-byte numeric value at ``start``.

    The first byte carries the sign in its top bit; the next 16 bytes hold four
    little-endian 32-bit words, most significant word first. The decimal point
    is placed ``prec`` digits from the right; ``scale`` does not affect the result.
    """
    negative = bool(_take(data, start, 1)[0] & 0x80)
    body = _take(data, start + 1, 16)
    words = [body[pos:pos + 4] for pos in range(0, 16, 4)]
    magnitude = int.from_bytes(b"".join(reversed(words)), "little")
    return _digits_to_string(magnitude, NUMERIC_PRECISION, prec, negative)