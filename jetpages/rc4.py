"""RC4 stream cipher as used for page encryption."""


class RC4:
    """An RC4 keystream; successive calls to :meth:`process` continue the stream."""

    def __init__(self, key):
        key = bytes(key)
        if not key:
            raise ValueError("RC4 key must not be empty")
        state = list(range(256))
        j = 0
        for i in range(256):
            j = (key[i % len(key)] + state[i] + j) % 256
            state[i], state[j] = state[j], state[i]
        self._state = state
        self._x = 0
        self._y = 0

    def process(self, data):
        """Encrypt or decrypt ``data`` and return the result as bytes."""
        state = self._state
        x, y = self._x, self._y
        out = bytearray(data)
        for pos, byte in enumerate(out):
            x = (x + 1) % 256
            y = (state[x] + y) % 256
            state[x], state[y] = state[y], state[x]
            out[pos] = byte ^ state[(state[x] + state[y]) % 256]
        self._x, self._y = x, y
        return bytes(out)


def rc4(key, data):
    """Encrypt or decrypt ``data`` with a fresh RC4 stream keyed by ``key``."""
    return RC4(key).process(data)


def page_cipher(db_key, pg, data):
    """Apply the per-page cipher of an encoded database.

    Page 0 and databases without a key are stored in the clear, so the data
    comes back unchanged for them.
    """
    if pg == 0 or db_key == 0:
        return bytes(data)
    page_key = ((db_key ^ pg) & 0xFFFFFFFF).to_bytes(4, "little")
    return rc4(page_key, data)