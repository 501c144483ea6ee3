import pytest

from jetpages.rc4 import RC4, page_cipher, rc4


@pytest.mark.parametrize(
    "key, plaintext, ciphertext",
    [
        (b"Key", b"Plaintext", bytes.fromhex("bbf316e8d940af0ad3")),
        (b"Wiki", b"pedia", bytes.fromhex("1021bf0420")),
    ],
)
def test_known_vectors(key, plaintext, ciphertext):
    assert rc4(key, plaintext) == ciphertext


@pytest.mark.parametrize("data", [b"", b"a", b"hello world", bytes(range(256)) * 3])
def test_round_trip(data):
    assert rc4(b"example-key", rc4(b"example-key", data)) == data


def test_length_is_preserved():
    data = bytes(1000)
    assert len(rc4(b"k", data)) == len(data)


def test_stream_continues_across_calls():
    data = bytes(range(200))
    cipher = RC4(b"stream")
    pieces = cipher.process(data[:37]) + cipher.process(data[37:])
    assert pieces == rc4(b"stream", data)


def test_different_keys_give_different_output():
    data = bytes(32)
    assert rc4(b"one", data) != rc4(b"two", data)
    assert rc4(b"one", data) == rc4(b"one", data)


def test_accepts_bytearray_and_memoryview():
    data = b"payload"
    assert rc4(bytearray(b"k1"), memoryview(data)) == rc4(b"k1", data)


def test_empty_key_rejected():
    with pytest.raises(ValueError):
        RC4(b"")


def test_page_zero_is_not_encrypted():
    data = bytes(range(64))
    assert page_cipher(0x1234, 0, data) == data


def test_no_db_key_means_no_encryption():
    data = bytes(range(64))
    assert page_cipher(0, 5, data) == data


def test_page_cipher_is_an_involution():
    data = bytes(range(256)) * 8
    encrypted = page_cipher(0x6B39DAC7, 9, data)
    assert encrypted != data
    assert page_cipher(0x6B39DAC7, 9, encrypted) == data


def test_page_cipher_depends_on_page_number():
    data = bytes(128)
    assert page_cipher(0x6B39DAC7, 1, data) != page_cipher(0x6B39DAC7, 2, data)