import hashlib
import hmac

import pytest

from rfc_vectors import HOTP_CODES, HOTP_KEY
from totp_engine.errors import InvalidParameters, InvalidSecret
from totp_engine.hotp import counter_bytes, hmac_for, hmac_sha1, hotp, truncate


@pytest.mark.parametrize("counter,expected", list(enumerate(HOTP_CODES)))
def test_rfc4226_vectors(counter, expected):
    assert hotp(HOTP_KEY, counter, 6) == expected


def test_counter_is_big_endian():
    assert counter_bytes(1) == b"\x00\x00\x00\x00\x00\x00\x00\x01"
    assert counter_bytes(0x0102030405060708) == bytes(range(1, 9))


def test_counter_out_of_range():
    with pytest.raises(InvalidParameters):
        counter_bytes(-1)
    with pytest.raises(InvalidParameters):
        counter_bytes(2 ** 64)


def test_truncate_rfc4226_example():
    # Exemple de la section 5.4 de la RFC 4226
    digest = bytes.fromhex("1f8698690e02ca16618550ef7f19da8e945b555a")
    assert truncate(digest, 6) == "872921"


def test_truncate_masks_top_bit():
    digest = bytes([0xFF] * 19 + [0x00])
    # offset 0, 0xFFFFFFFF masqué en 0x7FFFFFFF
    assert truncate(digest, 9) == str(0x7FFFFFFF % 10 ** 9).zfill(9)


def test_leading_zeros_are_kept():
    assert hotp(HOTP_KEY, 37037036, 8) == "07081804"
    assert hotp(HOTP_KEY, 37037036, 6) == "081804"


@pytest.mark.parametrize("digits", range(1, 10))
def test_length_matches_digits(digits):
    assert len(hotp(HOTP_KEY, 37037036, digits)) == digits


def test_empty_key_is_rejected():
    with pytest.raises(InvalidSecret):
        hotp(b"", 0)


@pytest.mark.parametrize("digits", [0, 10, -6, 6.0, True, "6"])
def test_digits_out_of_range(digits):
    with pytest.raises(InvalidParameters):
        hotp(HOTP_KEY, 0, digits)


def test_injected_hmac_is_used():
    calls = []

    def fake_hmac(key, message):
        calls.append((key, message))
        return bytes(20)

    assert hotp(b"k", 5, 6, hmac_fn=fake_hmac) == "000000"
    assert calls == [(b"k", counter_bytes(5))]


def test_hmac_for():
    assert hmac_for("SHA1") is hmac_sha1
    assert hmac_for("sha-256")(b"k", b"m") == hmac.new(b"k", b"m", hashlib.sha256).digest()
    with pytest.raises(InvalidParameters):
        hmac_for("MD5")
