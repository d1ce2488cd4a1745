# totp_engine/hotp.py
# Primitive HOTP (RFC 4226) : HMAC + troncature dynamique

import hashlib
import hmac
from typing import Callable

from totp_engine import config
from totp_engine.errors import InvalidParameters, InvalidSecret

HmacFunction = Callable[[bytes, bytes], bytes]

MAX_COUNTER = 2 ** 64 - 1

_DIGESTS = {
    "SHA1": hashlib.sha1,
    "SHA256": hashlib.sha256,
    "SHA512": hashlib.sha512,
}


def hmac_sha1(key: bytes, message: bytes) -> bytes:
    return hmac.new(key, message, hashlib.sha1).digest()


def hmac_for(algorithm: str = config.DEFAULT_ALGORITHM) -> HmacFunction:
    """Retourne la fonction HMAC correspondant au nom d'algorithme (SHA1, SHA256, SHA512)"""
    name = algorithm.upper().replace("-", "")
    if name == "SHA1":
        return hmac_sha1
    if name not in _DIGESTS:
        raise InvalidParameters(f"Unsupported algorithm: {algorithm}")
    digest = _DIGESTS[name]
    return lambda key, message: hmac.new(key, message, digest).digest()


def counter_bytes(counter: int) -> bytes:
    """Compteur sur 8 octets, big-endian"""
    if not 0 <= counter <= MAX_COUNTER:
        raise InvalidParameters(f"Counter out of range: {counter}")
    return counter.to_bytes(8, "big")


def truncate(digest: bytes, digits: int) -> str:
    """Troncature dynamique : 4 octets à partir de l'offset donné par le dernier quartet"""
    offset = digest[-1] & 0x0F
    binary = (
        ((digest[offset] & 0x7F) << 24)
        | (digest[offset + 1] << 16)
        | (digest[offset + 2] << 8)
        | digest[offset + 3]
    )
    return str(binary % 10 ** digits).zfill(digits)


def hotp(key: bytes, counter: int, digits: int = config.DEFAULT_DIGITS,
         hmac_fn: HmacFunction = hmac_sha1) -> str:
    if not key:
        raise InvalidSecret("Empty key")
    low, high = config.HOTP_DIGITS_RANGE
    if isinstance(digits, bool) or not isinstance(digits, int):
        raise InvalidParameters(f"Digits must be an integer, got {digits!r}")
    if not low <= digits <= high:
        raise InvalidParameters(f"Digits must be between {low} and {high}, got {digits}")
    return truncate(hmac_fn(key, counter_bytes(counter)), digits)
