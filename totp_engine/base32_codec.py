# totp_engine/base32_codec.py
# Décodage tolérant des secrets Base32 (RFC 4648) saisis par l'utilisateur

import base64
import os

BASE32_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
_ALPHABET_INDEX = {char: index for index, char in enumerate(BASE32_ALPHABET)}


def clean(secret: str) -> str:
    """Met en majuscules et retire tout ce qui n'est pas dans A-Z2-7 (espaces, tirets, '=')"""
    return "".join(char for char in secret.upper() if char in _ALPHABET_INDEX)


def decode(secret: str) -> bytes:
    """
    Décode un secret Base32 en octets.

    Chaque caractère apporte 5 bits ; on regroupe par 8 bits.
    Les bits restants qui ne forment pas un octet complet sont ignorés.
    Une entrée vide ou sans caractère valide donne b"" (à l'appelant de la refuser).
    """
    output = bytearray()
    buffer = 0
    bits = 0
    for char in clean(secret):
        buffer = (buffer << 5) | _ALPHABET_INDEX[char]
        bits += 5
        if bits >= 8:
            bits -= 8
            output.append((buffer >> bits) & 0xFF)
            buffer &= (1 << bits) - 1
    return bytes(output)


def encode(data: bytes, padding: bool = False) -> str:
    encoded = base64.b32encode(data).decode("ascii")
    return encoded if padding else encoded.rstrip("=")


def generate_secret(length: int = 20) -> str:
    """Génère une graine aléatoire de `length` octets, encodée en Base32 sans padding"""
    if length < 1:
        raise ValueError("Secret length must be positive")
    return encode(os.urandom(length))
