# totp_engine/totp.py
# Dérivation TOTP (RFC 6238) : le temps donne le compteur, HOTP donne le code

import hmac
import math

from totp_engine import base32_codec, config
from totp_engine.errors import InvalidParameters, InvalidSecret
from totp_engine.hotp import hmac_for, hotp


def _check_time(unix_time: float, period: int):
    if isinstance(period, bool) or not isinstance(period, int) or period <= 0:
        raise InvalidParameters(f"Period must be a positive number of seconds, got {period!r}")
    if not math.isfinite(unix_time) or unix_time < 0:
        raise InvalidParameters(f"Invalid unix time: {unix_time!r}")


def counter_at(unix_time: float, period: int = config.DEFAULT_PERIOD) -> int:
    _check_time(unix_time, period)
    return int(unix_time // period)


def remaining_seconds(unix_time: float, period: int = config.DEFAULT_PERIOD) -> int:
    """Secondes restantes dans la fenêtre courante : period au début, 1 à la fin"""
    _check_time(unix_time, period)
    return period - int(unix_time) % period


def totp(secret: str, unix_time: float, period: int = config.DEFAULT_PERIOD,
         digits: int = config.DEFAULT_DIGITS, algorithm: str = config.DEFAULT_ALGORITHM) -> str:
    """
    Code TOTP pour un instant donné.

    Le temps est toujours explicite : les tests passent les vecteurs RFC,
    l'UI passe la lecture d'horloge du tick en cours.
    """
    counter = counter_at(unix_time, period)
    key = base32_codec.decode(secret)
    if not key:
        raise InvalidSecret("Secret contains no Base32 characters")
    return hotp(key, counter, digits, hmac_for(algorithm))


def verify(secret: str, code: str, unix_time: float, period: int = config.DEFAULT_PERIOD,
           digits: int = config.DEFAULT_DIGITS, algorithm: str = config.DEFAULT_ALGORITHM,
           window: int = 0) -> bool:
    """Accepte le code s'il correspond à une fenêtre dans [-window, +window] autour de unix_time"""
    if window < 0:
        raise InvalidParameters(f"Window must be >= 0, got {window}")
    code = str(code).replace(" ", "")
    for step in range(-window, window + 1):
        instant = unix_time + step * period
        if instant < 0:
            continue
        if hmac.compare_digest(totp(secret, instant, period, digits, algorithm), code):
            return True
    return False
