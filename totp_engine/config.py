# totp_engine/config.py
# Valeurs par défaut et surcharges par variables d'environnement

import logging
import os
import sys
from pathlib import Path

APP_NAME = "NoroOTP"

# Paramètres TOTP
DEFAULT_DIGITS = 6
DEFAULT_PERIOD = 30
DEFAULT_ALGORITHM = "SHA1"
HOTP_DIGITS_RANGE = (1, 9)  # bornes incluses, primitive RFC 4226
ITEM_DIGITS_RANGE = (6, 8)  # bornes incluses, configuration d'un item
SUPPORTED_ALGORITHMS = ("SHA1", "SHA256", "SHA512")

# Interface
DEFAULT_TICK_MS = 1000
COPIED_FEEDBACK_MS = 1500
MASK = "●●●●●●"


def log_dir() -> Path:
    """Dossier des logs : variable d'env, sinon à côté de l'exe, sinon dossier utilisateur"""
    override = os.environ.get("NORO_OTP_LOG_DIR")
    if override:
        return Path(override)
    if getattr(sys, 'frozen', False):
        # Mode PyInstaller
        return Path(os.path.dirname(sys.executable)) / "logs"
    # Hors du paquet installé (site-packages peut être en lecture seule)
    return Path.home() / ".noro-otp" / "logs"


def log_level() -> int:
    name = os.environ.get("NORO_OTP_LOG_LEVEL", "DEBUG").upper()
    return getattr(logging, name, logging.DEBUG)


def tick_interval_ms() -> int:
    """Intervalle du timer de ticks ; valeur invalide -> défaut + warning"""
    raw = os.environ.get("NORO_OTP_TICK_MS")
    if raw is None:
        return DEFAULT_TICK_MS
    try:
        interval = int(raw)
    except ValueError:
        interval = 0
    if interval <= 0:
        logging.getLogger(APP_NAME).getChild('config').warning(
            f"Invalid NORO_OTP_TICK_MS={raw!r}, using {DEFAULT_TICK_MS} ms")
        return DEFAULT_TICK_MS
    return interval
