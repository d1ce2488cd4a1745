# totp_engine/errors.py
# Les deux seules erreurs levées par le moteur OTP


class OTPError(Exception):
    """Erreur de base du moteur OTP"""


class InvalidSecret(OTPError, ValueError):
    """Le secret ne donne aucune clé exploitable (vide ou sans caractère Base32)"""


class InvalidParameters(OTPError, ValueError):
    """digits, period, temps ou URI otpauth hors des plages supportées"""
