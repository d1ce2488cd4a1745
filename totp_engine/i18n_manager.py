import builtins
import gettext
import locale
from pathlib import Path

from totp_engine.logger import app_logger

logger = app_logger.getChild('i18n')


def setup_i18n(language=None):
    """Configure l'internationalisation au démarrage de l'app"""

    # Répertoire des traductions (à côté de main.py)
    locales_dir = Path(__file__).parent.parent / "locales"

    if language is None:
        # Détecter la langue du système
        try:
            language, _encoding = locale.getlocale()  # ex: ('fr_FR', 'UTF-8')
            if not language:
                language = "en"
            language = language.split('_')[0]  # 'fr_FR' -> 'fr'
        except ValueError:
            language = "en"

    if language != 'en' and locales_dir.exists():
        translation = gettext.translation(
            'messages',
            localedir=str(locales_dir),
            languages=[language],
            fallback=True
        )
    else:
        # Pas de traduction (anglais ou dossier absent)
        translation = gettext.NullTranslations()

    # Installer globalement la fonction _
    translation.install()
    builtins._ = translation.gettext
    logger.debug(f"i18n language: {language}")
    return translation
