from PyQt6.QtWidgets import QApplication
import sys
import os
from totp_engine.i18n_manager import setup_i18n
setup_i18n()
from totp_engine.errors import OTPError
from totp_engine.logger import app_logger
from totp_engine.otp_model import parse_otpauth
from totp_ui.main_window import MainWindow
from totp_ui.ressources import load_stylesheet

logger = app_logger.getChild('main')

if hasattr(sys, 'frozen'):
    # Mode exécutable
    os.environ['QT_AUTO_SCREEN_SCALE_FACTOR'] = '1'


def load_items(uris):
    """URI otpauth:// passées en ligne de commande ; les invalides sont ignorées"""
    items = []
    for uri in uris:
        try:
            items.append(parse_otpauth(uri))
        except OTPError as e:
            logger.warning(f"Ignoring argument: {e}")
    return items


def main(argv=None):
    argv = sys.argv if argv is None else argv
    app = QApplication(argv)
    styles = load_stylesheet()
    if styles:
        app.setStyleSheet(styles)
    window = MainWindow(load_items(argv[1:]))
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
