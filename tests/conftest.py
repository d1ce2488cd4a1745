import os
import tempfile

# Avant tout import du moteur : logs dans un dossier temporaire, Qt sans écran
os.environ.setdefault("NORO_OTP_LOG_DIR", tempfile.mkdtemp(prefix="noro-otp-logs-"))
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from totp_engine.i18n_manager import setup_i18n

setup_i18n("en")


@pytest.fixture(scope="session")
def qapp():
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app
