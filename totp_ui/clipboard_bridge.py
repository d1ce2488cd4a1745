# totp_ui/clipboard_bridge.py
# Implémentation Qt du pont de présentation : presse-papiers + affichage des champs masqués

from PyQt6.QtCore import QObject, QTimer, pyqtSignal
from PyQt6.QtWidgets import QApplication

from totp_engine import config
from totp_engine.logger import app_logger
from totp_engine.presentation_bridge import PresentationBridge


class ClipboardBridge(QObject):
    copied_changed = pyqtSignal(bool)
    reveal_changed = pyqtSignal(bool)

    def __init__(self, feedback_ms=config.COPIED_FEEDBACK_MS, parent=None):
        super().__init__(parent)
        self.feedback_ms = feedback_ms
        self.copied = False
        self.revealed = False
        self.logger = app_logger.getChild('Clipboard')

        self._reset_timer = QTimer(self)
        self._reset_timer.setSingleShot(True)
        self._reset_timer.timeout.connect(self._reset_copied)

    def on_copy(self, code: str) -> None:
        QApplication.clipboard().setText(code.replace(" ", ""))
        self.copied = True
        self.copied_changed.emit(True)
        # Relancé à chaque copie
        self._reset_timer.start(self.feedback_ms)
        self.logger.debug("Code copied to clipboard")

    def on_reveal(self, toggle: bool) -> None:
        self.revealed = bool(toggle)
        self.reveal_changed.emit(self.revealed)

    def _reset_copied(self):
        self.copied = False
        self.copied_changed.emit(False)


# QObject a sa propre métaclasse : on enregistre la classe comme implémentation du contrat
PresentationBridge.register(ClipboardBridge)
