# totp_ui/otp_card.py
from PyQt6.QtWidgets import (
    QFrame, QLabel, QVBoxLayout, QHBoxLayout, QPushButton,
    QMenu, QMessageBox, QWidget
)
from PyQt6.QtGui import QAction
from PyQt6.QtCore import Qt, pyqtSignal

from totp_engine import config
from totp_engine.countdown_scheduler import CountdownScheduler, CountdownSnapshot
from totp_engine.errors import OTPError
from totp_engine.logger import app_logger
from totp_engine.otp_model import ItemKind, VaultItem
from totp_ui.clipboard_bridge import ClipboardBridge
from totp_ui.progress_indicator import ProgressIndicator


class OTPCard(QFrame):
    delete_requested = pyqtSignal(str)
    parameters_requested = pyqtSignal(str)

    def __init__(self, item: VaultItem, tick_source, bridge=None, parent=None):
        super().__init__(parent)
        self.item = item
        self.label_text = item.label
        self.code = None
        self.remaining_seconds = 0
        self.bridge = bridge or ClipboardBridge(parent=self)
        self.logger = app_logger.getChild('OTPCard')

        self.setObjectName("otpCard")

        # === Layout principal ===
        main_layout = QHBoxLayout(self)
        main_layout.setContentsMargins(5, 5, 15, 5)

        # === Partie gauche ===
        left_widget = QWidget()
        left_widget.setFixedWidth(230)
        left_layout = QVBoxLayout(left_widget)

        # Code + copier
        self.label_code = QLabel()
        self.label_code.setObjectName("codeLabel")
        self.label_code.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)

        code_layout = QHBoxLayout()
        code_layout.addWidget(self.label_code)

        self.copy_button = QPushButton(_("Copy"))
        self.copy_button.setFlat(True)
        self.copy_button.setToolTip(_("Copy code to clipboard"))
        self.copy_button.setVisible(False)
        self.copy_button.clicked.connect(self.copy_code)

        self.feedback_label = QLabel(_("Code copied"))
        self.feedback_label.setObjectName("CopiedLabel")
        self.feedback_label.setVisible(False)
        self.bridge.copied_changed.connect(self.feedback_label.setVisible)

        code_layout.addWidget(self.copy_button)
        code_layout.addWidget(self.feedback_label)
        code_layout.addStretch()

        # Labels de compte
        self.issuer_label = QLabel(item.issuer or item.name)
        self.issuer_label.setObjectName("issuer")
        self.issuer_label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)

        self.account_label = QLabel(item.account)
        self.account_label.setObjectName("accountName")
        self.account_label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)

        left_layout.addWidget(self.issuer_label)
        left_layout.addWidget(self.account_label)

        # Mot de passe masqué pour les items login
        self.password_label = None
        if item.kind is ItemKind.LOGIN and item.password:
            password_layout = QHBoxLayout()
            self.password_label = QLabel()
            self.password_label.setObjectName("passwordLabel")
            self.reveal_button = QPushButton(_("Show"))
            self.reveal_button.setFlat(True)
            self.reveal_button.setCheckable(True)
            self.reveal_button.toggled.connect(self.bridge.on_reveal)
            self.bridge.reveal_changed.connect(self._set_password_visible)
            password_layout.addWidget(self.password_label)
            password_layout.addWidget(self.reveal_button)
            password_layout.addStretch()
            left_layout.addLayout(password_layout)
            self._set_password_visible(False)

        left_layout.addLayout(code_layout)

        main_layout.addWidget(left_widget)
        main_layout.addStretch()

        # === Partie droite ===
        right_layout = QVBoxLayout()
        right_layout.setContentsMargins(0, 30, 0, 0)
        right_layout.setSpacing(15)

        self.progress = ProgressIndicator(item.config.period)
        right_layout.addWidget(self.progress, alignment=Qt.AlignmentFlag.AlignRight)

        self.info_button = QPushButton("i")
        self.info_button.setFixedSize(20, 20)
        self.info_button.setFlat(True)
        self.info_button.setToolTip(_("Show OTP parameters"))
        self.info_button.clicked.connect(lambda: self.parameters_requested.emit(self.label_text))

        self.delete_button = QPushButton("✕")
        self.delete_button.setFixedSize(20, 20)
        self.delete_button.setFlat(True)
        self.delete_button.setToolTip(_("Delete OTP account"))
        self.delete_button.clicked.connect(lambda: self.delete_requested.emit(self.label_text))

        bottom_buttons = QHBoxLayout()
        bottom_buttons.setSpacing(6)
        bottom_buttons.addStretch()
        bottom_buttons.addWidget(self.info_button)
        bottom_buttons.addWidget(self.delete_button)
        right_layout.addLayout(bottom_buttons)

        main_layout.addLayout(right_layout)
        main_layout.setAlignment(right_layout, Qt.AlignmentFlag.AlignVCenter)

        # Un scheduler par carte, sur la source de ticks partagée
        self.scheduler = CountdownScheduler(
            tick_source,
            self.on_countdown,
            config=item.config,
            label=self.label_text,
        )
        self.start()

    # --- méthodes utilitaires ---
    @staticmethod
    def format_code(code):
        code = str(code)
        if len(code) == 6:
            return code[:3] + " " + code[3:]
        elif len(code) in (7, 8):
            return code[:4] + " " + code[4:]
        return code

    def start(self):
        try:
            self.scheduler.start(self.item.secret)
        except OTPError as e:
            # Pas de code trompeur : on affiche un masque
            self.logger.warning(f"Cannot compute code for '{self.label_text}': {e}")
            self.set_offline(_("Invalid secret"))

    def stop(self):
        self.scheduler.stop()

    def on_countdown(self, snapshot: CountdownSnapshot):
        # Le code arrive avec le compte à rebours de la même fenêtre
        if snapshot.code != self.code:
            self.set_code(snapshot.code)
        self.remaining_seconds = snapshot.remaining
        self.progress.set_remaining(snapshot.remaining)

    def set_code(self, code: str):
        self.code = code
        self.label_code.setText(self.format_code(code))
        self.copy_button.setVisible(True)

    def copy_code(self):
        if self.code:
            self.bridge.on_copy(self.code)

    def _set_password_visible(self, visible: bool):
        if self.password_label is None:
            return
        self.password_label.setText(self.item.password if visible else config.MASK)
        self.reveal_button.setText(_("Hide") if visible else _("Show"))

    def contextMenuEvent(self, event):
        menu = QMenu(self)
        show_params_action = QAction(_("Show OTP parameters"), self)
        show_params_action.triggered.connect(lambda: self.parameters_requested.emit(self.label_text))

        delete_action = QAction(_("Delete OTP code"), self)
        delete_action.setObjectName("deleteAction")
        delete_action.triggered.connect(lambda: self.delete_requested.emit(self.label_text))

        menu.addAction(show_params_action)
        menu.addSeparator()
        menu.addAction(delete_action)
        menu.exec(event.globalPos())

    def show_parameters(self):
        msg = QMessageBox(self)
        msg.setWindowTitle(_("Parameters"))
        msg.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        msg.setText(self.item.display_parameters())
        msg.setStandardButtons(QMessageBox.StandardButton.Ok)
        msg.exec()

    def set_offline(self, reason: str):
        self.code = None
        self.label_code.setText(config.MASK)
        self.copy_button.setVisible(False)
        self.progress.setVisible(False)
        self.account_label.setText(reason)
        self.setProperty("offline", True)
        self.style().unpolish(self)
        self.style().polish(self)
