# totp_ui/enroll_widget.py
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QComboBox,
    QPushButton, QSpinBox, QMessageBox, QToolButton
)
from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QValidator

from totp_engine import base32_codec, config
from totp_engine.errors import OTPError
from totp_engine.logger import app_logger
from totp_engine.otp_model import ItemKind, TimeStepConfig, VaultItem, parse_otpauth

SEED_LENGTH_LIMITS = {
    "SHA1": {"min_recommended": 20, "min_accepted": 1, "max": 64},
    "SHA256": {"min_recommended": 32, "min_accepted": 1, "max": 64},
    "SHA512": {"min_recommended": 64, "min_accepted": 1, "max": 128}
}


class EnrollWidget(QWidget):
    item_created = pyqtSignal(object)  # VaultItem
    cancel_requested = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle(_("Enroll OTP secret"))
        self.setMinimumWidth(400)
        self.logger = app_logger.getChild('Enroll')

        enroll_view_layout = QVBoxLayout(self)
        enroll_view_layout.setContentsMargins(0, 0, 0, 0)
        enroll_view_layout.setSpacing(0)

        # --- En-tête
        page_header_widget = QWidget()
        page_header_widget.setObjectName("enrollHeader")
        page_header_layout = QHBoxLayout(page_header_widget)
        back = QPushButton("←")
        back.setObjectName("returnButton")
        back.setFlat(True)
        back.clicked.connect(self.cancel_requested.emit)
        page_header_layout.addWidget(back, 0, Qt.AlignmentFlag.AlignLeft)
        page_header_layout.addStretch()
        title = QLabel(_("Add OTP Account"))
        title.setObjectName("enrollTitle")
        page_header_layout.addWidget(title)
        page_header_layout.addStretch()
        page_header_layout.addSpacing(back.sizeHint().width())
        enroll_view_layout.addWidget(page_header_widget)

        content_widget = QWidget()
        content_widget.setObjectName("enrollPanel")
        content_layout = QVBoxLayout(content_widget)
        content_layout.setContentsMargins(10, 10, 10, 10)
        content_layout.setSpacing(20)
        enroll_view_layout.addWidget(content_widget)

        no_colon_validator = NoColonValidator()

        # === URI otpauth collée (remplit tout le formulaire) ===
        self.uri_edit = QLineEdit()
        self.uri_edit.setObjectName("uriEdit")
        self.uri_edit.setPlaceholderText("otpauth://totp/Issuer:account?secret=...")
        self.uri_edit.textChanged.connect(self._uri_changed)
        content_layout.addWidget(self._section(_("otpauth URI :"), self.uri_edit))

        # === Issuer du compte ===
        self.issuer_edit = QLineEdit()
        self.issuer_edit.setPlaceholderText("Google, GitHub, etc.")
        self.issuer_edit.setValidator(no_colon_validator)
        self.issuer_edit.setToolTip(_("Issuer name should not contain ':'"))
        self.issuer_edit.setMaxLength(24)
        content_layout.addWidget(self._section(_("Issuer :"), self.issuer_edit))

        # === Nom du compte ===
        self.account_edit = QLineEdit()
        self.account_edit.setPlaceholderText(_("user@example.com"))
        self.account_edit.setValidator(no_colon_validator)
        self.account_edit.textChanged.connect(self._validate_form)
        self.account_edit.setMaxLength(32)
        self.account_edit.setToolTip(_("Account name should not contain ':'"))
        content_layout.addWidget(self._section(_("Account name <span style='color:red'>*</span> :"), self.account_edit))

        # === Secret (seed) ===
        seed_row = QWidget()
        seed_row_layout = QHBoxLayout(seed_row)
        seed_row_layout.setContentsMargins(0, 0, 0, 0)
        self.seed_edit = QLineEdit()
        self.seed_edit.setPlaceholderText("JBSWY3DPEHPK3PXP...")
        self.seed_edit.textChanged.connect(self._validate_form)
        seed_row_layout.addWidget(self.seed_edit)
        gen_btn = QPushButton(_("Generate"))
        gen_btn.setToolTip(_("Generate a random seed"))
        gen_btn.setObjectName("randomSeedBtn")
        gen_btn.clicked.connect(self._generate_seed)
        seed_row_layout.addWidget(gen_btn)
        content_layout.addWidget(self._section(_("Secret key (Base32) <span style='color:red'>*</span> :"), seed_row))

        # === Bouton pour afficher/masquer les paramètres ===
        self.show_params_btn = QToolButton()
        self.show_params_btn.setText(_("Advanced options"))
        self.show_params_btn.setObjectName("advancedOptionsBtn")
        self.show_params_btn.setCheckable(True)
        self.show_params_btn.setArrowType(Qt.ArrowType.DownArrow)
        self.show_params_btn.setToolButtonStyle(Qt.ToolButtonStyle.ToolButtonTextBesideIcon)
        self.show_params_btn.clicked.connect(self._toggle_parameters_visibility)
        content_layout.addWidget(self.show_params_btn, alignment=Qt.AlignmentFlag.AlignLeft)

        self.parameters_panel = QWidget()
        self.parameters_panel.setObjectName("parametersPanel")
        self.parameters_panel.hide()
        params_layout = QHBoxLayout(self.parameters_panel)
        params_layout.setSpacing(15)

        # Type d'item : seuls les items OTP acceptent des paramètres non standards
        self.kind_combo = QComboBox()
        self.kind_combo.addItem("OTP", ItemKind.OTP)
        self.kind_combo.addItem("Login", ItemKind.LOGIN)
        self.kind_combo.currentIndexChanged.connect(self._update_kind)
        params_layout.addWidget(self._section(_("Type"), self.kind_combo))

        self.algo_combo = QComboBox()
        self.algo_combo.addItems(list(config.SUPPORTED_ALGORITHMS))
        self.algo_combo.currentTextChanged.connect(self._validate_form)
        params_layout.addWidget(self._section(_("Algorithm"), self.algo_combo))

        self.digits_spin = QSpinBox()
        self.digits_spin.setRange(*config.ITEM_DIGITS_RANGE)
        self.digits_spin.setValue(config.DEFAULT_DIGITS)
        params_layout.addWidget(self._section(_("Digits"), self.digits_spin))

        self.period_combo = QComboBox()
        self.period_combo.addItems(["30", "60"])
        params_layout.addWidget(self._section(_("Timestep (s)"), self.period_combo))

        content_layout.addWidget(self.parameters_panel)

        # === Bouton Enroller ===
        self.enroll_btn = QPushButton(_("Add account"))
        self.enroll_btn.setObjectName("enrollBtn")
        self.enroll_btn.clicked.connect(self._enroll)
        content_layout.addWidget(self.enroll_btn)

        content_layout.addStretch()

        self._validate_form()

    @staticmethod
    def _section(title, widget):
        section = QWidget()
        layout = QVBoxLayout(section)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(4)
        label = QLabel(title)
        label.setWordWrap(True)
        layout.addWidget(label)
        layout.addWidget(widget)
        return section

    def reset(self):
        self.uri_edit.clear()
        self.seed_edit.clear()
        self.issuer_edit.clear()
        self.account_edit.clear()
        self.kind_combo.setCurrentIndex(0)
        self.algo_combo.setCurrentIndex(0)
        self.period_combo.setCurrentIndex(0)
        self.digits_spin.setValue(config.DEFAULT_DIGITS)
        self.parameters_panel.hide()
        self.show_params_btn.setChecked(False)
        self.show_params_btn.setArrowType(Qt.ArrowType.DownArrow)
        self._validate_form()

    def showEvent(self, event):
        super().showEvent(event)
        self.reset()

    def _uri_changed(self, text):
        # Une URI collée remplace la saisie manuelle
        self._set_manual_fields_enabled(not text.strip())
        self._validate_form()

    def _set_manual_fields_enabled(self, enabled: bool):
        for widget in (self.issuer_edit, self.account_edit, self.seed_edit,
                       self.algo_combo, self.digits_spin, self.period_combo):
            widget.setEnabled(enabled)
        if enabled:
            self._update_kind()

    def _update_kind(self):
        allows = self.kind_combo.currentData().allows_overrides
        for widget in (self.algo_combo, self.digits_spin, self.period_combo):
            widget.setEnabled(allows)
        if not allows:
            self.algo_combo.setCurrentText(config.DEFAULT_ALGORITHM)
            self.digits_spin.setValue(config.DEFAULT_DIGITS)
            self.period_combo.setCurrentText(str(config.DEFAULT_PERIOD))
        self._validate_form()

    def _validate_form(self):
        """Valide le formulaire et active/désactive le bouton d'enrollment"""
        is_valid = True
        tooltip_msg = ""

        uri = self.uri_edit.text().strip()
        if uri:
            try:
                parse_otpauth(uri, self.kind_combo.currentData())
            except OTPError as e:
                is_valid = False
                tooltip_msg = _("Invalid otpauth URI: {error}").format(error=str(e))
        elif not self.account_edit.text().strip():
            is_valid = False
            tooltip_msg = _("Account name is required")
        elif not self.seed_edit.text().strip():
            is_valid = False
            tooltip_msg = _("Secret key is required")
        else:
            secret_bytes = base32_codec.decode(self.seed_edit.text())
            length_valid, length_error = EnrollWidget.validate_seed_length(
                secret_bytes, self.algo_combo.currentText())
            if not length_valid:
                is_valid = False
                tooltip_msg = _("Invalid seed length: {length_error}").format(length_error=length_error)

        self.enroll_btn.setEnabled(is_valid)
        self.enroll_btn.setToolTip(tooltip_msg if not is_valid else "")
        return is_valid

    def _toggle_parameters_visibility(self):
        if self.parameters_panel.isHidden():
            self.parameters_panel.show()
            self.show_params_btn.setArrowType(Qt.ArrowType.UpArrow)
        else:
            self.parameters_panel.hide()
            self.show_params_btn.setArrowType(Qt.ArrowType.DownArrow)

    def _generate_seed(self):
        length = {"SHA1": 20, "SHA256": 32, "SHA512": 64}
        algo = self.algo_combo.currentText()
        self.seed_edit.setText(base32_codec.generate_secret(length.get(algo, 20)))
        self._validate_form()

    @staticmethod
    def validate_seed_length(secret_bytes: bytes, algo: str) -> tuple[bool, str]:
        """
        Valide la longueur de la graine selon l'algorithme

        Returns:
            tuple: (is_valid, error_message)
        """
        if algo not in SEED_LENGTH_LIMITS:
            return False, _("Unknown algorithm: {algo}").format(algo=algo)

        limits = SEED_LENGTH_LIMITS[algo]
        length = len(secret_bytes)

        if length < limits["min_accepted"]:
            return False, _("Secret key too short for {algo}: {length} bytes (minimum: {min_accepted})").format(
                algo=algo,
                length=length,
                min_accepted=limits['min_accepted']
            )

        if length > limits["max"]:
            return False, _("Secret key too long for {algo}: {length} bytes (maximum: {max})").format(
                algo=algo,
                length=length,
                max=limits["max"]
            )

        return True, ""

    def build_item(self) -> VaultItem:
        kind = self.kind_combo.currentData()
        uri = self.uri_edit.text().strip()
        if uri:
            return parse_otpauth(uri, kind)

        account_name = self.account_edit.text().strip()
        issuer_name = self.issuer_edit.text().strip()
        return VaultItem(
            name=issuer_name or account_name,
            secret=base32_codec.clean(self.seed_edit.text()),
            kind=kind,
            issuer=issuer_name,
            account=account_name,
            config=TimeStepConfig(
                digits=self.digits_spin.value(),
                period=int(self.period_combo.currentText()),
                algorithm=self.algo_combo.currentText(),
            ),
        )

    def _enroll(self):
        if not self._validate_form():
            QMessageBox.warning(self, _("Error"), self.enroll_btn.toolTip())
            return
        try:
            item = self.build_item()
        except OTPError as e:
            self.logger.warning(f"Enrollment rejected: {e}")
            QMessageBox.warning(self, _("Error"), str(e))
            return
        self.logger.info(f"Account '{item.label}' added")
        self.item_created.emit(item)


class NoColonValidator(QValidator):
    def validate(self, input_str, pos):
        if ':' in input_str:
            return (QValidator.State.Invalid, input_str, pos)
        return (QValidator.State.Acceptable, input_str, pos)
