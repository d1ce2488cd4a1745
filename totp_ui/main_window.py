# totp_ui/main_window.py
from PyQt6.QtWidgets import (
    QWidget, QLabel, QVBoxLayout, QHBoxLayout,
    QScrollArea, QPushButton, QMessageBox, QStackedLayout, QLineEdit
)
from PyQt6.QtCore import Qt

from totp_engine.logger import app_logger
from totp_engine.qt_tick_source import QtTickSource
from totp_ui.enroll_widget import EnrollWidget
from totp_ui.otp_card import OTPCard


class MainWindow(QWidget):
    def __init__(self, items=(), tick_source=None):
        super().__init__()
        self.setWindowTitle("NoroOTP")
        self.setFixedSize(400, 650)
        self.logger = app_logger.getChild('MainWindow')

        # Une seule source de ticks : toutes les cartes lisent la même heure à chaque cycle
        self.tick_source = tick_source or QtTickSource(parent=self)
        self.generator_widgets = {}

        self.stack = QStackedLayout()
        main_layout = QVBoxLayout(self)
        main_layout.addLayout(self.stack)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)

        self.main_view = QWidget(self)
        main_view_layout = QVBoxLayout(self.main_view)
        main_view_layout.setContentsMargins(0, 0, 0, 0)
        main_view_layout.setSpacing(0)
        self.stack.addWidget(self.main_view)

        # bouton enrol et searchbar
        enrol_search_widget = QWidget()
        enrol_search_widget.setObjectName("enrolSeach")
        enrol_search_layout = QHBoxLayout(enrol_search_widget)
        enrol_button = QPushButton("+")
        enrol_button.setObjectName("enrolPageButton")
        enrol_button.setToolTip(_("Add OTP Account"))
        enrol_button.clicked.connect(self.switch_to_enroll_view)
        self.search_bar = QLineEdit()
        self.search_bar.setObjectName("searchBar")
        self.search_bar.setPlaceholderText(_("Search for a code..."))
        self.search_bar.setClearButtonEnabled(True)
        self.search_bar.textChanged.connect(self.on_search_text_changed)
        self.search_bar.setMinimumWidth(250)
        enrol_search_layout.addWidget(enrol_button, alignment=Qt.AlignmentFlag.AlignLeft)
        enrol_search_layout.addStretch()
        enrol_search_layout.addWidget(self.search_bar)
        enrol_search_layout.addStretch()
        main_view_layout.addWidget(enrol_search_widget)

        # Message quand la liste est vide
        self.status_label = QLabel(_("No OTP account yet."))
        self.status_label.setObjectName("statusLabel")
        main_view_layout.addWidget(self.status_label)

        # OTP list area
        scroll_area = QScrollArea()
        scroll_area.setWidgetResizable(True)
        self.otp_list_widget = QWidget()
        self.otp_list_widget.setObjectName("listArea")
        self.otp_list_layout = QVBoxLayout(self.otp_list_widget)
        self.otp_list_layout.setAlignment(Qt.AlignmentFlag.AlignTop)
        self.otp_list_layout.setSpacing(10)  # espacement entre les cartes
        scroll_area.setWidget(self.otp_list_widget)
        main_view_layout.addWidget(scroll_area, stretch=1)

        # === Vue d'enrôlement ===
        self.enroll_widget = EnrollWidget(self)
        self.enroll_widget.item_created.connect(self.on_item_created)
        self.enroll_widget.cancel_requested.connect(self.switch_to_main_view)
        self.stack.addWidget(self.enroll_widget)

        for item in items:
            self.add_item(item)

    def add_item(self, item):
        label = item.label
        if label in self.generator_widgets:
            QMessageBox.warning(self, _("Error"), _("A generator with this name already exists"))
            return None
        card = OTPCard(item, self.tick_source)
        card.delete_requested.connect(self.confirm_delete)
        card.parameters_requested.connect(self.on_parameters_requested)
        self.otp_list_layout.addWidget(card)
        self.generator_widgets[label] = card
        self.status_label.hide()
        return card

    def remove_item(self, label):
        card = self.generator_widgets.pop(label, None)
        if card is None:
            return
        # Plus aucun tick pour cette carte
        card.stop()
        card.setParent(None)
        card.deleteLater()
        self.status_label.setVisible(not self.generator_widgets)
        self.logger.info(f"Account '{label}' removed")

    def on_search_text_changed(self, text):
        for label, card in self.generator_widgets.items():
            card.setVisible(text.lower() in label.lower())

    def switch_to_enroll_view(self):
        self.stack.setCurrentWidget(self.enroll_widget)

    def switch_to_main_view(self):
        self.stack.setCurrentWidget(self.main_view)

    def on_item_created(self, item):
        if self.add_item(item) is not None:
            self.switch_to_main_view()

    def on_parameters_requested(self, label):
        card = self.generator_widgets.get(label)
        if card:
            card.show_parameters()

    def confirm_delete(self, label):
        """Confirmation et suppression d'un générateur"""
        card = self.generator_widgets.get(label)
        if card is None:
            return
        account = card.item.account or card.item.name
        reply = QMessageBox.question(
            self,
            _("Delete {account}").format(account=account),
            _("Are you sure you want to delete the OTP generator '{account}'?").format(account=account),
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No
        )
        if reply == QMessageBox.StandardButton.Yes:
            self.remove_item(label)

    def closeEvent(self, event):
        """Nettoyage à la fermeture"""
        for card in self.generator_widgets.values():
            card.stop()
        if isinstance(self.tick_source, QtTickSource):
            self.tick_source.cleanup()
        super().closeEvent(event)
