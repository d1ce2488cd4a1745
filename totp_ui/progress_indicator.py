# totp_ui/progress_indicator.py
from PyQt6.QtWidgets import QWidget, QSizePolicy
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QPainter, QColor, QBrush


class ProgressIndicator(QWidget):
    def __init__(self, period=30, parent=None):
        super().__init__(parent)
        self.period = period
        self.remaining_seconds = period
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Fixed)
        self.setFixedHeight(12)
        self.setMaximumWidth(300)
        self.setMinimumWidth(100)

    def set_remaining(self, remaining: int):
        """Le scheduler fournit les secondes restantes, on redessine"""
        self.remaining_seconds = remaining
        self.setToolTip(_("{seconds} s remaining").format(seconds=remaining))
        self.update()

    @property
    def fill_ratio(self) -> float:
        return max(0.0, min(1.0, self.remaining_seconds / self.period))

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        w = self.width()
        h = self.height()
        r = h / 2

        bg_brush = QBrush(QColor("#c3e9fc"))
        # Rouge sur les 5 dernières secondes
        fill_brush = QBrush(QColor("#e4705a" if self.remaining_seconds <= 5 else "#52c5e4"))

        # Arrière-plan
        painter.setBrush(bg_brush)
        painter.setPen(Qt.PenStyle.NoPen)
        painter.drawRoundedRect(0, 0, w, h, r, r)

        # Remplissage progressif
        fill_width = int(w * self.fill_ratio)
        painter.setBrush(fill_brush)
        painter.drawRoundedRect(0, 0, fill_width, h, r, r)

        painter.end()
