# totp_engine/qt_tick_source.py
# Source de ticks pilotée par un QTimer dans la boucle d'événements Qt

import time

from PyQt6.QtCore import QTimer, Qt

from totp_engine import config
from totp_engine.tick_source import TickSource


class QtTickSource(TickSource):
    def __init__(self, interval=None, clock=time.time, parent=None):
        super().__init__(clock)
        self.interval = interval if interval is not None else config.tick_interval_ms()
        self.parent = parent
        self.timer = None

    @property
    def active(self) -> bool:
        return self.timer is not None and self.timer.isActive()

    def _start_timer(self):
        # Créé à la demande, dans le thread qui l'utilise
        if self.timer is None:
            self.timer = QTimer(self.parent)
            self.timer.setInterval(self.interval)
            self.timer.setTimerType(Qt.TimerType.PreciseTimer)
            self.timer.timeout.connect(self.tick)
        if not self.timer.isActive():
            self.timer.start()

    def _stop_timer(self):
        if self.timer and self.timer.isActive():
            self.timer.stop()

    def cleanup(self):
        """Arrêt + destruction du timer, plus aucun tick ensuite"""
        self._subscribers.clear()
        if self.timer:
            if self.timer.isActive():
                self.timer.stop()
            self.timer.deleteLater()
            self.timer = None
