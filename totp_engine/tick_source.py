# totp_engine/tick_source.py
# Source de ticks partagée : une seule lecture d'horloge par cycle, distribuée à tous les abonnés

import time
from abc import ABC, abstractmethod
from typing import Callable, Dict

from totp_engine.logger import app_logger

TickCallback = Callable[[float], None]


class TickSource(ABC):
    """
    Base commune des sources de ticks.

    Les sous-classes fournissent le timer (_start_timer/_stop_timer) ;
    le timer tourne seulement tant qu'il y a au moins un abonné.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self.clock = clock
        self._subscribers: Dict[int, TickCallback] = {}
        self._next_handle = 0
        self.logger = app_logger.getChild(type(self).__name__)

    def now(self) -> float:
        return self.clock()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, callback: TickCallback) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._subscribers[handle] = callback
        if len(self._subscribers) == 1:
            self.logger.debug("First subscriber, starting timer")
            self._start_timer()
        return handle

    def unsubscribe(self, handle: int):
        if self._subscribers.pop(handle, None) is None:
            return
        if not self._subscribers:
            self.logger.debug("No subscriber left, stopping timer")
            self._stop_timer()

    def tick(self):
        """Un cycle : lire l'horloge une fois et notifier chaque abonné avec la même valeur"""
        now = self.clock()
        # Copie : un abonné peut se désabonner pendant le tick
        for handle, callback in list(self._subscribers.items()):
            if handle in self._subscribers:
                callback(now)

    @abstractmethod
    def _start_timer(self):
        """Démarre le timer qui appelle tick()"""

    @abstractmethod
    def _stop_timer(self):
        """Arrête le timer ; plus aucun tick ensuite"""


class ManualTickSource(TickSource):
    """Temps virtuel pour les tests : on avance l'horloge à la main, un tick par seconde"""

    def __init__(self, start_time: float = 0.0):
        self.current_time = start_time
        self.running = False
        super().__init__(clock=lambda: self.current_time)

    def advance(self, seconds: int = 1):
        for _step in range(seconds):
            self.current_time += 1
            if self.running:
                self.tick()

    def set_time(self, unix_time: float):
        self.current_time = unix_time

    def _start_timer(self):
        self.running = True

    def _stop_timer(self):
        self.running = False
