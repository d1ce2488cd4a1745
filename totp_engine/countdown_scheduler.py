# totp_engine/countdown_scheduler.py
# Un planificateur par champ OTP affiché : code courant + secondes restantes

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from totp_engine import totp
from totp_engine.logger import app_logger
from totp_engine.otp_model import TimeStepConfig
from totp_engine.tick_source import TickSource


class SchedulerState(Enum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass(frozen=True)
class CountdownSnapshot:
    code: str
    remaining: int
    counter: int
    period: int


class CountdownScheduler:
    """
    Machine à états IDLE -> RUNNING -> IDLE.

    A chaque tick, si la fenêtre a changé, le code est recalculé AVANT le
    nouveau `remaining`, puis les deux sont publiés ensemble au listener :
    le code affiché ne peut pas être en retard sur le compte à rebours.
    """

    def __init__(self, tick_source: TickSource,
                 on_update: Callable[[CountdownSnapshot], None],
                 config: Optional[TimeStepConfig] = None,
                 label: str = "",
                 deriver=totp.totp):
        self.tick_source = tick_source
        self.on_update = on_update
        self.config = config or TimeStepConfig()
        self.label = label
        self.deriver = deriver
        self.state = SchedulerState.IDLE
        self.snapshot: Optional[CountdownSnapshot] = None
        self._secret = None
        self._handle = None
        self.logger = app_logger.getChild('Scheduler')

    @property
    def running(self) -> bool:
        return self.state is SchedulerState.RUNNING

    def start(self, secret: str):
        """Calcule immédiatement code et compte à rebours, puis s'abonne aux ticks"""
        if self.running:
            self.stop()
        self._secret = secret
        try:
            self._publish(self.tick_source.now(), force=True)
        except Exception:
            # Secret ou paramètres invalides : on reste IDLE
            self._secret = None
            self.snapshot = None
            raise
        self.state = SchedulerState.RUNNING
        self._handle = self.tick_source.subscribe(self._on_tick)
        self.logger.debug(f"Started '{self.label}' (period={self.config.period}s)")

    def set_secret(self, secret: Optional[str]):
        """Secret absent -> IDLE, secret présent -> RUNNING"""
        if secret:
            self.start(secret)
        else:
            self.stop()

    def stop(self):
        if self._handle is not None:
            self.tick_source.unsubscribe(self._handle)
            self._handle = None
        if self.running:
            self.logger.debug(f"Stopped '{self.label}'")
        self.state = SchedulerState.IDLE
        self._secret = None
        self.snapshot = None

    def _on_tick(self, now: float):
        if not self.running:
            return
        self._publish(now)

    def _publish(self, now: float, force: bool = False):
        period = self.config.period
        counter = totp.counter_at(now, period)
        if force or self.snapshot is None or counter != self.snapshot.counter:
            # Nouvelle fenêtre : le code d'abord
            code = self.deriver(self._secret, now, period, self.config.digits, self.config.algorithm)
            if not force:
                self.logger.debug(f"New window {counter} for '{self.label}'")
        else:
            code = self.snapshot.code
        self.snapshot = CountdownSnapshot(
            code=code,
            remaining=totp.remaining_seconds(now, period),
            counter=counter,
            period=period,
        )
        self.on_update(self.snapshot)
