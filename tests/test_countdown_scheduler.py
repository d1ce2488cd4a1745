import pytest

from rfc_vectors import SECRET_SHA1
from totp_engine.countdown_scheduler import CountdownScheduler, SchedulerState
from totp_engine.errors import InvalidSecret
from totp_engine.otp_model import TimeStepConfig
from totp_engine.tick_source import ManualTickSource, TickSource
from totp_engine.totp import totp

EIGHT_DIGITS = TimeStepConfig(digits=8)


class Recorder:
    def __init__(self):
        self.snapshots = []

    def __call__(self, snapshot):
        self.snapshots.append(snapshot)

    @property
    def remaining(self):
        return [s.remaining for s in self.snapshots]


def make_scheduler(source, config=EIGHT_DIGITS, deriver=totp):
    recorder = Recorder()
    scheduler = CountdownScheduler(source, recorder, config=config, label="test", deriver=deriver)
    return scheduler, recorder


def test_start_publishes_immediately():
    source = ManualTickSource(55)
    scheduler, recorder = make_scheduler(source)
    scheduler.start(SECRET_SHA1)

    assert scheduler.state is SchedulerState.RUNNING
    assert source.running
    assert len(recorder.snapshots) == 1
    snapshot = recorder.snapshots[0]
    assert snapshot.code == "94287082"
    assert snapshot.remaining == 5
    assert snapshot.counter == 1


def test_remaining_counts_down_and_wraps():
    source = ManualTickSource(55)
    scheduler, recorder = make_scheduler(source)
    scheduler.start(SECRET_SHA1)
    source.advance(35)

    assert recorder.remaining == [5, 4, 3, 2, 1] + list(range(30, 0, -1)) + [30]
    # une seule remontée à `period` par fenêtre
    assert recorder.remaining.count(30) == 2


def test_code_recomputed_on_wrap_tick():
    source = ManualTickSource(1111111105)
    scheduler, recorder = make_scheduler(source)
    scheduler.start(SECRET_SHA1)
    source.advance(5)

    before, wrap = recorder.snapshots[-2], recorder.snapshots[-1]
    assert (before.code, before.remaining) == ("07081804", 1)
    assert (wrap.code, wrap.remaining) == ("14050471", 30)
    assert wrap.counter == before.counter + 1


def test_deriver_called_once_per_window():
    calls = []

    def deriver(secret, now, period, digits, algorithm):
        calls.append(now)
        return totp(secret, now, period, digits, algorithm)

    source = ManualTickSource(50)
    scheduler, recorder = make_scheduler(source, deriver=deriver)
    scheduler.start(SECRET_SHA1)
    source.advance(70)

    assert calls == [50, 60, 90, 120]
    assert len(recorder.snapshots) == 71


def test_stop_cancels_ticks():
    source = ManualTickSource(10)
    scheduler, recorder = make_scheduler(source)
    scheduler.start(SECRET_SHA1)
    scheduler.stop()
    source.advance(60)

    assert scheduler.state is SchedulerState.IDLE
    assert scheduler.snapshot is None
    assert source.subscriber_count == 0
    assert not source.running
    assert len(recorder.snapshots) == 1


def test_invalid_secret_stays_idle():
    source = ManualTickSource(10)
    scheduler, recorder = make_scheduler(source)
    with pytest.raises(InvalidSecret):
        scheduler.start("!!!")

    assert scheduler.state is SchedulerState.IDLE
    assert source.subscriber_count == 0
    assert recorder.snapshots == []


def test_set_secret_drives_state():
    source = ManualTickSource(10)
    scheduler, recorder = make_scheduler(source)
    scheduler.set_secret(SECRET_SHA1)
    assert scheduler.running
    scheduler.set_secret("")
    assert not scheduler.running
    assert source.subscriber_count == 0


def test_restart_keeps_single_subscription():
    source = ManualTickSource(10)
    scheduler, recorder = make_scheduler(source)
    scheduler.start(SECRET_SHA1)
    scheduler.start("JBSWY3DPEHPK3PXP")
    source.advance(1)

    assert source.subscriber_count == 1
    assert recorder.snapshots[-1].code == totp("JBSWY3DPEHPK3PXP", 11, digits=8)


def test_custom_period():
    source = ManualTickSource(118)
    scheduler, recorder = make_scheduler(source, config=TimeStepConfig(digits=6, period=60))
    scheduler.start(SECRET_SHA1)
    source.advance(2)

    assert recorder.remaining == [2, 1, 60]
    assert recorder.snapshots[-1].code == totp(SECRET_SHA1, 120, period=60)


class CountingSource(TickSource):
    def __init__(self):
        self.reads = 0
        super().__init__(clock=self._read)

    def _read(self):
        self.reads += 1
        return 1000.0 + self.reads

    def _start_timer(self):
        pass

    def _stop_timer(self):
        pass


def test_instances_share_one_clock_read_per_tick():
    source = CountingSource()
    first, first_rec = make_scheduler(source)
    second, second_rec = make_scheduler(source, config=TimeStepConfig(period=60))
    first.start(SECRET_SHA1)
    second.start(SECRET_SHA1)
    reads_before = source.reads

    source.tick()

    assert source.reads == reads_before + 1
    now = 1000.0 + source.reads
    assert first_rec.snapshots[-1].remaining == 30 - int(now) % 30
    assert second_rec.snapshots[-1].remaining == 60 - int(now) % 60


def test_unsubscribe_during_tick():
    source = ManualTickSource(10)
    other, other_rec = make_scheduler(source)

    def stop_other(snapshot):
        if snapshot.remaining == 19:
            other.stop()

    first = CountdownScheduler(source, stop_other, config=EIGHT_DIGITS)
    first.start(SECRET_SHA1)
    other.start(SECRET_SHA1)
    source.advance(3)

    assert not other.running
    assert first.running
    assert other_rec.remaining == [20]


def test_tick_source_requires_timer_hooks():
    with pytest.raises(TypeError):
        TickSource()

    class NoStop(TickSource):
        def _start_timer(self):
            pass

    with pytest.raises(TypeError):
        NoStop()
