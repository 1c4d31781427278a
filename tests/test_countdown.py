"""Tests for the console countdown driver."""

import logging
from datetime import timedelta

import pytest

import countdown
from models import EventKind
from next_event import EventTrigger
from prayer_times import compute_prayer_times


class FakeClock:
    """Wall and monotonic clocks that only advance when the driver sleeps or does work."""

    def __init__(self, start, work=0.0):
        self.start = start
        self.work = work
        self.elapsed = 0.0
        self.readings = []
        self.sleeps = []

    def now(self):
        instant = self.start + timedelta(seconds=self.elapsed)
        self.readings.append(instant)
        # Time spent inside tick()
        self.elapsed += self.work
        return instant

    def monotonic(self):
        return self.elapsed

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.elapsed += seconds


@pytest.fixture
def imsak(dhaka, mwl, ramadan_start):
    return compute_prayer_times(ramadan_start, dhaka, mwl).imsak


def _run(trigger, fake, ticks, interval=1.0):
    countdown.run(
        trigger,
        ticks=ticks,
        interval=interval,
        clock=fake.now,
        sleep=fake.sleep,
        monotonic=fake.monotonic,
    )


class TestAnnounce:

    def test_logs_start_adhan(self, caplog):
        with caplog.at_level(logging.INFO, logger="countdown"):
            countdown.announce(EventKind.IFTAR)
        assert "Iftar - start adhan" in caplog.text

    def test_every_kind_has_a_label(self):
        assert set(countdown.LABELS) == set(EventKind)


class TestRun:

    def test_runs_requested_ticks(self, dhaka, mwl, imsak):
        fake = FakeClock(imsak - timedelta(minutes=10))
        _run(EventTrigger(dhaka, mwl), fake, ticks=4)

        assert len(fake.readings) == 4
        assert len(fake.sleeps) == 4

    def test_prints_label_and_countdown(self, dhaka, mwl, imsak, capsys):
        fake = FakeClock(imsak - timedelta(seconds=5, milliseconds=1))
        _run(EventTrigger(dhaka, mwl), fake, ticks=1)

        assert capsys.readouterr().out == "\rSehri ends in 00:00:05"

    def test_tick_work_does_not_stretch_period(self, dhaka, mwl, imsak):
        """Each tick costs 0.2 ms; the driver sleeps that much less so ticks stay one second apart."""
        fake = FakeClock(imsak - timedelta(seconds=5, milliseconds=1), work=0.0002)
        _run(EventTrigger(dhaka, mwl), fake, ticks=8)

        for previous, current in zip(fake.readings, fake.readings[1:]):
            gap = (current - previous).total_seconds()
            assert gap == pytest.approx(1.0, abs=1e-5), f"Tick period drifted to {gap}"
        assert all(0 <= s <= 1.0 for s in fake.sleeps)

    def test_fires_on_time_despite_tick_work(self, dhaka, mwl, imsak):
        fired = []
        fake = FakeClock(imsak - timedelta(seconds=5, milliseconds=1), work=0.0002)
        trigger = EventTrigger(dhaka, mwl, on_fire=fired.append)

        _run(trigger, fake, ticks=8)

        assert fired == [EventKind.SEHRI_ENDS]
        assert trigger.last_fired.at == imsak

    def test_fires_once_with_period_over_one_second(self, dhaka, mwl, imsak):
        """Even a driver ticking every 1.0002 s, which steps over the zero second, fires the event."""
        fired = []
        fake = FakeClock(imsak - timedelta(microseconds=5_001_000))
        trigger = EventTrigger(dhaka, mwl, on_fire=fired.append)

        _run(trigger, fake, ticks=10, interval=1.0002)

        assert fired == [EventKind.SEHRI_ENDS]

    def test_falling_behind_never_sleeps_negative(self, dhaka, mwl, imsak):
        fake = FakeClock(imsak - timedelta(minutes=10), work=2.5)
        _run(EventTrigger(dhaka, mwl), fake, ticks=3)

        assert fake.sleeps == [0.0, 0.0, 0.0]
