"""
Next Sehri-end / Iftar boundary, countdown, and the single-fire adhan trigger.

evaluate() keeps no state: it is recomputed from the current instant on every tick.
The only state is EventTrigger's last fired event identity.
"""

import logging
import math
import threading
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Callable

from models import CalculationMethod, Countdown, EventKind, GeoCoordinate, NextEvent
from prayer_times import compute_prayer_times

logger = logging.getLogger(__name__)


def _require_aware(now: datetime) -> datetime:
    if now.tzinfo is None or now.utcoffset() is None:
        raise ValueError("now must be timezone-aware")
    return now.astimezone(timezone.utc)


def local_mean_date(now: datetime, coord: GeoCoordinate) -> date:
    """Calendar date of `now` in mean solar time at the coordinate's longitude."""
    return (_require_aware(now) + timedelta(hours=coord.longitude / 15.0)).date()


def evaluate(now: datetime, coord: GeoCoordinate, method: CalculationMethod) -> NextEvent:
    """
    The next event after `now`:
    before today's imsak -> Sehri ends at imsak; before today's maghrib -> Iftar at maghrib;
    otherwise -> Sehri ends at tomorrow's imsak. A boundary instant belongs to the next branch.
    """
    now = _require_aware(now)
    today = local_mean_date(now, coord)
    schedule = compute_prayer_times(today, coord, method)

    if now < schedule.imsak:
        return NextEvent(kind=EventKind.SEHRI_ENDS, at=schedule.imsak)
    if now < schedule.maghrib:
        return NextEvent(kind=EventKind.IFTAR, at=schedule.maghrib)

    tomorrow = compute_prayer_times(today + timedelta(days=1), coord, method)
    return NextEvent(kind=EventKind.SEHRI_ENDS, at=tomorrow.imsak)


def remaining_seconds(now: datetime, event: NextEvent) -> int:
    """Whole seconds until the event, clamped at 0."""
    delta = (event.at - _require_aware(now)).total_seconds()
    return max(0, math.floor(delta))


def countdown(now: datetime, event: NextEvent) -> Countdown:
    return Countdown(remaining_seconds=remaining_seconds(now, event))


# A boundary passed between two ticks still fires if it is at most this old
LATE_FIRE_WINDOW = timedelta(seconds=5)


@dataclass(frozen=True)
class Tick:
    event: NextEvent
    countdown: Countdown
    fired: NextEvent | None = None


class EventTrigger:
    """
    Fires once per event identity (kind, at) when its countdown reaches zero.

    The countdown reads zero only during the last second before the event. A tick
    period slightly over one second can step over that second, so a tick that finds
    the previously seen event already passed (by at most LATE_FIRE_WINDOW) and not
    yet fired fires it then. The identity of the last fired event is guarded by a lock,
    since two unsynchronised ticks could otherwise both fire the same event. A new
    identity (after the boundary passes or the day rolls over) re-arms the trigger.
    on_fire receives the event kind and is only called while adhan_enabled is true.
    """

    def __init__(
        self,
        coord: GeoCoordinate,
        method: CalculationMethod,
        on_fire: Callable[[EventKind], None] | None = None,
        adhan_enabled: bool = True,
    ):
        self.coord = coord
        self.method = method
        self.on_fire = on_fire
        self.adhan_enabled = adhan_enabled
        self._lock = threading.Lock()
        self._last_fired: NextEvent | None = None
        self._last_seen: NextEvent | None = None

    @property
    def last_fired(self) -> NextEvent | None:
        return self._last_fired

    def tick(self, now: datetime) -> Tick:
        now = _require_aware(now)
        event = evaluate(now, self.coord, self.method)
        remaining = countdown(now, event)

        with self._lock:
            due = None
            late = False
            missed = self._last_seen
            if remaining.is_zero and event != self._last_fired:
                due = event
            elif (
                missed is not None
                and missed != event
                and missed != self._last_fired
                and missed.at <= now <= missed.at + LATE_FIRE_WINDOW
            ):
                due, late = missed, True
            if due is not None:
                self._last_fired = due
            self._last_seen = event

        if due is not None:
            if late:
                logger.info("%s passed between ticks at %s", due.kind.value, due.at.isoformat())
            else:
                logger.info("%s reached at %s", due.kind.value, due.at.isoformat())
            if self.adhan_enabled and self.on_fire is not None:
                self.on_fire(due.kind)
            elif not self.adhan_enabled:
                logger.debug("Adhan disabled, %s not forwarded", due.kind.value)

        return Tick(event=event, countdown=remaining, fired=due)
