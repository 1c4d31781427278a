"""
Console Sehri/Iftar countdown for the configured location.
Ticks once per second and logs when the adhan should start.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Callable

from config import get_settings
from models import EventKind
from next_event import EventTrigger

logger = logging.getLogger(__name__)

LABELS = {EventKind.SEHRI_ENDS: "Sehri ends", EventKind.IFTAR: "Iftar"}


def announce(kind: EventKind) -> None:
    # Playback belongs to the audio player; this only signals it
    logger.info("🕌 %s - start adhan", LABELS[kind])


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def run(
    trigger: EventTrigger,
    ticks: int | None = None,
    interval: float = 1.0,
    clock: Callable[[], datetime] = _utcnow,
    sleep: Callable[[float], None] = time.sleep,
    monotonic: Callable[[], float] = time.monotonic,
) -> None:
    """
    Tick until interrupted, or `ticks` times.
    Ticks are scheduled on the monotonic clock, so time spent in tick() does not
    stretch the period past `interval`.
    """
    count = 0
    next_tick = monotonic()
    while ticks is None or count < ticks:
        state = trigger.tick(clock())
        print(f"\r{LABELS[state.event.kind]:>10} in {state.countdown.hhmmss()}", end="", flush=True)
        count += 1
        next_tick += interval
        delay = next_tick - monotonic()
        if delay < 0:
            # Fell behind by more than a period: skip the missed ticks
            next_tick = monotonic()
            delay = 0.0
        sleep(delay)


def main():
    settings = get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(message)s")
    trigger = EventTrigger(
        settings.default_coordinate(),
        settings.calculation_method(),
        on_fire=announce,
        adhan_enabled=settings.ADHAN_ENABLED,
    )
    logger.info("Countdown for %s (%s)", settings.DEFAULT_CITY, trigger.method.name)
    try:
        run(trigger)
    except KeyboardInterrupt:
        print()


if __name__ == "__main__":
    main()
