"""Per-day prayer schedules over a date range (the 30-day Ramadan table)."""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator

from models import CalculationMethod, GeoCoordinate, PrayerSchedule
from prayer_times import compute_prayer_times

RAMADAN_2026_START = date(2026, 2, 18)
RAMADAN_DAYS = 30


@dataclass(frozen=True)
class CalendarDay:
    index: int  # 1-based day of the range
    date: date
    schedule: PrayerSchedule


class CalendarProjection:
    """
    Lazy, restartable sequence of CalendarDay. Every iteration starts again from
    `start`; each element is an independent compute_prayer_times call.
    """

    def __init__(self, start: date, days: int, coord: GeoCoordinate, method: CalculationMethod):
        if days < 1:
            raise ValueError(f"days must be >= 1, got {days}")
        self.start = start
        self.days = days
        self.coord = coord
        self.method = method

    def __len__(self) -> int:
        return self.days

    def __iter__(self) -> Iterator[CalendarDay]:
        for i in range(self.days):
            day = self.start + timedelta(days=i)
            yield CalendarDay(
                index=i + 1,
                date=day,
                schedule=compute_prayer_times(day, self.coord, self.method),
            )


def project_calendar(
    start: date,
    days: int,
    coord: GeoCoordinate,
    method: CalculationMethod,
) -> CalendarProjection:
    return CalendarProjection(start, days, coord, method)
