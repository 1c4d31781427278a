"""
Prayer times from solar position (hour-angle method).
Fajr/Isha: sun at the method's depression angle. Asr: shadow = factor × object + noon shadow.
Dhuhr: solar transit. Maghrib: sunset. Imsak: 10 minutes before Fajr.
All instants are UTC; format_schedule renders them as local HH:MM strings.
"""

import logging
import math
from datetime import date, datetime, timedelta, timezone
from functools import lru_cache
from typing import TypedDict

from models import (
    CalculationMethod,
    GeoCoordinate,
    HighLatitudeRule,
    PrayerSchedule,
    SolarDay,
)
from solar_position import asr_hour_angle, compute_solar_day, hour_angle

logger = logging.getLogger(__name__)

IMSAK_OFFSET = timedelta(minutes=10)

# Highest latitude at which the sun rises and sets on every day of the year
# (65.7° = 90 - 23.44 obliquity - 0.833 horizon altitude)
REFERENCE_LATITUDE_LIMIT = 65.0


class PrayerTimesResult(TypedDict):
    imsak: str
    fajr: str
    sunrise: str
    dhuhr: str
    asr: str
    maghrib: str
    isha: str
    midnight: str
    last_third: str


def _normalize_hour_24(hours: float) -> float:
    """Normalize hour to [0, 24)."""
    h = hours % 24.0
    return h if h >= 0 else h + 24.0


def _decimal_hour_to_hhmm(h: float) -> str:
    """Convert decimal hours (0–24) to 'HH:MM' 24h format."""
    h = _normalize_hour_24(h)
    hour = int(math.floor(h))
    minute = int(round((h - hour) * 60))
    if minute >= 60:
        minute = 0
        hour += 1
    if hour >= 24:
        hour = 0
    return f"{hour:02d}:{minute:02d}"


def _to_hhmm(instant: datetime, utc_offset_minutes: float) -> str:
    """UTC instant as local 'HH:MM' for a fixed offset (minutes east of UTC, e.g. 360 for UTC+6)."""
    local = instant.astimezone(timezone.utc) + timedelta(minutes=utc_offset_minutes)
    decimal_hour = local.hour + local.minute / 60.0 + (local.second + local.microsecond / 1e6) / 3600.0
    return _decimal_hour_to_hhmm(decimal_hour)


def _hours(omega_deg: float) -> timedelta:
    """Time from transit for an hour angle: 15 degrees per hour."""
    return timedelta(hours=omega_deg / 15.0)


def _reference_coordinate(coord: GeoCoordinate) -> GeoCoordinate:
    """Nearest coordinate (same hemisphere and meridian) with a daily sunrise and sunset."""
    return GeoCoordinate(
        latitude=math.copysign(REFERENCE_LATITUDE_LIMIT, coord.latitude),
        longitude=coord.longitude,
    )


def _solar_days(day: date, coord: GeoCoordinate) -> tuple[SolarDay, SolarDay, GeoCoordinate]:
    """Today's and tomorrow's solar days, moved to the reference latitude if either is polar."""
    today = compute_solar_day(day, coord)
    tomorrow = compute_solar_day(day + timedelta(days=1), coord)
    if not (today.is_polar or tomorrow.is_polar):
        return today, tomorrow, coord

    reference = _reference_coordinate(coord)
    logger.debug(
        "No sunrise/sunset at %s on %s (%s), using latitude %.1f",
        coord, day, (today.polar or tomorrow.polar).value, reference.latitude,
    )
    return (
        compute_solar_day(day, reference),
        compute_solar_day(day + timedelta(days=1), reference),
        reference,
    )


def _bounded_fajr(
    angle_time: datetime | None,
    safe_time: datetime,
    rule: HighLatitudeRule,
) -> tuple[datetime, bool]:
    if angle_time is None:
        return safe_time, True
    if rule != HighLatitudeRule.NONE and angle_time < safe_time:
        return safe_time, True
    return angle_time, False


def _bounded_isha(
    angle_time: datetime | None,
    safe_time: datetime,
    rule: HighLatitudeRule,
) -> tuple[datetime, bool]:
    if angle_time is None:
        return safe_time, True
    if rule != HighLatitudeRule.NONE and angle_time > safe_time:
        return safe_time, True
    return angle_time, False


@lru_cache(maxsize=1024)
def _compute(day: date, coord: GeoCoordinate, method: CalculationMethod) -> PrayerSchedule:
    today, tomorrow, observer = _solar_days(day, coord)
    adjusted = observer is not coord

    lat = observer.latitude
    decl = today.declination
    dhuhr = today.transit
    sunrise = today.sunrise
    sunset = today.sunset
    night = tomorrow.sunrise - sunset

    # NONE only uses its (middle of the night) portion when the angle is never reached
    fajr_portion, isha_portion = method.night_portions()

    # Fajr: sun at fajr_angle below the horizon, before transit
    omega_fajr = hour_angle(lat, decl, -method.fajr_angle)
    fajr, fajr_bounded = _bounded_fajr(
        dhuhr - _hours(omega_fajr) if omega_fajr is not None else None,
        sunrise - night * fajr_portion,
        method.high_latitude_rule,
    )

    # Isha: fixed interval after Maghrib, or sun at isha_angle below the horizon
    if method.isha_interval is not None:
        isha, isha_bounded = sunset + timedelta(minutes=method.isha_interval), False
    else:
        omega_isha = hour_angle(lat, decl, -method.isha_angle)
        isha, isha_bounded = _bounded_isha(
            dhuhr + _hours(omega_isha) if omega_isha is not None else None,
            sunset + night * isha_portion,
            method.high_latitude_rule,
        )

    omega_asr = asr_hour_angle(lat, decl, int(method.asr_shadow))
    if omega_asr is None:
        # Sun barely clears the horizon: no shadow ratio is reached
        asr = dhuhr + (sunset - dhuhr) / 2
        adjusted = True
    else:
        asr = dhuhr + _hours(omega_asr)

    if fajr_bounded or isha_bounded:
        logger.debug(
            "High-latitude rule %s applied at %s on %s (fajr=%s, isha=%s)",
            method.high_latitude_rule.value, coord, day, fajr_bounded, isha_bounded,
        )

    return PrayerSchedule(
        date=day,
        fajr=fajr,
        sunrise=sunrise,
        dhuhr=dhuhr,
        asr=asr,
        maghrib=sunset,
        isha=isha,
        imsak=fajr - IMSAK_OFFSET,
        midnight=sunset + night / 2,
        last_third=sunset + night * 2 / 3,
        high_latitude_adjusted=adjusted or fajr_bounded or isha_bounded,
    )


def compute_prayer_times(
    day: date,
    coord: GeoCoordinate,
    method: CalculationMethod,
) -> PrayerSchedule:
    """
    Prayer schedule for one calendar date.
    Results are cached per (date, coordinate, method); the function is pure, so repeated
    calls return identical instants. Never fails for a valid coordinate: where the sun does
    not reach the twilight angle (or does not rise/set), the method's high-latitude rule
    and the reference latitude supply the missing times.
    """
    if isinstance(day, datetime):
        day = day.date()
    return _compute(day, coord, method)


def format_schedule(schedule: PrayerSchedule, utc_offset_minutes: float = 0) -> PrayerTimesResult:
    """
    Render a schedule as local 'HH:MM' strings.
    utc_offset_minutes: minutes east of UTC (e.g. 360 for Asia/Dhaka, 180 for Turkey).
    """
    return PrayerTimesResult(
        imsak=_to_hhmm(schedule.imsak, utc_offset_minutes),
        fajr=_to_hhmm(schedule.fajr, utc_offset_minutes),
        sunrise=_to_hhmm(schedule.sunrise, utc_offset_minutes),
        dhuhr=_to_hhmm(schedule.dhuhr, utc_offset_minutes),
        asr=_to_hhmm(schedule.asr, utc_offset_minutes),
        maghrib=_to_hhmm(schedule.maghrib, utc_offset_minutes),
        isha=_to_hhmm(schedule.isha, utc_offset_minutes),
        midnight=_to_hhmm(schedule.midnight, utc_offset_minutes),
        last_third=_to_hhmm(schedule.last_third, utc_offset_minutes),
    )
