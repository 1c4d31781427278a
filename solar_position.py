"""
Low-precision solar ephemeris: declination, equation of time, transit, sunrise and sunset.
Angles are in degrees, instants are UTC. The day is anchored to the location's mean
solar noon (12:00 - longitude/15 h), so no timezone is involved.
"""

import logging
import math
from datetime import date, datetime, timedelta, timezone

from models import GeoCoordinate, PolarCondition, SolarDay

logger = logging.getLogger(__name__)

# Apparent altitude of the sun's upper limb at sunrise/sunset (refraction + semi-diameter)
SUNRISE_SUNSET_ALTITUDE = -0.833

J2000 = 2451545.0
DAYS_PER_CENTURY = 36525.0


def _deg2rad(d: float) -> float:
    return d * math.pi / 180.0


def _rad2deg(r: float) -> float:
    return r * 180.0 / math.pi


def _normalize_angle_360(degrees: float) -> float:
    """Normalize angle to [0, 360)."""
    d = degrees % 360.0
    return d if d >= 0 else d + 360.0


def _julian_date(year: int, month: int, day: int, hour_utc: float = 0.0) -> float:
    """Julian date at given UTC time (default midnight UTC)."""
    if month <= 2:
        year -= 1
        month += 12
    A = math.floor(year / 100)
    B = 2 - A + math.floor(A / 4)
    jd = math.floor(365.25 * (year + 4716)) + math.floor(30.6001 * (month + 1)) + day + B - 1524.5
    jd += hour_utc / 24.0
    return jd


def julian_century(jd: float) -> float:
    return (jd - J2000) / DAYS_PER_CENTURY


def sun_declination_and_equation_of_time(T: float) -> tuple[float, float]:
    """
    Solar declination (degrees) and equation of time (minutes) at Julian century T.
    Mean longitude and anomaly, orbit eccentricity and the equation of centre give the
    apparent ecliptic longitude; the obliquity turns that into declination.
    """
    L0 = _normalize_angle_360(280.46646 + T * (36000.76983 + T * 0.0003032))
    M = 357.52911 + T * (35999.05029 - 0.0001537 * T)
    e = 0.016708634 - T * (0.000042037 + 0.0000001267 * T)

    M_r = _deg2rad(M)
    center = (
        math.sin(M_r) * (1.914602 - T * (0.004817 + 0.000014 * T))
        + math.sin(2 * M_r) * (0.019993 - 0.000101 * T)
        + math.sin(3 * M_r) * 0.000289
    )
    true_longitude = L0 + center
    omega = _deg2rad(125.04 - 1934.136 * T)
    apparent_longitude = true_longitude - 0.00569 - 0.00478 * math.sin(omega)

    seconds = 21.448 - T * (46.815 + T * (0.00059 - T * 0.001813))
    mean_obliquity = 23.0 + (26.0 + seconds / 60.0) / 60.0
    obliquity = mean_obliquity + 0.00256 * math.cos(omega)

    eps_r = _deg2rad(obliquity)
    decl = _rad2deg(math.asin(math.sin(eps_r) * math.sin(_deg2rad(apparent_longitude))))

    y = math.tan(eps_r / 2) ** 2
    L0_r = _deg2rad(L0)
    eq_time = (
        y * math.sin(2 * L0_r)
        - 2 * e * math.sin(M_r)
        + 4 * e * y * math.sin(M_r) * math.cos(2 * L0_r)
        - 0.5 * y * y * math.sin(4 * L0_r)
        - 1.25 * e * e * math.sin(2 * M_r)
    )
    return decl, 4.0 * _rad2deg(eq_time)


def hour_angle(lat_deg: float, decl_deg: float, altitude_deg: float) -> float | None:
    """
    Hour angle (degrees) at which the sun stands at the given altitude.
    altitude_deg is negative below the horizon (-18 for a Fajr angle of 18, -0.833 for sunrise).
    Returns None if the sun never reaches that altitude on this day.
    """
    lat_r = _deg2rad(lat_deg)
    decl_r = _deg2rad(decl_deg)
    denominator = math.cos(lat_r) * math.cos(decl_r)
    if denominator == 0:
        return None
    # sin(altitude) = sin(lat)*sin(decl) + cos(lat)*cos(decl)*cos(omega)
    cos_omega = (math.sin(_deg2rad(altitude_deg)) - math.sin(lat_r) * math.sin(decl_r)) / denominator
    if cos_omega < -1 or cos_omega > 1:
        return None
    return _rad2deg(math.acos(cos_omega))


def asr_altitude(lat_deg: float, decl_deg: float, shadow_factor: int) -> float | None:
    """Sun altitude when an object's shadow is shadow_factor lengths plus its noon shadow."""
    phi_minus_d = abs(lat_deg - decl_deg)
    if phi_minus_d >= 90:
        return None
    tan_alt = 1.0 / (shadow_factor + math.tan(_deg2rad(phi_minus_d)))
    return _rad2deg(math.atan(tan_alt))


def asr_hour_angle(lat_deg: float, decl_deg: float, shadow_factor: int) -> float | None:
    """Hour angle for Asr (1 = standard, 2 = Hanafi)."""
    altitude = asr_altitude(lat_deg, decl_deg, shadow_factor)
    if altitude is None:
        return None
    return hour_angle(lat_deg, decl_deg, altitude)


def transit_hours_utc(lng_deg: float, eqtime_minutes: float) -> float:
    """Solar noon as decimal hours after 00:00 UTC of the date. May fall outside [0, 24)."""
    return 12.0 - lng_deg / 15.0 - eqtime_minutes / 60.0


def compute_solar_day(day: date, coord: GeoCoordinate) -> SolarDay:
    """
    Solar quantities for a calendar date at a coordinate.
    Sunrise/sunset are None (and ``polar`` set) when the sun does not cross the horizon.
    """
    jd = _julian_date(day.year, day.month, day.day, 12.0 - coord.longitude / 15.0)
    decl, eqtime = sun_declination_and_equation_of_time(julian_century(jd))

    midnight_utc = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
    transit = midnight_utc + timedelta(hours=transit_hours_utc(coord.longitude, eqtime))

    omega = hour_angle(coord.latitude, decl, SUNRISE_SUNSET_ALTITUDE)
    if omega is None:
        noon_altitude = 90.0 - abs(coord.latitude - decl)
        polar = (
            PolarCondition.POLAR_DAY
            if noon_altitude > SUNRISE_SUNSET_ALTITUDE
            else PolarCondition.POLAR_NIGHT
        )
        logger.debug("%s at %s on %s", polar.value, coord, day)
        return SolarDay(
            date=day,
            declination=decl,
            equation_of_time=eqtime,
            transit=transit,
            sunrise=None,
            sunset=None,
            polar=polar,
        )

    half_day = timedelta(hours=omega / 15.0)
    return SolarDay(
        date=day,
        declination=decl,
        equation_of_time=eqtime,
        transit=transit,
        sunrise=transit - half_day,
        sunset=transit + half_day,
    )
