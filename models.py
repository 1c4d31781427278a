"""Value types shared by the solar, prayer-time, scheduler and calendar layers."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum


class InvalidCoordinate(ValueError):
    """Latitude or longitude outside the valid range."""


class UnknownMethodError(KeyError):
    """No calculation method registered under the given name."""


class AsrShadow(int, Enum):
    """Shadow-length multiple at which Asr begins."""

    STANDARD = 1  # Shafi'i, Maliki, Hanbali
    HANAFI = 2


class HighLatitudeRule(str, Enum):
    """How Fajr/Isha are bounded when the twilight angle is not reached."""

    NONE = "none"
    MIDDLE_OF_NIGHT = "middle_of_night"
    SEVENTH_OF_NIGHT = "seventh_of_night"
    TWILIGHT_ANGLE = "twilight_angle"


class PolarCondition(str, Enum):
    POLAR_DAY = "polar_day"
    POLAR_NIGHT = "polar_night"


class EventKind(str, Enum):
    SEHRI_ENDS = "sehri_ends"
    IFTAR = "iftar"


@dataclass(frozen=True)
class GeoCoordinate:
    """Observer position in decimal degrees. No elevation."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        # NaN fails both comparisons, so it is rejected too
        if not -90.0 <= self.latitude <= 90.0:
            raise InvalidCoordinate(
                f"Latitude must be between -90 and 90, got {self.latitude}"
            )
        if not -180.0 <= self.longitude <= 180.0:
            raise InvalidCoordinate(
                f"Longitude must be between -180 and 180, got {self.longitude}"
            )


@dataclass(frozen=True)
class CalculationMethod:
    """Angle parameters for one calculation method.

    ``isha_interval`` (minutes after Maghrib) replaces ``isha_angle`` when set.
    """

    name: str
    fajr_angle: float
    isha_angle: float | None = None
    isha_interval: int | None = None
    asr_shadow: AsrShadow = AsrShadow.STANDARD
    high_latitude_rule: HighLatitudeRule = HighLatitudeRule.MIDDLE_OF_NIGHT

    def __post_init__(self) -> None:
        if self.isha_angle is None and self.isha_interval is None:
            raise ValueError(f"{self.name}: isha_angle or isha_interval is required")

    def night_portions(self) -> tuple[float, float]:
        """(fajr, isha) share of the night used as the high-latitude bound."""
        rule = self.high_latitude_rule
        if rule == HighLatitudeRule.SEVENTH_OF_NIGHT:
            return 1 / 7, 1 / 7
        if rule == HighLatitudeRule.TWILIGHT_ANGLE:
            isha_angle = self.isha_angle if self.isha_angle is not None else self.fajr_angle
            return self.fajr_angle / 60.0, isha_angle / 60.0
        return 1 / 2, 1 / 2


@dataclass(frozen=True)
class SolarDay:
    """Solar quantities for one calendar date at one coordinate (UTC instants).

    ``sunrise`` and ``sunset`` are None when ``polar`` is set.
    """

    date: date
    declination: float  # degrees
    equation_of_time: float  # minutes
    transit: datetime
    sunrise: datetime | None
    sunset: datetime | None
    polar: PolarCondition | None = None

    @property
    def is_polar(self) -> bool:
        return self.polar is not None


@dataclass(frozen=True)
class PrayerSchedule:
    """Prayer times for one date, all UTC instants."""

    date: date
    fajr: datetime
    sunrise: datetime
    dhuhr: datetime
    asr: datetime
    maghrib: datetime
    isha: datetime
    imsak: datetime
    midnight: datetime
    last_third: datetime
    high_latitude_adjusted: bool = False

    def prayers(self) -> dict[str, datetime]:
        """The six daily times, in the order they occur."""
        return {
            "fajr": self.fajr,
            "sunrise": self.sunrise,
            "dhuhr": self.dhuhr,
            "asr": self.asr,
            "maghrib": self.maghrib,
            "isha": self.isha,
        }


@dataclass(frozen=True)
class NextEvent:
    """Upcoming Sehri-end or Iftar boundary. Equality is the event identity."""

    kind: EventKind
    at: datetime


@dataclass(frozen=True)
class Countdown:
    remaining_seconds: int

    @property
    def hours(self) -> int:
        return self.remaining_seconds // 3600

    @property
    def minutes(self) -> int:
        return (self.remaining_seconds % 3600) // 60

    @property
    def seconds(self) -> int:
        return self.remaining_seconds % 60

    @property
    def is_zero(self) -> bool:
        return self.remaining_seconds == 0

    def hhmmss(self) -> str:
        return f"{self.hours:02d}:{self.minutes:02d}:{self.seconds:02d}"
