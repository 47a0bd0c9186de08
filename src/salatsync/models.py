"""Shared types for the resolver, calculator and evaluator layers."""

import math
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from salatsync.errors import (
    InvalidCoordinate,
    UnknownHighLatitudeRule,
    UnknownMadhab,
    UnknownMethod,
)

# From this latitude the high-latitude rule bounds Fajr/Isha even when the
# geometric twilight exists.
HIGH_LATITUDE_THRESHOLD = 48.0


class CalculationMethod(str, Enum):
    """Named calculation authorities. Each maps to one row of the method table."""

    MUSLIM_WORLD_LEAGUE = "muslim_world_league"
    EGYPTIAN = "egyptian"
    KARACHI = "karachi"
    UMM_AL_QURA = "umm_al_qura"
    DUBAI = "dubai"
    MOONSIGHTING_COMMITTEE = "moonsighting_committee"
    NORTH_AMERICA = "north_america"
    KUWAIT = "kuwait"
    QATAR = "qatar"
    SINGAPORE = "singapore"
    TURKEY = "turkey"
    TEHRAN = "tehran"
    OTHER = "other"

    @classmethod
    def parse(cls, value: "str | CalculationMethod") -> "CalculationMethod":
        """Return the member for value, raising UnknownMethod otherwise."""
        try:
            return cls(value)
        except (ValueError, TypeError):
            raise UnknownMethod(f"Unknown calculation method: {value!r}") from None


class Madhab(str, Enum):
    """School of thought for Asr. Only the shadow multiplier differs."""

    SHAFI = "shafi"  # Shafi'i, Maliki, Hanbali
    HANAFI = "hanafi"

    @property
    def shadow_length(self) -> int:
        return 2 if self is Madhab.HANAFI else 1

    @classmethod
    def parse(cls, value: "str | Madhab") -> "Madhab":
        """Return the member for value, raising UnknownMadhab otherwise.

        ``shafi_maliki_hanbali`` is accepted as an alias of ``shafi``.
        """
        if value == "shafi_maliki_hanbali":
            return cls.SHAFI
        try:
            return cls(value)
        except (ValueError, TypeError):
            raise UnknownMadhab(f"Unknown madhab: {value!r}") from None


class HighLatitudeRule(str, Enum):
    """How the night is apportioned when twilight angles are unattainable."""

    MIDDLE_OF_THE_NIGHT = "middle_of_the_night"
    SEVENTH_OF_THE_NIGHT = "seventh_of_the_night"
    TWILIGHT_ANGLE = "twilight_angle"

    @classmethod
    def parse(cls, value: "str | HighLatitudeRule") -> "HighLatitudeRule":
        """Return the member for value, raising UnknownHighLatitudeRule otherwise."""
        try:
            return cls(value)
        except (ValueError, TypeError):
            raise UnknownHighLatitudeRule(
                f"Unknown high-latitude rule: {value!r}"
            ) from None

    @classmethod
    def recommended(cls, coordinate: "GeoCoordinate") -> "HighLatitudeRule":
        """Seventh of the night above 48° (either hemisphere), middle of the night elsewhere."""
        if abs(coordinate.latitude) > HIGH_LATITUDE_THRESHOLD:
            return cls.SEVENTH_OF_THE_NIGHT
        return cls.MIDDLE_OF_THE_NIGHT


class Prayer(str, Enum):
    """The six computed instants. Sunrise is not a prayer."""

    FAJR = "fajr"
    SUNRISE = "sunrise"
    DHUHR = "dhuhr"
    ASR = "asr"
    MAGHRIB = "maghrib"
    ISHA = "isha"

    @classmethod
    def daily(cls) -> tuple["Prayer", ...]:
        """The five daily prayers in chronological order."""
        return (cls.FAJR, cls.DHUHR, cls.ASR, cls.MAGHRIB, cls.ISHA)


class Rounding(str, Enum):
    """Rounding of computed instants to whole minutes."""

    NEAREST = "nearest"
    UP = "up"
    NONE = "none"


class MidnightMode(str, Enum):
    """Which span counts as "the night" for sunnah times."""

    STANDARD = "standard"  # sunset to sunrise
    JAFARI = "jafari"  # sunset to fajr


@dataclass(frozen=True)
class GeoCoordinate:
    """A point on the earth's surface. Out-of-range values are rejected, never clamped."""

    latitude: float  # Decimal degrees, [-90, 90]
    longitude: float  # Decimal degrees, [-180, 180]

    def __post_init__(self) -> None:
        lat, lng = self.latitude, self.longitude
        if not (math.isfinite(lat) and -90.0 <= lat <= 90.0):
            raise InvalidCoordinate(f"Latitude out of range: {lat}")
        if not (math.isfinite(lng) and -180.0 <= lng <= 180.0):
            raise InvalidCoordinate(f"Longitude out of range: {lng}")


@dataclass(frozen=True)
class PrayerAdjustments:
    """Signed minute offsets per instant. None means "not set"; 0 is a valid value."""

    fajr: int | None = None
    sunrise: int | None = None
    dhuhr: int | None = None
    asr: int | None = None
    maghrib: int | None = None
    isha: int | None = None

    def get(self, prayer: Prayer) -> int | None:
        return getattr(self, prayer.value)

    def items(self) -> Iterator[tuple[Prayer, int]]:
        """Yield (prayer, minutes) for every adjustment that is set."""
        for prayer in Prayer:
            minutes = self.get(prayer)
            if minutes is not None:
                yield prayer, minutes


@dataclass(frozen=True)
class PrayerTimeSettings:
    """User-facing calculation settings. Passed explicitly into every calculation."""

    calculation_method: CalculationMethod = CalculationMethod.MUSLIM_WORLD_LEAGUE
    madhab: Madhab = Madhab.SHAFI
    high_latitude_rule: HighLatitudeRule | None = HighLatitudeRule.MIDDLE_OF_THE_NIGHT
    adjustments: PrayerAdjustments = field(default_factory=PrayerAdjustments)


@dataclass(frozen=True)
class MethodParameters:
    """One row of the method table."""

    fajr_angle: float  # Degrees below the horizon
    isha_angle: float  # Degrees below the horizon
    isha_interval: int = 0  # Minutes after sunset; overrides isha_angle when > 0
    fajr_interval: int = 0  # Minutes before sunrise; overrides fajr_angle when > 0
    maghrib_angle: float | None = None  # Degrees below the horizon
    adjustments: PrayerAdjustments = field(default_factory=PrayerAdjustments)
    rounding: Rounding = Rounding.NEAREST
    midnight_mode: MidnightMode = MidnightMode.STANDARD


@dataclass(frozen=True)
class ResolvedParameters:
    """Concrete parameters for the calculator. Output of the parameter resolver."""

    method: CalculationMethod
    table: MethodParameters
    madhab: Madhab
    high_latitude_rule: HighLatitudeRule | None
    adjustments: PrayerAdjustments

    @property
    def shadow_length(self) -> int:
        return self.madhab.shadow_length

    def night_portions(self) -> tuple[float, float] | None:
        """(fajr, isha) fractions of the night for the high-latitude rule, or None if unset."""
        rule = self.high_latitude_rule
        if rule is None:
            return None
        if rule is HighLatitudeRule.MIDDLE_OF_THE_NIGHT:
            return 1 / 2, 1 / 2
        if rule is HighLatitudeRule.SEVENTH_OF_THE_NIGHT:
            return 1 / 7, 1 / 7
        if rule is HighLatitudeRule.TWILIGHT_ANGLE:
            return self.table.fajr_angle / 60, self.table.isha_angle / 60
        raise UnknownHighLatitudeRule(f"Unknown high-latitude rule: {rule!r}")

    def total_adjustment(self, prayer: Prayer) -> int:
        """Method adjustment plus user adjustment for prayer, in minutes."""
        total = 0
        for adjustments in (self.table.adjustments, self.adjustments):
            minutes = adjustments.get(prayer)
            if minutes is not None:
                total += minutes
        return total


@dataclass(frozen=True)
class PrayerTimesResult:
    """Six instants for one (coordinate, date, parameters) triple. Recomputed as a whole."""

    fajr: datetime
    sunrise: datetime
    dhuhr: datetime
    asr: datetime
    maghrib: datetime
    isha: datetime
    coordinate: GeoCoordinate
    day: date  # Calendar date the times belong to
    parameters: ResolvedParameters
    timezone: str  # IANA zone the instants are localised to

    def time_for(self, prayer: Prayer) -> datetime:
        return getattr(self, prayer.value)


@dataclass(frozen=True)
class SunnahTimes:
    """Night-prayer (qiyam) reference points derived from a day's times."""

    middle_of_the_night: datetime
    last_third_of_the_night: datetime


@dataclass(frozen=True)
class PrayerMoment:
    """A named prayer at a specific instant. Produced by the state evaluator."""

    prayer: Prayer
    time: datetime
    display_name: str  # English name ("Fajr")
    localized_name: str  # Arabic name ("الفجر")


@dataclass(frozen=True)
class Countdown:
    """Whole hours/minutes/seconds until a moment."""

    hours: int
    minutes: int
    seconds: int
