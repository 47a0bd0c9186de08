"""Error taxonomy for the prayer-time core. All errors propagate to the caller."""


class PrayerTimeError(Exception):
    """Base class for every error raised by salatsync."""


class InvalidCoordinate(PrayerTimeError, ValueError):
    """Latitude or longitude outside the valid range."""


class UnresolvableGeometry(PrayerTimeError):
    """The sun never reaches a required altitude and no fallback can resolve it."""


class UnknownMethod(PrayerTimeError, ValueError):
    """Calculation method outside the supported set."""


class UnknownMadhab(PrayerTimeError, ValueError):
    """Madhab outside the supported set."""


class UnknownHighLatitudeRule(PrayerTimeError, ValueError):
    """High-latitude rule outside the supported set."""


class InvalidAdjustment(PrayerTimeError, ValueError):
    """Per-prayer minute adjustment that is not an integer in [-30, 30]."""


class InvalidSettings(PrayerTimeError, ValueError):
    """Settings document that cannot be parsed."""
