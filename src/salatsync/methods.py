"""Parameter resolution from the method table plus user overrides."""

from salatsync.errors import InvalidAdjustment, UnknownMethod
from salatsync.i18n import t
from salatsync.models import (
    CalculationMethod,
    HighLatitudeRule,
    Madhab,
    MethodParameters,
    MidnightMode,
    PrayerAdjustments,
    PrayerTimeSettings,
    ResolvedParameters,
    Rounding,
)

MAX_ADJUSTMENT_MINUTES = 30

_METHOD_TABLE: dict[CalculationMethod, MethodParameters] = {
    CalculationMethod.MUSLIM_WORLD_LEAGUE: MethodParameters(
        fajr_angle=18, isha_angle=17, adjustments=PrayerAdjustments(dhuhr=1)
    ),
    CalculationMethod.EGYPTIAN: MethodParameters(
        fajr_angle=19.5, isha_angle=17.5, adjustments=PrayerAdjustments(dhuhr=1)
    ),
    CalculationMethod.KARACHI: MethodParameters(
        fajr_angle=18, isha_angle=18, adjustments=PrayerAdjustments(dhuhr=1)
    ),
    CalculationMethod.UMM_AL_QURA: MethodParameters(
        fajr_angle=18.5, isha_angle=0, isha_interval=90
    ),
    CalculationMethod.DUBAI: MethodParameters(
        fajr_angle=18.2,
        isha_angle=18.2,
        adjustments=PrayerAdjustments(sunrise=-3, dhuhr=3, asr=3, maghrib=3),
    ),
    CalculationMethod.MOONSIGHTING_COMMITTEE: MethodParameters(
        fajr_angle=18,
        isha_angle=18,
        adjustments=PrayerAdjustments(dhuhr=5, maghrib=3),
    ),
    CalculationMethod.NORTH_AMERICA: MethodParameters(
        fajr_angle=15, isha_angle=15, adjustments=PrayerAdjustments(dhuhr=1)
    ),
    CalculationMethod.KUWAIT: MethodParameters(fajr_angle=18, isha_angle=17.5),
    CalculationMethod.QATAR: MethodParameters(
        fajr_angle=18, isha_angle=0, isha_interval=90
    ),
    CalculationMethod.SINGAPORE: MethodParameters(
        fajr_angle=20,
        isha_angle=18,
        adjustments=PrayerAdjustments(dhuhr=1),
        rounding=Rounding.UP,
    ),
    CalculationMethod.TURKEY: MethodParameters(
        fajr_angle=18,
        isha_angle=17,
        adjustments=PrayerAdjustments(sunrise=-7, dhuhr=5, asr=4, maghrib=7),
    ),
    CalculationMethod.TEHRAN: MethodParameters(
        fajr_angle=17.7,
        isha_angle=14,
        maghrib_angle=4.5,
        midnight_mode=MidnightMode.JAFARI,
    ),
    # Caller supplies explicit adjustments
    CalculationMethod.OTHER: MethodParameters(fajr_angle=0, isha_angle=0),
}


def method_parameters(method: CalculationMethod | str) -> MethodParameters:
    """Return the method-table row for method.

    Raises:
        UnknownMethod: If method is outside the supported set.
    """
    parsed = CalculationMethod.parse(method)
    try:
        return _METHOD_TABLE[parsed]
    except KeyError:
        raise UnknownMethod(f"No parameters for method: {parsed.value}") from None


def available_methods(lang: str = "en") -> tuple[tuple[CalculationMethod, str], ...]:
    """(method, display name) pairs in table order, for settings pickers."""
    return tuple((method, t(f"method_{method.value}", lang)) for method in _METHOD_TABLE)


def validate_adjustments(adjustments: PrayerAdjustments) -> PrayerAdjustments:
    """Check every set adjustment is an integer in [-30, 30].

    Raises:
        InvalidAdjustment: On the first offending value.
    """
    for prayer, minutes in adjustments.items():
        if isinstance(minutes, bool) or not isinstance(minutes, int):
            raise InvalidAdjustment(
                f"{prayer.value} adjustment must be whole minutes, got {minutes!r}"
            )
        if not -MAX_ADJUSTMENT_MINUTES <= minutes <= MAX_ADJUSTMENT_MINUTES:
            raise InvalidAdjustment(
                f"{prayer.value} adjustment {minutes} outside "
                f"[-{MAX_ADJUSTMENT_MINUTES}, {MAX_ADJUSTMENT_MINUTES}]"
            )
    return adjustments


def resolve_parameters(settings: PrayerTimeSettings) -> ResolvedParameters:
    """Map user settings to the concrete parameters the calculator needs.

    Args:
        settings: Method, madhab, high-latitude rule and per-prayer adjustments.

    Returns:
        ResolvedParameters carrying the method-table row and the overrides.

    Raises:
        UnknownMethod / UnknownMadhab / UnknownHighLatitudeRule: For values
            outside the closed enumerations.
        InvalidAdjustment: For adjustments outside [-30, 30].
    """
    method = CalculationMethod.parse(settings.calculation_method)
    madhab = Madhab.parse(settings.madhab)
    rule = (
        None
        if settings.high_latitude_rule is None
        else HighLatitudeRule.parse(settings.high_latitude_rule)
    )
    return ResolvedParameters(
        method=method,
        table=method_parameters(method),
        madhab=madhab,
        high_latitude_rule=rule,
        adjustments=validate_adjustments(settings.adjustments),
    )
