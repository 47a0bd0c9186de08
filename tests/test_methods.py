import pytest

from salatsync.errors import (
    InvalidAdjustment,
    UnknownHighLatitudeRule,
    UnknownMadhab,
    UnknownMethod,
)
from salatsync.methods import (
    available_methods,
    method_parameters,
    resolve_parameters,
    validate_adjustments,
)
from salatsync.models import (
    CalculationMethod,
    GeoCoordinate,
    HighLatitudeRule,
    Madhab,
    MidnightMode,
    Prayer,
    PrayerAdjustments,
    PrayerTimeSettings,
    Rounding,
)


@pytest.mark.parametrize("method", list(CalculationMethod))
def test_every_method_has_a_table_row(method):
    params = method_parameters(method)
    assert params.fajr_angle >= 0
    assert params.isha_angle >= 0 or params.isha_interval > 0


@pytest.mark.parametrize(
    "method, fajr, isha",
    [
        (CalculationMethod.MUSLIM_WORLD_LEAGUE, 18, 17),
        (CalculationMethod.EGYPTIAN, 19.5, 17.5),
        (CalculationMethod.KARACHI, 18, 18),
        (CalculationMethod.NORTH_AMERICA, 15, 15),
        (CalculationMethod.KUWAIT, 18, 17.5),
        (CalculationMethod.SINGAPORE, 20, 18),
        (CalculationMethod.TEHRAN, 17.7, 14),
        (CalculationMethod.DUBAI, 18.2, 18.2),
        (CalculationMethod.OTHER, 0, 0),
    ],
)
def test_twilight_angles(method, fajr, isha):
    params = method_parameters(method)
    assert params.fajr_angle == fajr
    assert params.isha_angle == isha


@pytest.mark.parametrize("method", [CalculationMethod.UMM_AL_QURA, CalculationMethod.QATAR])
def test_interval_methods_fix_isha_ninety_minutes_after_sunset(method):
    params = method_parameters(method)
    assert params.fajr_angle == 18.5 or params.fajr_angle == 18
    assert params.isha_interval == 90


def test_tehran_uses_maghrib_angle_and_jafari_midnight():
    params = method_parameters(CalculationMethod.TEHRAN)
    assert params.maghrib_angle == 4.5
    assert params.midnight_mode is MidnightMode.JAFARI


def test_singapore_rounds_up():
    assert method_parameters(CalculationMethod.SINGAPORE).rounding is Rounding.UP


def test_turkey_method_adjustments():
    adjustments = method_parameters(CalculationMethod.TURKEY).adjustments
    assert adjustments == PrayerAdjustments(sunrise=-7, dhuhr=5, asr=4, maghrib=7)


def test_method_parameters_accepts_identifier_string():
    assert method_parameters("karachi") == method_parameters(CalculationMethod.KARACHI)


def test_unknown_method_is_rejected():
    with pytest.raises(UnknownMethod):
        method_parameters("jafari")


def test_resolve_defaults():
    resolved = resolve_parameters(PrayerTimeSettings())
    assert resolved.method is CalculationMethod.MUSLIM_WORLD_LEAGUE
    assert resolved.madhab is Madhab.SHAFI
    assert resolved.shadow_length == 1
    assert resolved.high_latitude_rule is HighLatitudeRule.MIDDLE_OF_THE_NIGHT


def test_hanafi_doubles_shadow_length():
    resolved = resolve_parameters(PrayerTimeSettings(madhab=Madhab.HANAFI))
    assert resolved.shadow_length == 2


@pytest.mark.parametrize(
    "settings, error",
    [
        (PrayerTimeSettings(calculation_method="bogus"), UnknownMethod),
        (PrayerTimeSettings(madhab="jafari"), UnknownMadhab),
        (PrayerTimeSettings(high_latitude_rule="angle_based"), UnknownHighLatitudeRule),
    ],
)
def test_values_outside_enumerations_are_rejected(settings, error):
    with pytest.raises(error):
        resolve_parameters(settings)


def test_madhab_alias_for_shafi_maliki_hanbali():
    assert Madhab.parse("shafi_maliki_hanbali") is Madhab.SHAFI


@pytest.mark.parametrize(
    "rule, portions",
    [
        (HighLatitudeRule.MIDDLE_OF_THE_NIGHT, (1 / 2, 1 / 2)),
        (HighLatitudeRule.SEVENTH_OF_THE_NIGHT, (1 / 7, 1 / 7)),
        (HighLatitudeRule.TWILIGHT_ANGLE, (18 / 60, 17 / 60)),
        (None, None),
    ],
)
def test_night_portions(rule, portions):
    resolved = resolve_parameters(PrayerTimeSettings(high_latitude_rule=rule))
    assert resolved.night_portions() == portions


def test_recommended_rule_by_latitude():
    assert (
        HighLatitudeRule.recommended(GeoCoordinate(59.3293, 18.0686))
        is HighLatitudeRule.SEVENTH_OF_THE_NIGHT
    )
    assert (
        HighLatitudeRule.recommended(GeoCoordinate(-55.0, -68.0))
        is HighLatitudeRule.SEVENTH_OF_THE_NIGHT
    )
    assert (
        HighLatitudeRule.recommended(GeoCoordinate(41.0082, 28.9784))
        is HighLatitudeRule.MIDDLE_OF_THE_NIGHT
    )


def test_zero_user_adjustment_keeps_method_adjustment():
    resolved = resolve_parameters(
        PrayerTimeSettings(adjustments=PrayerAdjustments(dhuhr=0))
    )
    assert resolved.adjustments.dhuhr == 0
    assert resolved.total_adjustment(Prayer.DHUHR) == 1


def test_user_adjustment_adds_to_method_adjustment():
    resolved = resolve_parameters(
        PrayerTimeSettings(
            calculation_method=CalculationMethod.TURKEY,
            adjustments=PrayerAdjustments(maghrib=-2, isha=4),
        )
    )
    assert resolved.total_adjustment(Prayer.MAGHRIB) == 5
    assert resolved.total_adjustment(Prayer.ISHA) == 4
    assert resolved.total_adjustment(Prayer.FAJR) == 0


@pytest.mark.parametrize("minutes", [-30, 0, 30])
def test_adjustment_bounds_are_inclusive(minutes):
    adjustments = PrayerAdjustments(asr=minutes)
    assert validate_adjustments(adjustments) is adjustments


@pytest.mark.parametrize("minutes", [-31, 31, 2.5, True, "5"])
def test_out_of_range_or_non_integer_adjustment_is_rejected(minutes):
    with pytest.raises(InvalidAdjustment):
        resolve_parameters(
            PrayerTimeSettings(adjustments=PrayerAdjustments(fajr=minutes))
        )


def test_available_methods_lists_every_method_once():
    methods = available_methods()
    assert [m for m, _ in methods] == list(CalculationMethod)
    assert methods[0] == (CalculationMethod.MUSLIM_WORLD_LEAGUE, "Muslim World League")


def test_available_methods_in_arabic():
    names = dict(available_methods("ar"))
    assert names[CalculationMethod.UMM_AL_QURA] == "جامعة أم القرى، مكة المكرمة"
