import pytest

from salatsync.errors import (
    InvalidAdjustment,
    InvalidSettings,
    UnknownHighLatitudeRule,
    UnknownMadhab,
    UnknownMethod,
)
from salatsync.models import (
    CalculationMethod,
    HighLatitudeRule,
    Madhab,
    PrayerAdjustments,
    PrayerTimeSettings,
)
from salatsync.settings import (
    export_settings,
    import_settings,
    settings_from_dict,
    settings_from_env,
    settings_to_dict,
    validate_settings,
)


def test_empty_document_uses_defaults():
    assert settings_from_dict({}) == PrayerTimeSettings()


def test_full_document():
    settings = settings_from_dict(
        {
            "calculationMethod": "north_america",
            "madhab": "hanafi",
            "highLatitudeRule": "seventh_of_the_night",
            "adjustments": {"fajr": -3, "isha": 10},
        }
    )
    assert settings.calculation_method is CalculationMethod.NORTH_AMERICA
    assert settings.madhab is Madhab.HANAFI
    assert settings.high_latitude_rule is HighLatitudeRule.SEVENTH_OF_THE_NIGHT
    assert settings.adjustments == PrayerAdjustments(fajr=-3, isha=10)


def test_zero_adjustment_is_kept_and_null_is_unset():
    settings = settings_from_dict({"adjustments": {"fajr": 0, "asr": None}})
    assert settings.adjustments.fajr == 0
    assert settings.adjustments.asr is None


def test_null_rule_disables_fallback():
    assert settings_from_dict({"highLatitudeRule": None}).high_latitude_rule is None


@pytest.mark.parametrize(
    "document, error",
    [
        ({"calculationMethod": "isna"}, UnknownMethod),
        ({"calculationMethod": 3}, UnknownMethod),
        ({"madhab": "maliki"}, UnknownMadhab),
        ({"highLatitudeRule": "angle_based"}, UnknownHighLatitudeRule),
        ({"adjustments": {"dhuhr": 45}}, InvalidAdjustment),
        ({"adjustments": {"qiyam": 5}}, InvalidSettings),
        ({"adjustments": [5]}, InvalidSettings),
    ],
)
def test_invalid_documents(document, error):
    with pytest.raises(error):
        settings_from_dict(document)


def test_to_dict_omits_unset_adjustments():
    settings = PrayerTimeSettings(
        calculation_method=CalculationMethod.TURKEY,
        high_latitude_rule=None,
        adjustments=PrayerAdjustments(maghrib=0),
    )
    assert settings_to_dict(settings) == {
        "calculationMethod": "turkey",
        "madhab": "shafi",
        "highLatitudeRule": None,
        "adjustments": {"maghrib": 0},
    }


def test_export_then_import_preserves_settings():
    settings = PrayerTimeSettings(
        calculation_method=CalculationMethod.TEHRAN,
        madhab=Madhab.HANAFI,
        high_latitude_rule=HighLatitudeRule.TWILIGHT_ANGLE,
        adjustments=PrayerAdjustments(sunrise=-2, isha=0),
    )
    assert import_settings(export_settings(settings)) == settings


@pytest.mark.parametrize("text", ["{not json", "[]", '"muslim_world_league"'])
def test_import_rejects_malformed_documents(text):
    with pytest.raises(InvalidSettings):
        import_settings(text)


def test_validate_settings_rejects_bad_adjustment():
    settings = PrayerTimeSettings(adjustments=PrayerAdjustments(asr=-31))
    with pytest.raises(InvalidAdjustment):
        validate_settings(settings)


def test_validate_settings_returns_valid_settings():
    settings = PrayerTimeSettings(madhab=Madhab.HANAFI)
    assert validate_settings(settings) is settings


def test_settings_from_env():
    settings = settings_from_env(
        {
            "SALATSYNC_CALCULATION_METHOD": "egyptian",
            "SALATSYNC_MADHAB": "shafi_maliki_hanbali",
            "SALATSYNC_HIGH_LATITUDE_RULE": "none",
            "SALATSYNC_ADJUST_MAGHRIB": "2",
            "SALATSYNC_ADJUST_FAJR": "0",
            "SALATSYNC_ADJUST_ISHA": "",
        }
    )
    assert settings.calculation_method is CalculationMethod.EGYPTIAN
    assert settings.madhab is Madhab.SHAFI
    assert settings.high_latitude_rule is None
    assert settings.adjustments == PrayerAdjustments(fajr=0, maghrib=2)


def test_settings_from_empty_env_uses_defaults():
    assert settings_from_env({}) == PrayerTimeSettings()


def test_settings_from_env_reads_process_environment(monkeypatch):
    monkeypatch.setenv("SALATSYNC_CALCULATION_METHOD", "kuwait")
    assert settings_from_env().calculation_method is CalculationMethod.KUWAIT


def test_non_numeric_env_adjustment_is_rejected():
    with pytest.raises(InvalidAdjustment):
        settings_from_env({"SALATSYNC_ADJUST_ASR": "ten"})
