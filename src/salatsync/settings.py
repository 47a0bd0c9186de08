"""Settings documents, their JSON form, and SALATSYNC_* environment variables."""

import json
import os
from collections.abc import Mapping
from typing import Any

from salatsync.errors import InvalidAdjustment, InvalidSettings
from salatsync.methods import validate_adjustments
from salatsync.models import (
    CalculationMethod,
    HighLatitudeRule,
    Madhab,
    Prayer,
    PrayerAdjustments,
    PrayerTimeSettings,
)

ENV_PREFIX = "SALATSYNC_"

# Value of SALATSYNC_HIGH_LATITUDE_RULE that disables the fallback rule
_NO_RULE = "none"


def _parse_adjustments(data: Any) -> PrayerAdjustments:
    if data is None:
        return PrayerAdjustments()
    if not isinstance(data, Mapping):
        raise InvalidSettings(f"adjustments must be an object, got {type(data).__name__}")
    known = {prayer.value for prayer in Prayer}
    unknown = sorted(set(data) - known)
    if unknown:
        raise InvalidSettings(f"Unknown adjustment keys: {', '.join(unknown)}")
    # A key mapped to null stays "not set"; 0 is kept as an explicit value.
    return validate_adjustments(PrayerAdjustments(**dict(data)))


def settings_from_dict(data: Mapping[str, Any]) -> PrayerTimeSettings:
    """Build settings from a preferences-store document.

    Missing keys take the defaults (Muslim World League, Shafi, middle of the
    night). An explicit ``"highLatitudeRule": null`` disables the fallback rule.

    Args:
        data: Mapping with ``calculationMethod``, ``madhab``,
            ``highLatitudeRule`` and ``adjustments`` keys.

    Returns:
        Validated PrayerTimeSettings.

    Raises:
        UnknownMethod / UnknownMadhab / UnknownHighLatitudeRule: For values
            outside the closed enumerations.
        InvalidAdjustment: For adjustments outside [-30, 30].
        InvalidSettings: For malformed documents.
    """
    if not isinstance(data, Mapping):
        raise InvalidSettings(f"Settings must be an object, got {type(data).__name__}")
    defaults = PrayerTimeSettings()

    method = CalculationMethod.parse(
        data.get("calculationMethod", defaults.calculation_method)
    )
    madhab = Madhab.parse(data.get("madhab", defaults.madhab))
    if "highLatitudeRule" in data:
        raw_rule = data["highLatitudeRule"]
        rule = None if raw_rule is None else HighLatitudeRule.parse(raw_rule)
    else:
        rule = defaults.high_latitude_rule

    return PrayerTimeSettings(
        calculation_method=method,
        madhab=madhab,
        high_latitude_rule=rule,
        adjustments=_parse_adjustments(data.get("adjustments")),
    )


def settings_to_dict(settings: PrayerTimeSettings) -> dict[str, Any]:
    """Inverse of settings_from_dict. Unset adjustments are omitted."""
    rule = settings.high_latitude_rule
    return {
        "calculationMethod": settings.calculation_method.value,
        "madhab": settings.madhab.value,
        "highLatitudeRule": None if rule is None else rule.value,
        "adjustments": {
            prayer.value: minutes for prayer, minutes in settings.adjustments.items()
        },
    }


def validate_settings(settings: PrayerTimeSettings) -> PrayerTimeSettings:
    """Re-check enum membership and adjustment ranges; return settings unchanged."""
    CalculationMethod.parse(settings.calculation_method)
    Madhab.parse(settings.madhab)
    if settings.high_latitude_rule is not None:
        HighLatitudeRule.parse(settings.high_latitude_rule)
    validate_adjustments(settings.adjustments)
    return settings


def export_settings(settings: PrayerTimeSettings) -> str:
    """Serialize settings as an indented JSON document."""
    return json.dumps(settings_to_dict(settings), indent=2, ensure_ascii=False)


def import_settings(text: str) -> PrayerTimeSettings:
    """Parse a JSON document produced by export_settings (or the web app).

    Raises:
        InvalidSettings: If text is not a JSON object.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidSettings(f"Settings are not valid JSON: {e}") from e
    return settings_from_dict(data)


def settings_from_env(environ: Mapping[str, str] | None = None) -> PrayerTimeSettings:
    """Read settings from SALATSYNC_* environment variables.

    Recognised variables: ``SALATSYNC_CALCULATION_METHOD``, ``SALATSYNC_MADHAB``,
    ``SALATSYNC_HIGH_LATITUDE_RULE`` (``none`` disables the rule) and
    ``SALATSYNC_ADJUST_<PRAYER>`` (signed whole minutes). Unset or empty
    variables keep the defaults.
    """
    env = os.environ if environ is None else environ
    data: dict[str, Any] = {}

    method = env.get(f"{ENV_PREFIX}CALCULATION_METHOD", "").strip()
    if method:
        data["calculationMethod"] = method
    madhab = env.get(f"{ENV_PREFIX}MADHAB", "").strip()
    if madhab:
        data["madhab"] = madhab
    rule = env.get(f"{ENV_PREFIX}HIGH_LATITUDE_RULE", "").strip()
    if rule:
        data["highLatitudeRule"] = None if rule.lower() == _NO_RULE else rule

    adjustments: dict[str, int] = {}
    for prayer in Prayer:
        name = f"{ENV_PREFIX}ADJUST_{prayer.value.upper()}"
        raw = env.get(name, "").strip()
        if not raw:
            continue
        try:
            adjustments[prayer.value] = int(raw)
        except ValueError:
            raise InvalidAdjustment(f"{name} must be whole minutes, got {raw!r}") from None
    if adjustments:
        data["adjustments"] = adjustments

    return settings_from_dict(data)
