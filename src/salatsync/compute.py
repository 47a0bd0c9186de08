"""Prayer time computation: solar geometry with high-latitude fallback, localised to a time zone."""

import logging
import math
from datetime import date, datetime, timedelta

from pytz import timezone, utc
from timezonefinder import TimezoneFinder

from salatsync.astronomy import (
    SolarTime,
    season_adjusted_evening_twilight,
    season_adjusted_morning_twilight,
)
from salatsync.errors import UnresolvableGeometry
from salatsync.methods import resolve_parameters
from salatsync.models import (
    HIGH_LATITUDE_THRESHOLD,
    CalculationMethod,
    GeoCoordinate,
    MidnightMode,
    Prayer,
    PrayerTimeSettings,
    PrayerTimesResult,
    ResolvedParameters,
    Rounding,
    SunnahTimes,
)

logger = logging.getLogger(__name__)

_tf = TimezoneFinder()

# Moonsighting Committee switches to a seventh of the night from this latitude
_MOONSIGHTING_SEVENTH_LATITUDE = 55.0


def timezone_for(coordinate: GeoCoordinate) -> str:
    """IANA time zone name for a coordinate. Falls back to UTC when none is found."""
    tz_str = _tf.timezone_at(lat=coordinate.latitude, lng=coordinate.longitude)
    if tz_str is None:
        logger.warning(
            "No time zone found for lat=%s, lng=%s; using UTC",
            coordinate.latitude,
            coordinate.longitude,
        )
        return "UTC"
    return tz_str


def _utc_instant(day: date, hours: float) -> datetime:
    """Decimal UTC hours of day as an aware datetime, truncated to the second."""
    midnight = datetime(day.year, day.month, day.day, tzinfo=utc)
    return midnight + timedelta(seconds=math.floor(hours * 3600))


def _rounded_minute(moment: datetime, rounding: Rounding) -> datetime:
    moment = moment.replace(microsecond=0)
    seconds = moment.second
    if rounding is Rounding.NONE:
        return moment
    if rounding is Rounding.UP:
        offset = 60 - seconds if seconds else 0
    else:
        offset = 60 - seconds if seconds >= 30 else -seconds
    return moment + timedelta(seconds=offset)


def _fajr(
    solar: SolarTime,
    day: date,
    sunrise: datetime,
    night: timedelta,
    resolved: ResolvedParameters,
) -> datetime:
    table = resolved.table
    latitude = solar.coordinate.latitude
    if table.fajr_interval > 0:
        return sunrise - timedelta(minutes=table.fajr_interval)

    hours = solar.hour_angle(-table.fajr_angle, after_transit=False)
    fajr = None if hours is None else _utc_instant(day, hours)

    if resolved.method is CalculationMethod.MOONSIGHTING_COMMITTEE:
        if abs(latitude) >= _MOONSIGHTING_SEVENTH_LATITUDE:
            fajr = sunrise - night / 7
        minutes = season_adjusted_morning_twilight(latitude, day)
        safe = sunrise - timedelta(seconds=round(minutes * 60))
        return safe if fajr is None or safe > fajr else fajr

    if fajr is not None and abs(latitude) < HIGH_LATITUDE_THRESHOLD:
        return fajr

    portions = resolved.night_portions()
    if portions is None:
        if fajr is None:
            raise UnresolvableGeometry(
                f"Sun never reaches -{table.fajr_angle}° for Fajr at "
                f"lat={latitude} on {day} and no high-latitude rule is set"
            )
        return fajr

    safe = sunrise - night * portions[0]
    if fajr is None or safe > fajr:
        logger.debug(
            "Fajr on %s at lat=%s bounded by %s", day, latitude, resolved.high_latitude_rule
        )
        return safe
    return fajr


def _isha(
    solar: SolarTime,
    day: date,
    sunset: datetime,
    night: timedelta,
    resolved: ResolvedParameters,
) -> datetime:
    table = resolved.table
    latitude = solar.coordinate.latitude
    if table.isha_interval > 0:
        return sunset + timedelta(minutes=table.isha_interval)

    hours = solar.hour_angle(-table.isha_angle, after_transit=True)
    isha = None if hours is None else _utc_instant(day, hours)

    if resolved.method is CalculationMethod.MOONSIGHTING_COMMITTEE:
        if abs(latitude) >= _MOONSIGHTING_SEVENTH_LATITUDE:
            isha = sunset + night / 7
        minutes = season_adjusted_evening_twilight(latitude, day)
        safe = sunset + timedelta(seconds=round(minutes * 60))
        return safe if isha is None or safe < isha else isha

    if isha is not None and abs(latitude) < HIGH_LATITUDE_THRESHOLD:
        return isha

    portions = resolved.night_portions()
    if portions is None:
        if isha is None:
            raise UnresolvableGeometry(
                f"Sun never reaches -{table.isha_angle}° for Isha at "
                f"lat={latitude} on {day} and no high-latitude rule is set"
            )
        return isha

    safe = sunset + night * portions[1]
    if isha is None or safe < isha:
        logger.debug(
            "Isha on %s at lat=%s bounded by %s", day, latitude, resolved.high_latitude_rule
        )
        return safe
    return isha


def calculate(
    coordinate: GeoCoordinate,
    day: date,
    resolved: ResolvedParameters,
    tz: str | None = None,
) -> PrayerTimesResult:
    """Compute the six instants for one coordinate and calendar date.

    Args:
        coordinate: Observer location.
        day: Calendar date. A datetime is reduced to its date.
        resolved: Output of resolve_parameters.
        tz: IANA zone to localise to. Looked up from the coordinate if None.

    Returns:
        PrayerTimesResult with all six fields set.

    Raises:
        UnresolvableGeometry: On polar day/night, at the poles, or when twilight
            is undefined and no high-latitude rule is set.
    """
    if isinstance(day, datetime):
        day = day.date()
    if abs(coordinate.latitude) == 90.0:
        raise UnresolvableGeometry("Prayer times are undefined at the poles")

    tomorrow = day + timedelta(days=1)
    solar = SolarTime(day, coordinate)
    solar_tomorrow = SolarTime(tomorrow, coordinate)
    if solar.sunrise is None or solar.sunset is None or solar_tomorrow.sunrise is None:
        raise UnresolvableGeometry(
            f"Sun does not rise and set at lat={coordinate.latitude}, "
            f"lng={coordinate.longitude} on {day}"
        )

    asr_hours = solar.afternoon(resolved.shadow_length)
    if asr_hours is None:
        raise UnresolvableGeometry(f"Asr is undefined at lat={coordinate.latitude} on {day}")

    dhuhr = _utc_instant(day, solar.transit)
    sunrise = _utc_instant(day, solar.sunrise)
    sunset = _utc_instant(day, solar.sunset)
    asr = _utc_instant(day, asr_hours)
    night = _utc_instant(tomorrow, solar_tomorrow.sunrise) - sunset

    fajr = _fajr(solar, day, sunrise, night, resolved)
    isha = _isha(solar, day, sunset, night, resolved)

    maghrib = sunset
    if resolved.table.maghrib_angle is not None:
        hours = solar.hour_angle(-resolved.table.maghrib_angle, after_transit=True)
        if hours is not None:
            angle_based = _utc_instant(day, hours)
            if sunset < angle_based < isha:
                maghrib = angle_based

    tz_name = tz or timezone_for(coordinate)
    zone = timezone(tz_name)
    raw = {
        Prayer.FAJR: fajr,
        Prayer.SUNRISE: sunrise,
        Prayer.DHUHR: dhuhr,
        Prayer.ASR: asr,
        Prayer.MAGHRIB: maghrib,
        Prayer.ISHA: isha,
    }
    final = {
        prayer.value: _rounded_minute(
            moment + timedelta(minutes=resolved.total_adjustment(prayer)),
            resolved.table.rounding,
        ).astimezone(zone)
        for prayer, moment in raw.items()
    }
    return PrayerTimesResult(
        **final,
        coordinate=coordinate,
        day=day,
        parameters=resolved,
        timezone=tz_name,
    )


def prayer_times(
    coordinate: GeoCoordinate,
    day: date,
    settings: PrayerTimeSettings | None = None,
    tz: str | None = None,
) -> PrayerTimesResult:
    """Top-level entry point: resolve settings, then calculate.

    Args:
        coordinate: Observer location.
        day: Calendar date.
        settings: Calculation settings. Defaults to Muslim World League / Shafi.
        tz: IANA zone to localise to. Looked up from the coordinate if None.

    Returns:
        Fully computed PrayerTimesResult.
    """
    resolved = resolve_parameters(settings or PrayerTimeSettings())
    return calculate(coordinate, day, resolved, tz)


def sunnah_times(times: PrayerTimesResult) -> SunnahTimes:
    """Middle and last third of the night following times.day.

    The night starts at Maghrib and ends at tomorrow's sunrise, or at
    tomorrow's Fajr for methods using the Jafari midnight.
    """
    params = times.parameters
    tomorrow = calculate(
        times.coordinate, times.day + timedelta(days=1), params, times.timezone
    )
    if params.table.midnight_mode is MidnightMode.JAFARI:
        end = tomorrow.fajr
    else:
        end = tomorrow.sunrise
    night = end - times.maghrib
    zone = timezone(times.timezone)
    rounding = params.table.rounding
    return SunnahTimes(
        middle_of_the_night=_rounded_minute(
            times.maghrib + night / 2, rounding
        ).astimezone(zone),
        last_third_of_the_night=_rounded_minute(
            times.maghrib + night * 2 / 3, rounding
        ).astimezone(zone),
    )
