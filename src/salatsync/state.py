"""Current and next prayer for a snapshot instant."""

from datetime import datetime, timedelta

from salatsync.compute import calculate
from salatsync.i18n import t
from salatsync.models import Countdown, Prayer, PrayerMoment, PrayerTimesResult


def _require_aware(now: datetime) -> None:
    if now.tzinfo is None or now.utcoffset() is None:
        raise ValueError("now must be a timezone-aware datetime")


def _moment(prayer: Prayer, time: datetime) -> PrayerMoment:
    key = f"prayer_{prayer.value}"
    return PrayerMoment(
        prayer=prayer,
        time=time,
        display_name=t(key, "en"),
        localized_name=t(key, "ar"),
    )


def _daily_moments(times: PrayerTimesResult) -> list[PrayerMoment]:
    return [_moment(prayer, times.time_for(prayer)) for prayer in Prayer.daily()]


def next_prayer(times: PrayerTimesResult, now: datetime) -> PrayerMoment:
    """First of the five prayers strictly after now.

    Once Isha has passed, tomorrow's Fajr is computed at the same coordinate,
    with the same parameters and time zone that produced times.

    Args:
        times: The day's computed times.
        now: Timezone-aware reference instant.

    Returns:
        PrayerMoment for the upcoming prayer.
    """
    _require_aware(now)
    for moment in _daily_moments(times):
        if moment.time > now:
            return moment

    tomorrow = calculate(
        times.coordinate,
        times.day + timedelta(days=1),
        times.parameters,
        times.timezone,
    )
    return _moment(Prayer.FAJR, tomorrow.fajr)


def current_prayer(times: PrayerTimesResult, now: datetime) -> PrayerMoment | None:
    """Latest prayer whose time is at or before now; None before Fajr."""
    _require_aware(now)
    current = None
    for moment in _daily_moments(times):
        if moment.time > now:
            break
        current = moment
    return current


def time_until(moment: PrayerMoment, now: datetime) -> timedelta:
    """Duration from now until moment, never negative."""
    _require_aware(now)
    return max(moment.time - now, timedelta(0))


def countdown(moment: PrayerMoment, now: datetime) -> Countdown:
    """time_until split into whole hours, minutes and seconds."""
    total = int(time_until(moment, now).total_seconds())
    hours, remainder = divmod(total, 3600)
    minutes, seconds = divmod(remainder, 60)
    return Countdown(hours=hours, minutes=minutes, seconds=seconds)
