"""CLI entry point for today's prayer times.

Set SALATSYNC_LATITUDE and SALATSYNC_LONGITUDE (environment or .env), then run:
    uv run salatsync-today
"""

import os
import sys
from datetime import datetime

from dotenv import load_dotenv
from pytz import timezone, utc

from salatsync.compute import prayer_times, timezone_for
from salatsync.errors import InvalidSettings, UnresolvableGeometry
from salatsync.i18n import t
from salatsync.models import GeoCoordinate, Prayer
from salatsync.settings import ENV_PREFIX, settings_from_env
from salatsync.state import countdown, current_prayer, next_prayer


def coordinate_from_env() -> GeoCoordinate:
    """Read SALATSYNC_LATITUDE / SALATSYNC_LONGITUDE.

    Raises:
        InvalidSettings: If either is missing or not a number.
        InvalidCoordinate: If either is out of range.
    """
    values = []
    for name in (f"{ENV_PREFIX}LATITUDE", f"{ENV_PREFIX}LONGITUDE"):
        raw = os.environ.get(name)
        if raw is None or not raw.strip():
            raise InvalidSettings(f"{name} is not set")
        try:
            values.append(float(raw))
        except ValueError:
            raise InvalidSettings(f"{name} must be a number, got {raw!r}") from None
    return GeoCoordinate(latitude=values[0], longitude=values[1])


def main(now: datetime | None = None) -> int:
    load_dotenv()
    lang = os.environ.get(f"{ENV_PREFIX}LANGUAGE", "en")
    coordinate = coordinate_from_env()
    settings = settings_from_env()
    tz_name = os.environ.get(f"{ENV_PREFIX}TIMEZONE") or timezone_for(coordinate)

    now = now or datetime.now(utc)
    day = now.astimezone(timezone(tz_name)).date()
    try:
        times = prayer_times(coordinate, day, settings, tz=tz_name)
    except UnresolvableGeometry as e:
        print(f"{t('error_location', lang)} ({e})", file=sys.stderr)
        return 1

    current = current_prayer(times, now)
    for prayer in Prayer:
        marker = "*" if current is not None and current.prayer is prayer else " "
        name = t(f"prayer_{prayer.value}", lang)
        print(f"{marker} {name:<8} {times.time_for(prayer).isoformat()}")

    upcoming = next_prayer(times, now)
    left = countdown(upcoming, now)
    name = t(f"prayer_{upcoming.prayer.value}", lang)
    print(
        f"{t('next_prayer', lang)}: {name} {upcoming.time.isoformat()} "
        f"(-{left.hours:02d}:{left.minutes:02d}:{left.seconds:02d})"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
