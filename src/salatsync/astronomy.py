"""Solar position and time-of-day solving for a coordinate and calendar date.

Low-precision solar coordinates (Meeus, Astronomical Algorithms) are taken
for the previous, current and next day and interpolated, so transit and
hour angles carry one correction step. Times come back as decimal hours of
the UTC day; a value outside [0, 24) belongs to the neighbouring UTC day.
"""

import calendar
import math
from dataclasses import dataclass
from datetime import date

from salatsync.models import GeoCoordinate

# Apparent altitude of the sun's centre at sunrise/sunset (refraction + semi-diameter)
RISE_SET_ALTITUDE = -50.0 / 60.0

_J2000 = 2451545.0


def _unwind_angle(angle: float) -> float:
    """Normalize angle to [0, 360)."""
    return angle - 360.0 * math.floor(angle / 360.0)


def _quadrant_shift_angle(angle: float) -> float:
    """Normalize angle to [-180, 180]."""
    if -180.0 <= angle <= 180.0:
        return angle
    return angle - 360.0 * round(angle / 360.0)


def _normalize_to_scale(value: float, scale: float) -> float:
    return value - scale * math.floor(value / scale)


def julian_day(year: int, month: int, day: int, hours: float = 0.0) -> float:
    """Julian day for a Gregorian calendar date at the given UTC hour."""
    y = year if month > 2 else year - 1
    m = month if month > 2 else month + 12
    d = day + hours / 24.0
    a = int(y / 100)
    b = int(2 - a + int(a / 4))
    return int(365.25 * (y + 4716)) + int(30.6001 * (m + 1)) + d + b - 1524.5


def julian_century(jd: float) -> float:
    """Julian centuries since J2000.0."""
    return (jd - _J2000) / 36525.0


def _mean_solar_longitude(t: float) -> float:
    return _unwind_angle(280.4664567 + 36000.76983 * t + 0.0003032 * t**2)


def _mean_lunar_longitude(t: float) -> float:
    return _unwind_angle(218.3165 + 481267.8813 * t)


def _ascending_lunar_node_longitude(t: float) -> float:
    return _unwind_angle(
        125.04452 - 1934.136261 * t + 0.0020708 * t**2 + t**3 / 450000.0
    )


def _mean_solar_anomaly(t: float) -> float:
    return _unwind_angle(357.52911 + 35999.05029 * t - 0.0001537 * t**2)


def _solar_equation_of_the_center(t: float, mean_anomaly: float) -> float:
    m = math.radians(mean_anomaly)
    return (
        (1.914602 - 0.004817 * t - 0.000014 * t**2) * math.sin(m)
        + (0.019993 - 0.000101 * t) * math.sin(2 * m)
        + 0.000289 * math.sin(3 * m)
    )


def _apparent_solar_longitude(t: float, mean_longitude: float) -> float:
    longitude = mean_longitude + _solar_equation_of_the_center(
        t, _mean_solar_anomaly(t)
    )
    omega = 125.04 - 1934.136 * t
    return _unwind_angle(longitude - 0.00569 - 0.00478 * math.sin(math.radians(omega)))


def _mean_obliquity_of_the_ecliptic(t: float) -> float:
    return 23.439291 - 0.013004167 * t - 0.0000001639 * t**2 + 0.0000005036 * t**3


def _apparent_obliquity_of_the_ecliptic(t: float, mean_obliquity: float) -> float:
    omega = 125.04 - 1934.136 * t
    return mean_obliquity + 0.00256 * math.cos(math.radians(omega))


def _mean_sidereal_time(t: float) -> float:
    jd = t * 36525.0 + _J2000
    return _unwind_angle(
        280.46061837
        + 360.98564736629 * (jd - _J2000)
        + 0.000387933 * t**2
        - t**3 / 38710000.0
    )


def _nutation_in_longitude(solar_lon: float, lunar_lon: float, node: float) -> float:
    return (
        (-17.2 / 3600) * math.sin(math.radians(node))
        - (1.32 / 3600) * math.sin(2 * math.radians(solar_lon))
        - (0.23 / 3600) * math.sin(2 * math.radians(lunar_lon))
        + (0.21 / 3600) * math.sin(2 * math.radians(node))
    )


def _nutation_in_obliquity(solar_lon: float, lunar_lon: float, node: float) -> float:
    return (
        (9.2 / 3600) * math.cos(math.radians(node))
        + (0.57 / 3600) * math.cos(2 * math.radians(solar_lon))
        + (0.1 / 3600) * math.cos(2 * math.radians(lunar_lon))
        - (0.09 / 3600) * math.cos(2 * math.radians(node))
    )


def _interpolate(y2: float, y1: float, y3: float, n: float) -> float:
    """Interpolate y2 toward n (in days) using the previous (y1) and next (y3) values."""
    a = y2 - y1
    b = y3 - y2
    return y2 + (n / 2) * (a + b + n * (b - a))


def _interpolate_angles(y2: float, y1: float, y3: float, n: float) -> float:
    a = _unwind_angle(y2 - y1)
    b = _unwind_angle(y3 - y2)
    return y2 + (n / 2) * (a + b + n * (b - a))


def _altitude_of_celestial_body(lat: float, decl: float, hour_angle: float) -> float:
    lat_r = math.radians(lat)
    decl_r = math.radians(decl)
    return math.degrees(
        math.asin(
            math.sin(lat_r) * math.sin(decl_r)
            + math.cos(lat_r) * math.cos(decl_r) * math.cos(math.radians(hour_angle))
        )
    )


@dataclass(frozen=True)
class SolarCoordinates:
    """Apparent solar position at 0h UT of a Julian day (all in degrees)."""

    declination: float
    right_ascension: float
    apparent_sidereal_time: float


def solar_coordinates(jd: float) -> SolarCoordinates:
    """Compute declination, right ascension and apparent sidereal time for jd."""
    t = julian_century(jd)
    solar_lon = _mean_solar_longitude(t)
    lunar_lon = _mean_lunar_longitude(t)
    node = _ascending_lunar_node_longitude(t)
    apparent_lon = math.radians(_apparent_solar_longitude(t, solar_lon))

    mean_obliquity = _mean_obliquity_of_the_ecliptic(t)
    apparent_obliquity = math.radians(
        _apparent_obliquity_of_the_ecliptic(t, mean_obliquity)
    )
    delta_psi = _nutation_in_longitude(solar_lon, lunar_lon, node)
    delta_eps = _nutation_in_obliquity(solar_lon, lunar_lon, node)

    declination = math.degrees(
        math.asin(math.sin(apparent_obliquity) * math.sin(apparent_lon))
    )
    right_ascension = _unwind_angle(
        math.degrees(
            math.atan2(
                math.cos(apparent_obliquity) * math.sin(apparent_lon),
                math.cos(apparent_lon),
            )
        )
    )
    sidereal_time = _mean_sidereal_time(t) + delta_psi * math.cos(
        math.radians(mean_obliquity + delta_eps)
    )
    return SolarCoordinates(
        declination=declination,
        right_ascension=right_ascension,
        apparent_sidereal_time=sidereal_time,
    )


class SolarTime:
    """Transit, sunrise and sunset for one date and place, plus hour-angle solving.

    Every time is decimal hours of the UTC day. ``sunrise``/``sunset`` and the
    results of :meth:`hour_angle` / :meth:`afternoon` are None when the sun
    never reaches the requested altitude on that date.
    """

    def __init__(self, day: date, coordinate: GeoCoordinate) -> None:
        jd = julian_day(day.year, day.month, day.day)
        self.coordinate = coordinate
        self.solar = solar_coordinates(jd)
        self._prev = solar_coordinates(jd - 1)
        self._next = solar_coordinates(jd + 1)

        self._approx_transit = _normalize_to_scale(
            (
                self.solar.right_ascension
                - coordinate.longitude
                - self.solar.apparent_sidereal_time
            )
            / 360.0,
            1.0,
        )
        self.transit = self._corrected_transit()
        self.sunrise = self.hour_angle(RISE_SET_ALTITUDE, after_transit=False)
        self.sunset = self.hour_angle(RISE_SET_ALTITUDE, after_transit=True)

    def _corrected_transit(self) -> float:
        m0 = self._approx_transit
        theta = _unwind_angle(self.solar.apparent_sidereal_time + 360.985647 * m0)
        alpha = _unwind_angle(
            _interpolate_angles(
                self.solar.right_ascension,
                self._prev.right_ascension,
                self._next.right_ascension,
                m0,
            )
        )
        h = _quadrant_shift_angle(theta + self.coordinate.longitude - alpha)
        return (m0 - h / 360.0) * 24.0

    def hour_angle(self, altitude: float, after_transit: bool) -> float | None:
        """Time the sun's centre crosses altitude (degrees; negative = below horizon).

        Args:
            altitude: Solar altitude in degrees.
            after_transit: True for the afternoon/evening crossing.

        Returns:
            Decimal UTC hours, or None if the sun never reaches altitude.
        """
        lat = self.coordinate.latitude
        lng = self.coordinate.longitude
        m0 = self._approx_transit
        lat_r = math.radians(lat)
        decl_r = math.radians(self.solar.declination)

        denominator = math.cos(lat_r) * math.cos(decl_r)
        if abs(denominator) < 1e-12:
            return None
        cos_h0 = (
            math.sin(math.radians(altitude)) - math.sin(lat_r) * math.sin(decl_r)
        ) / denominator
        if cos_h0 < -1.0 or cos_h0 > 1.0:
            return None
        h0 = math.degrees(math.acos(cos_h0))

        m = m0 + h0 / 360.0 if after_transit else m0 - h0 / 360.0
        theta = _unwind_angle(self.solar.apparent_sidereal_time + 360.985647 * m)
        alpha = _unwind_angle(
            _interpolate_angles(
                self.solar.right_ascension,
                self._prev.right_ascension,
                self._next.right_ascension,
                m,
            )
        )
        delta = _interpolate(
            self.solar.declination, self._prev.declination, self._next.declination, m
        )
        h = theta + lng - alpha
        body_altitude = _altitude_of_celestial_body(lat, delta, h)
        correction_denominator = (
            360.0
            * math.cos(math.radians(delta))
            * math.cos(lat_r)
            * math.sin(math.radians(h))
        )
        if correction_denominator == 0.0:
            return m * 24.0
        dm = (body_altitude - altitude) / correction_denominator
        return (m + dm) * 24.0

    def afternoon(self, shadow_length: float) -> float | None:
        """Time an object's shadow equals shadow_length times its height plus its noon shadow."""
        tangent = abs(self.coordinate.latitude - self.solar.declination)
        inverse = shadow_length + math.tan(math.radians(tangent))
        altitude = math.degrees(math.atan(1.0 / inverse))
        return self.hour_angle(altitude, after_transit=True)


def _days_since_solstice(day_of_year: int, year: int, latitude: float) -> int:
    days_in_year = 366 if calendar.isleap(year) else 365
    if latitude >= 0:
        days = day_of_year + 10
        if days >= days_in_year:
            days -= days_in_year
    else:
        days = day_of_year - (173 if calendar.isleap(year) else 172)
        if days < 0:
            days += days_in_year
    return days


def _seasonal_interpolation(
    days: int, a: float, b: float, c: float, d: float
) -> float:
    if days < 91:
        return a + (b - a) / 91 * days
    if days < 137:
        return b + (c - b) / 46 * (days - 91)
    if days < 183:
        return c + (d - c) / 46 * (days - 137)
    if days < 229:
        return d + (c - d) / 46 * (days - 183)
    if days < 275:
        return c + (b - c) / 46 * (days - 229)
    return b + (a - b) / 91 * (days - 275)


def season_adjusted_morning_twilight(latitude: float, day: date) -> float:
    """Moonsighting Committee minutes between Fajr and sunrise for the season."""
    lat = abs(latitude)
    a = 75 + 28.65 / 55.0 * lat
    b = 75 + 19.44 / 55.0 * lat
    c = 75 + 32.74 / 55.0 * lat
    d = 75 + 48.10 / 55.0 * lat
    days = _days_since_solstice(day.timetuple().tm_yday, day.year, latitude)
    return _seasonal_interpolation(days, a, b, c, d)


def season_adjusted_evening_twilight(latitude: float, day: date) -> float:
    """Moonsighting Committee minutes between sunset and Isha (general shafaq)."""
    lat = abs(latitude)
    a = 75 + 25.60 / 55.0 * lat
    b = 75 + 2.050 / 55.0 * lat
    c = 75 - 9.210 / 55.0 * lat
    d = 75 + 6.140 / 55.0 * lat
    days = _days_since_solstice(day.timetuple().tm_yday, day.year, latitude)
    return _seasonal_interpolation(days, a, b, c, d)
