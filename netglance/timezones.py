"""Local time lookup against a static UTC offset table.

Offsets are looked up by IANA identifier ("America/Los_Angeles") or by
abbreviation ("PST"). Identifiers that observe daylight saving carry a DST
rule; abbreviations are fixed offsets. Explicit offsets such as "UTC+8" or
"GMT-05:30" are also accepted.

An unknown timezone never leaves the displayed time blank: the configured
default region's offset is used instead.
"""

import calendar
import logging
import re
from datetime import datetime, timedelta, timezone

from netglance.errors import TimezoneUnresolved

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "America/New_York"

US_DST = "us"
EU_DST = "eu"
AU_DST = "au"

# identifier -> (standard offset in minutes, DST rule or None)
ZONE_TABLE = {
    "UTC": (0, None),
    "Etc/UTC": (0, None),
    "Europe/London": (0, EU_DST),
    "Europe/Dublin": (0, EU_DST),
    "Europe/Lisbon": (0, EU_DST),
    "Europe/Paris": (60, EU_DST),
    "Europe/Berlin": (60, EU_DST),
    "Europe/Madrid": (60, EU_DST),
    "Europe/Rome": (60, EU_DST),
    "Europe/Amsterdam": (60, EU_DST),
    "Europe/Brussels": (60, EU_DST),
    "Europe/Vienna": (60, EU_DST),
    "Europe/Zurich": (60, EU_DST),
    "Europe/Stockholm": (60, EU_DST),
    "Europe/Oslo": (60, EU_DST),
    "Europe/Copenhagen": (60, EU_DST),
    "Europe/Warsaw": (60, EU_DST),
    "Europe/Prague": (60, EU_DST),
    "Europe/Athens": (120, EU_DST),
    "Europe/Helsinki": (120, EU_DST),
    "Europe/Kyiv": (120, EU_DST),
    "Europe/Kiev": (120, EU_DST),
    "Europe/Istanbul": (180, None),
    "Europe/Moscow": (180, None),
    "Africa/Cairo": (120, None),
    "Africa/Johannesburg": (120, None),
    "Africa/Lagos": (60, None),
    "Africa/Nairobi": (180, None),
    "Asia/Dubai": (240, None),
    "Asia/Karachi": (300, None),
    "Asia/Kolkata": (330, None),
    "Asia/Calcutta": (330, None),
    "Asia/Dhaka": (360, None),
    "Asia/Bangkok": (420, None),
    "Asia/Jakarta": (420, None),
    "Asia/Ho_Chi_Minh": (420, None),
    "Asia/Shanghai": (480, None),
    "Asia/Chongqing": (480, None),
    "Asia/Hong_Kong": (480, None),
    "Asia/Macau": (480, None),
    "Asia/Taipei": (480, None),
    "Asia/Singapore": (480, None),
    "Asia/Kuala_Lumpur": (480, None),
    "Asia/Manila": (480, None),
    "Asia/Seoul": (540, None),
    "Asia/Tokyo": (540, None),
    "Australia/Perth": (480, None),
    "Australia/Brisbane": (600, None),
    "Australia/Sydney": (600, AU_DST),
    "Australia/Melbourne": (600, AU_DST),
    "Pacific/Auckland": (720, None),
    "Pacific/Honolulu": (-600, None),
    "America/Anchorage": (-540, US_DST),
    "America/Los_Angeles": (-480, US_DST),
    "America/Vancouver": (-480, US_DST),
    "America/Phoenix": (-420, None),
    "America/Denver": (-420, US_DST),
    "America/Chicago": (-360, US_DST),
    "America/Mexico_City": (-360, None),
    "America/New_York": (-300, US_DST),
    "America/Toronto": (-300, US_DST),
    "America/Bogota": (-300, None),
    "America/Lima": (-300, None),
    "America/Halifax": (-240, US_DST),
    "America/Santiago": (-240, None),
    "America/Sao_Paulo": (-180, None),
    "America/Argentina/Buenos_Aires": (-180, None),
}

ABBREVIATIONS = {
    "GMT": 0,
    "BST": 60,
    "CET": 60,
    "CEST": 120,
    "EET": 120,
    "EEST": 180,
    "MSK": 180,
    "IST": 330,
    "ICT": 420,
    "HKT": 480,
    "SGT": 480,
    "AWST": 480,
    "JST": 540,
    "KST": 540,
    "AEST": 600,
    "AEDT": 660,
    "NZST": 720,
    "HST": -600,
    "AKST": -540,
    "PST": -480,
    "PDT": -420,
    "MST": -420,
    "MDT": -360,
    "CDT": -300,
    "EST": -300,
    "EDT": -240,
}

_EXPLICIT_OFFSET = re.compile(r"^(?:UTC|GMT)\s*([+-])(\d{1,2})(?::?(\d{2}))?$", re.IGNORECASE)


def _nth_sunday(year: int, month: int, n: int) -> int:
    """Day of month of the n-th Sunday (n=-1 for the last one)."""
    weeks = calendar.monthcalendar(year, month)
    sundays = [week[calendar.SUNDAY] for week in weeks if week[calendar.SUNDAY]]
    return sundays[n]


def _utc(year: int, month: int, day: int, hour: int, offset_minutes: int) -> datetime:
    local = datetime(year, month, day, hour, tzinfo=timezone.utc)
    return local - timedelta(minutes=offset_minutes)


def _dst_active(rule: str, std_minutes: int, now_utc: datetime) -> bool:
    year = now_utc.year
    if rule == US_DST:
        # 2nd Sunday of March 02:00 local standard -> 1st Sunday of November 02:00 local daylight
        start = _utc(year, 3, _nth_sunday(year, 3, 1), 2, std_minutes)
        end = _utc(year, 11, _nth_sunday(year, 11, 0), 2, std_minutes + 60)
        return start <= now_utc < end
    if rule == EU_DST:
        start = _utc(year, 3, _nth_sunday(year, 3, -1), 1, 0)
        end = _utc(year, 10, _nth_sunday(year, 10, -1), 1, 0)
        return start <= now_utc < end
    if rule == AU_DST:
        # southern hemisphere: active from October to April
        end = _utc(year, 4, _nth_sunday(year, 4, 0), 3, std_minutes + 60)
        start = _utc(year, 10, _nth_sunday(year, 10, 0), 2, std_minutes)
        return now_utc < end or now_utc >= start
    raise ValueError(f"unknown DST rule: {rule}")


def utc_offset(tz_name: str, now_utc: datetime | None = None) -> timedelta:
    """Return the UTC offset in effect for tz_name at now_utc.

    Raises:
        TimezoneUnresolved: tz_name is empty or not in the static table
    """
    if now_utc is None:
        now_utc = datetime.now(timezone.utc)
    name = (tz_name or "").strip()
    if not name:
        raise TimezoneUnresolved(tz_name)

    if name in ZONE_TABLE:
        std_minutes, rule = ZONE_TABLE[name]
        if rule and _dst_active(rule, std_minutes, now_utc):
            return timedelta(minutes=std_minutes + 60)
        return timedelta(minutes=std_minutes)

    if name.upper() in ABBREVIATIONS:
        return timedelta(minutes=ABBREVIATIONS[name.upper()])

    match = _EXPLICIT_OFFSET.match(name)
    if match:
        sign, hours, minutes = match.groups()
        total = int(hours) * 60 + int(minutes or 0)
        return timedelta(minutes=-total if sign == "-" else total)

    raise TimezoneUnresolved(tz_name)


def local_time_string(
    tz_name: str,
    now_utc: datetime | None = None,
    default_timezone: str = DEFAULT_TIMEZONE,
) -> str:
    """Format the local time ("HH:MM", 24h) for tz_name.

    Falls back to default_timezone when tz_name cannot be resolved, and to
    UTC if the default itself is not in the table.
    """
    if now_utc is None:
        now_utc = datetime.now(timezone.utc)
    try:
        offset = utc_offset(tz_name, now_utc)
    except TimezoneUnresolved as e:
        logger.debug("Timezone unresolved, using default %s: %s", default_timezone, e)
        try:
            offset = utc_offset(default_timezone, now_utc)
        except TimezoneUnresolved:
            logger.warning("Default timezone %r unresolved, using UTC", default_timezone)
            offset = timedelta(0)
    return (now_utc + offset).strftime("%H:%M")
