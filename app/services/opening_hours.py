"""Opening hours evaluation: is the restaurant open right now?

Every function here is pure. The schedule is rebuilt from the raw
OpeningHour list on each call, so callers can poll freely (the menu page
refreshes its badge once a minute).

Day indexes follow the spreadsheet convention: 0=Sunday ... 6=Saturday.
Python's datetime.weekday() is 0=Monday, so it is shifted by one.
"""
import re
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Iterable, Optional

import pytz

from app.models.opening_hours import (
    NextOpen,
    OpeningHour,
    OpeningHourWindow,
    RestaurantStatus,
)
from app.services.formatting import format_time_label

DEFAULT_TIMEZONE = "America/Sao_Paulo"

WEEKDAY_LABELS_PT = [
    "Domingo",
    "Segunda",
    "Terça",
    "Quarta",
    "Quinta",
    "Sexta",
    "Sábado",
]

LABEL_OPEN = "Aberto"
LABEL_CLOSED = "Fechado"

MINUTES_PER_DAY = 24 * 60
DAYS_PER_WEEK = 7

# "9", "09", "9:30", "09:30", "8:0", "17h30", "17h", "930", "1730"
_LOOSE_TIME_RE = re.compile(r"^(\d{1,2})(?:[:hH](\d{1,2})?|(\d{2}))?$")
_STRICT_TIME_RE = re.compile(r"^(\d{1,2}):(\d{1,2})$")


@dataclass(frozen=True)
class NormalizedWindow:
    """Validated window with minute offsets since local midnight."""
    opens_at: str
    closes_at: str
    start_minutes: int
    end_minutes: int

    def to_window(self) -> OpeningHourWindow:
        return OpeningHourWindow(opens_at=self.opens_at, closes_at=self.closes_at)


@dataclass(frozen=True)
class DaySchedule:
    """Validated, start-sorted windows for one weekday."""
    day_of_week: int
    windows: list[NormalizedWindow]


@dataclass(frozen=True)
class ZonedNow:
    """An instant projected onto a timezone's local weekday and minute of day."""
    day_index: int
    minutes_since_midnight: int


def _format_hhmm(hours: int, minutes: int) -> str:
    hours = min(23, max(0, hours))
    minutes = min(59, max(0, minutes))
    return f"{hours:02d}:{minutes:02d}"


def normalize_time(raw: Optional[str]) -> str:
    """Normalize a free-form spreadsheet time into "HH:MM".

    Out-of-range digits are clamped ("25:70" -> "23:59") rather than
    rejected. Anything unparseable yields "" which callers treat as
    "no time".

    Examples:
        "930" -> "09:30", "17h30" -> "17:30", "8:0" -> "08:00", "abc" -> ""
    """
    if not raw:
        return ""
    trimmed = str(raw).strip()
    if not trimmed:
        return ""

    match = _LOOSE_TIME_RE.match(trimmed)
    if match:
        hours = int(match.group(1))
        minutes_raw = match.group(2) or match.group(3)
        minutes = int(minutes_raw) if minutes_raw else 0
        return _format_hhmm(hours, minutes)

    # Fall back to bare digits: "9.30" -> "930" -> "09:30"
    digits_only = re.sub(r"\D", "", trimmed)
    if 3 <= len(digits_only) <= 4:
        return _format_hhmm(int(digits_only[:-2]), int(digits_only[-2:]))

    return ""


def time_to_minutes(time_str: Optional[str]) -> Optional[int]:
    """Convert "HH:MM" to minutes since midnight, or None if invalid."""
    if not time_str:
        return None
    match = _STRICT_TIME_RE.match(time_str.strip())
    if not match:
        return None

    hours = int(match.group(1))
    minutes = int(match.group(2))
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        return None
    return hours * 60 + minutes


def normalize_windows(windows: Iterable[OpeningHourWindow]) -> list[NormalizedWindow]:
    """Keep only windows that parse and close strictly after they open."""
    normalized: list[NormalizedWindow] = []
    for window in windows:
        start = time_to_minutes(window.opens_at)
        end = time_to_minutes(window.closes_at)
        if start is None or end is None or end <= start:
            continue
        normalized.append(
            NormalizedWindow(
                opens_at=window.opens_at,
                closes_at=window.closes_at,
                start_minutes=start,
                end_minutes=end,
            )
        )
    normalized.sort(key=lambda w: w.start_minutes)
    return normalized


def build_day_schedules(opening_hours: Iterable[OpeningHour]) -> list[DaySchedule]:
    """Group validated windows by weekday.

    Entries sharing a day_of_week are concatenated and re-sorted by start
    time. Overlapping windows are kept as-is. Days left without any valid
    window are omitted, which callers read as "closed all day".
    """
    by_day: dict[int, list[NormalizedWindow]] = {}
    for entry in opening_hours:
        by_day.setdefault(entry.day_of_week, []).extend(normalize_windows(entry.windows))

    schedules = [
        DaySchedule(
            day_of_week=day,
            windows=sorted(windows, key=lambda w: w.start_minutes),
        )
        for day, windows in by_day.items()
        if windows
    ]
    schedules.sort(key=lambda s: s.day_of_week)
    return schedules


def resolve_timezone(timezone_name: Optional[str]) -> tuple[tzinfo, bool]:
    """Look up an IANA timezone.

    Returns:
        (tzinfo, True) when the name is known, (UTC, False) otherwise.
        The evaluator never logs; callers decide whether to warn.
    """
    if not timezone_name:
        return pytz.UTC, False
    try:
        return pytz.timezone(timezone_name), True
    except pytz.UnknownTimeZoneError:
        return pytz.UTC, False


def get_zoned_now(timezone_name: Optional[str], instant: Optional[datetime] = None) -> ZonedNow:
    """Project an instant onto the local weekday/minute of a timezone.

    Naive instants are taken as UTC. Unknown timezones fall back to UTC.
    """
    tz, _ = resolve_timezone(timezone_name)
    if instant is None:
        instant = datetime.now(pytz.UTC)
    elif instant.tzinfo is None:
        instant = pytz.UTC.localize(instant)

    local = instant.astimezone(tz)
    day_index = (local.weekday() + 1) % DAYS_PER_WEEK
    return ZonedNow(day_index=day_index, minutes_since_midnight=local.hour * 60 + local.minute)


def find_day_schedule(schedules: list[DaySchedule], day_index: int) -> Optional[DaySchedule]:
    for schedule in schedules:
        if schedule.day_of_week == day_index:
            return schedule
    return None


def find_next_window(
    schedules: list[DaySchedule], starting_day_index: int, now_minutes: int
) -> Optional[NextOpen]:
    """Scan today and the following six days for the next opening.

    Today only counts windows starting strictly after now; later days use
    their earliest window.
    """
    for offset in range(DAYS_PER_WEEK):
        day_index = (starting_day_index + offset) % DAYS_PER_WEEK
        schedule = find_day_schedule(schedules, day_index)
        if schedule is None:
            continue
        for window in schedule.windows:
            if offset > 0 or window.start_minutes > now_minutes:
                return NextOpen(day_of_week=day_index, opens_at=window.opens_at)
    return None


def get_restaurant_status(
    opening_hours: list[OpeningHour],
    timezone_name: Optional[str],
    instant: Optional[datetime] = None,
) -> RestaurantStatus:
    """Decide whether the restaurant is open at the given instant.

    An empty schedule means nobody filled in the hours sheet yet, so the
    restaurant is reported as always open. A schedule that simply has no
    entry for today is closed. Windows are half-open: at exactly closes_at
    the restaurant is closed. If windows overlap, the first one in start
    order supplies closes_at.

    Args:
        opening_hours: Raw weekly schedule as loaded from the spreadsheet
        timezone_name: IANA timezone of the restaurant
        instant: Moment to evaluate (defaults to now)

    Returns:
        RestaurantStatus for that instant
    """
    zoned = get_zoned_now(timezone_name, instant)

    if not opening_hours:
        return RestaurantStatus(
            is_open=True,
            label=LABEL_OPEN,
            current_day_index=zoned.day_index,
            todays_windows=[OpeningHourWindow(opens_at="00:00", closes_at="23:59")],
        )

    schedules = build_day_schedules(opening_hours)
    today = find_day_schedule(schedules, zoned.day_index)
    todays_windows = today.windows if today else []
    now_minutes = zoned.minutes_since_midnight

    current = next(
        (w for w in todays_windows if w.start_minutes <= now_minutes < w.end_minutes),
        None,
    )
    if current is not None:
        return RestaurantStatus(
            is_open=True,
            label=LABEL_OPEN,
            current_day_index=zoned.day_index,
            todays_windows=[w.to_window() for w in todays_windows],
            closes_at=current.closes_at,
        )

    return RestaurantStatus(
        is_open=False,
        label=LABEL_CLOSED,
        current_day_index=zoned.day_index,
        todays_windows=[w.to_window() for w in todays_windows],
        next_open=find_next_window(schedules, zoned.day_index, now_minutes),
    )


def get_weekday_label(day_index: int) -> str:
    """Portuguese weekday label; unknown indexes map to Sunday."""
    if 0 <= day_index < len(WEEKDAY_LABELS_PT):
        return WEEKDAY_LABELS_PT[day_index]
    return WEEKDAY_LABELS_PT[0]


def format_status_hint(status: RestaurantStatus) -> Optional[str]:
    """Text shown under the open/closed badge.

    The weekday is only mentioned when the next opening is not today.
    """
    if status.is_open:
        return f"Fecha às {format_time_label(status.closes_at)}" if status.closes_at else None

    if status.next_open is None:
        return None
    if status.next_open.day_of_week != status.current_day_index:
        weekday = get_weekday_label(status.next_open.day_of_week)
        return f"Abre {weekday} às {format_time_label(status.next_open.opens_at)}"
    return f"Abre às {format_time_label(status.next_open.opens_at)}"
