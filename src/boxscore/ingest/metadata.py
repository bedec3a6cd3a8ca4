"""Match header extraction: date, venue, score line and game facts."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from typing import Iterable, Optional, Pattern, Tuple

from boxscore.config import TeamProfile


GAME_NUMBER_RE = re.compile(r"Game No\.:\s*(\d+)", re.IGNORECASE)
ATTENDANCE_RE = re.compile(r"Attendance:\s*(\d+)", re.IGNORECASE)
DURATION_RE = re.compile(r"Game Duration:\s*(\d{2}):(\d{2})", re.IGNORECASE)
DATE_VENUE_RE = re.compile(r"([^,]+),\s*(\w+)\s+(\d{1,2})\s+(\w+)\s+(\d{4})")
START_TIME_RE = re.compile(r"Start time:\s*(\d{2}):(\d{2})", re.IGNORECASE)

MONTHS: dict[str, int] = {
    "jan": 1,
    "january": 1,
    "qnuari": 1,
    "yanuari": 1,
    "януари": 1,
    "feb": 2,
    "february": 2,
    "fevruari": 2,
    "februari": 2,
    "февруари": 2,
    "mar": 3,
    "march": 3,
    "mart": 3,
    "март": 3,
    "apr": 4,
    "april": 4,
    "април": 4,
    "may": 5,
    "mai": 5,
    "май": 5,
    "jun": 6,
    "june": 6,
    "juni": 6,
    "yuni": 6,
    "юни": 6,
    "jul": 7,
    "july": 7,
    "juli": 7,
    "yuli": 7,
    "юли": 7,
    "aug": 8,
    "august": 8,
    "avgust": 8,
    "август": 8,
    "sep": 9,
    "sept": 9,
    "september": 9,
    "septemvri": 9,
    "септември": 9,
    "oct": 10,
    "october": 10,
    "oktomvri": 10,
    "октомври": 10,
    "nov": 11,
    "november": 11,
    "noemvri": 11,
    "ноември": 11,
    "dec": 12,
    "december": 12,
    "dekemvri": 12,
    "декември": 12,
}


class MatchParseError(ValueError):
    """Raised when a document lacks the information every later step needs."""


@dataclass
class MatchInfo:
    date: Optional[datetime] = None
    venue: Optional[str] = None
    opponent: Optional[str] = None
    target_score: Optional[int] = None
    opponent_score: Optional[int] = None
    game_number: Optional[str] = None
    attendance: Optional[int] = None
    duration: Optional[str] = None
    home_is_target: Optional[bool] = None


def parse_match_date(day: str, month: str, year: str) -> Optional[datetime]:
    text = f"{month} {day} {year}"
    for fmt in ("%B %d %Y", "%b %d %Y"):
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    month_number = MONTHS.get(month.lower())
    if month_number is None:
        return None
    try:
        return datetime(int(year), month_number, int(day))
    except ValueError:
        return None


SCORE_PART = r"(?P<left_score>\d+)\s*[–-]\s*(?P<right_score>\d+)"
HEADER_FIELD_RES = (GAME_NUMBER_RE, ATTENDANCE_RE, DURATION_RE, START_TIME_RE)


@lru_cache(maxsize=None)
def _score_patterns(target: str) -> Tuple[Pattern[str], Pattern[str]]:
    """Score line patterns with the target on the left and on the right."""
    name = re.escape(target)
    return (
        re.compile(rf"(?:^|\s){name}\s+{SCORE_PART}\s+(?P<opponent>.+)$"),
        re.compile(rf"^(?P<opponent>.+?)\s+{SCORE_PART}\s+{name}(?:\s|$)"),
    )


def _strip_header_fields(text: str) -> str:
    for pattern in HEADER_FIELD_RES:
        text = pattern.sub(" ", text)
    return " ".join(text.split())


def _apply_score_line(info: MatchInfo, line: str, target: str) -> None:
    # Header fields sharing the row are cut from the opponent name.
    home, away = _score_patterns(target)
    for pattern, home_is_target in ((home, True), (away, False)):
        match = pattern.search(line)
        if not match:
            continue
        opponent = _strip_header_fields(match.group("opponent"))
        if not opponent:
            continue
        left_score = int(match.group("left_score"))
        right_score = int(match.group("right_score"))
        info.home_is_target = home_is_target
        info.opponent = opponent
        info.target_score = left_score if home_is_target else right_score
        info.opponent_score = right_score if home_is_target else left_score
        return


def extract_match_info(lines: Iterable[str], profile: TeamProfile) -> MatchInfo:
    info = MatchInfo()
    for line in lines:
        game_number = GAME_NUMBER_RE.search(line)
        if game_number:
            info.game_number = game_number.group(1)

        attendance = ATTENDANCE_RE.search(line)
        if attendance:
            info.attendance = int(attendance.group(1))

        duration = DURATION_RE.search(line)
        if duration:
            info.duration = f"{duration.group(1)}:{duration.group(2)}"

        _apply_score_line(info, line, profile.name)

        date_venue = DATE_VENUE_RE.search(line)
        if date_venue:
            parsed = parse_match_date(date_venue.group(3), date_venue.group(4), date_venue.group(5))
            if parsed is not None:
                info.venue = date_venue.group(1).strip()
                info.date = parsed

        start_time = START_TIME_RE.search(line)
        if start_time and info.date is not None:
            hours, minutes = int(start_time.group(1)), int(start_time.group(2))
            if hours < 24 and minutes < 60:
                info.date = info.date.replace(hour=hours, minute=minutes)

    if info.date is None or not info.opponent or info.home_is_target is None:
        raise MatchParseError("Missing required match information (date, opponent, or team positions)")
    return info
