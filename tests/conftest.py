from __future__ import annotations

from typing import Callable, List

import pytest

from boxscore.config import get_profile
from boxscore.config_loader import Settings
from boxscore.ingest import PositionedToken
from boxscore.persistence import BoxScoreStore


TARGET_PLAYER_LINES = [
    "*4 Ivan Petrov (C) 32:15 7/15 46.7 5/9 55.6 2/6 33.3 3/4 75.0 2 5 7 4 3 1 0 2 3 +8 18 19",
    "*7 Georgi Dimitrov 30:00 10/18 55.6 8/12 66.7 2/6 33.3 4/5 80.0 3 6 9 2 2 2 1 3 4 +5 22 26",
    "*11 Nikolay Stoyanov 28:40 8/16 50.0 6/10 60.0 2/6 33.3 5/6 83.3 1 4 5 5 1 1 0 2 2 +3 15 23",
    "15 Todor Kolev 20:05 5/11 45.5 3/7 42.9 2/4 50.0 0/2 0.0 4 6 10 7 6 3 2 4 1 -2 8 12",
    "9 Petar Ivanov DNP",
]

TARGET_TOTALS = "Totals 200:00 30/60 50.0 22/38 57.9 8/22 36.4 12/17 70.6 10 21 31 18 12 7 3 11 80"
OPPONENT_TOTALS = "Totals 200:00 27/58 46.6 18/36 50.0 9/22 40.9 12/15 80.0 8 24 32 15 10 6 2 18 75"


def make_box_score_lines(opponent: str = "Opponent", day: int = 15) -> List[str]:
    """Text rows of a home game won 80-75, in page order."""
    return [
        "Game No.: 12",
        f"Sofia Arena, Saturday {day} March 2024",
        "Start time: 18:30",
        f"Етрос 80 - 75 {opponent}",
        "Attendance: 350",
        "Game Duration: 01:45",
        "Етрос (ЕТР)",
        "No. Player Min Field Goals 2 Points 3 Points Free Throws Rebounds AS TO ST BS PF FD +/- EFF PTS",
        "M/A % M/A % M/A % M/A % OR DR TOT",
        *TARGET_PLAYER_LINES,
        TARGET_TOTALS,
        "Coach: Stefan Georgiev",
        f"{opponent} (OPP)",
        "No. Player Min Field Goals 2 Points 3 Points Free Throws Rebounds AS TO ST BS PF FD +/- EFF PTS",
        "5 John Smith 40:00 27/58 46.6 18/36 50.0 9/22 40.9 12/15 80.0 8 24 32 15 10 6 2 18 9 +5 60 75",
        OPPONENT_TOTALS,
        "Coach: Someone Else",
    ]


def tokens_from_lines(lines: List[str]) -> List[PositionedToken]:
    """Lay out every word of ``lines`` as a positioned token, one row per line."""
    tokens: List[PositionedToken] = []
    for row, line in enumerate(lines):
        y = 40.0 + row * 12.0
        for column, word in enumerate(line.split()):
            # Jitter stays well below half a point so rounding keeps rows intact.
            tokens.append(PositionedToken(text=word, x=20.0 + column * 30.0, y=y + (column % 2) * 0.2))
    return tokens


@pytest.fixture(scope="module")
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def profile():
    return get_profile("ETROS")


@pytest.fixture
def box_score_lines() -> List[str]:
    return make_box_score_lines()


@pytest.fixture
def store(tmp_path) -> BoxScoreStore:
    return BoxScoreStore(tmp_path / "boxscore.sqlite")


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(db_path=tmp_path / "boxscore.sqlite", token_secret="test-secret")


@pytest.fixture
def fake_pdf(monkeypatch) -> Callable[..., bytes]:
    """Register a synthetic document and return the bytes that stand for it.

    The parser's PDF reader is replaced so the returned bytes resolve to the
    laid-out rows; any other bytes still go through the real reader.
    """
    from boxscore.ingest import parser

    documents: dict[bytes, List[PositionedToken]] = {}
    real_extract = parser.extract_tokens

    def _extract(data: bytes) -> List[PositionedToken]:
        if data in documents:
            return documents[data]
        return real_extract(data)

    monkeypatch.setattr(parser, "extract_tokens", _extract)

    def _register(opponent: str = "Opponent", day: int = 15) -> bytes:
        data = f"%PDF-1.4 box score {opponent} {day}".encode("utf-8")
        documents[data] = tokens_from_lines(make_box_score_lines(opponent=opponent, day=day))
        return data

    return _register
