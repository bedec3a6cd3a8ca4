"""Rebuild text rows from positioned PDF words."""

from __future__ import annotations

import io
import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

import pdfplumber


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PositionedToken:
    text: str
    x: float
    y: float
    page: int = 0


@dataclass(frozen=True)
class Line:
    y: int
    tokens: Tuple[PositionedToken, ...]

    @property
    def text(self) -> str:
        return " ".join(token.text for token in self.tokens)


def extract_tokens(data: bytes) -> List[PositionedToken]:
    """Return every word of every page with its top-left coordinate.

    Bytes that pdfplumber cannot open or lay out produce no tokens; pdfminer
    raises arbitrary errors on corrupted streams.
    """
    tokens: List[PositionedToken] = []
    try:
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            for page_number, page in enumerate(pdf.pages):
                for word in page.extract_words(keep_blank_chars=True):
                    tokens.append(
                        PositionedToken(
                            text=word["text"],
                            x=float(word["x0"]),
                            y=float(word["top"]),
                            page=page_number,
                        )
                    )
    except Exception as exc:
        logger.warning("Could not read PDF document: %s", exc)
        return []
    return tokens


def _row_key(y: float) -> int:
    # Halves round up so 100.5 and 101.2 share a row.
    return math.floor(y + 0.5)


def build_lines(tokens: Iterable[PositionedToken]) -> List[Line]:
    """Group tokens by rounded vertical position into left-to-right lines."""
    rows: Dict[int, List[PositionedToken]] = {}
    for token in tokens:
        rows.setdefault(_row_key(token.y), []).append(token)
    return [
        Line(y=y, tokens=tuple(sorted(row, key=lambda token: token.x)))
        for y, row in sorted(rows.items())
    ]


def line_texts(lines: Iterable[Line]) -> List[str]:
    return [line.text for line in lines]
