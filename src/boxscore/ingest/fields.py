"""Positional field tables for whitespace-tokenised box-score rows."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Literal, Sequence, Tuple


FieldKind = Literal["int", "split", "text"]


@dataclass(frozen=True)
class FieldSpec:
    """A field read ``offset`` tokens after a landmark.

    ``split`` fields hold ``made/attempted`` and populate two attributes
    named ``<name>_made`` and ``<name>_attempted``. A negative offset counts
    from the end of the row.
    """

    name: str
    offset: int
    kind: FieldKind = "int"


class FieldParseError(ValueError):
    pass


def parse_int(raw: str) -> int:
    text = raw.strip()
    try:
        return int(text)
    except ValueError:
        raise FieldParseError(f"'{raw}' is not an integer") from None


def parse_split(raw: str) -> Tuple[int, int]:
    made, sep, attempted = raw.partition("/")
    if not sep:
        raise FieldParseError(f"'{raw}' is not a made/attempted pair")
    return parse_int(made), parse_int(attempted)


def _token_at(parts: Sequence[str], start: int, spec: FieldSpec) -> str:
    index = spec.offset if spec.offset < 0 else start + spec.offset
    if index >= len(parts) or -index > len(parts):
        raise FieldParseError(f"row has no token for {spec.name} at position {index}")
    return parts[index]


def read_fields(
    parts: Sequence[str],
    specs: Sequence[FieldSpec],
    *,
    start: int = 0,
    strict: bool = True,
) -> Dict[str, object]:
    """Read every field spec from ``parts``.

    With ``strict`` any missing or malformed token raises ``FieldParseError``;
    otherwise the affected attributes fall back to zero.
    """
    values: Dict[str, object] = {}
    for spec in specs:
        try:
            raw = _token_at(parts, start, spec)
            if spec.kind == "split":
                made, attempted = parse_split(raw)
                values[f"{spec.name}_made"] = made
                values[f"{spec.name}_attempted"] = attempted
            elif spec.kind == "text":
                values[spec.name] = raw
            else:
                values[spec.name] = parse_int(raw)
        except FieldParseError:
            if strict:
                raise
            if spec.kind == "split":
                values[f"{spec.name}_made"] = 0
                values[f"{spec.name}_attempted"] = 0
            elif spec.kind == "text":
                values[spec.name] = None
            else:
                values[spec.name] = 0
    return values
