"""Team profiles describing whose box score the pipeline extracts."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, Iterable, Tuple


@dataclass(frozen=True)
class TeamProfile:
    key: str
    name: str
    abbreviation: str
    duration_tokens: Tuple[str, ...] = ("200:00", "225:00")
    placeholder_born_year: int = 2000
    max_player_points: int = 50
    captain_marker: str = "(C)"

    @property
    def section_marker(self) -> str:
        return f"({self.abbreviation})"

    @classmethod
    def load(cls, path: Path) -> "TeamProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        try:
            name = data["name"]
            abbreviation = data["abbreviation"]
        except KeyError as exc:
            raise ValueError(f"team profile {path} is missing {exc.args[0]!r}") from None
        defaults = cls(key="", name=name, abbreviation=abbreviation)
        return cls(
            key=str(data.get("key") or name).upper(),
            name=name,
            abbreviation=abbreviation,
            duration_tokens=tuple(data.get("duration_tokens") or defaults.duration_tokens),
            placeholder_born_year=int(data.get("placeholder_born_year", defaults.placeholder_born_year)),
            max_player_points=int(data.get("max_player_points", defaults.max_player_points)),
            captain_marker=data.get("captain_marker", defaults.captain_marker),
        )

    def save(self, path: Path) -> None:
        payload = asdict(self)
        payload["duration_tokens"] = list(self.duration_tokens)
        path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


_PROFILES: Dict[str, TeamProfile] = {
    "ETROS": TeamProfile(
        key="ETROS",
        name="Етрос",
        abbreviation="ЕТР",
    ),
}

DEFAULT_PROFILE_KEY = "ETROS"


def get_profile(key: str | None = None) -> TeamProfile:
    lookup = (key or DEFAULT_PROFILE_KEY).strip().upper()
    try:
        return _PROFILES[lookup]
    except KeyError:
        raise KeyError(f"No team profile registered for {key!r}") from None


def register_profile(profile: TeamProfile) -> None:
    _PROFILES[profile.key.upper()] = profile


def iter_profiles() -> Iterable[TeamProfile]:
    return tuple(_PROFILES.values())
