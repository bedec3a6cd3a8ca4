"""Runtime settings assembled from ``BOXSCORE_*`` environment variables."""

from __future__ import annotations

from pathlib import Path
from typing import Any, FrozenSet, Optional, Union

from pydantic import AliasChoices, Field, PrivateAttr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from boxscore.config import TeamProfile, get_profile


DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent / "boxscore.sqlite"
DEFAULT_TOKEN_SECRET = "boxscore-dev-secret"
DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024


class Settings(BaseSettings):
    """Environment-driven settings.

    ``BOXSCORE_TEAM`` selects a registered team profile and
    ``BOXSCORE_TEAM_PROFILE`` points at a JSON profile that takes precedence.
    """

    model_config = SettingsConfigDict(env_prefix="BOXSCORE_", extra="ignore")

    db_path: Union[Path, str] = DEFAULT_DB_PATH
    team_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("team_key", "BOXSCORE_TEAM"),
    )
    team_profile: Optional[Path] = None
    token_secret: str = DEFAULT_TOKEN_SECRET
    max_upload_bytes: int = Field(default=DEFAULT_MAX_UPLOAD_BYTES, gt=0)
    allowed_content_types: FrozenSet[str] = frozenset({"application/pdf"})

    _team: TeamProfile = PrivateAttr()

    @field_validator("db_path", mode="before")
    @classmethod
    def _coerce_db_path(cls, value: Any) -> Any:
        # sqlite URIs stay strings so the store can open them with uri=True.
        if isinstance(value, str) and not value.startswith("file:"):
            return Path(value)
        return value

    def model_post_init(self, __context: Any) -> None:
        if self.team_profile is not None:
            self._team = TeamProfile.load(self.team_profile)
        else:
            self._team = get_profile(self.team_key)

    @property
    def team(self) -> TeamProfile:
        return self._team

    @classmethod
    def from_env(cls, **overrides: Any) -> "Settings":
        """Read the environment; keyword overrides win over variables."""
        return cls(**overrides)
