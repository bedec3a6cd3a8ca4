from pathlib import Path

import pytest

from boxscore.config import TeamProfile, get_profile, iter_profiles, register_profile
from boxscore.config_loader import DEFAULT_MAX_UPLOAD_BYTES, Settings


def test_default_profile_is_etros():
    profile = get_profile()
    assert profile.name == "Етрос"
    assert profile.abbreviation == "ЕТР"
    assert profile.section_marker == "(ЕТР)"
    assert profile.duration_tokens == ("200:00", "225:00")


def test_get_profile_is_case_insensitive():
    assert get_profile("etros") is get_profile("ETROS")


def test_get_profile_missing_raises():
    with pytest.raises(KeyError):
        get_profile("NOPE")


def test_register_profile():
    profile = TeamProfile(key="rilski", name="Рилски спортист", abbreviation="РИЛ")
    register_profile(profile)
    assert get_profile("RILSKI") is profile
    assert profile in iter_profiles()


def test_profile_json_round_trip(tmp_path: Path):
    path = tmp_path / "team.json"
    profile = TeamProfile(key="LEV", name="Levski", abbreviation="LEV", max_player_points=60)
    profile.save(path)
    assert TeamProfile.load(path) == profile


def test_profile_load_requires_name(tmp_path: Path):
    path = tmp_path / "team.json"
    path.write_text('{"abbreviation": "X"}', encoding="utf-8")
    with pytest.raises(ValueError):
        TeamProfile.load(path)


def test_settings_from_env(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("BOXSCORE_DB_PATH", str(tmp_path / "db.sqlite"))
    monkeypatch.setenv("BOXSCORE_TOKEN_SECRET", "abc")
    monkeypatch.setenv("BOXSCORE_MAX_UPLOAD_BYTES", "1024")
    monkeypatch.delenv("BOXSCORE_TEAM_PROFILE", raising=False)
    monkeypatch.delenv("BOXSCORE_TEAM", raising=False)
    settings = Settings.from_env()
    assert settings.db_path == tmp_path / "db.sqlite"
    assert settings.token_secret == "abc"
    assert settings.max_upload_bytes == 1024
    assert settings.team.key == "ETROS"


def test_settings_defaults(monkeypatch):
    for name in ("BOXSCORE_DB_PATH", "BOXSCORE_TOKEN_SECRET", "BOXSCORE_MAX_UPLOAD_BYTES", "BOXSCORE_TEAM"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("BOXSCORE_TEAM_PROFILE", raising=False)
    settings = Settings.from_env()
    assert settings.max_upload_bytes == DEFAULT_MAX_UPLOAD_BYTES
    assert settings.allowed_content_types == frozenset({"application/pdf"})


def test_settings_team_profile_file(monkeypatch, tmp_path: Path):
    path = tmp_path / "team.json"
    TeamProfile(key="LEV", name="Levski", abbreviation="LEV").save(path)
    monkeypatch.setenv("BOXSCORE_TEAM_PROFILE", str(path))
    assert Settings.from_env().team.name == "Levski"


def test_settings_rejects_bad_upload_limit(monkeypatch):
    monkeypatch.setenv("BOXSCORE_MAX_UPLOAD_BYTES", "lots")
    with pytest.raises(ValueError):
        Settings.from_env()
