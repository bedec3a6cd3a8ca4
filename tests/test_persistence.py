from datetime import datetime

import pytest

from boxscore.persistence import DuplicateUploadError


GAME_DAY = datetime(2024, 3, 15, 18, 30)


def test_upload_uniqueness_per_date_and_opponent(store):
    first = store.create_upload(file_name="a.pdf", uploaded_by="u", match_date=GAME_DAY, opponent="Rivals")
    assert first.status == "pending"
    with pytest.raises(DuplicateUploadError) as excinfo:
        store.create_upload(file_name="b.pdf", uploaded_by="u", match_date=GAME_DAY, opponent="Rivals")
    assert excinfo.value.existing_upload_id == first.upload_id
    assert excinfo.value.status == "pending"
    other = store.create_upload(file_name="c.pdf", uploaded_by="u", match_date=GAME_DAY, opponent="Levski")
    assert other.upload_id != first.upload_id
    assert store.count_uploads() == 2


def test_upload_status_transitions(store):
    upload = store.create_upload(
        file_name="a.pdf", uploaded_by="u", match_date=GAME_DAY, opponent="Rivals", status="processing"
    )
    failed = store.update_upload_status(upload.upload_id, status="failed", error_message="boom")
    assert (failed.status, failed.error_message) == ("failed", "boom")

    reopened = store.reopen_upload(upload.upload_id, file_name="again.pdf", uploaded_by="v")
    assert reopened.status == "processing"
    assert reopened.error_message is None
    assert reopened.file_name == "again.pdf"

    done = store.update_upload_status(upload.upload_id, status="completed", match_id="m1", error_message="ignored")
    assert done.error_message is None
    assert done.match_id == "m1"
    with pytest.raises(DuplicateUploadError):
        store.reopen_upload(upload.upload_id, file_name="x.pdf", uploaded_by="v")


def test_unknown_statuses_are_rejected(store):
    with pytest.raises(ValueError):
        store.create_upload(file_name="a.pdf", uploaded_by="u", match_date=GAME_DAY, opponent="R", status="done")
    with pytest.raises(ValueError):
        store.create_match(date=GAME_DAY, opponent="R", status="cancelled")


def test_match_update_keeps_unset_fields(store):
    match = store.create_match(date=GAME_DAY, opponent="Rivals", status="upcoming", venue="Hall 1")
    updated = store.update_match(match.match_id, status="finished", our_score=80, team_stats={"total_points": 80})
    assert updated.venue == "Hall 1"
    assert updated.status == "finished"
    assert updated.team_stats == {"total_points": 80}
    assert store.find_match(date=GAME_DAY, opponent="Rivals", status="upcoming") is None
    assert store.find_match(date=GAME_DAY, opponent="Rivals").match_id == match.match_id


def test_stat_references_are_appended_once(store):
    player = store.create_player(name="Ivan Petrov", number="4", born_year=2000)
    match = store.create_match(date=GAME_DAY, opponent="Rivals", status="finished")
    stat = store.create_player_stat(match_id=match.match_id, player_id=player.player_id, stats={"points": 19})
    assert stat.stats["points"] == 19
    assert stat.stats["assists"] is None

    for _ in range(2):
        store.append_match_player_stat(match.match_id, stat.stat_id)
        store.append_player_stat(player.player_id, stat.stat_id)
    assert store.get_match(match.match_id).player_stats == [stat.stat_id]
    assert store.get_player(player.player_id).stats_history == [stat.stat_id]


def test_update_missing_player_raises(store):
    with pytest.raises(KeyError):
        store.update_player_number("missing", "5")


def test_second_player_stat_for_same_match_returns_existing(store):
    player = store.create_player(name="Ivan Petrov", number="4", born_year=2000)
    match = store.create_match(date=GAME_DAY, opponent="Rivals", status="finished")
    first = store.create_player_stat(match_id=match.match_id, player_id=player.player_id, stats={"points": 19})
    second = store.create_player_stat(match_id=match.match_id, player_id=player.player_id, stats={"points": 7})
    assert second.stat_id == first.stat_id
    assert second.stats["points"] == 19
    assert len(store.list_player_stats(match.match_id)) == 1
