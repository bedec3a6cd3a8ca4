"""Persistence layer for players, matches, per-player stats and uploads."""

from __future__ import annotations

import json
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Mapping, Optional
from uuid import uuid4


UPLOAD_STATES = ("pending", "processing", "completed", "failed")
MATCH_STATES = ("upcoming", "finished")

PLAYER_STAT_COLUMNS = (
    "minutes",
    "field_goals_made",
    "field_goals_attempted",
    "two_points_made",
    "two_points_attempted",
    "three_points_made",
    "three_points_attempted",
    "free_throws_made",
    "free_throws_attempted",
    "offensive_rebounds",
    "defensive_rebounds",
    "total_rebounds",
    "assists",
    "steals",
    "blocks",
    "turnovers",
    "fouls",
    "fouls_drawn",
    "plus_minus",
    "efficiency",
    "points",
)


class DuplicateUploadError(Exception):
    """An upload already exists for the same match date and opponent."""

    def __init__(self, existing_upload_id: str, status: str | None = None):
        super().__init__("A match with this date and opponent already exists")
        self.existing_upload_id = existing_upload_id
        self.status = status


@dataclass
class PlayerIdentity:
    player_id: str
    name: str
    number: str
    born_year: int
    stats_history: List[str]
    created_at: datetime
    updated_at: datetime


@dataclass
class MatchRecord:
    match_id: str
    date: datetime
    opponent: str
    venue: Optional[str]
    home_away: Optional[str]
    game_number: Optional[str]
    attendance: Optional[int]
    duration: Optional[str]
    status: str
    our_score: Optional[int]
    opponent_score: Optional[int]
    result: str
    team_stats: dict
    player_stats: List[str]
    created_at: datetime
    updated_at: datetime


@dataclass
class PlayerStatRecord:
    stat_id: str
    match_id: str
    player_id: str
    stats: dict
    created_at: datetime


@dataclass
class UploadRecord:
    upload_id: str
    file_name: str
    uploaded_by: str
    match_date: datetime
    opponent: str
    status: str
    error_message: Optional[str]
    match_id: Optional[str]
    created_at: datetime
    updated_at: datetime


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _date_key(value: datetime) -> str:
    return value.isoformat()


class BoxScoreStore:
    """SQLite-backed store; uniqueness rules live in the schema."""

    def __init__(self, db_path: Path | str):
        self._use_uri = isinstance(db_path, str) and db_path.startswith("file:")
        self.db_path = db_path if self._use_uri else Path(db_path)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path)
        else:
            conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS players (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL UNIQUE,
                number TEXT NOT NULL,
                born_year INTEGER NOT NULL,
                stats_history_json TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS matches (
                id TEXT PRIMARY KEY,
                date TEXT NOT NULL,
                opponent TEXT NOT NULL,
                venue TEXT,
                home_away TEXT,
                game_number TEXT,
                attendance INTEGER,
                duration TEXT,
                status TEXT NOT NULL,
                our_score INTEGER,
                opponent_score INTEGER,
                result TEXT NOT NULL,
                team_stats_json TEXT NOT NULL,
                player_stats_json TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                UNIQUE (date, opponent)
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS player_stats (
                id TEXT PRIMARY KEY,
                match_id TEXT NOT NULL REFERENCES matches(id),
                player_id TEXT NOT NULL REFERENCES players(id),
                stats_json TEXT NOT NULL,
                created_at TEXT NOT NULL,
                UNIQUE (match_id, player_id)
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS uploads (
                id TEXT PRIMARY KEY,
                file_name TEXT NOT NULL,
                uploaded_by TEXT NOT NULL,
                match_date TEXT NOT NULL,
                opponent TEXT NOT NULL,
                status TEXT NOT NULL DEFAULT 'pending',
                error_message TEXT,
                match_id TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                UNIQUE (match_date, opponent)
            )
            """
        )
        conn.commit()

    # Players

    def create_player(self, *, name: str, number: str, born_year: int) -> PlayerIdentity:
        player_id = uuid4().hex
        now = _now()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO players (id, name, number, born_year, stats_history_json, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (player_id, name, number, born_year, "[]", now, now),
            )
            conn.commit()
        player = self.get_player(player_id)
        if player is None:  # pragma: no cover
            raise KeyError(f"Player {player_id} not found after insert")
        return player

    def get_player(self, player_id: str) -> Optional[PlayerIdentity]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM players WHERE id = ?", (player_id,)).fetchone()
            if row is None:
                return None
            return self._row_to_player(row)

    def get_player_by_name(self, name: str) -> Optional[PlayerIdentity]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM players WHERE name = ?", (name,)).fetchone()
            if row is None:
                return None
            return self._row_to_player(row)

    def list_players(self) -> List[PlayerIdentity]:
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM players ORDER BY name").fetchall()
        return [self._row_to_player(row) for row in rows]

    def update_player_number(self, player_id: str, number: str) -> PlayerIdentity:
        with self._connect() as conn:
            cursor = conn.execute(
                "UPDATE players SET number = ?, updated_at = ? WHERE id = ?",
                (number, _now(), player_id),
            )
            conn.commit()
        if cursor.rowcount == 0:
            raise KeyError(f"Player {player_id} not found")
        player = self.get_player(player_id)
        if player is None:  # pragma: no cover
            raise KeyError(f"Player {player_id} not found after update")
        return player

    def append_player_stat(self, player_id: str, stat_id: str) -> PlayerIdentity:
        player = self.get_player(player_id)
        if player is None:
            raise KeyError(f"Player {player_id} not found")
        if stat_id in player.stats_history:
            return player
        history = player.stats_history + [stat_id]
        with self._connect() as conn:
            conn.execute(
                "UPDATE players SET stats_history_json = ?, updated_at = ? WHERE id = ?",
                (json.dumps(history), _now(), player_id),
            )
            conn.commit()
        player.stats_history = history
        return player

    # Matches

    def create_match(
        self,
        *,
        date: datetime,
        opponent: str,
        status: str,
        result: str = "Pending",
        venue: str | None = None,
        home_away: str | None = None,
        game_number: str | None = None,
        attendance: int | None = None,
        duration: str | None = None,
        our_score: int | None = None,
        opponent_score: int | None = None,
        team_stats: Mapping[str, int] | None = None,
    ) -> MatchRecord:
        if status not in MATCH_STATES:
            raise ValueError(f"Unknown match status {status!r}")
        match_id = uuid4().hex
        now = _now()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO matches (
                    id, date, opponent, venue, home_away, game_number, attendance, duration,
                    status, our_score, opponent_score, result, team_stats_json,
                    player_stats_json, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    match_id,
                    _date_key(date),
                    opponent,
                    venue,
                    home_away,
                    game_number,
                    attendance,
                    duration,
                    status,
                    our_score,
                    opponent_score,
                    result,
                    json.dumps(dict(team_stats or {})),
                    "[]",
                    now,
                    now,
                ),
            )
            conn.commit()
        match = self.get_match(match_id)
        if match is None:  # pragma: no cover
            raise KeyError(f"Match {match_id} not found after insert")
        return match

    def get_match(self, match_id: str) -> Optional[MatchRecord]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM matches WHERE id = ?", (match_id,)).fetchone()
            if row is None:
                return None
            return self._row_to_match(row)

    def find_match(self, *, date: datetime, opponent: str, status: str | None = None) -> Optional[MatchRecord]:
        query = "SELECT * FROM matches WHERE date = ? AND opponent = ?"
        params: list[str] = [_date_key(date), opponent]
        if status:
            query += " AND status = ?"
            params.append(status)
        with self._connect() as conn:
            row = conn.execute(query, tuple(params)).fetchone()
            if row is None:
                return None
            return self._row_to_match(row)

    def list_matches(self, *, status: str | None = None, limit: int = 50) -> List[MatchRecord]:
        query = "SELECT * FROM matches"
        params: list[str | int] = []
        if status:
            query += " WHERE status = ?"
            params.append(status)
        query += " ORDER BY date DESC LIMIT ?"
        params.append(limit)
        with self._connect() as conn:
            rows = conn.execute(query, tuple(params)).fetchall()
        return [self._row_to_match(row) for row in rows]

    def update_match(
        self,
        match_id: str,
        *,
        status: str | None = None,
        result: str | None = None,
        venue: str | None = None,
        home_away: str | None = None,
        game_number: str | None = None,
        attendance: int | None = None,
        duration: str | None = None,
        our_score: int | None = None,
        opponent_score: int | None = None,
        team_stats: Mapping[str, int] | None = None,
    ) -> MatchRecord:
        match = self.get_match(match_id)
        if match is None:
            raise KeyError(f"Match {match_id} not found")
        if status is not None and status not in MATCH_STATES:
            raise ValueError(f"Unknown match status {status!r}")

        with self._connect() as conn:
            conn.execute(
                """
                UPDATE matches
                SET status = ?, result = ?, venue = ?, home_away = ?, game_number = ?,
                    attendance = ?, duration = ?, our_score = ?, opponent_score = ?,
                    team_stats_json = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    status if status is not None else match.status,
                    result if result is not None else match.result,
                    venue if venue is not None else match.venue,
                    home_away if home_away is not None else match.home_away,
                    game_number if game_number is not None else match.game_number,
                    attendance if attendance is not None else match.attendance,
                    duration if duration is not None else match.duration,
                    our_score if our_score is not None else match.our_score,
                    opponent_score if opponent_score is not None else match.opponent_score,
                    json.dumps(dict(team_stats) if team_stats is not None else match.team_stats),
                    _now(),
                    match_id,
                ),
            )
            conn.commit()
        updated = self.get_match(match_id)
        if updated is None:  # pragma: no cover
            raise KeyError(f"Match {match_id} not found after update")
        return updated

    def append_match_player_stat(self, match_id: str, stat_id: str) -> MatchRecord:
        match = self.get_match(match_id)
        if match is None:
            raise KeyError(f"Match {match_id} not found")
        if stat_id in match.player_stats:
            return match
        refs = match.player_stats + [stat_id]
        with self._connect() as conn:
            conn.execute(
                "UPDATE matches SET player_stats_json = ?, updated_at = ? WHERE id = ?",
                (json.dumps(refs), _now(), match_id),
            )
            conn.commit()
        match.player_stats = refs
        return match

    # Per-player statistics

    def create_player_stat(self, *, match_id: str, player_id: str, stats: Mapping[str, object]) -> PlayerStatRecord:
        stat_id = uuid4().hex
        payload = {column: stats.get(column) for column in PLAYER_STAT_COLUMNS}
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO player_stats (id, match_id, player_id, stats_json, created_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (stat_id, match_id, player_id, json.dumps(payload), _now()),
                )
                conn.commit()
        except sqlite3.IntegrityError:
            # One stat row per player and match; the first write stays.
            existing = self.find_player_stat(match_id=match_id, player_id=player_id)
            if existing is None:
                raise
            return existing
        record = self.find_player_stat(match_id=match_id, player_id=player_id)
        if record is None:  # pragma: no cover
            raise KeyError(f"Player stat {stat_id} not found after insert")
        return record

    def find_player_stat(self, *, match_id: str, player_id: str) -> Optional[PlayerStatRecord]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM player_stats WHERE match_id = ? AND player_id = ?",
                (match_id, player_id),
            ).fetchone()
            if row is None:
                return None
            return self._row_to_player_stat(row)

    def list_player_stats(self, match_id: str) -> List[PlayerStatRecord]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM player_stats WHERE match_id = ? ORDER BY datetime(created_at), rowid",
                (match_id,),
            ).fetchall()
        return [self._row_to_player_stat(row) for row in rows]

    # Uploads

    def create_upload(
        self,
        *,
        file_name: str,
        uploaded_by: str,
        match_date: datetime,
        opponent: str,
        status: str = "pending",
    ) -> UploadRecord:
        """Insert an upload, relying on the unique (date, opponent) index.

        A conflicting row raises :class:`DuplicateUploadError` naming it.
        """
        if status not in UPLOAD_STATES:
            raise ValueError(f"Unknown upload status {status!r}")
        upload_id = uuid4().hex
        now = _now()
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO uploads (
                        id, file_name, uploaded_by, match_date, opponent, status,
                        created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (upload_id, file_name, uploaded_by, _date_key(match_date), opponent, status, now, now),
                )
                conn.commit()
        except sqlite3.IntegrityError:
            existing = self.find_upload(match_date=match_date, opponent=opponent)
            if existing is None:
                raise
            raise DuplicateUploadError(existing.upload_id, existing.status) from None
        upload = self.get_upload(upload_id)
        if upload is None:  # pragma: no cover
            raise KeyError(f"Upload {upload_id} not found after insert")
        return upload

    def get_upload(self, upload_id: str) -> Optional[UploadRecord]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM uploads WHERE id = ?", (upload_id,)).fetchone()
            if row is None:
                return None
            return self._row_to_upload(row)

    def find_upload(self, *, match_date: datetime, opponent: str) -> Optional[UploadRecord]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM uploads WHERE match_date = ? AND opponent = ?",
                (_date_key(match_date), opponent),
            ).fetchone()
            if row is None:
                return None
            return self._row_to_upload(row)

    def count_uploads(self) -> int:
        with self._connect() as conn:
            row = conn.execute("SELECT COUNT(*) FROM uploads").fetchone()
        return int(row[0])

    def update_upload_status(
        self,
        upload_id: str,
        *,
        status: str,
        error_message: Optional[str] = None,
        match_id: Optional[str] = None,
    ) -> UploadRecord:
        if status not in UPLOAD_STATES:
            raise ValueError(f"Unknown upload status {status!r}")
        upload = self.get_upload(upload_id)
        if upload is None:
            raise KeyError(f"Upload {upload_id} not found")
        if status == "failed":
            message = error_message
        else:
            message = None
        with self._connect() as conn:
            conn.execute(
                """
                UPDATE uploads
                SET status = ?, error_message = ?, match_id = ?, updated_at = ?
                WHERE id = ?
                """,
                (status, message, match_id if match_id is not None else upload.match_id, _now(), upload_id),
            )
            conn.commit()
        updated = self.get_upload(upload_id)
        if updated is None:  # pragma: no cover
            raise KeyError(f"Upload {upload_id} not found after update")
        return updated

    def reopen_upload(self, upload_id: str, *, file_name: str, uploaded_by: str) -> UploadRecord:
        """Move a failed upload back to ``processing`` for another attempt."""
        with self._connect() as conn:
            cursor = conn.execute(
                """
                UPDATE uploads
                SET status = 'processing', error_message = NULL, file_name = ?,
                    uploaded_by = ?, updated_at = ?
                WHERE id = ? AND status = 'failed'
                """,
                (file_name, uploaded_by, _now(), upload_id),
            )
            conn.commit()
        upload = self.get_upload(upload_id)
        if upload is None:
            raise KeyError(f"Upload {upload_id} not found")
        if cursor.rowcount == 0:
            raise DuplicateUploadError(upload.upload_id, upload.status)
        return upload

    def _row_to_player(self, row: sqlite3.Row) -> PlayerIdentity:
        return PlayerIdentity(
            player_id=row["id"],
            name=row["name"],
            number=row["number"],
            born_year=row["born_year"],
            stats_history=json.loads(row["stats_history_json"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def _row_to_match(self, row: sqlite3.Row) -> MatchRecord:
        return MatchRecord(
            match_id=row["id"],
            date=datetime.fromisoformat(row["date"]),
            opponent=row["opponent"],
            venue=row["venue"],
            home_away=row["home_away"],
            game_number=row["game_number"],
            attendance=row["attendance"],
            duration=row["duration"],
            status=row["status"],
            our_score=row["our_score"],
            opponent_score=row["opponent_score"],
            result=row["result"],
            team_stats=json.loads(row["team_stats_json"]),
            player_stats=json.loads(row["player_stats_json"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def _row_to_player_stat(self, row: sqlite3.Row) -> PlayerStatRecord:
        return PlayerStatRecord(
            stat_id=row["id"],
            match_id=row["match_id"],
            player_id=row["player_id"],
            stats=json.loads(row["stats_json"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def _row_to_upload(self, row: sqlite3.Row) -> UploadRecord:
        return UploadRecord(
            upload_id=row["id"],
            file_name=row["file_name"],
            uploaded_by=row["uploaded_by"],
            match_date=datetime.fromisoformat(row["match_date"]),
            opponent=row["opponent"],
            status=row["status"],
            error_message=row["error_message"],
            match_id=row["match_id"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
