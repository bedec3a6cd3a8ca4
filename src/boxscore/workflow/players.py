"""Match parsed roster names to stored player identities."""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from boxscore.config import TeamProfile
from boxscore.models import PlayerRow
from boxscore.persistence import BoxScoreStore


logger = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    created: List[str] = field(default_factory=list)
    existing: List[str] = field(default_factory=list)
    errors: List[Dict[str, str]] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "created": list(self.created),
            "existing": list(self.existing),
            "errors": [dict(error) for error in self.errors],
        }


def reconcile_players(
    store: BoxScoreStore,
    rows: Iterable[PlayerRow],
    profile: TeamProfile,
) -> ReconcileResult:
    """Create missing players and refresh jersey numbers.

    Each row is handled on its own; a failure is recorded and the remaining
    rows are still processed.
    """
    result = ReconcileResult()
    for row in rows:
        if row.did_not_play:
            continue
        name = row.name.strip()
        label = f"{name} (#{row.number})"
        try:
            player = store.get_player_by_name(name)
            if player is None:
                store.create_player(
                    name=name,
                    number=row.number,
                    born_year=profile.placeholder_born_year,
                )
                logger.info("Created new player: %s", label)
                result.created.append(label)
                continue
            if player.number != row.number:
                logger.info("Updating number for %s: #%s -> #%s", name, player.number, row.number)
                store.update_player_number(player.player_id, row.number)
            result.existing.append(label)
        except (sqlite3.Error, KeyError, ValueError) as exc:
            logger.error("Error managing player %s: %s", row.name, exc)
            result.errors.append({"name": row.name, "error": str(exc)})
    return result
