from __future__ import annotations

import datetime
import logging
from typing import List, Optional, Protocol, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from batstat.core.config import RECENT_AT_BATS_LIMIT
from batstat.core.stat_aggregator import HitLocation, InvalidStatError, Stat, StatType
from batstat.database.models import Game, Player, StatRecord
from batstat.services.errors import NotFoundError


logger = logging.getLogger(__name__)


class StatSource(Protocol):
    """Anything that can hand over the recorded stats for a game."""

    def fetch_game_stats(self, game_id: str) -> List[Stat]:
        ...

    def fetch_player_game_stats(self, game_id: str, player_id: str) -> List[Stat]:
        ...


class StatService:
    def __init__(self, db: Session):
        self.db = db

    def record_at_bat(
        self,
        game_id: str,
        player_id: str,
        type: StatType,
        outcome: Optional[str] = None,
        runs_batted_in: Optional[int] = None,
        inning: Optional[int] = None,
        at_bat_number: Optional[int] = None,
        hit_location: Optional[HitLocation] = None,
        timestamp: Optional[datetime.datetime] = None,
    ) -> Stat:
        logger.info(f"Recording at-bat: {getattr(type, 'value', type)} for player {player_id} in game {game_id}")

        if self.db.get(Game, game_id) is None:
            raise NotFoundError("game", game_id)
        if self.db.get(Player, player_id) is None:
            raise NotFoundError("player", player_id)

        # building the Stat is where malformed values are rejected
        kwargs = {}
        if timestamp is not None:
            kwargs["timestamp"] = timestamp
        stat = Stat(
            game_id=game_id,
            player_id=player_id,
            type=type,
            outcome=outcome,
            runs_batted_in=runs_batted_in,
            inning=inning,
            at_bat_number=at_bat_number,
            hit_location=hit_location,
            **kwargs,
        )

        if at_bat_number is None:
            logger.warning(f"At-bat number missing for stat {stat.id}")

        try:
            self.db.add(StatRecord.from_stat(stat))
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to record at-bat: {e}")
            raise

        logger.info(f"Successfully recorded at-bat {stat.id}")
        return stat

    def record_runs(
        self,
        game_id: str,
        player_ids: Sequence[str],
        inning: Optional[int] = None,
        timestamp: Optional[datetime.datetime] = None,
    ) -> List[Stat]:
        """
        One `run` stat per runner who scored, all committed together. Runs are
        not turns at the plate, so they carry no at-bat number.
        """
        logger.info(f"Recording {len(player_ids)} runs in game {game_id}, inning {inning}")

        if len(set(player_ids)) != len(player_ids):
            raise InvalidStatError("a runner can only score once per play")
        if self.db.get(Game, game_id) is None:
            raise NotFoundError("game", game_id)
        for player_id in player_ids:
            if self.db.get(Player, player_id) is None:
                raise NotFoundError("player", player_id)

        when = timestamp or datetime.datetime.now(datetime.timezone.utc)
        stats = [
            Stat(
                game_id=game_id,
                player_id=player_id,
                type=StatType.RUN,
                outcome="Run",
                inning=inning,
                timestamp=when,
            )
            for player_id in player_ids
        ]

        try:
            self.db.add_all([StatRecord.from_stat(s) for s in stats])
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to record runs: {e}")
            raise

        return stats

    def fetch_stat(self, stat_id: str) -> Stat:
        record = self.db.get(StatRecord, stat_id)
        if record is None:
            raise NotFoundError("stat", stat_id)
        return record.to_stat()

    def fetch_game_stats(self, game_id: str) -> List[Stat]:
        logger.debug(f"Fetching stats for game: {game_id}")
        rows = self.db.execute(
            select(StatRecord)
            .where(StatRecord.game_id == game_id)
            .order_by(StatRecord.timestamp.asc())
        ).scalars().all()
        logger.info(f"Fetched {len(rows)} stats for game {game_id}")
        return [r.to_stat() for r in rows]

    def fetch_player_game_stats(self, game_id: str, player_id: str) -> List[Stat]:
        logger.debug(f"Fetching stats for player {player_id} in game {game_id}")
        rows = self.db.execute(
            select(StatRecord)
            .where(StatRecord.game_id == game_id, StatRecord.player_id == player_id)
            .order_by(StatRecord.timestamp.asc())
        ).scalars().all()
        return [r.to_stat() for r in rows]

    def fetch_player_stats(self, player_id: str) -> List[Stat]:
        rows = self.db.execute(
            select(StatRecord)
            .where(StatRecord.player_id == player_id)
            .order_by(StatRecord.timestamp.asc())
        ).scalars().all()
        return [r.to_stat() for r in rows]

    def fetch_recent_at_bats(self, game_id: str, limit: int = RECENT_AT_BATS_LIMIT) -> List[Stat]:
        rows = self.db.execute(
            select(StatRecord)
            .where(StatRecord.game_id == game_id)
            .order_by(StatRecord.timestamp.desc())
            .limit(limit)
        ).scalars().all()
        return [r.to_stat() for r in rows]

    def next_at_bat_number(self, game_id: str, player_id: str) -> int:
        current = self.db.execute(
            select(func.max(StatRecord.at_bat_number))
            .where(StatRecord.game_id == game_id, StatRecord.player_id == player_id)
        ).scalar()
        return (current or 0) + 1
