from typing import Any, Dict, List, Optional

from sqlalchemy import select

from batstat.adapters.row_adapters import GameAdapter, LineupAdapter, PlayerAdapter, StatAdapter
from batstat.core.config import IMPORT_PAGE_SIZE
from batstat.database.models import Game, Player
from batstat.jobs.base import BaseJob


class StatImport(BaseJob):
    """
    Pulls players, games, lineups and stats from the hosted backend and
    merges them into the local database. With `game_id` only that game (and
    its lineup and stats) is pulled; players are always pulled in full.
    """

    def __init__(self, game_id: Optional[str] = None, api_client=None):
        super().__init__(api_client=api_client)
        self.set_child_instance(self)
        self.game_id = game_id

    def execute(self, db_session):
        self.logger.info(f"Starting StatImport... game_id={self.game_id}")

        players = PlayerAdapter().run(self._fetch("players"))
        for player in players:
            db_session.merge(player)
        db_session.flush()
        self.logger.info(f"Merged players={len(players)}")

        game_filter = {"id": f"eq.{self.game_id}"} if self.game_id else None
        games = GameAdapter().run(self._fetch("games", game_filter))
        for game in games:
            db_session.merge(game)
        db_session.flush()
        self.logger.info(f"Merged games={len(games)}")

        game_ids = set(db_session.execute(select(Game.id)).scalars().all())
        player_ids = set(db_session.execute(select(Player.id)).scalars().all())

        child_filter = {"game_id": f"eq.{self.game_id}"} if self.game_id else None

        lineups = LineupAdapter(game_ids, player_ids).run(self._fetch("game_lineups", child_filter))
        for entry in lineups:
            db_session.merge(entry)
        self.logger.info(f"Merged lineup entries={len(lineups)}")

        stat_adapter = StatAdapter(game_ids, player_ids)
        records = stat_adapter.run(self._fetch("stats", child_filter))
        for record in records:
            db_session.merge(record)
        db_session.flush()

        if stat_adapter.rejected:
            self.logger.warning(f"Rejected stats={stat_adapter.rejected}")
        self.logger.info(f"Merged stats={len(records)}")

        self.logger.info("Import Complete.")

    def _fetch(self, table: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        self.logger.info(f"Fetching {table}")
        return self.api_client.get_table(table, params=params, page_size=IMPORT_PAGE_SIZE)
