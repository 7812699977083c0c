from __future__ import annotations

import logging
import sys
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from batstat.core.lineup import next_batter_index, previous_batter_index
from batstat.database.models import Game, GameLineup, Player
from batstat.services.errors import NotFoundError


logger = logging.getLogger(__name__)


def _join_positions(positions: Optional[Sequence[str]]) -> Optional[str]:
    if not positions:
        return None
    return ",".join(p.strip() for p in positions if p and p.strip())


class PlayerService:
    def __init__(self, db: Session):
        self.db = db

    def create_player(
        self,
        name: str,
        number: Optional[int] = None,
        primary_position: Optional[str] = None,
        secondary_positions: Optional[Sequence[str]] = None,
    ) -> Player:
        logger.info(f"Creating new player: {name}")

        player = Player(
            name=name,
            number=number,
            primary_position=primary_position,
            secondary_positions=_join_positions(secondary_positions),
        )
        self.db.add(player)
        self.db.commit()
        self.db.refresh(player)

        logger.info(f"Successfully created player: {player.name} (ID: {player.id})")
        return player

    def fetch_all_players(self) -> List[Player]:
        players = self.db.execute(select(Player).order_by(Player.name.asc())).scalars().all()
        logger.info(f"Successfully fetched {len(players)} players")
        return list(players)

    def fetch_player(self, player_id: str) -> Player:
        player = self.db.get(Player, player_id)
        if player is None:
            raise NotFoundError("player", player_id)
        return player

    def update_player(self, player_id: str, changes: Dict[str, Any]) -> Player:
        player = self.fetch_player(player_id)

        if changes.get("name") is not None:
            player.name = changes["name"]
        if "number" in changes:
            player.number = changes["number"]
        if "primary_position" in changes:
            player.primary_position = changes["primary_position"]
        if changes.get("secondary_positions") is not None:
            player.secondary_positions = _join_positions(changes["secondary_positions"])

        self.db.commit()
        self.db.refresh(player)
        return player

    def delete_player(self, player_id: str) -> None:
        logger.info(f"Deleting player with ID: {player_id}")
        player = self.fetch_player(player_id)
        self.db.delete(player)
        self.db.commit()

    def lineup(self, game_id: str) -> List[GameLineup]:
        """Lineup entries in batting order; entries without an order go last."""
        if self.db.get(Game, game_id) is None:
            raise NotFoundError("game", game_id)

        entries = self.db.execute(
            select(GameLineup).where(GameLineup.game_id == game_id)
        ).scalars().all()
        logger.debug(f"Found {len(entries)} lineup entries for game {game_id}")

        return sorted(entries, key=lambda e: e.batting_order if e.batting_order is not None else sys.maxsize)

    def fetch_players_in_game(self, game_id: str) -> List[Player]:
        return [entry.player for entry in self.lineup(game_id)]

    def add_player_to_game(
        self,
        player_id: str,
        game_id: str,
        batting_order: Optional[int] = None,
        position: Optional[str] = None,
    ) -> GameLineup:
        logger.info(f"Adding player {player_id} to game {game_id} at batting order {batting_order}")

        if self.db.get(Game, game_id) is None:
            raise NotFoundError("game", game_id)
        player = self.fetch_player(player_id)

        entry = self.db.get(GameLineup, (game_id, player_id))
        if entry is None:
            entry = GameLineup(game_id=game_id, player_id=player_id)
            self.db.add(entry)

        entry.batting_order = batting_order
        entry.position = position or player.primary_position
        self.db.commit()
        self.db.refresh(entry)
        return entry

    def remove_player_from_game(self, player_id: str, game_id: str) -> None:
        entry = self.db.get(GameLineup, (game_id, player_id))
        if entry is None:
            raise NotFoundError("lineup entry", f"{game_id}/{player_id}")
        self.db.delete(entry)
        self.db.commit()

    def next_batter(self, game_id: str, player_id: str) -> GameLineup:
        return self._rotate(game_id, player_id, next_batter_index)

    def previous_batter(self, game_id: str, player_id: str) -> GameLineup:
        return self._rotate(game_id, player_id, previous_batter_index)

    def _rotate(self, game_id: str, player_id: str, step) -> GameLineup:
        entries = self.lineup(game_id)
        order = [entry.player_id for entry in entries]
        if player_id not in order:
            raise NotFoundError("lineup entry", f"{game_id}/{player_id}")
        return entries[step(order.index(player_id), len(entries))]
