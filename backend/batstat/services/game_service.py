from __future__ import annotations

import datetime
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from batstat.database.models import Game
from batstat.services.errors import NotFoundError


logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {"date", "location", "opponent", "weather_conditions"}


class GameService:
    def __init__(self, db: Session):
        self.db = db

    def create_game(
        self,
        opponent: str,
        location: str,
        date: datetime.datetime,
        weather_conditions: Optional[str] = None,
    ) -> Game:
        logger.info(f"Creating game: opponent={opponent}, location={location}, date={date}")

        game = Game(
            opponent=opponent,
            location=location,
            date=date,
            weather_conditions=weather_conditions,
            is_complete=False,
        )
        self.db.add(game)
        self.db.commit()
        self.db.refresh(game)

        logger.info(f"Successfully created game with ID: {game.id}")
        return game

    def fetch_all_games(self) -> List[Game]:
        return list(self.db.execute(select(Game).order_by(Game.date.desc())).scalars().all())

    def fetch_game(self, game_id: str) -> Game:
        game = self.db.get(Game, game_id)
        if game is None:
            raise NotFoundError("game", game_id)
        return game

    def update_game(self, game_id: str, changes: Dict[str, Any]) -> Game:
        game = self.fetch_game(game_id)
        for key, value in changes.items():
            if key in UPDATABLE_FIELDS and value is not None:
                setattr(game, key, value)
        self.db.commit()
        self.db.refresh(game)
        return game

    def delete_game(self, game_id: str) -> None:
        game = self.fetch_game(game_id)
        self.db.delete(game)
        self.db.commit()
        logger.info(f"Deleted game {game_id}")

    def mark_game_as_finished(self, game_id: str) -> Game:
        game = self.fetch_game(game_id)
        game.is_complete = True
        self.db.commit()
        self.db.refresh(game)
        return game

    def update_game_score(self, game_id: str, home_score: int, opponent_score: int) -> Game:
        if home_score < 0 or opponent_score < 0:
            raise ValueError("scores cannot be negative")

        game = self.fetch_game(game_id)
        game.home_score = home_score
        game.opponent_score = opponent_score
        self.db.commit()
        self.db.refresh(game)
        return game
