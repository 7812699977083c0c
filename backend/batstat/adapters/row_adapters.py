import datetime
import logging
from typing import Any, List, Optional, Set
from batstat.core.config import GRID_SIZE
from batstat.core.stat_aggregator import HitLocation, InvalidStatError, Stat
from batstat.database.models import Game, GameLineup, Player, StatRecord
from batstat.adapters.base import BaseAdapter


logger = logging.getLogger(__name__)


def parse_timestamp(value: Any) -> Optional[datetime.datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime.datetime):
        return value
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.datetime.fromisoformat(text)


class PlayerAdapter(BaseAdapter):

    def run(self, data) -> List[Player]:
        players = []
        for item in data:
            player_id = self._json_get(item, "id", "")
            name = self._json_get(item, "name", "")
            if not player_id or not name:
                continue

            secondary = self._json_get(item, "secondary_positions", [])
            if isinstance(secondary, list):
                secondary = ",".join(secondary) or None

            player = Player()
            player.id = str(player_id)
            player.name = name
            player.number = self._json_get(item, "number")
            player.primary_position = self._json_get(item, "primary_position")
            player.secondary_positions = secondary
            player.created_at = parse_timestamp(self._json_get(item, "created_at")) or datetime.datetime.now(datetime.timezone.utc)
            players.append(player)
        return players


class GameAdapter(BaseAdapter):

    def run(self, data) -> List[Game]:
        games = []
        for item in data:
            game_id = self._json_get(item, "id", "")
            date = parse_timestamp(self._json_get(item, "date"))
            if not game_id or date is None:
                continue

            game = Game()
            game.id = str(game_id)
            game.date = date
            game.location = self._json_get(item, "location", "")
            game.opponent = self._json_get(item, "opponent", "Unknown")
            game.home_score = self._json_get(item, "home_score")
            game.opponent_score = self._json_get(item, "opponent_score")
            game.weather_conditions = self._json_get(item, "weather_conditions")
            game.is_complete = bool(self._json_get(item, "is_complete", False))
            games.append(game)
        return games


class LineupAdapter(BaseAdapter):

    def __init__(self, game_ids: Set[str], player_ids: Set[str]):
        self.game_ids = game_ids
        self.player_ids = player_ids

    def run(self, data) -> List[GameLineup]:
        entries = []
        for item in data:
            game_id, player_id = self._row_ids(item)
            if game_id not in self.game_ids or player_id not in self.player_ids:
                continue

            entry = GameLineup()
            entry.game_id = game_id
            entry.player_id = player_id
            entry.position = self._json_get(item, "position")
            entry.batting_order = self._json_get(item, "batting_order")
            entries.append(entry)
        return entries


class StatAdapter(BaseAdapter):
    """
    Converts hosted `stats` rows. Rows are rebuilt as Stat first, so a row
    with a negative RBI count or a non-positive inning is rejected here
    instead of reaching the box score.
    """

    def __init__(self, game_ids: Set[str], player_ids: Set[str]):
        self.game_ids = game_ids
        self.player_ids = player_ids
        self.rejected = 0

    def run(self, data) -> List[StatRecord]:
        self.rejected = 0
        records = []
        for item in data:
            game_id, player_id = self._row_ids(item)
            if game_id not in self.game_ids or player_id not in self.player_ids:
                self.rejected += 1
                continue

            try:
                stat = self._to_stat(item, game_id, player_id)
            except (InvalidStatError, ValueError) as e:
                logger.warning(f"Skipping stat {self._json_get(item, 'id')}: {e}")
                self.rejected += 1
                continue

            records.append(StatRecord.from_stat(stat))
        return records

    def _to_stat(self, item, game_id: str, player_id: str) -> Stat:
        hit_location = None
        x = self._json_get(item, "hit_location_x")
        y = self._json_get(item, "hit_location_y")
        if x is not None and y is not None:
            hit_location = HitLocation(
                x=float(x),
                y=float(y),
                height=float(self._json_get(item, "hit_location_height", 0.0)),
                grid_resolution=int(self._json_get(item, "hit_location_grid_resolution", GRID_SIZE)),
            )

        kwargs = {}
        timestamp = parse_timestamp(self._json_get(item, "timestamp"))
        if timestamp is not None:
            kwargs["timestamp"] = timestamp
        if self._json_get(item, "id"):
            kwargs["id"] = str(item["id"])

        return Stat(
            game_id=game_id,
            player_id=player_id,
            type=self._json_get(item, "type", ""),
            inning=self._json_get(item, "inning"),
            at_bat_number=self._json_get(item, "at_bat_number"),
            outcome=self._json_get(item, "outcome"),
            runs_batted_in=self._json_get(item, "runs_batted_in"),
            hit_location=hit_location,
            **kwargs,
        )
