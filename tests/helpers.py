import datetime

from sqlalchemy.orm import Session

from batstat.core.stat_aggregator import HitLocation, Stat, StatType
from batstat.database.models import Game, GameLineup, Player

GAME_ID = "game-1"
PLAYER_ID = "player-1"
BASE_TIME = datetime.datetime(2025, 5, 5, 18, 0, 0)


def at(minutes: int) -> datetime.datetime:
    return BASE_TIME + datetime.timedelta(minutes=minutes)


def make_stat(
    type: StatType,
    *,
    minute: int = 0,
    game_id: str = GAME_ID,
    player_id: str = PLAYER_ID,
    inning: int | None = None,
    at_bat_number: int | None = None,
    runs_batted_in: int | None = None,
    outcome: str | None = None,
    location: tuple[float, float] | None = None,
) -> Stat:
    hit_location = None
    if location is not None:
        hit_location = HitLocation(x=location[0], y=location[1], height=0.3)
    return Stat(
        game_id=game_id,
        player_id=player_id,
        type=type,
        timestamp=at(minute),
        inning=inning,
        at_bat_number=at_bat_number,
        runs_batted_in=runs_batted_in,
        outcome=outcome,
        hit_location=hit_location,
    )


def seed_game(
    session: Session,
    *,
    game_id: str = GAME_ID,
    opponent: str = "Base Invaders",
    location: str = "Home Field",
    date: datetime.datetime = BASE_TIME,
) -> Game:
    game = Game(id=game_id, opponent=opponent, location=location, date=date, is_complete=False)
    session.add(game)
    session.commit()
    return game


def seed_player(
    session: Session,
    *,
    player_id: str = PLAYER_ID,
    name: str = "M. Johnson",
    number: int | None = 12,
    primary_position: str | None = "SS",
) -> Player:
    player = Player(id=player_id, name=name, number=number, primary_position=primary_position)
    session.add(player)
    session.commit()
    return player


def seed_lineup(session: Session, game_id: str, player_id: str, batting_order: int | None) -> GameLineup:
    entry = GameLineup(game_id=game_id, player_id=player_id, batting_order=batting_order)
    session.add(entry)
    session.commit()
    return entry
