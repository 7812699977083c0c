from typing import List, Optional
from fastapi import APIRouter, Depends, Query, HTTPException, Response
from sqlalchemy.orm import Session
from batstat.database.database import get_db
from batstat.database.models import Game
from batstat.schemas.game import (
    GameCreate,
    GameResponse,
    GameScoreUpdate,
    GameUpdate,
    LineupEntryCreate,
    LineupEntryResponse,
)
from batstat.services.game_service import GameService
from batstat.services.player_service import PlayerService

router = APIRouter(prefix="/games", tags=["games"])


def game_to_dict(game: Game) -> dict:
    return {
        "id": game.id,
        "date": game.date,
        "location": game.location,
        "opponent": game.opponent,
        "home_score": game.home_score,
        "opponent_score": game.opponent_score,
        "weather_conditions": game.weather_conditions,
        "is_complete": bool(game.is_complete),
        "is_win": game.is_win,
    }


def lineup_entry_to_dict(entry) -> dict:
    return {
        "player_id": entry.player_id,
        "name": entry.player.name,
        "number": entry.player.number,
        "position": entry.position,
        "batting_order": entry.batting_order,
    }


@router.get("/", response_model=List[GameResponse])
def get_games(
    opponent: Optional[str] = Query(None, description="Filter by opponent (partial match)"),
    limit: int = Query(50, le=100),
    offset: int = 0,
    db: Session = Depends(get_db)
):
    "gets all games, most recent first"

    query = db.query(Game)

    if opponent:
        query = query.filter(Game.opponent.ilike(f"%{opponent}%"))

    query = query.order_by(Game.date.desc())

    return [game_to_dict(g) for g in query.limit(limit).offset(offset).all()]


@router.get("/{game_id}", response_model=GameResponse)
def get_game(game_id: str, db: Session = Depends(get_db)):
    game = db.get(Game, game_id)

    if not game:
        raise HTTPException(status_code=404, detail="Game not found")

    return game_to_dict(game)


@router.post("/", response_model=GameResponse, status_code=201)
def create_game(body: GameCreate, db: Session = Depends(get_db)):
    game = GameService(db).create_game(
        opponent=body.opponent,
        location=body.location,
        date=body.date,
        weather_conditions=body.weather_conditions,
    )
    return game_to_dict(game)


@router.patch("/{game_id}", response_model=GameResponse)
def update_game(game_id: str, body: GameUpdate, db: Session = Depends(get_db)):
    game = GameService(db).update_game(game_id, body.model_dump(exclude_unset=True))
    return game_to_dict(game)


@router.delete("/{game_id}", status_code=204)
def delete_game(game_id: str, db: Session = Depends(get_db)):
    GameService(db).delete_game(game_id)
    return Response(status_code=204)


@router.post("/{game_id}/finish", response_model=GameResponse)
def finish_game(game_id: str, db: Session = Depends(get_db)):
    return game_to_dict(GameService(db).mark_game_as_finished(game_id))


@router.put("/{game_id}/score", response_model=GameResponse)
def update_score(game_id: str, body: GameScoreUpdate, db: Session = Depends(get_db)):
    game = GameService(db).update_game_score(game_id, body.home_score, body.opponent_score)
    return game_to_dict(game)


@router.get("/{game_id}/lineup", response_model=List[LineupEntryResponse])
def get_lineup(game_id: str, db: Session = Depends(get_db)):
    "lineup in batting order"

    entries = PlayerService(db).lineup(game_id)

    return [lineup_entry_to_dict(entry) for entry in entries]


@router.get("/{game_id}/lineup/next", response_model=LineupEntryResponse)
def get_next_batter(game_id: str, player_id: str = Query(..., description="Current batter"), db: Session = Depends(get_db)):
    "batter after player_id, back to the leadoff hitter after the last one"
    return lineup_entry_to_dict(PlayerService(db).next_batter(game_id, player_id))


@router.get("/{game_id}/lineup/previous", response_model=LineupEntryResponse)
def get_previous_batter(game_id: str, player_id: str = Query(..., description="Current batter"), db: Session = Depends(get_db)):
    return lineup_entry_to_dict(PlayerService(db).previous_batter(game_id, player_id))


@router.post("/{game_id}/lineup", response_model=LineupEntryResponse, status_code=201)
def add_to_lineup(game_id: str, body: LineupEntryCreate, db: Session = Depends(get_db)):
    entry = PlayerService(db).add_player_to_game(
        player_id=body.player_id,
        game_id=game_id,
        batting_order=body.batting_order,
        position=body.position,
    )
    return lineup_entry_to_dict(entry)


@router.delete("/{game_id}/lineup/{player_id}", status_code=204)
def remove_from_lineup(game_id: str, player_id: str, db: Session = Depends(get_db)):
    PlayerService(db).remove_player_from_game(player_id=player_id, game_id=game_id)
    return Response(status_code=204)
