from typing import List, Optional
from fastapi import APIRouter, Depends, Query, HTTPException, Response
from sqlalchemy.orm import Session
from batstat.database.database import get_db
from batstat.database.models import Game, Player
from batstat.schemas.player import PlayerCreate, PlayerResponse, PlayerUpdate
from batstat.schemas.box_score import PlayerGameStatsResponse
from batstat.services.box_score import player_history
from batstat.services.player_service import PlayerService
from batstat.services.stat_service import StatService

router = APIRouter(prefix="/players", tags=["players"])


def player_to_dict(player: Player) -> dict:
    return {
        "id": player.id,
        "name": player.name,
        "number": player.number,
        "primary_position": player.primary_position,
        "secondary_positions": player.secondary_position_list,
        "created_at": player.created_at,
    }


@router.get("/", response_model=List[PlayerResponse])
def get_players(
    name: Optional[str] = Query(None, description="Search by name (partial match)"),
    limit: int = Query(50, le=1000),
    offset: int = 0,
    db: Session = Depends(get_db)
):
    """
    Get the roster ordered by name, optionally filtered by name
    """
    query = db.query(Player)

    if name:
        query = query.filter(Player.name.ilike(f"%{name}%"))

    query = query.order_by(Player.name.asc())

    return [player_to_dict(p) for p in query.limit(limit).offset(offset).all()]


@router.get("/{player_id}", response_model=PlayerResponse)
def get_player_by_id(player_id: str, db: Session = Depends(get_db)):
    player = db.get(Player, player_id)

    if not player:
        raise HTTPException(status_code=404, detail="Player not found")

    return player_to_dict(player)


@router.post("/", response_model=PlayerResponse, status_code=201)
def create_player(body: PlayerCreate, db: Session = Depends(get_db)):
    player = PlayerService(db).create_player(
        name=body.name,
        number=body.number,
        primary_position=body.primary_position,
        secondary_positions=body.secondary_positions,
    )
    return player_to_dict(player)


@router.patch("/{player_id}", response_model=PlayerResponse)
def update_player(player_id: str, body: PlayerUpdate, db: Session = Depends(get_db)):
    player = PlayerService(db).update_player(player_id, body.model_dump(exclude_unset=True))
    return player_to_dict(player)


@router.delete("/{player_id}", status_code=204)
def delete_player(player_id: str, db: Session = Depends(get_db)):
    PlayerService(db).delete_player(player_id)
    return Response(status_code=204)


@router.get("/{player_id}/stats")
def get_player_stats(player_id: str, db: Session = Depends(get_db)):
    """
    career line plus one line per game, most recent game first
    """
    player = db.get(Player, player_id)
    if not player:
        raise HTTPException(status_code=404, detail="Player not found")

    career, per_game = player_history(StatService(db).fetch_player_stats(player_id))

    games = {g.id: g for g in db.query(Game).filter(Game.id.in_(list(per_game))).all()} if per_game else {}
    ordered = sorted(per_game.items(), key=lambda item: games[item[0]].date, reverse=True)

    return {
        "player": player_to_dict(player),
        "career": PlayerGameStatsResponse(player_id=player.id, name=player.name, number=player.number, **career.to_row()),
        "games": [
            {
                "game_id": game_id,
                "date": games[game_id].date,
                "opponent": games[game_id].opponent,
                "stats": PlayerGameStatsResponse(player_id=player.id, name=player.name, number=player.number, **line.to_row()),
            }
            for game_id, line in ordered
        ],
    }
