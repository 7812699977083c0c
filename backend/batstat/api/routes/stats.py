from typing import List, Optional
from fastapi import APIRouter, Depends, Query, HTTPException
from sqlalchemy.orm import Session
from batstat.core.config import RECENT_AT_BATS_LIMIT, UNNUMBERED_TYPES
from batstat.core.stat_aggregator import HitLocation, Stat
from batstat.database.database import get_db
from batstat.database.models import Game
from batstat.schemas.stat import RunsCreate, StatCreate, StatResponse
from batstat.services.stat_service import StatService

router = APIRouter(prefix="/stats", tags=["stats"])


def stat_to_dict(stat: Stat) -> dict:
    loc = stat.hit_location
    return {
        "id": stat.id,
        "game_id": stat.game_id,
        "player_id": stat.player_id,
        "type": stat.type,
        "timestamp": stat.timestamp,
        "inning": stat.inning,
        "at_bat_number": stat.at_bat_number,
        "outcome": stat.outcome,
        "runs_batted_in": stat.runs_batted_in,
        "hit_location": {
            "x": loc.x,
            "y": loc.y,
            "height": loc.height,
            "grid_resolution": loc.grid_resolution,
        } if loc else None,
    }


@router.post("/", response_model=StatResponse, status_code=201)
def record_at_bat(body: StatCreate, db: Session = Depends(get_db)):
    """
    records one at-bat outcome. at_bat_number defaults to the player's next number in the game,
    except for runs and bare RBI counts which are not turns at the plate
    """
    service = StatService(db)

    hit_location = None
    if body.hit_location is not None:
        hit_location = HitLocation(**body.hit_location.model_dump())

    at_bat_number = body.at_bat_number
    if at_bat_number is None and body.type.value not in UNNUMBERED_TYPES:
        at_bat_number = service.next_at_bat_number(body.game_id, body.player_id)

    stat = service.record_at_bat(
        game_id=body.game_id,
        player_id=body.player_id,
        type=body.type,
        outcome=body.outcome,
        runs_batted_in=body.runs_batted_in,
        inning=body.inning,
        at_bat_number=at_bat_number,
        hit_location=hit_location,
        timestamp=body.timestamp,
    )
    return stat_to_dict(stat)


@router.post("/runs", response_model=List[StatResponse], status_code=201)
def record_runs(body: RunsCreate, db: Session = Depends(get_db)):
    """
    records a run for each runner the batter drove in. The RBIs stay on the
    batter's stat, so the number of runners has to match its runs_batted_in
    """
    service = StatService(db)
    batter = service.fetch_stat(body.batter_stat_id)

    expected = batter.runs_batted_in or 0
    if len(body.player_ids) != expected:
        raise HTTPException(
            status_code=422,
            detail=f"Batter drove in {expected} runs but {len(body.player_ids)} runners were given",
        )

    stats = service.record_runs(
        game_id=batter.game_id,
        player_ids=body.player_ids,
        inning=body.inning or batter.inning,
        timestamp=body.timestamp,
    )
    return [stat_to_dict(s) for s in stats]


@router.get("/game/{game_id}", response_model=List[StatResponse])
def get_game_stats(
    game_id: str,
    player_id: Optional[str] = Query(None, description="Only this player's stats"),
    db: Session = Depends(get_db)
):
    "gets all stats for a game in the order they were recorded"

    if not db.get(Game, game_id):
        raise HTTPException(status_code=404, detail="Game not found")

    service = StatService(db)
    if player_id:
        stats = service.fetch_player_game_stats(game_id, player_id)
    else:
        stats = service.fetch_game_stats(game_id)

    return [stat_to_dict(s) for s in stats]


@router.get("/game/{game_id}/recent", response_model=List[StatResponse])
def get_recent_at_bats(
    game_id: str,
    limit: int = Query(RECENT_AT_BATS_LIMIT, ge=1, le=100),
    db: Session = Depends(get_db)
):
    "most recent at-bats first"

    if not db.get(Game, game_id):
        raise HTTPException(status_code=404, detail="Game not found")

    return [stat_to_dict(s) for s in StatService(db).fetch_recent_at_bats(game_id, limit=limit)]
