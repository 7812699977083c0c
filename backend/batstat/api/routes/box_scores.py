from typing import List, Optional
from fastapi import APIRouter, Depends, Path, Query, HTTPException
from sqlalchemy.orm import Session
from batstat.core.diamond_grid import nearest_display_hit
from batstat.database.database import get_db
from batstat.database.models import Game, Player
from batstat.schemas.box_score import (
    InningLineResponse,
    PlayerGameStatsResponse,
    PlayerGameSummaryResponse,
    SprayChartHitResponse,
)
from batstat.services import box_score
from batstat.services.player_service import PlayerService
from batstat.services.stat_service import StatService

router = APIRouter(prefix="/box_scores", tags=["box_scores"])


def _require_game(db: Session, game_id: str) -> Game:
    game = db.get(Game, game_id)
    if not game:
        raise HTTPException(status_code=404, detail="Game not found")
    return game


@router.get("/{game_id}", response_model=List[PlayerGameStatsResponse])
def get_box_score(game_id: str, db: Session = Depends(get_db)):
    """
    one line per player in batting order. Without a lineup, every player
    with recorded stats is listed
    """
    _require_game(db, game_id)

    lineup = PlayerService(db).lineup(game_id)
    player_ids = [entry.player_id for entry in lineup] or None

    lines = box_score.game_box_score(StatService(db), game_id, player_ids)
    players = {p.id: p for p in db.query(Player).filter(Player.id.in_(list(lines))).all()} if lines else {}

    rows = []
    for player_id, line in lines.items():
        player = players.get(player_id)
        rows.append({
            "player_id": player_id,
            "name": player.name if player else None,
            "number": player.number if player else None,
            **line.to_row(),
        })
    return rows


@router.get("/{game_id}/innings", response_model=List[InningLineResponse])
def get_inning_lines(game_id: str, db: Session = Depends(get_db)):
    _require_game(db, game_id)
    return [line.to_row() for line in box_score.game_innings(StatService(db), game_id)]


@router.get("/{game_id}/innings/{inning}", response_model=InningLineResponse)
def get_inning_line(game_id: str, inning: int = Path(..., ge=1), db: Session = Depends(get_db)):
    _require_game(db, game_id)
    return box_score.inning_line(StatService(db), game_id, inning).to_row()


@router.get("/{game_id}/players/{player_id}", response_model=PlayerGameSummaryResponse)
def get_player_game_summary(game_id: str, player_id: str, db: Session = Depends(get_db)):
    "box score line plus the at-bat log for one player in one game"

    _require_game(db, game_id)
    player = db.get(Player, player_id)
    if not player:
        raise HTTPException(status_code=404, detail="Player not found")

    line, log = box_score.player_game_summary(StatService(db), game_id, player_id)

    return {
        "game_id": game_id,
        "stats": {
            "player_id": player.id,
            "name": player.name,
            "number": player.number,
            **line.to_row(),
        },
        "at_bats": [entry.to_row() for entry in log],
    }


@router.get("/{game_id}/spray_chart", response_model=List[SprayChartHitResponse])
def get_spray_chart(
    game_id: str,
    inning: Optional[int] = Query(None, ge=1),
    player_id: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    """
    tracked hits for the view, numbered 1..N within the view. The numbers
    are display labels only; use stat_id to get back to the recorded stat
    """
    _require_game(db, game_id)
    hits = box_score.spray_chart(StatService(db), game_id, inning=inning, player_id=player_id)
    return [hit.to_row() for hit in hits]


@router.get("/{game_id}/spray_chart/nearest", response_model=Optional[SprayChartHitResponse])
def get_nearest_spray_chart_hit(
    game_id: str,
    tap_x: float = Query(..., description="Tap position in pixels"),
    tap_y: float = Query(..., description="Tap position in pixels"),
    width: float = Query(..., gt=0, description="Rendered field width in pixels"),
    height: float = Query(..., gt=0, description="Rendered field height in pixels"),
    inning: Optional[int] = Query(None, ge=1),
    player_id: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    """
    marker under a tap on the rendered chart, null when no marker is within
    the tap radius. Numbering matches the spray_chart view with the same filters
    """
    _require_game(db, game_id)
    hits = box_score.spray_chart(StatService(db), game_id, inning=inning, player_id=player_id)
    hit = nearest_display_hit(hits, tap_x, tap_y, width, height)
    return hit.to_row() if hit else None
