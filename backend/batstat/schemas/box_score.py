from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

class PlayerGameStatsResponse(BaseModel):
    player_id: str
    name: Optional[str] = None
    number: Optional[int] = None

    at_bats: int = 0
    runs: int = 0
    hits: int = 0
    rbis: int = 0
    home_runs: int = 0
    batting_average: float = 0.0

class InningLineResponse(BaseModel):
    inning: int
    ab: int = 0
    r: int = 0
    h: int = 0
    rbi: int = 0
    hr: int = 0

class AtBatEntryResponse(BaseModel):
    number: int
    description: str
    type: str
    inning: Optional[int] = None

class PlayerGameSummaryResponse(BaseModel):
    game_id: str
    stats: PlayerGameStatsResponse
    at_bats: List[AtBatEntryResponse] = []

class SprayChartHitResponse(BaseModel):
    display_sequence: int
    stat_id: str
    player_id: str
    type: str
    inning: Optional[int] = None
    at_bat_number: Optional[int] = None
    timestamp: datetime
    x: float
    y: float
    height: float
    grid_resolution: int
