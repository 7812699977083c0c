from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from batstat.core.config import GRID_SIZE
from batstat.core.stat_aggregator import StatType

# Ingestion-side validation: malformed events never reach the aggregator.

class HitLocationIn(BaseModel):
    x: float = Field(ge=0.0, le=1.0)
    y: float = Field(ge=0.0, le=1.0)
    height: float = Field(0.0, ge=0.0, le=1.0) # 0 = ground ball, 1 = max fly ball arc
    grid_resolution: int = Field(GRID_SIZE, gt=0)

class StatCreate(BaseModel):
    game_id: str
    player_id: str
    type: StatType
    outcome: Optional[str] = None
    runs_batted_in: Optional[int] = Field(None, ge=0)
    inning: Optional[int] = Field(None, ge=1)
    at_bat_number: Optional[int] = Field(None, ge=1)
    hit_location: Optional[HitLocationIn] = None
    timestamp: Optional[datetime] = None

class HitLocationResponse(BaseModel):
    x: float
    y: float
    height: float
    grid_resolution: int

    class Config:
        from_attributes = True

class StatResponse(BaseModel):
    id: str
    game_id: str
    player_id: str
    type: StatType
    timestamp: datetime
    inning: Optional[int] = None
    at_bat_number: Optional[int] = None
    outcome: Optional[str] = None
    runs_batted_in: Optional[int] = None
    hit_location: Optional[HitLocationResponse] = None

    class Config:
        from_attributes = True

class RunsCreate(BaseModel):
    batter_stat_id: str
    player_ids: List[str] = Field(min_length=1) # runners who scored on the batter's play
    inning: Optional[int] = Field(None, ge=1)
    timestamp: Optional[datetime] = None
