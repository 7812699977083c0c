from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class GameCreate(BaseModel):
    date: datetime
    location: str
    opponent: str = Field(min_length=1)
    weather_conditions: Optional[str] = None

class GameUpdate(BaseModel):
    date: Optional[datetime] = None
    location: Optional[str] = None
    opponent: Optional[str] = Field(None, min_length=1)
    weather_conditions: Optional[str] = None

class GameScoreUpdate(BaseModel):
    home_score: int = Field(ge=0)
    opponent_score: int = Field(ge=0)

class GameResponse(BaseModel):
    id: str
    date: datetime
    location: str
    opponent: str
    home_score: Optional[int] = None
    opponent_score: Optional[int] = None
    weather_conditions: Optional[str] = None
    is_complete: bool = False
    is_win: Optional[bool] = None

    class Config:
        from_attributes = True

class LineupEntryCreate(BaseModel):
    player_id: str
    batting_order: int = Field(ge=1)
    position: Optional[str] = None

class LineupEntryResponse(BaseModel):
    player_id: str
    name: str
    number: Optional[int] = None
    position: Optional[str] = None
    batting_order: Optional[int] = None
