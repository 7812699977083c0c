from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

class PlayerCreate(BaseModel):
    name: str = Field(min_length=1)
    number: Optional[int] = Field(None, ge=0)
    primary_position: Optional[str] = None
    secondary_positions: List[str] = []

class PlayerUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    number: Optional[int] = Field(None, ge=0)
    primary_position: Optional[str] = None
    secondary_positions: Optional[List[str]] = None

class PlayerResponse(BaseModel):
    id: str
    name: str
    number: Optional[int] = None
    primary_position: Optional[str] = None
    secondary_positions: List[str] = []
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
