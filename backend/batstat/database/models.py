from typing import List, Optional
import datetime
import uuid
from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from batstat.core.config import GRID_SIZE
from batstat.core.stat_aggregator import HitLocation, Stat, StatType
from batstat.database.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class Player(Base):
    __tablename__ = "players"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(index=True)
    number: Mapped[Optional[int]] = mapped_column()
    primary_position: Mapped[Optional[str]] = mapped_column()
    secondary_positions: Mapped[Optional[str]] = mapped_column() # comma separated
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    lineups: Mapped[List["GameLineup"]] = relationship(
        back_populates="player", cascade="all, delete-orphan"
    )
    stats: Mapped[List["StatRecord"]] = relationship(
        back_populates="player", cascade="all, delete-orphan"
    )

    @property
    def secondary_position_list(self) -> List[str]:
        if not self.secondary_positions:
            return []
        return [p.strip() for p in self.secondary_positions.split(",") if p.strip()]

    def __repr__(self) -> str:
        return f"PLAYER (id={self.id}, name={self.name}, number={self.number})"

class Game(Base):
    __tablename__ = "games"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    date: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), index=True)
    location: Mapped[str] = mapped_column()
    opponent: Mapped[str] = mapped_column()
    home_score: Mapped[Optional[int]] = mapped_column()
    opponent_score: Mapped[Optional[int]] = mapped_column()
    weather_conditions: Mapped[Optional[str]] = mapped_column()
    is_complete: Mapped[bool] = mapped_column(default=False)

    lineups: Mapped[List["GameLineup"]] = relationship(
        back_populates="game", cascade="all, delete-orphan"
    )
    stats: Mapped[List["StatRecord"]] = relationship(
        back_populates="game", cascade="all, delete-orphan"
    )

    @property
    def is_win(self) -> Optional[bool]:
        if self.home_score is None or self.opponent_score is None:
            return None
        return self.home_score > self.opponent_score

    def __repr__(self) -> str:
        return f"GAME (id={self.id}, date={self.date}, opponent={self.opponent})"

class GameLineup(Base):
    __tablename__ = "game_lineups"

    game_id: Mapped[str] = mapped_column(ForeignKey("games.id"), primary_key=True)
    player_id: Mapped[str] = mapped_column(ForeignKey("players.id"), primary_key=True)
    position: Mapped[Optional[str]] = mapped_column()
    batting_order: Mapped[Optional[int]] = mapped_column()

    game: Mapped["Game"] = relationship(back_populates="lineups")
    player: Mapped["Player"] = relationship(back_populates="lineups")

    def __repr__(self) -> str:
        return f"GAME_LINEUP (game_id={self.game_id}, player_id={self.player_id}, batting_order={self.batting_order})"

class StatRecord(Base):
    __tablename__ = "stats"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    game_id: Mapped[str] = mapped_column(ForeignKey("games.id"), index=True)
    player_id: Mapped[str] = mapped_column(ForeignKey("players.id"), index=True)
    inning: Mapped[Optional[int]] = mapped_column()
    at_bat_number: Mapped[Optional[int]] = mapped_column()
    timestamp: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, index=True)
    outcome: Mapped[Optional[str]] = mapped_column()
    runs_batted_in: Mapped[Optional[int]] = mapped_column()
    type: Mapped[str] = mapped_column(String(8))

    hit_location_x: Mapped[Optional[float]] = mapped_column()
    hit_location_y: Mapped[Optional[float]] = mapped_column()
    hit_location_height: Mapped[Optional[float]] = mapped_column()
    hit_location_grid_resolution: Mapped[Optional[int]] = mapped_column()

    game: Mapped["Game"] = relationship(back_populates="stats")
    player: Mapped["Player"] = relationship(back_populates="stats")

    @classmethod
    def from_stat(cls, stat: Stat) -> "StatRecord":
        loc = stat.hit_location
        return cls(
            id=stat.id,
            game_id=stat.game_id,
            player_id=stat.player_id,
            inning=stat.inning,
            at_bat_number=stat.at_bat_number,
            timestamp=stat.timestamp,
            outcome=stat.outcome,
            runs_batted_in=stat.runs_batted_in,
            type=stat.type.value,
            hit_location_x=loc.x if loc else None,
            hit_location_y=loc.y if loc else None,
            hit_location_height=loc.height if loc else None,
            hit_location_grid_resolution=loc.grid_resolution if loc else None,
        )

    def to_stat(self) -> Stat:
        hit_location = None
        if self.hit_location_x is not None and self.hit_location_y is not None:
            hit_location = HitLocation(
                x=self.hit_location_x,
                y=self.hit_location_y,
                height=self.hit_location_height or 0.0,
                grid_resolution=self.hit_location_grid_resolution or GRID_SIZE,
            )

        return Stat(
            id=self.id,
            game_id=self.game_id,
            player_id=self.player_id,
            type=StatType(self.type),
            timestamp=self.timestamp,
            inning=self.inning,
            at_bat_number=self.at_bat_number,
            outcome=self.outcome,
            runs_batted_in=self.runs_batted_in,
            hit_location=hit_location,
        )

    def __repr__(self) -> str:
        return f"STAT (id={self.id}, game_id={self.game_id}, player_id={self.player_id}, type={self.type})"
