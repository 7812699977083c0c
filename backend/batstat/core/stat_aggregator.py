from __future__ import annotations

import datetime
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from batstat.core.config import GRID_SIZE, SPRAY_CHART_TYPES


class InvalidStatError(ValueError):
    """Raised when a stat or hit location is built from malformed values."""


class StatType(str, Enum):
    AT_BAT = "AB"
    HIT = "H"
    RUN = "R"
    RBI = "RBI"
    HOME_RUN = "HR"
    STRIKE_OUT = "SO"
    WALK = "BB"
    SINGLE = "1B"
    DOUBLE = "2B"
    TRIPLE = "3B"
    ERROR = "E"
    FIELDERS_CHOICE = "FC"
    SACRIFICE = "SAC"
    FLY_OUT = "FO"


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


@dataclass(frozen=True)
class HitLocation:
    x: float
    y: float
    height: float
    grid_resolution: int = GRID_SIZE

    def __post_init__(self):
        for name in ("x", "y", "height"):
            value = getattr(self, name)
            if value is None or not 0.0 <= float(value) <= 1.0:
                raise InvalidStatError(f"hit location {name} must be within [0, 1], got {value!r}")
        if self.grid_resolution is not None and self.grid_resolution <= 0:
            raise InvalidStatError(f"grid resolution must be positive, got {self.grid_resolution!r}")

    @classmethod
    def from_point(
        cls,
        px: float,
        py: float,
        field_width: float,
        field_height: float,
        height: float = 0.0,
        grid_resolution: int = GRID_SIZE,
    ) -> "HitLocation":
        if field_width <= 0 or field_height <= 0:
            raise InvalidStatError("field size must be positive")
        return cls(
            x=px / field_width,
            y=py / field_height,
            height=height,
            grid_resolution=grid_resolution,
        )

    def to_point(self, field_width: float, field_height: float) -> Tuple[float, float]:
        return self.x * field_width, self.y * field_height


@dataclass(frozen=True)
class Stat:
    """One recorded outcome. Built once, never mutated afterwards."""

    game_id: str
    player_id: str
    type: StatType
    timestamp: datetime.datetime = field(default_factory=_utcnow)
    inning: Optional[int] = None
    at_bat_number: Optional[int] = None
    outcome: Optional[str] = None
    runs_batted_in: Optional[int] = None
    hit_location: Optional[HitLocation] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        if not isinstance(self.type, StatType):
            try:
                object.__setattr__(self, "type", StatType(self.type))
            except ValueError:
                raise InvalidStatError(f"unknown stat type {self.type!r}") from None

        if self.inning is not None and self.inning <= 0:
            raise InvalidStatError(f"inning must be positive, got {self.inning}")
        if self.at_bat_number is not None and self.at_bat_number <= 0:
            raise InvalidStatError(f"at-bat number must be positive, got {self.at_bat_number}")
        if self.runs_batted_in is not None and self.runs_batted_in < 0:
            raise InvalidStatError(f"runs batted in cannot be negative, got {self.runs_batted_in}")


@dataclass(frozen=True)
class _Contribution:
    ab: int = 0
    h: int = 0
    r: int = 0
    hr: int = 0


_NONE = _Contribution()
_AT_BAT = _Contribution(ab=1)
_HIT = _Contribution(ab=1, h=1)

# Every StatType must appear here.
CLASSIFICATION: Dict[StatType, _Contribution] = {
    StatType.AT_BAT: _AT_BAT,
    StatType.HIT: _HIT,
    StatType.SINGLE: _HIT,
    StatType.DOUBLE: _HIT,
    StatType.TRIPLE: _HIT,
    StatType.HOME_RUN: _Contribution(ab=1, h=1, r=1, hr=1),
    StatType.STRIKE_OUT: _AT_BAT,
    StatType.ERROR: _AT_BAT,
    StatType.FIELDERS_CHOICE: _AT_BAT,
    StatType.FLY_OUT: _AT_BAT,
    StatType.SACRIFICE: _AT_BAT,
    StatType.RUN: _Contribution(r=1),
    StatType.WALK: _NONE,
    StatType.RBI: _NONE,
}

_unclassified = set(StatType) - set(CLASSIFICATION)
if _unclassified:
    raise RuntimeError(f"Stat types without a box score classification: {sorted(t.value for t in _unclassified)}")


@dataclass
class BoxLine:
    ab: int = 0
    r: int = 0
    h: int = 0
    rbi: int = 0
    hr: int = 0

    def apply(self, stat: Stat) -> None:
        contribution = CLASSIFICATION[stat.type]
        self.ab += contribution.ab
        self.h += contribution.h
        self.r += contribution.r
        self.hr += contribution.hr
        self.rbi += stat.runs_batted_in or 0


def _fold(stats: Iterable[Stat]) -> BoxLine:
    line = BoxLine()
    for stat in stats:
        line.apply(stat)
    return line


@dataclass(frozen=True)
class PlayerGameStats:
    at_bats: int = 0
    runs: int = 0
    hits: int = 0
    rbis: int = 0
    home_runs: int = 0

    @property
    def batting_average(self) -> float:
        if self.at_bats <= 0:
            return 0.0
        return self.hits / self.at_bats

    def to_row(self) -> Dict[str, Any]:
        return {
            "at_bats": self.at_bats,
            "runs": self.runs,
            "hits": self.hits,
            "rbis": self.rbis,
            "home_runs": self.home_runs,
            "batting_average": self.batting_average,
        }


@dataclass(frozen=True)
class InningLine:
    inning: int
    ab: int = 0
    r: int = 0
    h: int = 0
    rbi: int = 0
    hr: int = 0

    def to_row(self) -> Dict[str, Any]:
        return {
            "inning": self.inning,
            "ab": self.ab,
            "r": self.r,
            "h": self.h,
            "rbi": self.rbi,
            "hr": self.hr,
        }


def aggregate_player_stats(stats: Iterable[Stat]) -> PlayerGameStats:
    """
    Folds one player's stats into a box score line. The caller decides the
    scope (one game, or a player's full history); nothing is filtered here.
    """
    line = _fold(stats)
    return PlayerGameStats(
        at_bats=line.ab,
        runs=line.r,
        hits=line.h,
        rbis=line.rbi,
        home_runs=line.hr,
    )


def aggregate_inning_stats(stats: Iterable[Stat], inning: int) -> InningLine:
    line = _fold(s for s in stats if s.inning is not None and s.inning == inning)
    return InningLine(inning=inning, ab=line.ab, r=line.r, h=line.h, rbi=line.rbi, hr=line.hr)


def aggregate_game_innings(stats: Iterable[Stat]) -> List[InningLine]:
    """One team line per inning that has any events, lowest inning first."""
    by_inning: Dict[int, BoxLine] = {}
    for stat in stats:
        if stat.inning is None:
            continue
        by_inning.setdefault(stat.inning, BoxLine()).apply(stat)

    return [
        InningLine(inning=inning, ab=line.ab, r=line.r, h=line.h, rbi=line.rbi, hr=line.hr)
        for inning, line in sorted(by_inning.items())
    ]


def aggregate_box_score(
    stats: Iterable[Stat],
    player_ids: Optional[Sequence[str]] = None,
) -> Dict[str, PlayerGameStats]:
    """
    Per-player lines for a game. With `player_ids` the result follows that
    order (lineup order) and players without events get zero lines; stats for
    players outside the list are dropped. Without it, players appear in the
    order they first show up in `stats`.
    """
    grouped: Dict[str, List[Stat]] = {}
    if player_ids is not None:
        for pid in player_ids:
            grouped[pid] = []

    for stat in stats:
        if stat.player_id in grouped:
            grouped[stat.player_id].append(stat)
        elif player_ids is None:
            grouped[stat.player_id] = [stat]

    return {pid: aggregate_player_stats(player_stats) for pid, player_stats in grouped.items()}


StatKey = Tuple[str, datetime.datetime, StatType]


def stat_key(stat: Stat) -> StatKey:
    return (stat.player_id, stat.timestamp, stat.type)


@dataclass(frozen=True)
class DisplayHit:
    """A spray chart marker: the untouched stat plus its label in the current view."""

    stat: Stat
    display_sequence: int

    @property
    def key(self) -> StatKey:
        return stat_key(self.stat)

    @property
    def hit_location(self) -> HitLocation:
        return self.stat.hit_location

    def to_row(self) -> Dict[str, Any]:
        loc = self.stat.hit_location
        return {
            "display_sequence": self.display_sequence,
            "stat_id": self.stat.id,
            "player_id": self.stat.player_id,
            "type": self.stat.type.value,
            "inning": self.stat.inning,
            "at_bat_number": self.stat.at_bat_number,
            "timestamp": self.stat.timestamp,
            "x": loc.x,
            "y": loc.y,
            "height": loc.height,
            "grid_resolution": loc.grid_resolution,
        }


def is_spray_chart_hit(stat: Stat) -> bool:
    return stat.hit_location is not None and stat.type.value in SPRAY_CHART_TYPES


def sequential_hit_numbering(stats: Iterable[Stat]) -> List[DisplayHit]:
    """
    Labels the tracked hits in scope 1..N by time. sorted() is stable, so
    hits with the same timestamp keep their incoming order.
    """
    hits = [s for s in stats if is_spray_chart_hit(s)]
    ordered = sorted(hits, key=lambda s: s.timestamp)
    return [DisplayHit(stat=s, display_sequence=i) for i, s in enumerate(ordered, start=1)]


def find_display_hit(display_hits: Iterable[DisplayHit], stat: Stat) -> Optional[DisplayHit]:
    key = stat_key(stat)
    for hit in display_hits:
        if hit.key == key:
            return hit
    return None


_OUTCOME_LABELS: Dict[StatType, str] = {
    StatType.HIT: "Single",
    StatType.SINGLE: "Single",
    StatType.DOUBLE: "Double",
    StatType.TRIPLE: "Triple",
    StatType.HOME_RUN: "Home Run",
    StatType.STRIKE_OUT: "Strikeout",
    StatType.WALK: "Walk",
    StatType.AT_BAT: "Out",
    StatType.RBI: "RBI",
    StatType.RUN: "Run",
    StatType.ERROR: "Error",
    StatType.FIELDERS_CHOICE: "Fielder's Choice",
    StatType.SACRIFICE: "Sacrifice",
    StatType.FLY_OUT: "Fly Out",
}


def describe_outcome(stat: Stat) -> str:
    if stat.type == StatType.HOME_RUN and stat.runs_batted_in:
        if stat.runs_batted_in == 1:
            return "Solo Home Run"
        return f"{stat.runs_batted_in}-run Home Run"

    base = stat.outcome or _OUTCOME_LABELS[stat.type]
    if stat.runs_batted_in:
        return f"{stat.runs_batted_in} RBI, {base}"
    return base


@dataclass(frozen=True)
class AtBatEntry:
    number: int
    description: str
    type: StatType
    inning: Optional[int] = None

    def to_row(self) -> Dict[str, Any]:
        return {
            "number": self.number,
            "description": self.description,
            "type": self.type.value,
            "inning": self.inning,
        }


def at_bat_log(stats: Iterable[Stat]) -> List[AtBatEntry]:
    entries = [
        AtBatEntry(
            number=s.at_bat_number,
            description=describe_outcome(s),
            type=s.type,
            inning=s.inning,
        )
        for s in stats
        if s.at_bat_number is not None
    ]
    entries.sort(key=lambda e: e.number)
    return entries


def format_average(avg: float) -> str:
    return f"{avg:.3f}"
