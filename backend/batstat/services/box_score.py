from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from batstat.core.stat_aggregator import (
    AtBatEntry,
    DisplayHit,
    InningLine,
    PlayerGameStats,
    Stat,
    aggregate_box_score,
    aggregate_game_innings,
    aggregate_inning_stats,
    aggregate_player_stats,
    at_bat_log,
    sequential_hit_numbering,
)
from batstat.services.stat_service import StatSource

# Read-side projections. Each takes its StatSource explicitly so callers can
# hand in the database-backed StatService or any other source of stats.


def game_box_score(source: StatSource, game_id: str, player_ids: Optional[Sequence[str]] = None) -> Dict[str, PlayerGameStats]:
    return aggregate_box_score(source.fetch_game_stats(game_id), player_ids)


def player_game_line(source: StatSource, game_id: str, player_id: str) -> PlayerGameStats:
    return aggregate_player_stats(source.fetch_player_game_stats(game_id, player_id))


def player_game_summary(source: StatSource, game_id: str, player_id: str) -> Tuple[PlayerGameStats, List[AtBatEntry]]:
    stats = source.fetch_player_game_stats(game_id, player_id)
    return aggregate_player_stats(stats), at_bat_log(stats)


def inning_line(source: StatSource, game_id: str, inning: int) -> InningLine:
    return aggregate_inning_stats(source.fetch_game_stats(game_id), inning)


def game_innings(source: StatSource, game_id: str) -> List[InningLine]:
    return aggregate_game_innings(source.fetch_game_stats(game_id))


def spray_chart(
    source: StatSource,
    game_id: str,
    inning: Optional[int] = None,
    player_id: Optional[str] = None,
) -> List[DisplayHit]:
    """Markers for the current view, labelled 1..N within that view only."""
    if player_id is not None:
        stats = source.fetch_player_game_stats(game_id, player_id)
    else:
        stats = source.fetch_game_stats(game_id)

    if inning is not None:
        stats = [s for s in stats if s.inning == inning]

    return sequential_hit_numbering(stats)


def player_history(stats: Sequence[Stat]) -> Tuple[PlayerGameStats, Dict[str, PlayerGameStats]]:
    """Career line plus one line per game, from a player's full stat history."""
    by_game: Dict[str, List[Stat]] = {}
    for stat in stats:
        by_game.setdefault(stat.game_id, []).append(stat)

    per_game = {game_id: aggregate_player_stats(game_stats) for game_id, game_stats in by_game.items()}
    return aggregate_player_stats(stats), per_game
