import argparse
import pandas as pd
from sqlalchemy import text
from batstat.core.stat_aggregator import aggregate_box_score, format_average
from batstat.database.database import SessionLocal, engine
from batstat.services.stat_service import StatService

OUTPUT_PATH = "box_scores.csv"

COLUMNS = ["game_date", "opponent", "location", "player", "number", "ab", "r", "h", "rbi", "hr", "avg"]

def make_naive(df, col):
    """Removes timezone info from a datetime column to prevent comparison errors."""
    if col in df.columns and pd.api.types.is_datetime64_any_dtype(df[col]):
        if df[col].dt.tz is not None:
            df[col] = df[col].dt.tz_localize(None)
    return df

def load_games(bind):
    df = pd.read_sql(text("""
        SELECT g.id AS game_id, g.date AS game_date, g.opponent, g.location
        FROM games g
        ORDER BY g.date
    """), bind, parse_dates=["game_date"])
    return make_naive(df, "game_date")

def load_players(bind):
    return pd.read_sql(text("SELECT p.id AS player_id, p.name AS player, p.number FROM players p"), bind)

def build_rows(session, games: pd.DataFrame, players: pd.DataFrame) -> pd.DataFrame:
    """One row per (game, player) from the same box score rules the API uses."""
    source = StatService(session)
    names = players.set_index("player_id")

    rows = []
    for game in games.itertuples(index=False):
        for player_id, line in aggregate_box_score(source.fetch_game_stats(game.game_id)).items():
            rows.append({
                "game_date": game.game_date,
                "opponent": game.opponent,
                "location": game.location,
                "player": names.at[player_id, "player"] if player_id in names.index else player_id,
                "number": names.at[player_id, "number"] if player_id in names.index else None,
                "ab": line.at_bats,
                "r": line.runs,
                "h": line.hits,
                "rbi": line.rbis,
                "hr": line.home_runs,
                "avg": format_average(line.batting_average),
            })

    return pd.DataFrame(rows, columns=COLUMNS)

def export(output_path: str = OUTPUT_PATH, bind=None) -> pd.DataFrame:
    bind = bind if bind is not None else engine
    games = load_games(bind)
    players = load_players(bind)

    with SessionLocal(bind=bind) as session:
        df = build_rows(session, games, players)

    print(f"Done. Generated {len(df)} rows.")
    df.to_csv(output_path, index=False)
    return df

if __name__ == "__main__":
    p = argparse.ArgumentParser()
    p.add_argument("--output", default=OUTPUT_PATH)
    args = p.parse_args()
    export(args.output)
