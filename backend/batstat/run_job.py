from sqlalchemy import text
import argparse
import sys

from batstat.database.database import SessionLocal

from batstat.jobs.stat_import import StatImport
from batstat.jobs.box_score_report import BoxScoreReport


def try_lock(session, name: str) -> bool:
    # advisory locks only exist on postgres
    if session.get_bind().dialect.name != "postgresql":
        return True
    return bool(
        session.execute(
            text("SELECT pg_try_advisory_lock(hashtext(:k), 0)"),
            {"k": name},
        ).scalar()
    )


def unlock(session, name: str) -> None:
    if session.get_bind().dialect.name != "postgresql":
        return
    session.execute(
        text("SELECT pg_advisory_unlock(hashtext(:k), 0)"),
        {"k": name},
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument(
        "job",
        choices=["stat_import", "box_score_report"],
    )
    p.add_argument("--game-id", default=None)
    return p


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    job_key = args.job

    if job_key == "box_score_report" and not args.game_id:
        print("box_score_report requires --game-id", file=sys.stderr)
        return 2

    with SessionLocal() as session:
        if not try_lock(session, job_key):
            return 1

        try:
            if job_key == "stat_import":
                ok = StatImport(game_id=args.game_id).run()
            elif job_key == "box_score_report":
                ok = BoxScoreReport(game_id=args.game_id).run()
        finally:
            unlock(session, job_key)

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
