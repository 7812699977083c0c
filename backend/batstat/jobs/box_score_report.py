from batstat.core.stat_aggregator import format_average
from batstat.jobs.base import BaseJob
from batstat.services import box_score
from batstat.services.game_service import GameService
from batstat.services.player_service import PlayerService
from batstat.services.stat_service import StatService


class BoxScoreReport(BaseJob):
    def __init__(self, game_id: str, api_client=None):
        super().__init__(api_client=api_client)
        self.set_child_instance(self)
        self.game_id = game_id
        self.lines = []

    def execute(self, db_session):
        game = GameService(db_session).fetch_game(self.game_id)
        source = StatService(db_session)

        lineup = PlayerService(db_session).lineup(self.game_id)
        names = {entry.player_id: entry.player.name for entry in lineup}
        player_ids = list(names) or None

        self.lines = []
        self._emit(f"{game.date:%b %d} vs {game.opponent} @ {game.location}")
        self._emit(f"{'PLAYER':<20} {'AB':>3} {'R':>3} {'H':>3} {'RBI':>4} {'HR':>3} {'AVG':>6}")

        for player_id, line in box_score.game_box_score(source, self.game_id, player_ids).items():
            name = names.get(player_id, player_id)
            self._emit(
                f"{name[:20]:<20} {line.at_bats:>3} {line.runs:>3} {line.hits:>3} "
                f"{line.rbis:>4} {line.home_runs:>3} {format_average(line.batting_average):>6}"
            )

        for inning in box_score.game_innings(source, self.game_id):
            self._emit(
                f"Inning {inning.inning}: AB={inning.ab} R={inning.r} H={inning.h} RBI={inning.rbi} HR={inning.hr}"
            )

    def _emit(self, text: str) -> None:
        self.lines.append(text)
        self.logger.info(text)
