import dataclasses

import pytest

from batstat.core.stat_aggregator import (
    CLASSIFICATION,
    DisplayHit,
    HitLocation,
    InningLine,
    InvalidStatError,
    PlayerGameStats,
    Stat,
    StatType,
    aggregate_box_score,
    aggregate_game_innings,
    aggregate_inning_stats,
    aggregate_player_stats,
    at_bat_log,
    describe_outcome,
    find_display_hit,
    format_average,
    sequential_hit_numbering,
)
from tests.helpers import GAME_ID, make_stat


class TestClassification:
    def test_every_stat_type_is_classified(self) -> None:
        assert set(CLASSIFICATION) == set(StatType)

    @pytest.mark.parametrize("stat_type", [StatType.WALK, StatType.RBI, StatType.RUN])
    def test_non_at_bat_types_never_add_at_bats(self, stat_type: StatType) -> None:
        result = aggregate_player_stats([make_stat(stat_type), make_stat(stat_type, minute=1)])
        assert result.at_bats == 0

    @pytest.mark.parametrize(
        "stat_type",
        [
            StatType.AT_BAT,
            StatType.STRIKE_OUT,
            StatType.ERROR,
            StatType.FIELDERS_CHOICE,
            StatType.FLY_OUT,
            StatType.SACRIFICE,
        ],
    )
    def test_outs_and_reached_on_error_count_as_at_bats_only(self, stat_type: StatType) -> None:
        result = aggregate_player_stats([make_stat(stat_type)])
        assert result == PlayerGameStats(at_bats=1)

    @pytest.mark.parametrize("stat_type", [StatType.HIT, StatType.SINGLE, StatType.DOUBLE, StatType.TRIPLE])
    def test_hits_add_an_at_bat_and_a_hit(self, stat_type: StatType) -> None:
        result = aggregate_player_stats([make_stat(stat_type)])
        assert result == PlayerGameStats(at_bats=1, hits=1)

    def test_run_adds_a_run(self) -> None:
        assert aggregate_player_stats([make_stat(StatType.RUN)]) == PlayerGameStats(runs=1)

    def test_rbi_type_without_count_adds_nothing(self) -> None:
        assert aggregate_player_stats([make_stat(StatType.RBI)]) == PlayerGameStats()


class TestAggregatePlayerStats:
    def test_empty_input_is_all_zero(self) -> None:
        result = aggregate_player_stats([])
        assert result == PlayerGameStats(at_bats=0, hits=0, runs=0, rbis=0, home_runs=0)
        assert result.batting_average == 0.0

    def test_home_run_counts_hit_run_and_home_run(self) -> None:
        result = aggregate_player_stats([make_stat(StatType.HOME_RUN)])
        assert result.at_bats == 1
        assert result.hits == 1
        assert result.runs == 1
        assert result.home_runs == 1
        assert result.rbis == 0

    def test_home_run_rbis_come_only_from_runs_batted_in(self) -> None:
        result = aggregate_player_stats([make_stat(StatType.HOME_RUN, runs_batted_in=2)])
        assert result == PlayerGameStats(at_bats=1, hits=1, runs=1, rbis=2, home_runs=1)
        assert result.batting_average == 1.0

    def test_mixed_game(self) -> None:
        stats = [
            make_stat(StatType.SINGLE, minute=0, at_bat_number=1),
            make_stat(StatType.STRIKE_OUT, minute=10, at_bat_number=2),
            make_stat(StatType.DOUBLE, minute=20, at_bat_number=3, runs_batted_in=2),
            make_stat(StatType.FLY_OUT, minute=30, at_bat_number=4),
        ]
        result = aggregate_player_stats(stats)
        assert result == PlayerGameStats(at_bats=4, hits=2, runs=0, rbis=2, home_runs=0)
        assert result.batting_average == 0.5

    def test_runs_batted_in_counted_for_any_type(self) -> None:
        stats = [
            make_stat(StatType.SACRIFICE, runs_batted_in=1),
            make_stat(StatType.WALK, minute=1, runs_batted_in=1),
            make_stat(StatType.RBI, minute=2, runs_batted_in=1),
        ]
        assert aggregate_player_stats(stats).rbis == 3

    def test_order_does_not_matter(self) -> None:
        stats = [
            make_stat(StatType.HOME_RUN, runs_batted_in=1),
            make_stat(StatType.WALK, minute=1),
            make_stat(StatType.TRIPLE, minute=2),
            make_stat(StatType.RUN, minute=3),
        ]
        assert aggregate_player_stats(stats) == aggregate_player_stats(list(reversed(stats)))

    def test_batting_average_with_no_at_bats_is_zero(self) -> None:
        assert PlayerGameStats(at_bats=0, hits=3).batting_average == 0.0

    def test_batting_average(self) -> None:
        assert PlayerGameStats(at_bats=3, hits=1).batting_average == pytest.approx(1 / 3)

    def test_to_row(self) -> None:
        row = PlayerGameStats(at_bats=4, hits=1, runs=1, rbis=2, home_runs=0).to_row()
        assert row == {
            "at_bats": 4,
            "runs": 1,
            "hits": 1,
            "rbis": 2,
            "home_runs": 0,
            "batting_average": 0.25,
        }


class TestInningStats:
    def test_only_matching_inning_is_counted(self) -> None:
        stats = [
            make_stat(StatType.SINGLE, inning=1, player_id="a"),
            make_stat(StatType.HOME_RUN, inning=1, player_id="b", runs_batted_in=1, minute=1),
            make_stat(StatType.DOUBLE, inning=2, player_id="a", minute=2),
            make_stat(StatType.TRIPLE, inning=None, player_id="c", minute=3),
        ]
        assert aggregate_inning_stats(stats, 1) == InningLine(inning=1, ab=2, r=1, h=2, rbi=1, hr=1)
        assert aggregate_inning_stats(stats, 2) == InningLine(inning=2, ab=1, h=1)

    def test_null_inning_never_matches(self) -> None:
        stats = [make_stat(StatType.TRIPLE, inning=None)]
        for inning in range(1, 10):
            assert aggregate_inning_stats(stats, inning) == InningLine(inning=inning)

    def test_walk_in_inning(self) -> None:
        stats = [make_stat(StatType.WALK, inning=3), make_stat(StatType.RUN, inning=3, minute=1)]
        assert aggregate_inning_stats(stats, 3) == InningLine(inning=3, r=1)

    def test_game_innings_sorted_and_skip_empty(self) -> None:
        stats = [
            make_stat(StatType.SINGLE, inning=3),
            make_stat(StatType.STRIKE_OUT, inning=1, minute=1),
            make_stat(StatType.WALK, inning=None, minute=2),
            make_stat(StatType.RUN, inning=3, minute=3),
        ]
        lines = aggregate_game_innings(stats)
        assert [line.inning for line in lines] == [1, 3]
        assert lines[0] == InningLine(inning=1, ab=1)
        assert lines[1] == InningLine(inning=3, ab=1, h=1, r=1)

    def test_game_innings_empty(self) -> None:
        assert aggregate_game_innings([]) == []


class TestBoxScore:
    def test_follows_given_player_order(self) -> None:
        stats = [
            make_stat(StatType.SINGLE, player_id="a"),
            make_stat(StatType.STRIKE_OUT, player_id="b", minute=1),
            make_stat(StatType.SINGLE, player_id="stranger", minute=2),
        ]
        box = aggregate_box_score(stats, ["b", "a", "c"])
        assert list(box) == ["b", "a", "c"]
        assert box["a"] == PlayerGameStats(at_bats=1, hits=1)
        assert box["b"] == PlayerGameStats(at_bats=1)
        assert box["c"] == PlayerGameStats()

    def test_without_player_order_uses_first_appearance(self) -> None:
        stats = [
            make_stat(StatType.SINGLE, player_id="z"),
            make_stat(StatType.STRIKE_OUT, player_id="y", minute=1),
            make_stat(StatType.RUN, player_id="z", minute=2),
        ]
        box = aggregate_box_score(stats)
        assert list(box) == ["z", "y"]
        assert box["z"] == PlayerGameStats(at_bats=1, hits=1, runs=1)


class TestSequentialHitNumbering:
    def test_numbers_by_timestamp(self) -> None:
        stats = [
            make_stat(StatType.DOUBLE, minute=20, at_bat_number=14, location=(0.2, 0.3)),
            make_stat(StatType.SINGLE, minute=10, at_bat_number=11, location=(0.5, 0.5)),
            make_stat(StatType.HOME_RUN, minute=30, at_bat_number=15, location=(0.9, 0.1)),
        ]
        hits = sequential_hit_numbering(stats)
        assert [h.display_sequence for h in hits] == [1, 2, 3]
        assert [h.stat.at_bat_number for h in hits] == [11, 14, 15]

    def test_keeps_only_tracked_hits(self) -> None:
        stats = [
            make_stat(StatType.SINGLE, minute=0, location=(0.5, 0.5)),
            make_stat(StatType.SINGLE, minute=1),
            make_stat(StatType.HIT, minute=2, location=(0.5, 0.5)),
            make_stat(StatType.FLY_OUT, minute=3, location=(0.5, 0.2)),
            make_stat(StatType.TRIPLE, minute=4, location=(0.1, 0.4)),
        ]
        hits = sequential_hit_numbering(stats)
        assert [h.stat.type for h in hits] == [StatType.SINGLE, StatType.TRIPLE]
        assert [h.display_sequence for h in hits] == [1, 2]

    def test_ties_keep_input_order(self) -> None:
        first = make_stat(StatType.SINGLE, minute=5, player_id="a", location=(0.1, 0.1))
        second = make_stat(StatType.DOUBLE, minute=5, player_id="b", location=(0.2, 0.2))
        earlier = make_stat(StatType.TRIPLE, minute=1, player_id="c", location=(0.3, 0.3))

        hits = sequential_hit_numbering([first, second, earlier])
        assert [h.stat for h in hits] == [earlier, first, second]

        hits = sequential_hit_numbering([second, first, earlier])
        assert [h.stat for h in hits] == [earlier, second, first]

    def test_idempotent(self) -> None:
        stats = [
            make_stat(StatType.SINGLE, minute=i, location=(0.5, 0.5))
            for i in range(5)
        ]
        once = sequential_hit_numbering(stats)
        twice = sequential_hit_numbering([h.stat for h in once])
        assert once == twice

    def test_does_not_touch_stats(self) -> None:
        stat = make_stat(StatType.SINGLE, at_bat_number=11, location=(0.5, 0.5))
        hits = sequential_hit_numbering([stat])
        assert hits[0].display_sequence == 1
        assert stat.at_bat_number == 11
        with pytest.raises(dataclasses.FrozenInstanceError):
            stat.at_bat_number = 1  # type: ignore[misc]

    def test_empty(self) -> None:
        assert sequential_hit_numbering([]) == []

    def test_find_display_hit_by_composite_key(self) -> None:
        single = make_stat(StatType.SINGLE, minute=1, location=(0.5, 0.5))
        double = make_stat(StatType.DOUBLE, minute=2, location=(0.4, 0.4))
        hits = sequential_hit_numbering([double, single])

        found = find_display_hit(hits, double)
        assert found is not None
        assert found.display_sequence == 2
        assert found.stat is double

    def test_find_display_hit_matches_copies_with_same_key(self) -> None:
        original = make_stat(StatType.SINGLE, minute=1, location=(0.5, 0.5))
        hits = sequential_hit_numbering([original])
        reloaded = dataclasses.replace(original, id="other-id", at_bat_number=7)
        assert find_display_hit(hits, reloaded) == hits[0]

    def test_find_display_hit_missing(self) -> None:
        hits = sequential_hit_numbering([make_stat(StatType.SINGLE, location=(0.5, 0.5))])
        assert find_display_hit(hits, make_stat(StatType.STRIKE_OUT)) is None

    def test_display_hit_row(self) -> None:
        stat = make_stat(StatType.DOUBLE, inning=3, at_bat_number=11, location=(0.25, 0.75))
        row = DisplayHit(stat=stat, display_sequence=1).to_row()
        assert row["display_sequence"] == 1
        assert row["stat_id"] == stat.id
        assert row["type"] == "2B"
        assert row["x"] == 0.25
        assert row["y"] == 0.75
        assert row["grid_resolution"] == 40


class TestDescribeOutcome:
    def test_free_text_outcome_wins(self) -> None:
        assert describe_outcome(make_stat(StatType.SINGLE, outcome="Bloop single to left")) == "Bloop single to left"

    def test_empty_outcome_falls_back_to_type(self) -> None:
        assert describe_outcome(make_stat(StatType.FIELDERS_CHOICE, outcome="")) == "Fielder's Choice"

    @pytest.mark.parametrize(
        "stat_type,label",
        [
            (StatType.HIT, "Single"),
            (StatType.AT_BAT, "Out"),
            (StatType.STRIKE_OUT, "Strikeout"),
            (StatType.FLY_OUT, "Fly Out"),
            (StatType.HOME_RUN, "Home Run"),
        ],
    )
    def test_labels(self, stat_type: StatType, label: str) -> None:
        assert describe_outcome(make_stat(stat_type)) == label

    def test_solo_home_run(self) -> None:
        assert describe_outcome(make_stat(StatType.HOME_RUN, runs_batted_in=1)) == "Solo Home Run"

    def test_multi_run_home_run(self) -> None:
        assert describe_outcome(make_stat(StatType.HOME_RUN, runs_batted_in=3, outcome="Deep")) == "3-run Home Run"

    def test_rbis_prefix_other_plays(self) -> None:
        assert describe_outcome(make_stat(StatType.DOUBLE, runs_batted_in=2)) == "2 RBI, Double"
        assert describe_outcome(make_stat(StatType.SACRIFICE, runs_batted_in=1)) == "1 RBI, Sacrifice"

    def test_rbis_prefix_free_text_outcome(self) -> None:
        stat = make_stat(StatType.SINGLE, runs_batted_in=1, outcome="Bloop single to left")
        assert describe_outcome(stat) == "1 RBI, Bloop single to left"

    def test_zero_rbis_has_no_prefix(self) -> None:
        assert describe_outcome(make_stat(StatType.TRIPLE, runs_batted_in=0)) == "Triple"
        assert describe_outcome(make_stat(StatType.HOME_RUN, runs_batted_in=0)) == "Home Run"


class TestAtBatLog:
    def test_ordered_by_at_bat_number_and_skips_unnumbered(self) -> None:
        stats = [
            make_stat(StatType.DOUBLE, minute=0, at_bat_number=3, inning=5),
            make_stat(StatType.RUN, minute=1),
            make_stat(StatType.WALK, minute=2, at_bat_number=1, inning=1),
            make_stat(StatType.STRIKE_OUT, minute=3, at_bat_number=2, inning=3),
        ]
        log = at_bat_log(stats)
        assert [e.number for e in log] == [1, 2, 3]
        assert [e.description for e in log] == ["Walk", "Strikeout", "Double"]
        assert log[2].inning == 5
        assert log[0].to_row() == {"number": 1, "description": "Walk", "type": "BB", "inning": 1}


class TestValidation:
    def test_negative_runs_batted_in_rejected(self) -> None:
        with pytest.raises(InvalidStatError):
            make_stat(StatType.DOUBLE, runs_batted_in=-1)

    @pytest.mark.parametrize("inning", [0, -2])
    def test_non_positive_inning_rejected(self, inning: int) -> None:
        with pytest.raises(InvalidStatError):
            make_stat(StatType.SINGLE, inning=inning)

    def test_non_positive_at_bat_number_rejected(self) -> None:
        with pytest.raises(InvalidStatError):
            make_stat(StatType.SINGLE, at_bat_number=0)

    def test_type_codes_are_accepted(self) -> None:
        stat = Stat(game_id=GAME_ID, player_id="p", type="HR")
        assert stat.type is StatType.HOME_RUN

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(InvalidStatError):
            Stat(game_id=GAME_ID, player_id="p", type="XX")

    def test_invalid_stat_error_is_value_error(self) -> None:
        assert issubclass(InvalidStatError, ValueError)

    @pytest.mark.parametrize("x,y,height", [(-0.1, 0.5, 0.0), (0.5, 1.01, 0.0), (0.5, 0.5, 2.0)])
    def test_hit_location_outside_unit_square_rejected(self, x: float, y: float, height: float) -> None:
        with pytest.raises(InvalidStatError):
            HitLocation(x=x, y=y, height=height)


class TestHitLocation:
    def test_from_point_and_back(self) -> None:
        loc = HitLocation.from_point(150.0, 300.0, field_width=300.0, field_height=400.0, height=0.5)
        assert loc.x == 0.5
        assert loc.y == 0.75
        assert loc.grid_resolution == 40
        assert loc.to_point(300.0, 400.0) == (150.0, 300.0)

    def test_same_location_on_another_screen(self) -> None:
        loc = HitLocation.from_point(100.0, 100.0, field_width=400.0, field_height=400.0)
        assert loc.to_point(800.0, 800.0) == (200.0, 200.0)

    def test_from_point_requires_positive_field(self) -> None:
        with pytest.raises(InvalidStatError):
            HitLocation.from_point(1.0, 1.0, field_width=0.0, field_height=10.0)


def test_format_average() -> None:
    assert format_average(0.5) == "0.500"
    assert format_average(1 / 3) == "0.333"
