import pytest

from game.stats.enums import MatchWinner, PlayerColor
from game.stats.exceptions import InvalidStateError, MissingDataError
from game.stats.ledger import MatchLedger
from game.stats.records import PlayerInfo
from game.tests.helpers.stats import (
    AI_OPPONENT,
    FRIEND,
    LOCAL_PLAYER,
    MATCH_END,
    MATCH_START,
    make_move,
    make_result,
)


class TestCreate:
    def test_new_ledger_is_in_progress_and_empty(self):
        ledger = MatchLedger.create(LOCAL_PLAYER, AI_OPPONENT, seed=42, started_at=MATCH_START)

        assert ledger.is_in_progress
        assert ledger.moves == ()
        assert ledger.result is None
        assert ledger.ended_at is None
        assert ledger.random_seed == 42
        assert ledger.started_at == MATCH_START

    def test_each_ledger_gets_a_fresh_match_id(self):
        first = MatchLedger.create(LOCAL_PLAYER, AI_OPPONENT)
        second = MatchLedger.create(LOCAL_PLAYER, AI_OPPONENT)

        assert first.match_id != second.match_id

    def test_missing_identity_raises(self):
        with pytest.raises(MissingDataError, match="blue"):
            MatchLedger.create(LOCAL_PLAYER, None)

    def test_empty_player_id_raises(self):
        nameless = PlayerInfo(player_id="", display_name="Ghost")

        with pytest.raises(MissingDataError, match="yellow"):
            MatchLedger.create(nameless, AI_OPPONENT)


class TestOpponentDetection:
    def test_vs_ai_with_personality(self):
        ledger = MatchLedger.create(LOCAL_PLAYER, AI_OPPONENT)

        assert ledger.is_vs_ai
        assert ledger.ai_personality == "balanced"

    def test_vs_human(self):
        ledger = MatchLedger.create(LOCAL_PLAYER, FRIEND)

        assert not ledger.is_vs_ai
        assert ledger.ai_personality is None

    def test_ai_on_yellow_side(self):
        ledger = MatchLedger.create(PlayerInfo.create_ai("aggressive"), LOCAL_PLAYER)

        assert ledger.ai_personality == "aggressive"

    def test_color_of_player(self):
        ledger = MatchLedger.create(FRIEND, LOCAL_PLAYER)

        assert ledger.color_of("LOCAL_PLAYER") is PlayerColor.BLUE
        assert ledger.color_of("FRIEND") is PlayerColor.YELLOW
        assert ledger.color_of("STRANGER") is None

    def test_player_for_color(self):
        ledger = MatchLedger.create(LOCAL_PLAYER, FRIEND)

        assert ledger.player_for(PlayerColor.YELLOW) == LOCAL_PLAYER
        assert ledger.player_for(PlayerColor.BLUE) == FRIEND

    def test_player_for_missing_identity_raises(self):
        ledger = MatchLedger(yellow_player=LOCAL_PLAYER)

        with pytest.raises(MissingDataError):
            ledger.player_for(PlayerColor.BLUE)


class TestAppend:
    def test_add_move_appends_in_order(self):
        ledger = MatchLedger.create(LOCAL_PLAYER, AI_OPPONENT)
        first = make_move(PlayerColor.YELLOW, "C", turn=1)
        second = make_move(PlayerColor.BLUE, "A", turn=2)

        ledger = ledger.add_move(first).add_move(second)

        assert ledger.moves == (first, second)

    def test_add_move_does_not_mutate_original(self):
        ledger = MatchLedger.create(LOCAL_PLAYER, AI_OPPONENT)

        ledger.add_move(make_move(PlayerColor.YELLOW))

        assert ledger.moves == ()

    def test_moves_by_filters_by_color(self):
        ledger = MatchLedger.create(LOCAL_PLAYER, AI_OPPONENT)
        for turn, color in enumerate([PlayerColor.YELLOW, PlayerColor.BLUE, PlayerColor.YELLOW]):
            ledger = ledger.add_move(make_move(color, turn=turn))

        assert [m.turn_number for m in ledger.moves_by(PlayerColor.YELLOW)] == [0, 2]
        assert [m.turn_number for m in ledger.moves_by(PlayerColor.BLUE)] == [1]

    def test_capture_initial_hands_copies_input(self):
        hand = ["A", "B", "C"]
        ledger = MatchLedger.create(LOCAL_PLAYER, AI_OPPONENT).capture_initial_hands(hand, ["X", "Y"])
        hand.append("D")

        assert ledger.initial_yellow_hand == ("A", "B", "C")
        assert ledger.initial_blue_hand == ("X", "Y")


class TestComplete:
    def test_complete_sets_result_and_end_time(self):
        result = make_result(MatchWinner.YELLOW, 30, 20)

        ledger = MatchLedger.create(LOCAL_PLAYER, AI_OPPONENT).complete(result, ended_at=MATCH_END)

        assert not ledger.is_in_progress
        assert ledger.result == result
        assert ledger.ended_at == MATCH_END

    def test_complete_defaults_end_time_to_now(self):
        ledger = MatchLedger.create(LOCAL_PLAYER, AI_OPPONENT).complete(make_result(MatchWinner.TIE))

        assert ledger.ended_at is not None
        assert ledger.ended_at >= ledger.started_at

    def test_complete_twice_raises(self):
        ledger = MatchLedger.create(LOCAL_PLAYER, AI_OPPONENT).complete(make_result(MatchWinner.TIE))

        with pytest.raises(InvalidStateError, match="already completed"):
            ledger.complete(make_result(MatchWinner.BLUE))

    def test_add_move_after_complete_raises(self):
        ledger = MatchLedger.create(LOCAL_PLAYER, AI_OPPONENT).complete(make_result(MatchWinner.TIE))

        with pytest.raises(InvalidStateError):
            ledger.add_move(make_move(PlayerColor.YELLOW))

    def test_capture_hands_after_complete_raises(self):
        ledger = MatchLedger.create(LOCAL_PLAYER, AI_OPPONENT).complete(make_result(MatchWinner.TIE))

        with pytest.raises(InvalidStateError):
            ledger.capture_initial_hands(["A"], ["B"])


class TestSerialization:
    def test_json_round_trip_preserves_ledger(self):
        ledger = MatchLedger.create(LOCAL_PLAYER, AI_OPPONENT, seed=9, started_at=MATCH_START)
        ledger = ledger.capture_initial_hands(["A", "B"], ["C", "D"])
        ledger = ledger.add_move(make_move(PlayerColor.YELLOW, "E", turn=1))
        ledger = ledger.complete(make_result(MatchWinner.YELLOW, 5, 0, total_turns=1), ended_at=MATCH_END)

        restored = MatchLedger.model_validate_json(ledger.model_dump_json())

        assert restored == ledger
