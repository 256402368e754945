from datetime import UTC, datetime

import pytest

from game.session.move_recorder import FormedWord, MoveRecorder, TangledPiece, new_tangle_events, score_word
from game.stats.enums import PlayerColor
from game.stats.exceptions import InvalidStateError
from game.stats.records import HexCoord

Y = PlayerColor.YELLOW
B = PlayerColor.BLUE

_DIRECTIONS = ((1, 0), (1, -1), (0, -1), (-1, 0), (-1, 1), (0, 1))


class LineBoard:
    """Unbounded lines clipped at three steps; enough for contact checks."""

    def line(self, origin: HexCoord, direction: int) -> list[HexCoord]:
        dq, dr = _DIRECTIONS[direction]
        return [HexCoord(q=origin.q + dq * i, r=origin.r + dr * i) for i in range(1, 4)]


def _hex(q: int, r: int) -> HexCoord:
    return HexCoord(q=q, r=r)


class TestScoreWord:
    def test_counts_own_tiles_for_ownership_points(self):
        positions = (_hex(0, 0), _hex(1, 0), _hex(2, 0))
        owners = {_hex(0, 0): Y, _hex(1, 0): B, _hex(2, 0): Y}

        scored = score_word(FormedWord("CAT", positions, 0), owners, Y)

        assert scored.word == "CAT"
        assert scored.length_points == 3
        assert scored.ownership_points == 2
        assert scored.total_points == 5
        assert scored.own_tiles_in_word == 2
        assert scored.total_tiles_in_word == 3

    def test_opponent_view_of_same_word(self):
        positions = (_hex(0, 0), _hex(1, 0))
        owners = {_hex(0, 0): Y, _hex(1, 0): B}

        scored = score_word(FormedWord("AT", positions, 0), owners, B)

        assert scored.own_tiles_in_word == 1


class TestNewTangleEvents:
    def test_only_newly_tangled_pieces_produce_events(self):
        old = TangledPiece(B, 0, _hex(1, 1))
        new = TangledPiece(B, 1, _hex(2, 2))

        events = new_tangle_events([old], [old, new], Y)

        assert len(events) == 1
        assert events[0].tangled_player is B
        assert events[0].piece_index == 1
        assert not events[0].is_self_tangle

    def test_own_piece_is_a_self_tangle(self):
        events = new_tangle_events([], [TangledPiece(Y, 2, _hex(0, 1))], Y)

        assert events[0].is_self_tangle

    def test_untangled_piece_produces_nothing(self):
        assert new_tangle_events([TangledPiece(B, 0, _hex(1, 1))], [], Y) == ()


class TestMoveRecorder:
    @pytest.fixture
    def recorder(self):
        return MoveRecorder(LineBoard())

    def _build(self, recorder, **overrides):
        kwargs = {
            "turn_number": 4,
            "player": Y,
            "cast_position": _hex(5, 5),
            "letter": "T",
            "words_formed": [],
            "points_earned": 0,
            "tile_owners": {},
            "opponent_positions": [],
            "tangled_after": [],
            "timestamp": datetime(2026, 3, 1, tzinfo=UTC),
        }
        kwargs.update(overrides)
        return recorder.build_record(**kwargs)

    def test_builds_record_from_captured_move(self, recorder):
        recorder.begin_move(1, _hex(0, 0), [])
        recorder.set_destination(_hex(1, 0))

        record = self._build(recorder)

        assert record.turn_number == 4
        assert record.piece_index == 1
        assert record.from_position == _hex(0, 0)
        assert record.to_position == _hex(1, 0)
        assert record.letter == "T"
        assert not record.is_scoring

    def test_detects_opponent_line_contact(self, recorder):
        recorder.begin_move(0, _hex(-5, -5), [])
        recorder.set_destination(_hex(2, 0))

        # opponent at origin: destination on its line, cast position off it
        record = self._build(recorder, opponent_positions=[_hex(0, 0)], cast_position=_hex(2, 1))

        assert record.moved_onto_opponent_line
        assert not record.cast_on_opponent_line

    def test_scores_formed_words(self, recorder):
        positions = (_hex(0, 0), _hex(1, 0), _hex(2, 0))
        recorder.begin_move(0, _hex(4, 4), [])
        recorder.set_destination(_hex(3, 3))

        record = self._build(
            recorder,
            words_formed=[FormedWord("CAT", positions, 0)],
            tile_owners=dict.fromkeys(positions, Y),
            points_earned=6,
        )

        assert record.is_scoring
        assert record.words_formed[0].own_tiles_in_word == 3
        assert record.points_earned == 6

    def test_records_new_tangles(self, recorder):
        before = [TangledPiece(B, 0, _hex(1, 1))]
        recorder.begin_move(0, _hex(0, 0), before)
        recorder.set_destination(_hex(0, 1))

        record = self._build(recorder, tangled_after=[*before, TangledPiece(B, 1, _hex(2, 2))])

        assert [e.piece_index for e in record.tangle_events] == [1]

    def test_cycle_fields_pass_through(self, recorder):
        recorder.begin_move(0, _hex(0, 0), [])
        recorder.set_destination(_hex(0, 1))

        record = self._build(recorder, entered_cycle_mode=True, tiles_cycled=3)

        assert record.entered_cycle_mode
        assert record.tiles_cycled == 3

    def test_build_resets_recorder(self, recorder):
        recorder.begin_move(0, _hex(0, 0), [])
        recorder.set_destination(_hex(0, 1))
        self._build(recorder)

        with pytest.raises(InvalidStateError):
            self._build(recorder)

    def test_destination_before_begin_raises(self, recorder):
        with pytest.raises(InvalidStateError, match="before begin_move"):
            recorder.set_destination(_hex(0, 1))

    def test_build_without_destination_raises(self, recorder):
        recorder.begin_move(0, _hex(0, 0), [])

        with pytest.raises(InvalidStateError):
            self._build(recorder)
