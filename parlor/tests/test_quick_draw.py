"""
Tests for the quick draw rooms.

Tests:
- Rooms: codes, joining, starting
- Word choice and drawing (drawer only)
- Guess scoring
- Round end, drawer rotation and the final result
- Hidden word in projections
"""

import pytest

from ..engine_core.action import Move
from ..engine_core.errors import BadRequest, Forbidden, NotFound
from ..engine_core.state import SessionStatus, Participant
from ..games.quick_draw import ROOM_CODE_ALPHABET, ROOM_CODE_LENGTH, top_scorer
from ..games.words import DRAW_WORDS
from ..session.notifications import NotificationType


def choose_first_option(manager, session_id, drawer):
    view = manager.get_game(session_id, drawer)
    word = view["board"]["word_options"][0]
    manager.make_move(drawer, session_id, Move.choose_word(word))
    return word


class TestRooms:
    def test_room_code_shape(self, manager):
        session = manager.create_game("alice", "quick_draw")
        code = session.board.room_code

        assert len(code) == ROOM_CODE_LENGTH
        assert all(ch in ROOM_CODE_ALPHABET for ch in code)
        assert session.status == SessionStatus.WAITING

    def test_settings_defaults(self, manager):
        session = manager.create_game("alice", "quick_draw")
        assert session.board.total_rounds == 3
        assert session.board.round_duration == 80

    def test_join_room_case_insensitive(self, manager):
        session = manager.create_game("alice", "quick_draw")
        joined = manager.join_room("bob", session.board.room_code.lower())

        assert joined.session_id == session.session_id
        assert joined.participant_ids == ["alice", "bob"]
        assert joined.status == SessionStatus.WAITING

    def test_join_room_idempotent(self, manager):
        session = manager.create_game("alice", "quick_draw")
        manager.join_room("bob", session.board.room_code)
        joined = manager.join_room("bob", session.board.room_code)
        assert joined.participant_ids == ["alice", "bob"]

    def test_unknown_room(self, manager):
        with pytest.raises(NotFound):
            manager.join_room("bob", "ZZZZZZ")

    def test_room_full(self, manager):
        session = manager.create_game("alice", "quick_draw")
        for i in range(7):
            manager.join_game(f"player{i}", session.session_id)

        with pytest.raises(BadRequest, match="full"):
            manager.join_game("latecomer", session.session_id)

    def test_invited_room(self, manager):
        session = manager.create_game("alice", "quick_draw", invited_player_id="bob")
        code = session.board.room_code

        with pytest.raises(Forbidden):
            manager.join_room("mallory", code)
        assert manager.join_room("bob", code).participant_ids == ["alice", "bob"]
        # members rejoin freely
        assert manager.join_room("bob", code).participant_ids == ["alice", "bob"]

    def test_start_needs_host(self, manager):
        session = manager.create_game("alice", "quick_draw")
        manager.join_game("bob", session.session_id)
        with pytest.raises(Forbidden):
            manager.start_game("bob", session.session_id)

    def test_start_needs_two_players(self, manager):
        session = manager.create_game("alice", "quick_draw")
        with pytest.raises(BadRequest, match="At least 2"):
            manager.start_game("alice", session.session_id)

    def test_start(self, drawing_room, sink):
        board = drawing_room.board
        assert drawing_room.status == SessionStatus.CHOOSING_WORD
        assert board.current_round == 1
        assert board.current_drawer_id == "alice"
        assert len(board.word_options) == 3
        assert all(word in DRAW_WORDS for word in board.word_options)

        started = sink.of_type(NotificationType.GAME_STARTED)
        assert {e.recipient_id for e in started} == {"bob", "carol"}

    def test_join_after_start_rejected(self, drawing_room, manager):
        with pytest.raises(BadRequest):
            manager.join_game("dave", drawing_room.session_id)


class TestDrawing:
    def test_only_drawer_chooses(self, drawing_room, manager):
        word = drawing_room.board.word_options[0]
        with pytest.raises(Forbidden):
            manager.make_move("bob", drawing_room.session_id, Move.choose_word(word))

    def test_word_must_be_offered(self, drawing_room, manager):
        offered = set(drawing_room.board.word_options)
        other = next(w for w in DRAW_WORDS if w not in offered)
        with pytest.raises(BadRequest, match="offered"):
            manager.make_move("alice", drawing_room.session_id, Move.choose_word(other))

    def test_choose_word_starts_drawing(self, drawing_room, manager, clock):
        word = choose_first_option(manager, drawing_room.session_id, "alice")
        view = manager.get_game(drawing_room.session_id, "alice")

        assert view["status"] == "drawing"
        assert view["board"]["current_word"] == word
        assert view["board"]["round_start_time"] == clock.now_ms()

    def test_choose_twice_rejected(self, drawing_room, manager):
        word = choose_first_option(manager, drawing_room.session_id, "alice")
        with pytest.raises(BadRequest):
            manager.make_move("alice", drawing_room.session_id, Move.choose_word(word))

    def test_update_drawing(self, drawing_room, manager):
        sid = drawing_room.session_id
        choose_first_option(manager, sid, "alice")

        manager.make_move("alice", sid, Move.update_drawing("M0,0 L10,10"))
        assert manager.get_game(sid, "bob")["board"]["drawing_data"] == "M0,0 L10,10"

        with pytest.raises(Forbidden):
            manager.make_move("bob", sid, Move.update_drawing("scribble"))

    def test_drawing_before_word_rejected(self, drawing_room, manager):
        with pytest.raises(BadRequest):
            manager.make_move("alice", drawing_room.session_id, Move.update_drawing("x"))


class TestGuessing:
    def test_guess_before_drawing_rejected(self, drawing_room, manager):
        with pytest.raises(BadRequest, match="drawing phase"):
            manager.make_move("bob", drawing_room.session_id, Move.guess("kedi"))

    def test_drawer_cannot_guess(self, drawing_room, manager):
        word = choose_first_option(manager, drawing_room.session_id, "alice")
        with pytest.raises(Forbidden):
            manager.make_move("alice", drawing_room.session_id, Move.guess(word))

    def test_instant_correct_guess_scores_150(self, drawing_room, manager):
        sid = drawing_room.session_id
        word = choose_first_option(manager, sid, "alice")

        result = manager.make_move("bob", sid, Move.guess(f"  {word.capitalize()}  "))

        assert result.details == {"is_correct": True, "points": 150}
        assert result.session.get_participant("bob").score == 150

    def test_points_decay_with_time(self, drawing_room, manager, clock):
        sid = drawing_room.session_id
        word = choose_first_option(manager, sid, "alice")
        clock.advance(30)

        result = manager.make_move("bob", sid, Move.guess(word))
        assert result.details["points"] == 125

    def test_wrong_guess_scores_nothing(self, drawing_room, manager):
        sid = drawing_room.session_id
        choose_first_option(manager, sid, "alice")

        result = manager.make_move("bob", sid, Move.guess("definitely not it"))
        assert result.details == {"is_correct": False, "points": 0}
        assert result.session.board.guesses[0].text == "definitely not it"

    def test_repeat_correct_guess_rejected(self, drawing_room, manager):
        sid = drawing_room.session_id
        word = choose_first_option(manager, sid, "alice")
        manager.make_move("bob", sid, Move.guess(word))

        with pytest.raises(BadRequest, match="already guessed"):
            manager.make_move("bob", sid, Move.guess(word))

    def test_word_hidden_from_guessers(self, drawing_room, manager):
        sid = drawing_room.session_id
        choose_first_option(manager, sid, "alice")

        bob_view = manager.get_game(sid, "bob")["board"]
        assert bob_view["current_word"] is None
        assert bob_view["word_options"] == []
        assert manager.get_game(sid, None)["board"]["current_word"] is None

    def test_correct_guess_text_hidden_from_other_guessers(self, drawing_room, manager):
        sid = drawing_room.session_id
        word = choose_first_option(manager, sid, "alice")
        manager.make_move("carol", sid, Move.guess("not the word"))
        manager.make_move("bob", sid, Move.guess(word))

        carol_guesses = manager.get_game(sid, "carol")["board"]["guesses"]
        assert [g["text"] for g in carol_guesses] == ["not the word", None]
        assert carol_guesses[1]["is_correct"] is True
        assert all(g["text"] != word for g in manager.get_game(sid, None)["board"]["guesses"])

        assert [g["text"] for g in manager.get_game(sid, "bob")["board"]["guesses"]] == ["not the word", word]
        assert [g["text"] for g in manager.get_game(sid, "alice")["board"]["guesses"]] == ["not the word", word]


class TestRounds:
    def test_end_round_noop_while_guessers_remain(self, drawing_room, manager):
        sid = drawing_room.session_id
        word = choose_first_option(manager, sid, "alice")
        manager.make_move("bob", sid, Move.guess(word))

        result = manager.make_move("carol", sid, Move.end_round())
        assert result.details == {"ended": False}
        assert not result.changed
        assert result.session.status == SessionStatus.DRAWING

    def test_end_round_noop_outside_drawing(self, drawing_room, manager):
        result = manager.make_move("bob", drawing_room.session_id, Move.end_round())
        assert result.details == {"ended": False}

    def test_all_guessed_rotates_drawer(self, drawing_room, manager):
        sid = drawing_room.session_id
        word = choose_first_option(manager, sid, "alice")
        manager.make_move("bob", sid, Move.guess(word))
        manager.make_move("carol", sid, Move.guess(word))

        result = manager.make_move("bob", sid, Move.end_round())
        board = result.session.board

        assert result.details["ended"] is True
        assert result.session.status == SessionStatus.CHOOSING_WORD
        assert board.current_round == 2
        assert board.current_drawer_id == "bob"
        assert board.last_word == word
        assert board.current_word is None
        assert board.guesses == []
        assert len(board.word_options) == 3

    def test_timer_ends_round(self, drawing_room, manager, clock):
        sid = drawing_room.session_id
        choose_first_option(manager, sid, "alice")
        clock.advance(59)
        assert manager.make_move("bob", sid, Move.end_round()).details["ended"] is False

        clock.advance(1)
        assert manager.make_move("bob", sid, Move.end_round()).details["ended"] is True

    def test_last_round_completes(self, drawing_room, manager, sink):
        sid = drawing_room.session_id

        word = choose_first_option(manager, sid, "alice")
        manager.make_move("bob", sid, Move.guess(word))
        manager.make_move("carol", sid, Move.guess(word))
        manager.make_move("alice", sid, Move.end_round())

        word = choose_first_option(manager, sid, "bob")
        manager.make_move("carol", sid, Move.guess(word))
        manager.make_move("alice", sid, Move.guess(word))
        result = manager.make_move("alice", sid, Move.end_round())

        assert result.finished
        assert result.session.status == SessionStatus.COMPLETED
        # carol scored in both rounds, alice and bob in one each
        assert result.session.result.winner_id == "carol"
        assert manager.get_game(sid, "alice")["board"]["current_word"] == word

        over = sink.of_type(NotificationType.GAME_OVER)
        assert {e.recipient_id for e in over} == {"alice", "bob", "carol"}

    def test_end_round_after_completion_is_noop(self, drawing_room, manager, clock):
        sid = drawing_room.session_id
        for drawer in ["alice", "bob"]:
            choose_first_option(manager, sid, drawer)
            clock.advance(60)
            manager.make_move(drawer, sid, Move.end_round())

        result = manager.make_move("carol", sid, Move.end_round())
        assert result.details == {"ended": False}
        assert result.session.status == SessionStatus.COMPLETED


class TestTieBreak:
    def test_earliest_joined_wins_tie(self):
        players = [
            Participant("alice", score=100),
            Participant("bob", score=250),
            Participant("carol", score=250),
        ]
        assert top_scorer(players).player_id == "bob"
