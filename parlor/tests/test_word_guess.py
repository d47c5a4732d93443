"""
Tests for the daily word game.

Tests:
- Two-pass letter scoring (repeated letters)
- One game per player per UTC day
- Win / loss and the hidden target
- Streak statistics
"""

import pytest

from ..engine_core.action import Move
from ..engine_core.errors import BadRequest
from ..engine_core.state import SessionStatus
from ..games.word_guess import score_guess, normalize, CORRECT, PRESENT, ABSENT
from ..games.words import TARGET_WORDS, VALID_GUESSES, TargetWord, WORD_LENGTH

DAY_SECONDS = 24 * 60 * 60
WRONG_GUESSES = ["araba", "deniz", "kitap", "bebek", "dünya", "zaman"]


def set_target(store, session_id, word):
    def place(session):
        session.board.target = TargetWord(word, "test")
        return session
    return store.update(session_id, place)


class TestScoreGuess:
    def test_repeated_guess_letter_credited_once(self):
        assert score_guess("araba", "kalem") == [PRESENT, ABSENT, ABSENT, ABSENT, ABSENT]

    def test_repeated_letter_in_both(self):
        assert score_guess("araba", "kanat") == [PRESENT, ABSENT, PRESENT, ABSENT, ABSENT]

    def test_exact_match_consumes_before_present(self):
        assert score_guess("ekmek", "kalem") == [ABSENT, PRESENT, PRESENT, CORRECT, ABSENT]

    def test_mixed_correct(self):
        assert score_guess("zaman", "vatan") == [ABSENT, CORRECT, ABSENT, CORRECT, CORRECT]

    def test_exact(self):
        assert score_guess("kalem", "kalem") == [CORRECT] * 5

    def test_never_overcredits(self):
        """No letter is marked correct or present more often than it occurs in the target."""
        targets = [t.word for t in TARGET_WORDS[:20]]
        for target in targets:
            for guess in sorted(VALID_GUESSES)[:40]:
                feedback = score_guess(guess, target)
                for letter in set(guess):
                    credited = sum(
                        1 for g, mark in zip(guess, feedback) if g == letter and mark != ABSENT
                    )
                    assert credited <= target.count(letter)


class TestNormalize:
    def test_dotted_capital_i(self):
        assert normalize("İLKAY") == "ilkay"

    def test_dotless_capital_i(self):
        assert normalize("BALIK") == "balık"

    def test_trims_and_lowers(self):
        assert normalize("  Kalem ") == "kalem"

    def test_decomposed_input_composed(self):
        # "ç" as c + combining cedilla
        assert normalize("c\u0327atal") == "\u00e7atal"

    def test_uppercase_turkish_guess_accepted(self, manager, store):
        session = manager.create_daily_word_game("alice")
        set_target(store, session.session_id, "ilkay")

        result = manager.make_move("alice", session.session_id, Move.guess_word("İLKAY"))
        assert result.session.status == SessionStatus.WON


class TestWordList:
    def test_targets_are_five_letters(self):
        assert all(len(t.word) == WORD_LENGTH for t in TARGET_WORDS)

    def test_every_target_has_a_hint(self):
        assert all(t.hint for t in TARGET_WORDS)


class TestDailyGame:
    def test_created_in_progress(self, manager):
        session = manager.create_daily_word_game("alice")
        assert session.status == SessionStatus.IN_PROGRESS
        assert session.participant_ids == ["alice"]
        assert session.board.max_guesses == 6

    def test_create_game_routes_to_daily(self, manager):
        session = manager.create_game("alice", "word_guess")
        assert session.lookup_key.startswith("daily:alice:")

    def test_one_per_day(self, manager):
        manager.create_daily_word_game("alice")
        with pytest.raises(BadRequest, match="already played"):
            manager.create_daily_word_game("alice")

    def test_other_players_unaffected(self, manager):
        manager.create_daily_word_game("alice")
        assert manager.create_daily_word_game("bob").creator_id == "bob"

    def test_new_day_new_game(self, manager, clock):
        first = manager.create_daily_word_game("alice")
        clock.advance(DAY_SECONDS)
        second = manager.create_daily_word_game("alice")
        assert second.board.day != first.board.day

    def test_todays_game(self, manager):
        assert manager.get_todays_game("alice") is None
        session = manager.create_daily_word_game("alice")

        view = manager.get_todays_game("alice")
        assert view["session_id"] == session.session_id
        assert view["board"]["target_word"] is None
        assert view["board"]["hint"] is None

    def test_cannot_join(self, manager):
        session = manager.create_daily_word_game("alice")
        with pytest.raises(BadRequest):
            manager.join_game("bob", session.session_id)


class TestGuessing:
    def test_length_checked(self, manager):
        session = manager.create_daily_word_game("alice")
        with pytest.raises(BadRequest, match="5 letters"):
            manager.make_move("alice", session.session_id, Move.guess_word("kedi"))

    def test_must_be_in_list(self, manager):
        session = manager.create_daily_word_game("alice")
        with pytest.raises(BadRequest, match="word list"):
            manager.make_move("alice", session.session_id, Move.guess_word("qqqqq"))

    def test_guess_normalized(self, manager, store):
        session = manager.create_daily_word_game("alice")
        set_target(store, session.session_id, "kalem")

        result = manager.make_move("alice", session.session_id, Move.guess_word(" EKMEK "))
        assert result.details["feedback"] == [ABSENT, PRESENT, PRESENT, CORRECT, ABSENT]
        assert result.details["guess_number"] == 1
        assert result.details["word"] is None

    def test_win(self, manager, store):
        session = manager.create_daily_word_game("alice")
        set_target(store, session.session_id, "kalem")

        result = manager.make_move("alice", session.session_id, Move.guess_word("kalem"))

        assert result.finished
        assert result.session.status == SessionStatus.WON
        assert result.session.result.winner_id == "alice"
        assert result.session.result.outcome == "won"
        assert result.details["word"] == "kalem"

    def test_loss_reveals_word(self, manager, store):
        session = manager.create_daily_word_game("alice")
        sid = session.session_id
        set_target(store, sid, "kalem")

        result = None
        for word in WRONG_GUESSES:
            result = manager.make_move("alice", sid, Move.guess_word(word))

        assert result.session.status == SessionStatus.LOST
        assert result.session.result.winner_id is None
        assert result.details["word"] == "kalem"

        view = manager.get_game(sid, "alice")["board"]
        assert view["target_word"] == "kalem"
        assert view["hint"] == "test"

    def test_no_guess_after_win(self, manager, store):
        session = manager.create_daily_word_game("alice")
        set_target(store, session.session_id, "kalem")
        manager.make_move("alice", session.session_id, Move.guess_word("kalem"))

        with pytest.raises(BadRequest):
            manager.make_move("alice", session.session_id, Move.guess_word("ekmek"))


class TestStats:
    def play(self, manager, store, clock, guesses):
        session = manager.create_daily_word_game("alice")
        set_target(store, session.session_id, "kalem")
        for word in guesses:
            manager.make_move("alice", session.session_id, Move.guess_word(word))
        clock.advance(DAY_SECONDS)

    def test_streaks_and_distribution(self, manager, store, clock):
        self.play(manager, store, clock, ["ekmek", "kalem"])
        self.play(manager, store, clock, ["kalem"])
        self.play(manager, store, clock, WRONG_GUESSES)
        self.play(manager, store, clock, ["kalem"])

        stats = manager.get_player_stats("alice", "word_guess")

        assert stats["total_games"] == 4
        assert stats["won"] == 3
        assert stats["lost"] == 1
        assert stats["win_rate"] == 75
        assert stats["current_streak"] == 1
        assert stats["max_streak"] == 2
        assert stats["guess_distribution"] == {1: 2, 2: 1, 3: 0, 4: 0, 5: 0, 6: 0}

    def test_unfinished_game_not_counted(self, manager):
        manager.create_daily_word_game("alice")
        stats = manager.get_player_stats("alice", "word_guess")
        assert stats["total_games"] == 0
        assert stats["win_rate"] == 0
