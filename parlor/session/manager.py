"""
Session Manager - Creates, joins, plays and cancels game sessions.

LIFECYCLE:
1. A player creates a session (waiting; the word game starts in progress)
2. An opponent joins, or the host starts a room (drawing game)
3. Moves are applied one atomic Store transaction at a time
4. The session ends as completed / won / lost, or is cancelled by its
   creator while still waiting

Every mutation follows the same path:
    store.update(id, fn) -> fn validates + applies via the Ruleset/Reducer

If fn raises, the Store keeps the previous record. Notifications are only
published after the transaction has committed.
"""

from __future__ import annotations
from typing import Any
import logging
import uuid

from ..config import Settings
from ..engine_core.state import Session, SessionStatus, GameType, Participant
from ..engine_core.action import Move, MoveResult
from ..engine_core.errors import BadRequest, Conflict, Forbidden, NotFound, Unauthenticated, SessionNotFound
from ..engine_core.random_source import RandomSource
from ..engine_core.reducer import Reducer
from ..engine_core.ruleset import Ruleset, MoveContext
from ..engine_core.timing import Clock, utc_day
from ..games import build_rulesets, parse_game_type
from ..games.quick_draw import room_key
from ..games.word_guess import daily_key
from .store import Store, InMemoryStore
from .notifications import NotificationSink, NotificationType, GameEvent, LoggingNotificationSink
from .projection import project

logger = logging.getLogger(__name__)

MAX_KEY_ATTEMPTS = 10


class SessionManager:
    """
    Session lifecycle for every game variant.

    Variant rules come from the Ruleset registry; everything else
    (matchmaking, turn enforcement, atomic writes, notifications) lives here.
    """

    def __init__(
        self,
        store: Store | None = None,
        rng: RandomSource | None = None,
        clock: Clock | None = None,
        sink: NotificationSink | None = None,
        settings: Settings | None = None,
        rulesets: dict[GameType, Ruleset] | None = None,
    ):
        self.settings = settings if settings is not None else Settings()
        self.store = store if store is not None else InMemoryStore()
        self.rng = rng if rng is not None else RandomSource(self.settings.random_seed)
        self.clock = clock if clock is not None else Clock()
        self.sink = sink if sink is not None else LoggingNotificationSink()
        self.rulesets = rulesets if rulesets is not None else build_rulesets(self.settings)

    def ruleset(self, game_type: GameType | str) -> Ruleset:
        return self.rulesets[parse_game_type(game_type)]

    def _context(self) -> MoveContext:
        return MoveContext(now_ms=self.clock.now_ms(), rng=self.rng)

    def _require_player(self, player_id: str | None) -> str:
        if not player_id:
            raise Unauthenticated()
        return player_id

    def _load(self, session_id: str) -> Session:
        session = self.store.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def _notify(self, notification_type: NotificationType, recipient_id: str, session: Session,
                actor_id: str | None = None, **data: Any) -> None:
        self.sink.publish(GameEvent(
            notification_type=notification_type,
            recipient_id=recipient_id,
            session_id=session.session_id,
            game_type=session.game_type.value,
            actor_id=actor_id,
            data=data,
        ))

    # =========================================================================
    # Creation and matchmaking
    # =========================================================================

    def create_game(
        self,
        creator_id: str | None,
        game_type: GameType | str,
        options: dict[str, Any] | None = None,
        invited_player_id: str | None = None,
    ) -> Session:
        """
        Create a session with the variant's canonical start board.

        Args:
            creator_id: Player creating the game (takes the first seat)
            game_type: Variant to play
            options: Variant options (difficulty, total_rounds, round_duration)
            invited_player_id: Only this player may join, and is notified

        Returns:
            The stored Session
        """
        creator_id = self._require_player(creator_id)
        game_type = parse_game_type(game_type)
        if game_type == GameType.WORD_GUESS:
            return self.create_daily_word_game(creator_id)
        if invited_player_id == creator_id:
            raise BadRequest("You cannot invite yourself")

        session = self._create(creator_id, game_type, dict(options or {}), invited_player_id)
        if invited_player_id:
            self._notify(NotificationType.GAME_INVITE, invited_player_id, session, actor_id=creator_id)
        return session

    def _create(
        self,
        creator_id: str,
        game_type: GameType,
        options: dict[str, Any],
        invited_player_id: str | None = None,
    ) -> Session:
        ruleset = self.ruleset(game_type)
        ctx = self._context()

        for _ in range(MAX_KEY_ATTEMPTS):
            session = self._new_session(ruleset, creator_id, options, invited_player_id, ctx)
            key = session.lookup_key
            if key is None or not ruleset.random_lookup_key or self.store.find_by_key(key) is None:
                break
            logger.warning(f"Lookup key collision for {game_type.value}, regenerating: {key}")
        else:
            raise Conflict("Could not allocate a unique room code")

        session = self.store.insert(session)
        logger.info(f"Created {game_type.value} game {session.session_id} by {creator_id}")
        return session

    def _new_session(
        self,
        ruleset: Ruleset,
        creator_id: str,
        options: dict[str, Any],
        invited_player_id: str | None,
        ctx: MoveContext,
    ) -> Session:
        board = ruleset.initial_board(options, ctx.rng)
        session = Session(
            session_id=str(uuid.uuid4()),
            game_type=ruleset.game_type,
            creator_id=creator_id,
            board=board,
            status=SessionStatus.WAITING,
            participants=[Participant(player_id=creator_id, joined_at=ctx.now_ms)],
            invited_player_id=invited_player_id,
            current_turn=ruleset.initial_turn(board),
            created_at=ctx.now_ms,
            updated_at=ctx.now_ms,
            options=options,
        )
        if ruleset.solo:
            session = ruleset.on_start(session, ctx)
        return session._copy_with(lookup_key=ruleset.lookup_key(session))

    def join_game(self, player_id: str | None, session_id: str) -> Session:
        """Take a free seat; two-player tables start as soon as they fill."""
        player_id = self._require_player(player_id)
        ruleset = self.ruleset(self._load(session_id).game_type)
        ctx = self._context()

        def do_join(session: Session) -> Session:
            ruleset.check_join(session, player_id)
            return ruleset.on_join(session, player_id, ctx)._copy_with(updated_at=ctx.now_ms)

        session = self.store.update(session_id, do_join)
        logger.info(f"Player {player_id} joined {session.game_type.value} game {session_id}")
        if session.status != SessionStatus.WAITING:
            logger.info(f"Game {session_id} started")
            self._notify(NotificationType.GAME_STARTED, session.creator_id, session, actor_id=player_id)
        return session

    def join_room(self, player_id: str | None, room_code: str) -> Session:
        """Join a drawing game by its room code (case-insensitive)."""
        player_id = self._require_player(player_id)
        session = self.store.find_by_key(room_key(room_code))
        if session is None:
            raise NotFound("Room not found", {"room_code": room_code.strip().upper()})
        return self.join_game(player_id, session.session_id)

    def start_game(self, player_id: str | None, session_id: str) -> Session:
        """Host starts a room that does not start on its own."""
        player_id = self._require_player(player_id)
        ruleset = self.ruleset(self._load(session_id).game_type)
        ctx = self._context()

        def do_start(session: Session) -> Session:
            ruleset.check_start(session, player_id)
            return ruleset.on_start(session, ctx)._copy_with(updated_at=ctx.now_ms)

        session = self.store.update(session_id, do_start)
        logger.info(f"Game {session_id} started by {player_id}")
        for pid in session.participant_ids:
            if pid != player_id:
                self._notify(NotificationType.GAME_STARTED, pid, session, actor_id=player_id)
        return session

    # =========================================================================
    # Play
    # =========================================================================

    def make_move(self, player_id: str | None, session_id: str, move: Move) -> MoveResult:
        """
        Apply one move in a single atomic write.

        Raises:
            Unauthenticated, SessionNotFound, Forbidden, BadRequest
        """
        player_id = self._require_player(player_id)
        ruleset = self.ruleset(self._load(session_id).game_type)
        reducer = Reducer(ruleset)
        ctx = self._context()
        outcome: dict[str, MoveResult] = {}

        def do_move(session: Session) -> Session:
            result = reducer.apply(session, move.by(player_id), ctx)
            outcome["result"] = result
            return result.session

        session = self.store.update(session_id, do_move)
        result = outcome["result"]
        result.session = session
        logger.debug(f"Move {move.move_type.value} by {player_id} in {session_id}: {result.details}")

        if result.finished:
            logger.info(f"Game {session_id} finished as {session.status.value}")
            winner_id = session.result.winner_id if session.result else None
            for pid in session.participant_ids:
                self._notify(NotificationType.GAME_OVER, pid, session, actor_id=player_id,
                             winner_id=winner_id, status=session.status.value)
        return result

    def cancel_game(self, player_id: str | None, session_id: str) -> Session:
        """Creator withdraws a game nobody has joined yet."""
        player_id = self._require_player(player_id)
        now = self.clock.now_ms()

        def do_cancel(session: Session) -> Session:
            if session.creator_id != player_id:
                raise Forbidden("Only the creator can cancel this game")
            if session.status != SessionStatus.WAITING:
                raise BadRequest("Only waiting games can be cancelled")
            return session._copy_with(status=SessionStatus.CANCELLED, current_turn=None, updated_at=now)

        session = self.store.update(session_id, do_cancel)
        logger.info(f"Game {session_id} cancelled by {player_id}")
        return session

    # =========================================================================
    # Word game
    # =========================================================================

    def create_daily_word_game(self, player_id: str | None) -> Session:
        """Today's word game; one per player per UTC day."""
        player_id = self._require_player(player_id)
        day = utc_day(self.clock.now_ms())
        if self.store.find_by_key(daily_key(player_id, day)) is not None:
            raise BadRequest("You have already played today's word game", {"day": day})
        return self._create(player_id, GameType.WORD_GUESS, {"day": day})

    def get_todays_game(self, player_id: str | None) -> dict[str, Any] | None:
        player_id = self._require_player(player_id)
        day = utc_day(self.clock.now_ms())
        session = self.store.find_by_key(daily_key(player_id, day))
        if session is None:
            return None
        return project(session, player_id, self.ruleset(session.game_type))

    # =========================================================================
    # Queries
    # =========================================================================

    def game_type_of(self, session_id: str) -> GameType:
        return self._load(session_id).game_type

    def get_game(self, session_id: str, viewer_id: str | None = None) -> dict[str, Any]:
        """Projection of the session for `viewer_id` (hidden information removed)."""
        session = self._load(session_id)
        return project(session, viewer_id, self.ruleset(session.game_type))

    def list_available_games(
        self,
        player_id: str | None,
        game_type: GameType | str | None = None,
    ) -> list[dict[str, Any]]:
        """Waiting sessions the caller could join: not their own, open or inviting them."""
        player_id = self._require_player(player_id)
        wanted = parse_game_type(game_type) if game_type else None
        found = []
        for session in self.store.scan():
            ruleset = self.ruleset(session.game_type)
            if wanted and session.game_type != wanted:
                continue
            if ruleset.solo or session.status != SessionStatus.WAITING:
                continue
            if session.is_participant(player_id):
                continue
            if session.invited_player_id and session.invited_player_id != player_id:
                continue
            if len(session.participants) >= ruleset.max_players:
                continue
            found.append(session)
        found.sort(key=lambda s: s.created_at, reverse=True)
        return [project(s, player_id, self.ruleset(s.game_type)) for s in found]

    def list_player_games(
        self,
        player_id: str | None,
        game_type: GameType | str | None = None,
        active_only: bool = False,
    ) -> list[dict[str, Any]]:
        player_id = self._require_player(player_id)
        sessions = self._player_sessions(player_id, parse_game_type(game_type) if game_type else None)
        if active_only:
            sessions = [s for s in sessions if not s.is_terminal]
        sessions.sort(key=lambda s: s.created_at, reverse=True)
        return [project(s, player_id, self.ruleset(s.game_type)) for s in sessions]

    def get_player_stats(self, player_id: str | None, game_type: GameType | str) -> dict[str, Any]:
        player_id = self._require_player(player_id)
        game_type = parse_game_type(game_type)
        stats = self.ruleset(game_type).summarize_stats(self._player_sessions(player_id, game_type), player_id)
        return {"game_type": game_type.value, **stats}

    def _player_sessions(self, player_id: str, game_type: GameType | None) -> list[Session]:
        return [
            s for s in self.store.scan()
            if s.is_participant(player_id) and (game_type is None or s.game_type == game_type)
        ]
