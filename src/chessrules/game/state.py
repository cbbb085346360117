"""Game state machine: tracks phase transitions and move history."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import IntEnum, auto

from chessrules.core.enums import Color, DrawType, GameResult, PieceType
from chessrules.core.errors import InvalidMove
from chessrules.core.move import Move
from chessrules.core.move_generator import AnnotatedMove, MoveGenerator
from chessrules.core.notation import (
    STARTING_FEN,
    move_from_uci,
    move_to_san,
    parse_san,
    position_from_fen,
    position_to_fen,
)
from chessrules.core.notation.uci import find_legal_move
from chessrules.core.position import Position
from chessrules.core.rules import Rules
from chessrules.core.types import Square

_LOGGER = logging.getLogger(__name__)


class GamePhase(IntEnum):
    """Finite-state-machine states for a game."""

    NOT_STARTED = auto()
    AWAITING_MOVE = auto()
    GAME_OVER = auto()


@dataclass
class MoveRecord:
    """A single entry in the move history."""

    move: Move
    san: str
    fen_after: str
    was_check: bool = False
    was_capture: bool = False


@dataclass
class GameState:
    """Manages game lifecycle: phase, result, move history, draw claims.

    Every move entering through this class is checked for legality; string
    input that does not name exactly one legal move raises
    :class:`~chessrules.core.errors.InvalidMove` and leaves the game as it was.
    """

    position: Position = field(default_factory=Position, init=False)
    phase: GamePhase = field(default=GamePhase.NOT_STARTED, init=False)
    result: GameResult = field(default=GameResult.IN_PROGRESS, init=False)
    draw_reason: DrawType = field(default=DrawType.NOT_DRAW, init=False)
    move_history: list[MoveRecord] = field(default_factory=list, init=False)
    start_fen: str = field(default=STARTING_FEN, init=False)

    # ── Initialisation ───────────────────────────────────────────────────

    def setup(self, fen: str | None = None) -> None:
        """Initialise (or reset) the game."""
        self.start_fen = fen or STARTING_FEN
        self.position = position_from_fen(self.start_fen)
        self.phase = GamePhase.AWAITING_MOVE
        self.result = GameResult.IN_PROGRESS
        self.draw_reason = DrawType.NOT_DRAW
        self.move_history.clear()
        _LOGGER.debug("Game set up from %s", self.start_fen)
        self._check_game_over()

    # ── Move application ─────────────────────────────────────────────────

    def apply_move(self, move: Move) -> MoveRecord:
        """Apply a legal move and return the history record."""
        if self.is_game_over:
            raise InvalidMove(move.uci, "game is over")
        gen = MoveGenerator(self.position)
        if not gen.is_legal(move):
            raise InvalidMove(move.uci, "not a legal move in this position")

        san = move_to_san(self.position, move)
        self.position.play_move(move)

        record = MoveRecord(
            move=move,
            san=san,
            fen_after=position_to_fen(self.position),
            was_check=gen.is_in_check(self.position.side_to_move),
            was_capture=move.is_capture,
        )
        self.move_history.append(record)
        _LOGGER.debug("Played %s (%s)", record.san, move.uci)

        self._check_game_over()
        return record

    def play_uci(self, text: str) -> MoveRecord:
        """Resolve a UCI string against the legal moves and apply it."""
        return self.apply_move(self._resolve(move_from_uci, text))

    def play_san(self, text: str) -> MoveRecord:
        """Resolve a SAN string against the legal moves and apply it."""
        return self.apply_move(self._resolve(parse_san, text))

    def undo_last_move(self) -> Move | None:
        """Undo the last move. Returns the undone Move, or None if empty."""
        if not self.move_history:
            return None

        record = self.move_history.pop()
        self.position.unplay_move()

        # Reset result if we un-did a game-ending move
        if self.result != GameResult.IN_PROGRESS:
            self.result = GameResult.IN_PROGRESS
            self.draw_reason = DrawType.NOT_DRAW
            self.phase = GamePhase.AWAITING_MOVE

        return record.move

    # ── Resignation / draw ───────────────────────────────────────────────

    def resign(self, color: Color) -> None:
        """Resign for *color*. Ignored once the game is over."""
        if self.is_game_over:
            _LOGGER.debug("Resignation by %s ignored: game is over", color)
            return
        self.result = (
            GameResult.BLACK_WINS if color == Color.WHITE else GameResult.WHITE_WINS
        )
        self.phase = GamePhase.GAME_OVER
        _LOGGER.info("%s resigned", color)

    def set_draw(self) -> None:
        """Record a draw agreed between the players."""
        if self.is_game_over:
            _LOGGER.debug("Agreed draw ignored: game is over")
            return
        self.result = GameResult.DRAW
        self.phase = GamePhase.GAME_OVER

    def claim_draw(self, color: Color | None = None) -> DrawType:
        """Claim a draw by rule for *color* (default: side to move).

        Ends the game and returns the reason when the claim holds, otherwise
        returns ``DrawType.NOT_DRAW`` and the game continues. A finished game
        never accepts a claim.
        """
        claimant = self.side_to_move if color is None else color
        if self.is_game_over:
            _LOGGER.debug("Draw claim by %s ignored: game is over", claimant)
            return DrawType.NOT_DRAW
        reason = Rules.draw_type(self.position, claimant == Color.WHITE)
        if reason == DrawType.NOT_DRAW:
            _LOGGER.debug("Draw claim by %s rejected", claimant)
            return reason

        self.result = GameResult.DRAW
        self.draw_reason = reason
        self.phase = GamePhase.GAME_OVER
        _LOGGER.info("Draw claimed by %s: %s", claimant, reason.name.lower())
        return reason

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def side_to_move(self) -> Color:
        return self.position.side_to_move

    @property
    def is_game_over(self) -> bool:
        return self.phase == GamePhase.GAME_OVER

    @property
    def ply_count(self) -> int:
        """Number of half-moves played."""
        return len(self.move_history)

    @property
    def fullmove_display(self) -> int:
        """Current full-move number for display."""
        return self.position.fullmove_number

    @property
    def fen(self) -> str:
        return position_to_fen(self.position)

    def legal_moves(self) -> list[Move]:
        """Legal moves in the current position."""
        gen = MoveGenerator(self.position)
        return gen.generate_legal_moves()

    def legal_moves_annotated(self) -> list[AnnotatedMove]:
        gen = MoveGenerator(self.position)
        return gen.generate_legal_moves_annotated()

    def legal_uci(self) -> list[str]:
        return [m.uci for m in self.legal_moves()]

    def legal_san(self) -> list[str]:
        return [move_to_san(self.position, m) for m in self.legal_moves()]

    def find_move(
        self, src: Square, dst: Square, promotion: PieceType | None = None
    ) -> Move:
        """The unique legal move from *src* to *dst*."""
        return find_legal_move(self.position, src, dst, promotion)

    def validate_uci(self, text: str) -> bool:
        """Whether *text* names exactly one legal move."""
        try:
            move_from_uci(self.position, text)
        except InvalidMove:
            return False
        return True

    # ── Internal ─────────────────────────────────────────────────────────

    def _resolve(self, parser: Callable[[Position, str], Move], text: str) -> Move:
        try:
            return parser(self.position, text)
        except InvalidMove as exc:
            _LOGGER.warning("Rejected move %r: %s", text, exc.reason)
            raise

    def _check_game_over(self) -> None:
        result = Rules.game_result(self.position)
        if result == GameResult.IN_PROGRESS:
            return
        self.result = result
        self.phase = GamePhase.GAME_OVER
        if result == GameResult.DRAW and Rules.is_automatic_draw(self.position):
            self.draw_reason = DrawType.INSUFFICIENT_AUTO
        _LOGGER.info("Game over: %s", result.name.lower())
