"""Game session layer: legality-checked play with history and draw claims.

Quick start::

    from chessrules.game import GameState

    game = GameState()
    game.setup()
    game.play_san("e4")
    game.play_uci("e7e5")
"""

from chessrules.game.state import GamePhase, GameState, MoveRecord

__all__ = [
    "GamePhase",
    "GameState",
    "MoveRecord",
]
