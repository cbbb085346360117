"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import pytest

from chessrules.core.notation import STARTING_FEN, position_from_fen
from chessrules.core.position import Position
from chessrules.game.state import GameState


@pytest.fixture
def start_position() -> Position:
    """A fresh position in the standard initial layout."""
    return position_from_fen(STARTING_FEN)


@pytest.fixture
def game() -> GameState:
    """A game set up from the initial position."""
    gs = GameState()
    gs.setup()
    return gs
