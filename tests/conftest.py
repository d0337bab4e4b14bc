"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import pytest

from chessai.core.board import Board


@pytest.fixture
def initial_board() -> Board:
    """Fresh board in the standard starting position."""
    return Board.initial()
