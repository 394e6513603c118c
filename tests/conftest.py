"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable, Iterator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.db.schema import Base
from src.xiangqi.board import Board
from src.xiangqi.pieces import Piece
from src.xiangqi.square import Square

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)

BoardFactory = Callable[[dict[str, str]], Board]


@pytest.fixture
def db_session_repo() -> Iterator[Session]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        Base.metadata.drop_all(bind=engine)
        db.close()


@pytest.fixture
def board_with() -> BoardFactory:
    """
    Build a board from {square notation: piece key}, ex)
    {"e9": "K", "e0": "k", "a5": "R"} --> Red king on e9, Black king on e0 and a Red rook on a5.
    """

    def _build(pieces: dict[str, str]) -> Board:
        board = Board()
        for notation, key in pieces.items():
            board.place_piece(Piece.from_key(key), Square.from_notation(notation))
        return board

    return _build
