"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from chainchess.api.facade import ChessApi
from chainchess.core.config import Settings
from chainchess.db.memory_repository import (
    InMemoryGameRepository,
    InMemoryLobbyRepository,
    InMemoryRatingRepository,
)
from chainchess.db.schema import Base
from chainchess.services.chess_service import ChessService
from chainchess.services.lobby_service import LobbyService
from chainchess.services.rating_service import RatingService

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def settings() -> Settings:
    return Settings(database_url=DATABASE_URL)


@pytest.fixture
def game_repository() -> Generator[InMemoryGameRepository, None, None]:
    repo = InMemoryGameRepository()
    try:
        yield repo
    finally:
        repo.clear()


@pytest.fixture
def rating_repository() -> Generator[InMemoryRatingRepository, None, None]:
    repo = InMemoryRatingRepository()
    try:
        yield repo
    finally:
        repo.clear()


@pytest.fixture
def lobby_repository() -> Generator[InMemoryLobbyRepository, None, None]:
    repo = InMemoryLobbyRepository()
    try:
        yield repo
    finally:
        repo.clear()


@pytest.fixture
def rating_service(
    rating_repository: InMemoryRatingRepository, settings: Settings
) -> RatingService:
    return RatingService(rating_repository, settings)


@pytest.fixture
def chess_service(
    game_repository: InMemoryGameRepository,
    rating_service: RatingService,
    settings: Settings,
) -> ChessService:
    return ChessService(game_repository, rating_service, settings)


@pytest.fixture
def lobby_service(
    lobby_repository: InMemoryLobbyRepository,
    chess_service: ChessService,
    settings: Settings,
) -> LobbyService:
    return LobbyService(lobby_repository, chess_service, settings)


@pytest.fixture
def api(
    chess_service: ChessService,
    rating_service: RatingService,
    lobby_service: LobbyService,
) -> ChessApi:
    return ChessApi(chess_service, rating_service, lobby_service)
