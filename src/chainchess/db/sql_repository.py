"""Implementation of the repositories using SQLAlchemy"""

from dataclasses import asdict
from uuid import UUID, uuid4

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from chainchess.core.models import (
    Address,
    ClockModel,
    GameModel,
    LobbyEntryModel,
    LobbyMatchModel,
    PlayerRatingModel,
)
from chainchess.core.shared_types import GameState
from chainchess.db.schema import DBGame, DBLobbyEntry, DBLobbyMatch, DBPlayerRating


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        game_db = self._fetch_game(game_id)
        if game_db:
            return self._to_model(game_db)
        return None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        new_id = uuid4()
        game_db = DBGame(id=new_id)
        self._copy_into(game_db, game)
        self.db.add(game_db)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db), new_id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Add new info to existing record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        self._copy_into(game_db, game)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db)

    def find_open_game(self, white: Address, black: Address) -> UUID | None:
        query = select(DBGame.id).where(
            DBGame.white == white,
            DBGame.black == black,
            DBGame.state == GameState.OPEN.value,
        )
        return self.db.scalars(query).first()

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        return self.db.scalar(query)

    def _copy_into(self, game_db: DBGame, game: GameModel) -> None:
        game_db.current_fen = game.current_fen
        game_db.moves_lan = list(game.moves_lan)
        game_db.white = game.players["white"]
        game_db.black = game.players["black"]
        game_db.clocks = {color: asdict(clock) for color, clock in game.clocks.items()}
        game_db.base_seconds = game.base_seconds
        game_db.increment_seconds = game.increment_seconds
        game_db.category = str(game.category)
        game_db.state = str(game.state)
        game_db.draw_offerer = game.draw_offerer
        game_db.concluder = game.concluder
        game_db.winner = game.winner
        game_db.started_at = game.created_at

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            current_fen=game_db.current_fen,
            moves_lan=list(game_db.moves_lan),
            players={"white": game_db.white, "black": game_db.black},
            clocks={
                color: ClockModel(**clock) for color, clock in game_db.clocks.items()
            },
            base_seconds=game_db.base_seconds,
            increment_seconds=game_db.increment_seconds,
            category=game_db.category,
            state=game_db.state,
            draw_offerer=game_db.draw_offerer,
            concluder=game_db.concluder,
            winner=game_db.winner,
            created_at=game_db.started_at,
        )


class SQLRatingRepository:
    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_leaderboard(self, category: str) -> list[PlayerRatingModel]:
        query = (
            select(DBPlayerRating)
            .where(DBPlayerRating.category == str(category))
            .order_by(DBPlayerRating.position)
        )
        return [self._to_model(rating_db) for rating_db in self.db.scalars(query)]

    def get_player_ratings(self, address: Address) -> list[PlayerRatingModel]:
        query = (
            select(DBPlayerRating)
            .where(DBPlayerRating.address == address)
            .order_by(DBPlayerRating.category)
        )
        return [self._to_model(rating_db) for rating_db in self.db.scalars(query)]

    def save_ratings(self, ratings: list[PlayerRatingModel]) -> None:
        for rating in ratings:
            query = select(DBPlayerRating).where(
                DBPlayerRating.address == rating.address,
                DBPlayerRating.category == str(rating.category),
            )
            rating_db = self.db.scalar(query)
            if rating_db is None:
                rating_db = DBPlayerRating(
                    address=rating.address, category=str(rating.category)
                )
                self.db.add(rating_db)
            rating_db.rating = rating.rating
            rating_db.wins = rating.wins
            rating_db.losses = rating.losses
            rating_db.draws = rating.draws
            rating_db.position = rating.position
        self.db.commit()

    def _to_model(self, rating_db: DBPlayerRating) -> PlayerRatingModel:
        return PlayerRatingModel(
            address=rating_db.address,
            category=rating_db.category,
            rating=rating_db.rating,
            wins=rating_db.wins,
            losses=rating_db.losses,
            draws=rating_db.draws,
            position=rating_db.position,
        )


class SQLLobbyRepository:
    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_queue(self, category: str) -> list[LobbyEntryModel]:
        query = (
            select(DBLobbyEntry)
            .where(DBLobbyEntry.category == str(category))
            .order_by(DBLobbyEntry.id)
        )
        return [
            LobbyEntryModel(
                address=entry_db.address,
                base_seconds=entry_db.base_seconds,
                increment_seconds=entry_db.increment_seconds,
                joined_at=entry_db.joined_at,
            )
            for entry_db in self.db.scalars(query)
        ]

    def save_queue(self, category: str, entries: list[LobbyEntryModel]) -> None:
        self.db.execute(
            delete(DBLobbyEntry).where(DBLobbyEntry.category == str(category))
        )
        self.db.add_all(
            DBLobbyEntry(
                category=str(category),
                address=entry.address,
                base_seconds=entry.base_seconds,
                increment_seconds=entry.increment_seconds,
                joined_at=entry.joined_at,
            )
            for entry in entries
        )
        self.db.commit()

    def get_match(self, address: Address) -> LobbyMatchModel | None:
        match_db = self.db.get(DBLobbyMatch, address)
        if match_db is None:
            return None
        return LobbyMatchModel(
            address=match_db.address,
            game_id=match_db.game_id,
            category=match_db.category,
            retrieved=match_db.retrieved,
        )

    def save_match(self, match: LobbyMatchModel) -> None:
        match_db = self.db.get(DBLobbyMatch, match.address)
        if match_db is None:
            match_db = DBLobbyMatch(address=match.address)
            self.db.add(match_db)
        match_db.game_id = match.game_id
        match_db.category = str(match.category)
        match_db.retrieved = match.retrieved
        self.db.commit()

    def delete_match(self, address: Address) -> None:
        self.db.execute(delete(DBLobbyMatch).where(DBLobbyMatch.address == address))
        self.db.commit()
