"""Ratings per category: applying game results and reading players / leaderboards."""

import logging
from typing import Optional

from chainchess.api.models import CategoryRatingView, LeaderboardView, PlayerView
from chainchess.core.config import Settings, get_settings
from chainchess.core.models import Address, PlayerRatingModel
from chainchess.core.shared_types import Category
from chainchess.db.repository import RatingRepository
from chainchess.game.game import GameOutcome
from chainchess.game.rating import Leaderboard, RatingSystem

logger = logging.getLogger(__name__)


def _rating_view(model: PlayerRatingModel) -> CategoryRatingView:
    return CategoryRatingView(
        address=model.address,
        category=Category(model.category),
        rating=model.rating,
        wins=model.wins,
        losses=model.losses,
        draws=model.draws,
        position=model.position,
    )


class RatingService:
    def __init__(
        self, repository: RatingRepository, settings: Optional[Settings] = None
    ) -> None:
        self.repo = repository
        settings = settings or get_settings()
        self.system = RatingSystem(
            k_factor=settings.k_factor, initial_rating=settings.initial_rating
        )

    def record(self, outcome: GameOutcome) -> list[PlayerRatingModel]:
        """Update both players' records and the leaderboard of the game's category. Returns the stored records."""
        leaderboard = Leaderboard.from_models(
            outcome.category, self.repo.get_leaderboard(outcome.category)
        )
        changed = [entry.to_model() for entry in self.system.apply(leaderboard, outcome)]
        self.repo.save_ratings(changed)

        white = leaderboard.find(outcome.white)
        black = leaderboard.find(outcome.black)
        logger.info(
            "Ratings updated (%s): %s -> %s, %s -> %s",
            outcome.category,
            outcome.white,
            white.rating if white else None,
            outcome.black,
            black.rating if black else None,
        )
        return changed

    def get_player(self, address: Address) -> PlayerView:
        """A player that never finished a rated game simply has no records yet."""
        ratings = self.repo.get_player_ratings(address)
        return PlayerView(
            address=address, ratings=[_rating_view(model) for model in ratings]
        )

    def leaderboard(self, category: Category) -> LeaderboardView:
        return LeaderboardView(
            category=category,
            entries=[_rating_view(model) for model in self.repo.get_leaderboard(category)],
        )
