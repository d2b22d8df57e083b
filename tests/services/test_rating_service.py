"""Unit tests for chainchess/services/rating_service.py"""

from chainchess.core.config import Settings
from chainchess.core.shared_types import Category
from chainchess.db.memory_repository import InMemoryRatingRepository
from chainchess.game.game import GameOutcome
from chainchess.services.rating_service import RatingService


def test_unknown_player_has_no_ratings(rating_service: RatingService) -> None:
    view = rating_service.get_player("0xnobody")
    assert view.address == "0xnobody"
    assert view.ratings == []


def test_record_stores_both_players(
    rating_service: RatingService, rating_repository: InMemoryRatingRepository
) -> None:
    stored = rating_service.record(GameOutcome("alice", "bob", Category.RAPID, 1.0))
    assert {(model.address, model.rating, model.position) for model in stored} == {
        ("alice", 1216, 1),
        ("bob", 1184, 2),
    }
    assert [model.address for model in rating_repository.get_leaderboard("rapid")] == [
        "alice",
        "bob",
    ]


def test_ratings_are_kept_per_category(rating_service: RatingService) -> None:
    rating_service.record(GameOutcome("alice", "bob", Category.RAPID, 1.0))
    rating_service.record(GameOutcome("bob", "alice", Category.BULLET, 1.0))

    ratings = {r.category: r for r in rating_service.get_player("alice").ratings}
    assert ratings[Category.RAPID].rating == 1216
    assert ratings[Category.BULLET].rating == 1184
    assert rating_service.leaderboard(Category.BLITZ).entries == []


def test_leaderboard_view(rating_service: RatingService) -> None:
    rating_service.record(GameOutcome("alice", "bob", Category.BLITZ, 0.0))
    rating_service.record(GameOutcome("carol", "dave", Category.BLITZ, 1.0))

    view = rating_service.leaderboard(Category.BLITZ)
    assert [(entry.address, entry.position) for entry in view.entries] == [
        ("bob", 1),
        ("carol", 2),
        ("alice", 3),
        ("dave", 4),
    ]


def test_settings_are_applied(rating_repository: InMemoryRatingRepository) -> None:
    service = RatingService(
        rating_repository, Settings(initial_rating=1000, k_factor=40)
    )
    service.record(GameOutcome("alice", "bob", Category.BLITZ, 1.0))
    view = service.leaderboard(Category.BLITZ)
    assert [(entry.address, entry.rating) for entry in view.entries] == [
        ("alice", 1020),
        ("bob", 980),
    ]
