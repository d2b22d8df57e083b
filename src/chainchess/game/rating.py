"""
Skill ratings and the per-category leaderboard.

Ratings follow the Elo system: the expected score of a player against an opponent is
    E = 1 / (1 + 10 ** ((R_opponent - R_player) / 400))
and after the game the rating moves by K * (score - E). The update is zero-sum: whatever the white player gains, the
black player loses (rounded once, applied to both with opposite sign).
"""

from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Self

from chainchess.core.models import Address, PlayerRatingModel
from chainchess.core.shared_types import Category
from chainchess.game.game import GameOutcome

DEFAULT_RATING = 1200
DEFAULT_K_FACTOR = 32


def expected_score(rating: float, opponent_rating: float) -> float:
    return 1.0 / (1.0 + 10 ** ((opponent_rating - rating) / 400.0))


def rating_change(
    rating: float, opponent_rating: float, score: float, k_factor: float
) -> int:
    """Points gained (positive) or lost (negative) for a game with the given score (1, 0.5 or 0)"""
    return round(k_factor * (score - expected_score(rating, opponent_rating)))


@dataclass
class PlayerRating:
    address: Address
    category: Category
    rating: int
    wins: int = 0
    losses: int = 0
    draws: int = 0
    position: int = 0

    @classmethod
    def from_model(cls, model: PlayerRatingModel) -> Self:
        return cls(
            address=model.address,
            category=Category(model.category),
            rating=model.rating,
            wins=model.wins,
            losses=model.losses,
            draws=model.draws,
            position=model.position,
        )

    def to_model(self) -> PlayerRatingModel:
        return PlayerRatingModel(
            address=self.address,
            category=self.category,
            rating=self.rating,
            wins=self.wins,
            losses=self.losses,
            draws=self.draws,
            position=self.position,
        )

    def record(self, score: float, delta: int) -> None:
        if score == 1:
            self.wins += 1
        elif score == 0:
            self.losses += 1
        else:
            self.draws += 1
        self.rating += delta


@dataclass
class Leaderboard:
    """PlayerRatings of one category, ordered by rating (highest first). Equal ratings keep their existing order."""

    category: Category
    entries: list[PlayerRating] = field(default_factory=list)

    @classmethod
    def from_models(cls, category: Category, models: list[PlayerRatingModel]) -> Self:
        entries = [PlayerRating.from_model(model) for model in models]
        entries.sort(key=lambda entry: entry.position)
        return cls(category, entries)

    def find(self, address: Address) -> PlayerRating | None:
        return next((entry for entry in self.entries if entry.address == address), None)

    def find_or_create(self, address: Address, initial_rating: int) -> PlayerRating:
        """Players get a record in a category on their first rated game in it."""
        entry = self.find(address)
        if entry is None:
            entry = PlayerRating(address, self.category, initial_rating)
            self.entries.append(entry)
        return entry

    def reposition(self, *moved: PlayerRating) -> set[Address]:
        """
        Move the entries to their place after a rating change and renumber every position from the
        highest place touched. Entries are taken out together first, so the remainder stays sorted
        while each one is inserted back.
        Returns the addresses whose position changed.
        """
        old_indexes = [
            idx
            for idx, candidate in enumerate(self.entries)
            if any(candidate is entry for entry in moved)
        ]
        self.entries = [
            candidate
            for candidate in self.entries
            if all(candidate is not entry for entry in moved)
        ]

        new_indexes = []
        for entry in moved:
            new_index = bisect_right(
                self.entries, -entry.rating, key=lambda candidate: -candidate.rating
            )
            self.entries.insert(new_index, entry)
            new_indexes.append(new_index)

        changed: set[Address] = set()
        low = min(old_indexes + new_indexes, default=len(self.entries))
        for idx in range(low, len(self.entries)):
            candidate = self.entries[idx]
            if candidate.position != idx + 1:
                candidate.position = idx + 1
                changed.add(candidate.address)
        return changed


@dataclass
class RatingSystem:
    k_factor: int = DEFAULT_K_FACTOR
    initial_rating: int = DEFAULT_RATING

    def apply(self, leaderboard: Leaderboard, outcome: GameOutcome) -> list[PlayerRating]:
        """
        Update both players' records in the leaderboard of the game's category.
        ---

        1. create the records if this is their first rated game in the category
        2. count the win/loss/draw and apply the (zero-sum) rating change
        3. reposition both entries in the leaderboard

        Returns every entry that changed (rating, counters or position), so the caller knows what to store.
        """
        white = leaderboard.find_or_create(outcome.white, self.initial_rating)
        black = leaderboard.find_or_create(outcome.black, self.initial_rating)

        delta = rating_change(
            white.rating, black.rating, outcome.white_score, self.k_factor
        )
        white.record(outcome.white_score, delta)
        black.record(1 - outcome.white_score, -delta)

        changed = {white.address, black.address}
        changed |= leaderboard.reposition(white, black)
        return [entry for entry in leaderboard.entries if entry.address in changed]
