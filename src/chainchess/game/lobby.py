"""
Waiting queue of one lobby category.

First in, first out: a newcomer gets paired with whoever has been waiting the longest.
"""

from dataclasses import dataclass, field
from typing import Callable, Self

from chainchess.core.models import Address, LobbyEntryModel
from chainchess.core.shared_types import Category
from chainchess.game.time_control import TimeControl


@dataclass(frozen=True)
class LobbyEntry:
    address: Address
    time_control: TimeControl
    joined_at: float

    @classmethod
    def from_model(cls, model: LobbyEntryModel) -> Self:
        return cls(
            model.address,
            TimeControl(model.base_seconds, model.increment_seconds),
            model.joined_at,
        )

    def to_model(self) -> LobbyEntryModel:
        return LobbyEntryModel(
            address=self.address,
            base_seconds=self.time_control.base_seconds,
            increment_seconds=self.time_control.increment_seconds,
            joined_at=self.joined_at,
        )


@dataclass
class LobbyQueue:
    category: Category
    entries: list[LobbyEntry] = field(default_factory=list)

    @classmethod
    def from_models(cls, category: Category, models: list[LobbyEntryModel]) -> Self:
        return cls(category, [LobbyEntry.from_model(model) for model in models])

    def to_models(self) -> list[LobbyEntryModel]:
        return [entry.to_model() for entry in self.entries]

    def __contains__(self, address: Address) -> bool:
        return any(entry.address == address for entry in self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def prune(self, now: float, ttl: float) -> list[LobbyEntry]:
        """Drop entries that have been waiting longer than `ttl` seconds. Returns what got dropped."""
        stale = [entry for entry in self.entries if now - entry.joined_at > ttl]
        self.entries = [entry for entry in self.entries if entry not in stale]
        return stale

    def pop_oldest(
        self, accept: Callable[[LobbyEntry], bool] = lambda entry: True
    ) -> LobbyEntry | None:
        """Entries rejected by `accept` keep their place in the queue."""
        candidates = [entry for entry in self.entries if accept(entry)]
        if not candidates:
            return None
        oldest = min(candidates, key=lambda entry: entry.joined_at)
        self.entries.remove(oldest)
        return oldest

    def append(self, entry: LobbyEntry) -> None:
        self.entries.append(entry)

    def remove(self, address: Address) -> bool:
        remaining = [entry for entry in self.entries if entry.address != address]
        removed = len(remaining) != len(self.entries)
        self.entries = remaining
        return removed
