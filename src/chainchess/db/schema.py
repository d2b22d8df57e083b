"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import JSON, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGame(Base):
    __tablename__ = "games"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    current_fen: Mapped[str]
    moves_lan: Mapped[list[str]] = mapped_column(JSON, default=list)
    white: Mapped[str] = mapped_column(index=True)
    black: Mapped[str] = mapped_column(index=True)
    clocks: Mapped[dict[str, Any]] = mapped_column(JSON)
    base_seconds: Mapped[float]
    increment_seconds: Mapped[float]
    category: Mapped[str]
    state: Mapped[str] = mapped_column(index=True)
    draw_offerer: Mapped[Optional[str]]
    concluder: Mapped[Optional[str]]
    winner: Mapped[Optional[str]]
    started_at: Mapped[float]
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)


class DBPlayerRating(Base):
    __tablename__ = "player_ratings"
    __table_args__ = (UniqueConstraint("address", "category"),)
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    address: Mapped[str] = mapped_column(index=True)
    category: Mapped[str] = mapped_column(index=True)
    rating: Mapped[int]
    wins: Mapped[int] = mapped_column(default=0)
    losses: Mapped[int] = mapped_column(default=0)
    draws: Mapped[int] = mapped_column(default=0)
    position: Mapped[int] = mapped_column(default=0)


class DBLobbyEntry(Base):
    __tablename__ = "lobby_entries"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    category: Mapped[str] = mapped_column(index=True)
    address: Mapped[str]
    base_seconds: Mapped[float]
    increment_seconds: Mapped[float]
    joined_at: Mapped[float]


class DBLobbyMatch(Base):
    __tablename__ = "lobby_matches"
    address: Mapped[str] = mapped_column(primary_key=True)
    game_id: Mapped[UUID]
    category: Mapped[str]
    retrieved: Mapped[bool] = mapped_column(default=False)
