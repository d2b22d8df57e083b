"""
Custom exceptions shared by all layers.

Everything raised on purpose derives from GameError, so the boundary layer can turn it into an error result.
"""


class GameError(Exception):
    """Top-level exception for anything the caller did wrong."""


# --- TIME CONTROL / GAME CREATION ---
class InvalidTimeControlError(GameError):
    """Base time or increment cannot be used for a game."""


class OngoingGameError(GameError):
    """An open game between the same challenger and opponent already exists."""


class InvalidOpponentError(GameError):
    """A player cannot challenge themselves."""


# --- NOTATION / RULES ---
class InvalidNotationError(GameError):
    """Move string cannot be parsed."""


class InvalidFENError(GameError):
    """Position string cannot be parsed."""


class IllegalMoveError(GameError):
    """Move is not in the set of legal moves."""


# --- LIFECYCLE ---
class NotParticipantError(GameError):
    """Caller is not one of the two players of the game."""


class NotYourTurnError(NotParticipantError):
    """Caller plays in the game, but it is the opponent's turn."""


class GameNotOpenError(GameError):
    """Game already reached a final state."""


class NoDrawOfferError(GameError):
    """No draw offer from the opponent is pending."""


class NoTimeoutError(GameError):
    """Neither clock has run out."""


# --- LOBBY ---
class AlreadyQueuedError(GameError):
    """Player is waiting in a lobby queue or has an unretrieved match."""


# --- PERSISTENCE / REQUESTS ---
class RepositoryError(GameError):
    """Something went wrong retrieving data from the repository."""


class GameNotFoundError(RepositoryError):
    """No game stored under the requested id."""


class InvalidRequestError(GameError):
    """Request data could not be interpreted."""


class GameStateError(GameError):
    """Stored game data does not describe a valid game."""
