"""Exceptions raised by the battlefield engine.

Every error here signals a caller bug. They are raised before any state is
touched and are never recovered from inside the engine.
"""

from __future__ import annotations


class BattlefieldError(ValueError):
    """Base class for engine errors."""


class FieldExistsError(BattlefieldError):
    """Raised when creating a field on a position that already has one."""


class FieldNotFoundError(BattlefieldError):
    """Raised when removing a field that does not exist."""


class FieldAlreadyMarkedError(BattlefieldError):
    """Raised when marking a field that is already marked as hit or missed."""


class UnmarkedFieldSerializationError(BattlefieldError):
    """Raised when serializing a field that carries no marker."""


class ShipAlreadyAddedError(BattlefieldError):
    """Raised when registering a ship that the battlefield already manages."""


class ShipNotFoundError(BattlefieldError):
    """Raised when a ship is not registered on the battlefield."""


class ShipTooLongError(BattlefieldError):
    """Raised when a ship cannot fit on the battlefield in any orientation."""


class PositionNotOnShipError(BattlefieldError):
    """Raised when hitting a ship at a position it does not cover."""


class PositionOutOfBoundsError(BattlefieldError):
    """Raised when a shot targets a position outside the grid."""
