from typing import Any


class GameError(Exception):
    """Base for every rejected command. ``str(err)`` is the text shown to the player."""

    message = "wrong command or parameters."

    def __init__(self, message: str | None = None, grid: Any = None):
        super().__init__(message or self.message)
        # grid built before the failure, shown ahead of the error message
        self.grid = grid


class ParseError(GameError):
    pass


class ValidationError(GameError):
    pass


class StateError(GameError):
    pass


class MapReadError(GameError, OSError):
    message = "an invalid path has been passed!"


# parse errors

class InvalidMoveCount(ParseError):
    message = "invalid number of moves."


class InvalidDirection(ParseError):
    message = "invalid direction. Please use: up, right, left or down."


class InvalidDiceRoll(ParseError):
    message = "an invalid parameter for the command dice roll. Please parse an valid digit between 1 and 6."


class InvalidFigureName(ParseError):
    message = "invalid figure name or this figure is not on the playing field."


class WrongCommand(ParseError):
    message = "wrong command or parameters."


class WrongParameters(ParseError):
    message = "wrong command parameters."


# validation errors

class OutOfBounds(ValidationError):
    message = "figure cannot go out of bounds in the matrix."


class CellNotFree(ValidationError):
    message = "the figure cannot be moved across the given path."


class AlreadyVisited(ValidationError):
    message = "it is forbidden to move a figure within one move over the same field multiple times."


class ProtectedZoneHit(ValidationError):
    message = "the figure you want to hit is placed on protected zone and cannot be hit."


class InvalidField(ValidationError):
    message = "the given game field is not valid. Please add new file path."


class InvalidForestVillage(ValidationError):
    message = "invalid forest or village."


class InvalidCharacter(ValidationError):
    message = "invalid character found."


class InvalidPath(ValidationError):
    message = "an invalid path has been passed!"


class DuplicateId(ValidationError):
    message = "this session already exists."


class NotAlphanumericId(ValidationError):
    message = "this session is not alphanumerical."


class OutOfPlayerRange(ValidationError):
    message = "the entered numbers are not integers or number of players do not fall within the range 2-21."


class TooManyPlayersForMap(ValidationError):
    message = "wrong command or parameters."


class FigureNotFound(ValidationError):
    message = "the figure does not exist in enemy list."


# state errors

class CommandNotAvailable(StateError):
    message = "this command is not available."


class AlreadyRolled(StateError):
    message = "this player already rolled the dice."


class AlreadyActive(StateError):
    message = "this session is already active."
