import string
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Optional

from campus_chaos.errors import FigureNotFound
from campus_chaos.schemas import (
    DICE_NOT_ROLLED,
    MAX_FIGURES,
    RESERVED_LETTERS,
    Cell,
    Figure,
    Position,
)


def player_letter(index: int) -> str:
    """The ``index``-th (0-based) uppercase letter that is not a map symbol."""
    letters = [c for c in string.ascii_uppercase if c not in RESERVED_LETTERS]
    if not (0 <= index < len(letters)):
        raise IndexError("player index out of range")
    return letters[index]


def start_symbol(letter: str) -> str:
    return letter.lower()


@dataclass
class Player:
    letter: str
    start: Position
    dice: int = DICE_NOT_ROLLED
    unused: Deque[Figure] = field(default_factory=deque)
    playing: Deque[Figure] = field(default_factory=deque)
    pending_obstacle: Optional[Cell] = None

    def __post_init__(self):
        if not self.unused and not self.playing:
            self.unused.extend(Figure(letter=self.letter, index=i) for i in range(1, MAX_FIGURES + 1))

    def has_rolled(self) -> bool:
        return self.dice != DICE_NOT_ROLLED

    def reset_dice(self) -> None:
        self.dice = DICE_NOT_ROLLED

    def all_figures_used(self) -> bool:
        return not self.unused

    def has_pending_obstacle(self) -> bool:
        return self.pending_obstacle is not None

    def bring_new_figure(self) -> Figure:
        figure = self.unused.popleft()
        self.playing.append(figure)
        return figure

    def find_playing(self, index: int) -> Figure | None:
        for figure in self.playing:
            if figure.index == index:
                return figure
        return None

    def return_to_unused(self, index: int) -> Figure:
        """Take a captured figure off the board and back into the unused pool."""
        figure = self.find_playing(index)
        if figure is None:
            raise FigureNotFound()
        self.playing.remove(figure)
        figure.position = Position.invalid()
        self.unused.append(figure)
        return figure

    def describe(self) -> str:
        dice = str(self.dice) if self.has_rolled() else "?"
        return f"It's player {self.letter}'s turn. Dice Roll: {dice}"
