from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field

MAX_FIGURES = 5

DICE_MIN = 1
DICE_MAX = 6
DICE_NOT_ROLLED = -1

MIN_PLAYERS = 2
MAX_PLAYERS = 21

# letters already taken by map symbols, never handed out to players
RESERVED_LETTERS = "OZPTF"

NON_EXISTENT_SYMBOL = "\0"


class CellType(str, Enum):
    PATHWAY = "P"
    PATHWAY_VILLAGE = "p"
    OBSTACLE = "O"
    OBSTACLE_VILLAGE = "o"
    TARGET = "T"
    PROTECTED_ZONE = "Z"
    EMPTY_FOREST = "f"
    OCCUPIED_FOREST = "F"
    EMPTY = " "
    NON_EXISTENT = NON_EXISTENT_SYMBOL
    PLAYER_START = "?"

    @property
    def symbol(self) -> str:
        return self.value

    @staticmethod
    def from_symbol(symbol: str) -> 'CellType':
        """Map a map character to its cell type. Unknown characters are player start markers."""
        try:
            return CellType(symbol)
        except ValueError:
            return CellType.PLAYER_START

    def is_forest(self) -> bool:
        return self in (CellType.EMPTY_FOREST, CellType.OCCUPIED_FOREST)

    def is_obstacle(self) -> bool:
        return self in (CellType.OBSTACLE, CellType.OBSTACLE_VILLAGE)

    def is_village(self) -> bool:
        return self in (CellType.PATHWAY_VILLAGE, CellType.OBSTACLE_VILLAGE)

    def is_plain_pathway(self) -> bool:
        return self in (CellType.PATHWAY, CellType.PATHWAY_VILLAGE)


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def delta(self) -> tuple[int, int]:
        return _DIRECTION_DELTAS[self]


_DIRECTION_DELTAS = {
    Direction.UP: (-1, 0),
    Direction.DOWN: (1, 0),
    Direction.LEFT: (0, -1),
    Direction.RIGHT: (0, 1),
}


class Position(BaseModel, frozen=True):

    row: int
    column: int

    def __hash__(self):
        return hash((self.row, self.column))

    def __eq__(self, other):
        if isinstance(other, Position):
            return self.row == other.row and self.column == other.column
        return False

    def __str__(self) -> str:
        return f"({self.row},{self.column})"

    @staticmethod
    def invalid() -> 'Position':
        return Position(row=-1, column=-1)

    def is_valid(self) -> bool:
        return self.row >= 0 and self.column >= 0

    def moved(self, direction: Direction, distance: int = 1) -> 'Position':
        d_row, d_column = direction.delta
        return Position(row=self.row + d_row * distance, column=self.column + d_column * distance)

    def in_bounds(self, height: int, width: int) -> bool:
        return 0 <= self.row < height and 0 <= self.column < width


class FigureId(BaseModel, frozen=True):
    """Stable identity of a figure: owner letter plus 1-based index."""

    letter: str
    index: int

    def __str__(self) -> str:
        return f"{self.letter}{self.index}"


class Figure(BaseModel):
    letter: str
    index: int
    position: Position = Field(default_factory=Position.invalid)

    @property
    def fid(self) -> FigureId:
        return FigureId(letter=self.letter, index=self.index)

    @property
    def name(self) -> str:
        return str(self.fid)

    def is_placed(self) -> bool:
        return self.position.is_valid()


class Cell(BaseModel):
    """One grid location.

    ``has_obstacle`` is an overlay flag kept in step with ``type``: a cell
    built from an obstacle symbol starts with it set, and lifting the
    obstacle degrades the type to a pathway.
    """

    type: CellType
    position: Position
    player_symbol: Optional[str] = None
    figure: Optional[FigureId] = None
    has_obstacle: bool = False

    @staticmethod
    def from_symbol(symbol: str, position: Position) -> 'Cell':
        cell_type = CellType.from_symbol(symbol)
        return Cell(
            type=cell_type,
            position=position,
            player_symbol=symbol if cell_type == CellType.PLAYER_START else None,
            has_obstacle=cell_type.is_obstacle(),
        )

    @property
    def symbol(self) -> str:
        if self.type == CellType.PLAYER_START and self.player_symbol is not None:
            return self.player_symbol
        return self.type.symbol

    def has_figure(self) -> bool:
        return self.figure is not None

    def is_forest(self) -> bool:
        return self.type.is_forest()

    def is_obstacle(self) -> bool:
        return self.has_obstacle or self.type.is_obstacle()

    def is_free_to_move(self, is_last: bool) -> bool:
        """Whether a figure may step onto this cell.

        Interior steps only exclude obstacles and missing cells; the final
        landing cell additionally excludes the forest.
        """
        if self.type in (CellType.EMPTY, CellType.NON_EXISTENT):
            return False
        if is_last:
            return not self.is_forest()
        return not self.is_obstacle()


class CommandKind(str, Enum):
    QUIT = "quit"
    HELP = "help"
    SHOW_SESSION = "show session"
    START_SESSION = "start session"
    DELETE_SESSION = "delete session"
    SWITCH_SESSION = "switch session"
    SHOW = "show"
    CURRENT_PLAYER = "current player"
    ROLL_DICE = "roll dice"
    NEW_FIGURE = "new figure"
    MOVE = "move"
    MOVE_OBSTACLE = "move obstacle"
    SKIP_TURN = "skip turn"
    REMATCH = "rematch"

    @property
    def words(self) -> list[str]:
        return self.value.split(" ")


class CommandRequest(BaseModel):
    kind: CommandKind
    params: List[str] = Field(default_factory=list)


class CommandResult(BaseModel):
    lines: List[str] = Field(default_factory=list)
    quit: bool = False


class SessionCreateRequest(BaseModel):
    session_id: str
    map_path: str
    players: int
    seed: Optional[int] = None


class TurnReport(BaseModel):
    logs: List[str] = Field(default_factory=list)
    winner: Optional[str] = None
    cell: Optional[Position] = None
