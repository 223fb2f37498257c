from typing import Iterable, Iterator, Sequence

from campus_chaos.errors import InvalidCharacter, InvalidField, InvalidForestVillage
from campus_chaos.schemas import NON_EXISTENT_SYMBOL, Cell, CellType, Position

# lowercase spellings of the target and protected zone are rejected
FORBIDDEN_SYMBOLS = ("t", "z")


class Grid:
    """
    Rectangular board of cells, addressed by Position(row, column).
    The shape is fixed once built; cells are replaced or updated in place.
    """
    def __init__(self, cells: list[list[Cell]]):
        H = len(cells)
        W = len(cells[0]) if H > 0 else 0
        if any(len(row) != W for row in cells):
            raise ValueError("All rows of a grid must have the same length")
        self.__cells = cells
        self.__W = W
        self.__H = H

    @staticmethod
    def from_rows(rows: Sequence[str] | None) -> 'Grid':
        """Build a grid from map text rows, padding short rows with non-existent cells."""
        if not rows:
            raise InvalidField()
        width = max(len(row) for row in rows)
        if width == 0:
            raise InvalidField()
        cells = [
            [Cell.from_symbol(symbol, Position(row=r, column=c))
             for c, symbol in enumerate(row.ljust(width, NON_EXISTENT_SYMBOL))]
            for r, row in enumerate(rows)
        ]
        grid = Grid(cells)
        symbols = {symbol for row in rows for symbol in row}
        has_forest = CellType.EMPTY_FOREST.symbol in symbols
        has_village = any(cell.type.is_village() for cell in grid.cells())
        if any(symbol in symbols for symbol in FORBIDDEN_SYMBOLS):
            raise InvalidCharacter(grid=grid)
        if has_forest != has_village:
            raise InvalidForestVillage(grid=grid)
        return grid

    @property
    def W(self) -> int:
        return self.__W

    @property
    def H(self) -> int:
        return self.__H

    @property
    def shape(self) -> tuple[int, int]:
        return (self.H, self.W)

    def in_bounds(self, pos: Position) -> bool:
        return pos.in_bounds(self.H, self.W)

    def get(self, row: int, column: int) -> Cell:
        if not (0 <= row < self.H and 0 <= column < self.W):
            raise IndexError("Coordinates out of bounds")
        return self.__cells[row][column]

    def __getitem__(self, pos: Position) -> Cell:
        if not isinstance(pos, Position):
            raise TypeError(f"Grid indices must be Position, not {type(pos).__name__}")
        return self.get(pos.row, pos.column)

    def replace(self, cell: Cell) -> None:
        """Put ``cell`` at its own position, dropping whatever cell was there."""
        if not self.in_bounds(cell.position):
            raise IndexError("Coordinates out of bounds")
        self.__cells[cell.position.row][cell.position.column] = cell

    def cells(self) -> Iterator[Cell]:
        for row in self.__cells:
            yield from row

    def copy(self) -> 'Grid':
        return Grid([[cell.model_copy(deep=True) for cell in row] for row in self.__cells])

    def find_start(self, symbol: str) -> Position | None:
        for cell in self.cells():
            if cell.type == CellType.PLAYER_START and cell.player_symbol == symbol:
                return cell.position
        return None

    def start_positions(self, symbols: Iterable[str]) -> dict[str, Position]:
        found = {}
        for symbol in symbols:
            pos = self.find_start(symbol)
            if pos is not None:
                found[symbol] = pos
        return found

    def forest_position(self) -> Position | None:
        # the last forest cell in reading order wins
        found = None
        for cell in self.cells():
            if cell.type == CellType.EMPTY_FOREST:
                found = cell.position
        return found

    def same_layout(self, other: 'Grid') -> bool:
        if self.shape != other.shape:
            return False
        return all(
            a.type == b.type and a.figure == b.figure and a.has_obstacle == b.has_obstacle
            and a.player_symbol == b.player_symbol
            for a, b in zip(self.cells(), other.cells())
        )

    def render(self, current_letter: str | None = None) -> list[str]:
        """Text rows of the board as players see it.

        The current player's figures show their index, everyone else's their
        owner letter. Non-existent cells print nothing.
        """
        lines = []
        for row in self.__cells:
            out = []
            for cell in row:
                if cell.figure is not None and not cell.is_forest():
                    fid = cell.figure
                    out.append(str(fid.index) if fid.letter == current_letter else fid.letter)
                elif cell.type != CellType.NON_EXISTENT:
                    out.append(cell.symbol)
            lines.append("".join(out))
        return lines
