from dataclasses import dataclass, field
from typing import List

from campus_chaos.schemas import CellType, Figure, FigureId, Position


@dataclass
class Forest:
    """Holding pen for captured figures in village maps.

    Captured figures stay in their owner's in-play pool; the forest only
    records which of them currently sit at its position.
    """
    position: Position
    captured: List[FigureId] = field(default_factory=list)

    @property
    def cell_type(self) -> CellType:
        return CellType.OCCUPIED_FOREST if self.captured else CellType.EMPTY_FOREST

    def add(self, figure: Figure) -> None:
        figure.position = self.position
        self.captured.append(figure.fid)

    def remove(self, fid: FigureId) -> bool:
        if fid in self.captured:
            self.captured.remove(fid)
            return True
        return False

    def holds(self, fid: FigureId) -> bool:
        return fid in self.captured

    def clear(self) -> None:
        self.captured.clear()
