import re
from typing import Sequence

from campus_chaos.config import _dbg
from campus_chaos.errors import (
    AlreadyVisited,
    CellNotFree,
    GameError,
    InvalidDirection,
    InvalidMoveCount,
    InvalidPath,
    OutOfBounds,
)
from campus_chaos.schemas import Direction, Position
from campus_chaos.services.grid import Grid

_DISTANCE_RE = re.compile(r"[0-9]+")


def parse_direction(token: str) -> Direction:
    try:
        return Direction(token)
    except ValueError:
        raise InvalidDirection() from None


def parse_distance(token: str, error: type[GameError]) -> int:
    if not _DISTANCE_RE.fullmatch(token):
        raise error()
    distance = int(token)
    if distance <= 0:
        raise error()
    return distance


def split_legs(tokens: Sequence[str]) -> list[tuple[str, str]]:
    """Pair up ``distance direction`` tokens."""
    if not tokens or len(tokens) % 2 != 0:
        raise InvalidPath()
    return [(tokens[i], tokens[i + 1]) for i in range(0, len(tokens), 2)]


class PathResolver:
    """
    Validates multi-leg paths on a grid without touching it.
    Figure paths walk one cell at a time and must spend the dice exactly;
    obstacle paths jump a whole leg at once and only the landing cell counts.
    """
    def __init__(self, grid: Grid):
        self.grid = grid

    def resolve(self, tokens: Sequence[str], dice: int, start: Position,
                visited: set[Position] | None = None) -> Position:
        legs = split_legs(tokens)
        visited = visited if visited is not None else set()
        visited.add(start)
        pos = start
        total = 0
        for leg_no, (distance_token, direction_token) in enumerate(legs):
            distance = parse_distance(distance_token, InvalidMoveCount)
            total += distance
            if total > dice:
                raise InvalidMoveCount()
            direction = parse_direction(direction_token)
            final_leg = leg_no == len(legs) - 1
            for step in range(1, distance + 1):
                pos = pos.moved(direction)
                if not self.grid.in_bounds(pos):
                    raise OutOfBounds()
                is_last = final_leg and step == distance
                if not self.grid[pos].is_free_to_move(is_last):
                    raise CellNotFree()
                if pos in visited:
                    raise AlreadyVisited()
                visited.add(pos)
        if total != dice:
            raise InvalidMoveCount()
        _dbg(f"[path] {start} -> {pos} dice={dice} legs={legs}")
        return pos

    def resolve_obstacle(self, tokens: Sequence[str], start: Position) -> Position:
        legs = split_legs(tokens)
        if len(legs) > 2:
            raise InvalidPath()
        directions = [parse_direction(direction_token) for _, direction_token in legs]
        if len(directions) == 2 and directions[0] == directions[1]:
            raise InvalidDirection()
        pos = start
        for (distance_token, _), direction in zip(legs, directions):
            distance = parse_distance(distance_token, InvalidPath)
            pos = pos.moved(direction, distance)
            if not self.grid.in_bounds(pos):
                raise InvalidPath()
        landing = self.grid[pos]
        if not landing.type.is_plain_pathway() or landing.has_figure() or landing.has_obstacle:
            raise InvalidPath()
        _dbg(f"[path] obstacle {start} -> {pos}")
        return pos
