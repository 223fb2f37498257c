import random
from typing import Optional, Sequence

from campus_chaos.config import _dbg
from campus_chaos.errors import (
    AlreadyRolled,
    CommandNotAvailable,
    FigureNotFound,
    InvalidDiceRoll,
    InvalidFigureName,
    OutOfPlayerRange,
    ProtectedZoneHit,
    TooManyPlayersForMap,
)
from campus_chaos.schemas import (
    DICE_MAX,
    DICE_MIN,
    MAX_PLAYERS,
    MIN_PLAYERS,
    Cell,
    CellType,
    Figure,
    FigureId,
    Position,
    TurnReport,
)
from campus_chaos.services.forest import Forest
from campus_chaos.services.grid import Grid
from campus_chaos.services.path import PathResolver
from campus_chaos.services.player import Player, player_letter, start_symbol
from campus_chaos.utils.audit import audit_write


def turn_message(letter: str) -> str:
    return f"It's player {letter}'s turn."


def hit_message(attacker: str, victim: str) -> str:
    return f"Player {attacker} has hit Player {victim}."


def win_message(letter: str) -> str:
    return f"Player {letter} has won!"


class Session:
    """
    One running game: the live grid and its pristine copy, the players in
    turn order, the optional forest and the optional seeded dice.
    Every gameplay operation validates fully before it writes anything.
    """
    def __init__(self,
                 session_id: str,
                 grid: Grid,
                 players: int,
                 seed: Optional[int] = None,
                 map_path: str = "",
               ):
        if not (MIN_PLAYERS <= players <= MAX_PLAYERS):
            raise OutOfPlayerRange(grid=grid)
        letters = [player_letter(i) for i in range(players)]
        starts = grid.start_positions(start_symbol(letter) for letter in letters)
        if len(starts) != len(letters):
            raise TooManyPlayersForMap(grid=grid)

        self.session_id = session_id
        self.map_path = map_path
        self.seed: Optional[int] = seed
        self.grid = grid
        self.original = grid.copy()
        self.starts: dict[str, Position] = {letter: starts[start_symbol(letter)] for letter in letters}
        forest_pos = grid.forest_position()
        self.forest: Optional[Forest] = Forest(position=forest_pos) if forest_pos is not None else None
        self.rng: Optional[random.Random] = random.Random(seed) if seed is not None else None
        self.players: list[Player] = self._build_players()
        self.current_index = 0
        self.winner: Optional[str] = None

    def _build_players(self) -> list[Player]:
        return [Player(letter=letter, start=pos) for letter, pos in self.starts.items()]

    # ---- queries ----

    @property
    def current_player(self) -> Player:
        return self.players[self.current_index]

    @property
    def letters(self) -> list[str]:
        return [p.letter for p in self.players]

    def player(self, letter: str) -> Player:
        for p in self.players:
            if p.letter == letter:
                return p
        raise KeyError(letter)

    def has_winner(self) -> bool:
        return self.winner is not None

    def is_start_free(self) -> bool:
        return not self.grid[self.current_player.start].has_figure()

    def find_figure(self, name: str) -> Figure:
        """Resolve a name like ``A1`` to one of the current player's figures in play."""
        for figure in self.current_player.playing:
            if figure.name == name:
                return figure
        raise InvalidFigureName()

    def describe(self, active: bool = False) -> str:
        marker = "*" if active else ""
        text = f"{self.session_id}{marker} -> Players: {','.join(self.letters)} | Map: {self.map_path}"
        if self.seed is not None:
            text += f" | Seed: {self.seed}"
        return text

    # ---- commands ----

    def roll_dice(self, value: Optional[int] = None) -> int:
        player = self.current_player
        if player.has_rolled():
            raise AlreadyRolled()
        if self.rng is not None:
            if value is not None:
                raise InvalidDiceRoll()
            dice = self.rng.randint(DICE_MIN, DICE_MAX)
        else:
            if value is None or not (DICE_MIN <= value <= DICE_MAX):
                raise InvalidDiceRoll()
            dice = value
        player.dice = dice
        _dbg(f"[session {self.session_id}] {player.letter} rolled {dice}")
        audit_write(self.session_id, {"type": "dice", "player": player.letter, "value": dice})
        return dice

    def new_figure(self) -> Figure:
        player = self.current_player
        if player.all_figures_used() or not self.is_start_free():
            raise CommandNotAvailable()
        figure = player.bring_new_figure()
        figure.position = player.start
        self.grid[player.start].figure = figure.fid
        audit_write(self.session_id, {"type": "new_figure", "figure": figure.name})
        return figure

    def move(self, figure_name: str, tokens: Sequence[str]) -> TurnReport:
        player = self.current_player
        figure = self.find_figure(figure_name)
        target = PathResolver(self.grid).resolve(tokens, player.dice, figure.position)
        report = TurnReport()
        cell = self.place_figure(figure, target, report)
        report.cell = cell.position
        audit_write(self.session_id, {
            "type": "move", "figure": figure.name, "to": [target.row, target.column], "legs": list(tokens),
        })
        if cell.has_obstacle:
            self._pick_up_obstacle(player, cell)
        elif cell.type == CellType.TARGET:
            self.winner = player.letter
            report.winner = player.letter
            report.logs.append(win_message(player.letter))
            audit_write(self.session_id, {"type": "win", "player": player.letter})
        else:
            self.change_current_player(report)
        return report

    def move_obstacle(self, tokens: Sequence[str]) -> TurnReport:
        player = self.current_player
        pending = player.pending_obstacle
        if pending is None:
            raise CommandNotAvailable()
        target = PathResolver(self.grid).resolve_obstacle(tokens, pending.position)
        self.grid.replace(pending.model_copy(
            update={"position": target, "figure": None, "has_obstacle": True}, deep=True))
        player.pending_obstacle = None
        audit_write(self.session_id, {
            "type": "obstacle_drop", "player": player.letter, "to": [target.row, target.column],
        })
        report = TurnReport(cell=target)
        self.change_current_player(report)
        return report

    def skip_turn(self) -> TurnReport:
        report = TurnReport()
        self.change_current_player(report)
        return report

    def rematch(self) -> TurnReport:
        self.players = self._build_players()
        self.current_index = 0
        self.winner = None
        self.grid = self.original.copy()
        if self.forest is not None:
            self.forest.clear()
        audit_write(self.session_id, {"type": "rematch"})
        return TurnReport(logs=[turn_message(self.current_player.letter)])

    def change_current_player(self, report: TurnReport) -> None:
        self.current_player.reset_dice()
        self.current_index = (self.current_index + 1) % len(self.players)
        letter = self.current_player.letter
        report.logs.append(turn_message(letter))
        _dbg(f"[session {self.session_id}] turn -> {letter}")
        audit_write(self.session_id, {"type": "turn", "player": letter})

    # ---- board mutation ----

    def place_figure(self, figure: Figure, new_pos: Position, report: TurnReport) -> Cell:
        """Move ``figure`` to ``new_pos``, hitting whatever opponent stands there.

        Raises ProtectedZoneHit, leaving the board untouched, when the
        destination is an occupied protected zone.
        """
        dest = self.grid[new_pos]
        occupant = dest.figure
        if occupant is not None and occupant != figure.fid:
            if dest.type == CellType.PROTECTED_ZONE:
                raise ProtectedZoneHit()
            if occupant.letter != figure.letter:
                self._hit(occupant)
                report.logs.append(hit_message(figure.letter, occupant.letter))
            else:
                _dbg(f"[session {self.session_id}] {figure.name} lands on own figure {occupant}")

        old_pos = figure.position
        if self.forest is not None and old_pos == self.forest.position:
            self.forest.remove(figure.fid)
            self._refresh_forest()
        elif old_pos.is_valid() and self.grid[old_pos].figure == figure.fid:
            self.grid[old_pos].figure = None

        figure.position = new_pos
        dest.figure = figure.fid
        return dest

    def _hit(self, victim_id: FigureId) -> None:
        owner = self.player(victim_id.letter)
        if self.forest is None:
            owner.return_to_unused(victim_id.index)
        else:
            victim = owner.find_playing(victim_id.index)
            if victim is None:
                raise FigureNotFound()
            self.forest.add(victim)
            self._refresh_forest()
        audit_write(self.session_id, {
            "type": "hit", "attacker": self.current_player.letter, "victim": str(victim_id),
        })

    def _refresh_forest(self) -> None:
        if self.forest is not None:
            self.grid[self.forest.position].type = self.forest.cell_type

    def _pick_up_obstacle(self, player: Player, cell: Cell) -> None:
        player.pending_obstacle = cell.model_copy(deep=True)
        cell.has_obstacle = False
        cell.type = CellType.PATHWAY_VILLAGE if cell.type == CellType.OBSTACLE_VILLAGE else CellType.PATHWAY
        _dbg(f"[session {self.session_id}] {player.letter} picked up obstacle at {cell.position}")
        audit_write(self.session_id, {
            "type": "obstacle_pickup", "player": player.letter, "at": [cell.position.row, cell.position.column],
        })
