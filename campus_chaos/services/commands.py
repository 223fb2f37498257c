import re
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Sequence

from campus_chaos.errors import (
    CommandNotAvailable,
    InvalidDiceRoll,
    InvalidPath,
    OutOfPlayerRange,
    WrongCommand,
    WrongParameters,
)
from campus_chaos.schemas import (
    CommandKind,
    CommandRequest,
    CommandResult,
)
from campus_chaos.services.grid import Grid
from campus_chaos.services.session import Session, turn_message
from campus_chaos.services.store import SessionStore
from campus_chaos.utils.maploader import read_map_rows

_NUMBER_RE = re.compile(r"[0-9]+")

COMMAND_DESCRIPTIONS: tuple[tuple[CommandKind, str], ...] = tuple(sorted((
    (CommandKind.HELP, "help: This command displays a list of available commands."),
    (CommandKind.DELETE_SESSION, "delete session: This command deletes a session. "
        "Please add a valid session_id in order to delete it. Example: delete session TestSession."),
    (CommandKind.QUIT, "quit: This command ends the game."),
    (CommandKind.SHOW_SESSION, "show session: This command shows all details about existing sessions. "
        "The session that is active has an * as a suffix. If a session id is provided after the command, "
        "only the details about it are shown."),
    (CommandKind.SWITCH_SESSION, "switch session: This command change the active game. "
        "Please add a valid session_id in order to switch it. Example: switch session TestSession"),
    (CommandKind.START_SESSION, "start session: This command creates and starts a game session. "
        "The command must have three or four parameters, each separated by a space: session_id, "
        "file_to_field, num_of_players and optionally seed. Number of players must be between 2 and 21."),
    (CommandKind.SHOW, "show: This command displays the playing field of the current session. "
        "No parameters needed."),
    (CommandKind.CURRENT_PLAYER, "current player: This command displays the current player and rolled dice. "
        "If not dice was rolled, a question mark will be shown. No parameters needed."),
    (CommandKind.ROLL_DICE, "roll dice: This command rolls a dice. Please add a number between 1 and 6 "
        "after command. If the session was created with seed, no number is needed. Example: roll dice 6."),
    (CommandKind.NEW_FIGURE, "new figure: This command brings a new figure into play. No need for parameters."),
    (CommandKind.MOVE, "move: Moves a piece of the current player. Please add a valid figure name, followed "
        "by a non-empty list of pair of distances and directions. Example: move A1 1 up 2 left."),
    (CommandKind.MOVE_OBSTACLE, "move obstacle: This command moves an obstacle that is currently reached by "
        "a figure. The command must contain 2 distances and 2 directions. Example : move obstacle 3 up 4 right."),
    (CommandKind.SKIP_TURN, "skip turn: This command skips the current players turn. No need for parameters."),
    (CommandKind.REMATCH, "rematch: This command the same game one more time. No need for parameters."),
), key=lambda item: item[0].value))


Predicate = Callable[[Optional[Session], Sequence[Session]], bool]


def _playing(active: Optional[Session]) -> bool:
    return active is not None and not active.has_winner()


def _can_switch(active: Optional[Session], sessions: Sequence[Session]) -> bool:
    return (len(sessions) == 1 and active is None) or len(sessions) >= 2


AVAILABILITY: Mapping[CommandKind, Predicate] = MappingProxyType({
    CommandKind.QUIT: lambda active, sessions: True,
    CommandKind.HELP: lambda active, sessions: True,
    CommandKind.START_SESSION: lambda active, sessions: True,
    CommandKind.SHOW: lambda active, sessions: active is not None,
    CommandKind.CURRENT_PLAYER: lambda active, sessions: _playing(active),
    CommandKind.ROLL_DICE: lambda active, sessions: _playing(active) and not active.current_player.has_rolled(),
    CommandKind.NEW_FIGURE: lambda active, sessions: (
        _playing(active) and not active.current_player.all_figures_used() and active.is_start_free()),
    CommandKind.MOVE: lambda active, sessions: (
        _playing(active) and active.current_player.has_rolled()
        and not active.current_player.has_pending_obstacle()),
    CommandKind.SKIP_TURN: lambda active, sessions: _playing(active) and active.current_player.has_rolled(),
    CommandKind.MOVE_OBSTACLE: lambda active, sessions: (
        _playing(active) and active.current_player.has_pending_obstacle()),
    CommandKind.REMATCH: lambda active, sessions: active is not None and active.has_winner(),
    CommandKind.DELETE_SESSION: lambda active, sessions: len(sessions) > 0,
    CommandKind.SHOW_SESSION: lambda active, sessions: len(sessions) > 0,
    CommandKind.SWITCH_SESSION: _can_switch,
})


def is_command_available(kind: CommandKind, active: Optional[Session], sessions: Sequence[Session]) -> bool:
    return AVAILABILITY[kind](active, sessions)


def available_commands(store: SessionStore) -> list[CommandKind]:
    return [kind for kind, _ in COMMAND_DESCRIPTIONS
            if is_command_available(kind, store.active, store.sessions())]


# ---- handlers ----

def _no_params(params: list[str]) -> None:
    if params:
        raise WrongCommand()


def _parse_count(token: str, grid: Grid | None = None) -> int:
    if not _NUMBER_RE.fullmatch(token):
        raise OutOfPlayerRange(grid=grid)
    return int(token)


def _active(store: SessionStore) -> Session:
    active = store.active
    if active is None:
        raise CommandNotAvailable()
    return active


def _board(sess: Session) -> list[str]:
    return sess.grid.render(sess.current_player.letter)


def _quit(store: SessionStore, params: list[str]) -> CommandResult:
    _no_params(params)
    return CommandResult(quit=True)


def _help(store: SessionStore, params: list[str]) -> CommandResult:
    _no_params(params)
    kinds = set(available_commands(store))
    return CommandResult(lines=[text for kind, text in COMMAND_DESCRIPTIONS if kind in kinds])


def _start_session(store: SessionStore, params: list[str]) -> CommandResult:
    if len(params) not in (3, 4):
        raise WrongParameters()
    session_id, map_path, players = params[:3]
    # map errors take precedence over number errors
    grid = Grid.from_rows(read_map_rows(map_path))
    count = _parse_count(players, grid)
    seed = _parse_count(params[3], grid) if len(params) == 4 else None
    sess = store.create_session(session_id, grid, count, seed, map_path=map_path)
    return CommandResult(lines=_board(sess) + [sess.session_id, turn_message(sess.current_player.letter)])


def _delete_session(store: SessionStore, params: list[str]) -> CommandResult:
    if len(params) != 1:
        raise WrongParameters()
    try:
        store.delete(params[0])
    except KeyError:
        raise WrongCommand() from None
    return CommandResult(lines=[params[0]])


def _switch_session(store: SessionStore, params: list[str]) -> CommandResult:
    if len(params) != 1:
        raise WrongParameters()
    try:
        sess = store.switch(params[0])
    except KeyError:
        raise WrongCommand() from None
    return CommandResult(lines=[sess.session_id])


def _show_session(store: SessionStore, params: list[str]) -> CommandResult:
    if len(params) > 1:
        raise WrongParameters()
    try:
        return CommandResult(lines=store.describe(params[0] if params else None))
    except KeyError:
        raise WrongCommand() from None


def _show(store: SessionStore, params: list[str]) -> CommandResult:
    _no_params(params)
    return CommandResult(lines=_board(_active(store)))


def _current_player(store: SessionStore, params: list[str]) -> CommandResult:
    _no_params(params)
    return CommandResult(lines=[_active(store).current_player.describe()])


def _roll_dice(store: SessionStore, params: list[str]) -> CommandResult:
    if len(params) > 1:
        raise InvalidDiceRoll()
    value = None
    if params:
        if not _NUMBER_RE.fullmatch(params[0]):
            raise InvalidDiceRoll()
        value = int(params[0])
    return CommandResult(lines=[str(_active(store).roll_dice(value))])


def _new_figure(store: SessionStore, params: list[str]) -> CommandResult:
    _no_params(params)
    return CommandResult(lines=[_active(store).new_figure().name])


def _move(store: SessionStore, params: list[str]) -> CommandResult:
    if len(params) < 3 or len(params) % 2 == 0:
        raise InvalidPath()
    report = _active(store).move(params[0], params[1:])
    return CommandResult(lines=report.logs)


def _move_obstacle(store: SessionStore, params: list[str]) -> CommandResult:
    if len(params) not in (2, 4):
        raise InvalidPath()
    report = _active(store).move_obstacle(params)
    return CommandResult(lines=report.logs)


def _skip_turn(store: SessionStore, params: list[str]) -> CommandResult:
    _no_params(params)
    return CommandResult(lines=_active(store).skip_turn().logs)


def _rematch(store: SessionStore, params: list[str]) -> CommandResult:
    _no_params(params)
    return CommandResult(lines=_active(store).rematch().logs)


HANDLERS: Mapping[CommandKind, Callable[[SessionStore, list[str]], CommandResult]] = MappingProxyType({
    CommandKind.QUIT: _quit,
    CommandKind.HELP: _help,
    CommandKind.START_SESSION: _start_session,
    CommandKind.DELETE_SESSION: _delete_session,
    CommandKind.SWITCH_SESSION: _switch_session,
    CommandKind.SHOW_SESSION: _show_session,
    CommandKind.SHOW: _show,
    CommandKind.CURRENT_PLAYER: _current_player,
    CommandKind.ROLL_DICE: _roll_dice,
    CommandKind.NEW_FIGURE: _new_figure,
    CommandKind.MOVE: _move,
    CommandKind.MOVE_OBSTACLE: _move_obstacle,
    CommandKind.SKIP_TURN: _skip_turn,
    CommandKind.REMATCH: _rematch,
})


def execute_command(store: SessionStore, req: CommandRequest) -> CommandResult:
    """Run one command against the store. Raises GameError subclasses on rejection."""
    if not is_command_available(req.kind, store.active, store.sessions()):
        raise CommandNotAvailable()
    return HANDLERS[req.kind](store, list(req.params))
