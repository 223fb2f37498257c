from typing import List

from pydantic import BaseModel, Field

from campus_chaos.config import _dbg
from campus_chaos.errors import GameError, WrongCommand
from campus_chaos.schemas import CommandKind, CommandRequest
from campus_chaos.services.commands import execute_command
from campus_chaos.services.store import SessionStore

ERROR_PREFIX = "Error, "
GREETING = "Welcome to CampusChaos 2024. Enter 'help' for more details."


class ConsoleOutput(BaseModel):
    out: List[str] = Field(default_factory=list)
    err: List[str] = Field(default_factory=list)
    quit: bool = False


def parse_command(line: str) -> CommandRequest:
    """Split a raw input line into a command kind and its parameter tokens.

    The longest matching command word wins, so ``move obstacle 1 up``
    is never read as ``move``.
    """
    tokens = line.split()
    best = None
    for kind in CommandKind:
        words = kind.words
        if tokens[:len(words)] == words and (best is None or len(words) > len(best.words)):
            best = kind
    if best is None:
        raise WrongCommand()
    return CommandRequest(kind=best, params=tokens[len(best.words):])


def handle_line(store: SessionStore, line: str) -> ConsoleOutput:
    try:
        req = parse_command(line)
        result = execute_command(store, req)
    except GameError as e:
        _dbg(f"[console] rejected {line!r}: {type(e).__name__}")
        out = e.grid.render() if e.grid is not None else []
        return ConsoleOutput(out=out, err=[f"{ERROR_PREFIX}{e}"])
    return ConsoleOutput(out=result.lines, quit=result.quit)
