import io
import pytest
from campus_chaos.errors import WrongCommand
from campus_chaos.main import main, run
from campus_chaos.routers.console_router import GREETING, handle_line, parse_command
from campus_chaos.schemas import CommandKind
from campus_chaos.services.commands import COMMAND_DESCRIPTIONS
from campus_chaos.services.store import SessionStore


@pytest.fixture
def map_file(tmp_path):
    path = tmp_path / "map.txt"
    path.write_text("aPPT\nbPPP\n", encoding="utf-8")
    return str(path)


@pytest.mark.parametrize("line,kind,params", [
    ("move obstacle 1 up", CommandKind.MOVE_OBSTACLE, ["1", "up"]),
    ("move A1 1 up", CommandKind.MOVE, ["A1", "1", "up"]),
    ("show session", CommandKind.SHOW_SESSION, []),
    ("show", CommandKind.SHOW, []),
    ("roll dice 4", CommandKind.ROLL_DICE, ["4"]),
    ("start session g1 map.txt 2 7", CommandKind.START_SESSION, ["g1", "map.txt", "2", "7"]),
])
def test_parse_command(line, kind, params):
    req = parse_command(line)
    assert req.kind == kind
    assert req.params == params


@pytest.mark.parametrize("line", ["", "dance", "roll", "moveA1"])
def test_parse_unknown(line):
    with pytest.raises(WrongCommand):
        parse_command(line)


def test_help_lists_available_commands_sorted():
    texts = dict(COMMAND_DESCRIPTIONS)
    out = handle_line(SessionStore(), "help")
    assert out.out == [texts[CommandKind.HELP], texts[CommandKind.QUIT], texts[CommandKind.START_SESSION]]
    assert out.err == []


def test_full_game(map_file):
    store = SessionStore()

    def send(line):
        result = handle_line(store, line)
        assert result.err == [], result.err
        return result.out

    assert send(f"start session g1 {map_file} 2") == ["aPPT", "bPPP", "g1", "It's player A's turn."]
    assert send("current player") == ["It's player A's turn. Dice Roll: ?"]
    assert send("new figure") == ["A1"]
    assert send("show") == ["1PPT", "bPPP"]
    assert send("roll dice 3") == ["3"]
    assert send("current player") == ["It's player A's turn. Dice Roll: 3"]
    assert send("move A1 3 right") == ["Player A has won!"]
    assert send("show") == ["aPP1", "bPPP"]
    assert send("rematch") == ["It's player A's turn."]
    assert send("show") == ["aPPT", "bPPP"]
    assert send("show session") == [f"g1* -> Players: A,B | Map: {map_file}"]
    assert send("delete session g1") == ["g1"]


def test_errors_are_prefixed(map_file):
    store = SessionStore()
    out = handle_line(store, "show")
    assert out.err == ["Error, this command is not available."]

    out = handle_line(store, f"start session bad-id {map_file} 2")
    assert out.out == ["aPPT", "bPPP"]
    assert out.err == ["Error, this session is not alphanumerical."]

    out = handle_line(store, f"start session g1 {map_file} two")
    assert out.err == [
        "Error, the entered numbers are not integers or number of players do not fall within the range 2-21."]
    out = handle_line(store, f"start session g1 {map_file}")
    assert out.err == ["Error, wrong command parameters."]
    out = handle_line(store, "start session g1 /no/such/map.txt 2")
    assert out.err == ["Error, an invalid path has been passed!"]

    handle_line(store, f"start session g1 {map_file} 2")
    assert handle_line(store, "move A1 1").err == ["Error, this command is not available."]
    handle_line(store, "roll dice 2")
    assert handle_line(store, "move A1 1").err == ["Error, an invalid path has been passed!"]
    assert handle_line(store, "move A1 2 right").err == [
        "Error, invalid figure name or this figure is not on the playing field."]
    assert handle_line(store, "roll dice 2").err == ["Error, this command is not available."]
    assert handle_line(store, "switch session g1").err == ["Error, this command is not available."]
    assert handle_line(store, "delete session g2").err == ["Error, wrong command or parameters."]


def test_start_session_reads_map_before_numbers(map_file):
    store = SessionStore()
    out = handle_line(store, "start session s /no/such/map.txt two")
    assert out.err == ["Error, an invalid path has been passed!"]

    out = handle_line(store, f"start session s {map_file} two")
    assert out.out == ["aPPT", "bPPP"]
    out = handle_line(store, f"start session s {map_file} 2 -3")
    assert out.out == ["aPPT", "bPPP"]
    assert out.err == [
        "Error, the entered numbers are not integers or number of players do not fall within the range 2-21."]
    assert len(store) == 0


def test_numbers_must_be_ascii_digits(map_file):
    store = SessionStore()
    out = handle_line(store, f"start session s {map_file} ٢")
    assert out.err == [
        "Error, the entered numbers are not integers or number of players do not fall within the range 2-21."]
    handle_line(store, f"start session s {map_file} 2")
    out = handle_line(store, "roll dice ٣")
    assert out.err == [
        "Error, an invalid parameter for the command dice roll. Please parse an valid digit between 1 and 6."]


def test_run_loop_stops_at_quit():
    stdin = io.StringIO("help\nquit\nshow\n")
    stdout, stderr = io.StringIO(), io.StringIO()
    assert run(stdin, stdout, stderr) == 0
    lines = stdout.getvalue().splitlines()
    assert lines[0] == GREETING
    assert len(lines) == 4
    assert stderr.getvalue() == ""


def test_run_loop_reports_errors():
    stdin = io.StringIO("dance\n")
    stdout, stderr = io.StringIO(), io.StringIO()
    run(stdin, stdout, stderr)
    assert stderr.getvalue() == "Error, wrong command or parameters.\n"


def test_command_line_arguments_are_rejected():
    with pytest.raises(SystemExit) as err:
        main(["--map", "x"])
    assert err.value.code == 2
