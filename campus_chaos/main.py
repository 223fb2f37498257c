from pathlib import Path
import argparse
import sys
from typing import Optional, TextIO

# Resolve project root (two levels up from this file: campus_chaos/main.py -> project root)
PROJECT_ROOT = Path(__file__).resolve().parent.parent
# Ensure project root on sys.path so `import campus_chaos.*` works when running as a script
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from campus_chaos.routers.console_router import GREETING, handle_line  # noqa: E402
from campus_chaos.services.store import SessionStore  # noqa: E402


def build_parser() -> argparse.ArgumentParser:
    # the game takes no command line arguments; anything extra is a usage error
    return argparse.ArgumentParser(
        prog="campus-chaos",
        description="Interactive dice board race game. Commands are read from standard input.",
    )


def run(stdin: TextIO, stdout: TextIO, stderr: TextIO, store: Optional[SessionStore] = None) -> int:
    store = store if store is not None else SessionStore()
    print(GREETING, file=stdout)
    for line in stdin:
        result = handle_line(store, line.rstrip("\n"))
        for text in result.out:
            print(text, file=stdout)
        for text in result.err:
            print(text, file=stderr)
        if result.quit:
            break
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    build_parser().parse_args(argv)
    return run(sys.stdin, sys.stdout, sys.stderr)


if __name__ == "__main__":
    sys.exit(main())
