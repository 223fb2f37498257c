from pathlib import Path

from campus_chaos.errors import MapReadError


def read_map_rows(path: str | Path) -> list[str]:
    """Read a map file into its rows, line endings stripped."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise MapReadError() from e
    return text.splitlines()
