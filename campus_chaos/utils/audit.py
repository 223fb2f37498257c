import json
import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from campus_chaos.config import settings

# Maintain per-session filename base so all writes go to the same timestamped file
_SESSION_FILE_BASE: Dict[str, str] = {}


def _file_base_for(session_id: str) -> str:
    """Return a stable '<timestamp>_<session_id>' base for this process."""
    if session_id in _SESSION_FILE_BASE:
        return _SESSION_FILE_BASE[session_id]
    ts = datetime.now().strftime("%Y%m%d-%H%M%S")
    base = f"{ts}_{session_id}"
    _SESSION_FILE_BASE[session_id] = base
    return base


def audit_path(session_id: str, base_dir: Optional[str] = None) -> Optional[str]:
    base_dir = base_dir or settings.audit_dir
    if not base_dir:
        return None
    return os.path.join(base_dir, f"{_file_base_for(session_id)}.log")


def audit_write(session_id: str, record: Dict[str, Any], base_dir: Optional[str] = None) -> None:
    """Append a structured JSON line to the per-session audit log.

    The file lives under CAMPUS_CHAOS_AUDIT_DIR as <timestamp>_<session_id>.log.
    Nothing is written when no audit directory is configured.
    """
    log_path = audit_path(session_id, base_dir)
    if log_path is None:
        return
    record = dict(record)
    record.setdefault("ts", datetime.now(timezone.utc).isoformat())
    record.setdefault("session_id", session_id)
    try:
        os.makedirs(os.path.dirname(log_path), exist_ok=True)
        with open(log_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(record, ensure_ascii=False) + "\n")
    except OSError:
        # audit logging is best-effort
        pass
