import re
from typing import Dict, Optional

from campus_chaos.config import _dbg
from campus_chaos.errors import AlreadyActive, DuplicateId, NotAlphanumericId, OutOfPlayerRange
from campus_chaos.schemas import SessionCreateRequest
from campus_chaos.services.grid import Grid
from campus_chaos.services.session import Session
from campus_chaos.utils.audit import audit_write
from campus_chaos.utils.maploader import read_map_rows

_SESSION_ID_RE = re.compile(r"[A-Za-z0-9]+")


class SessionStore:
    """All sessions of the process, at most one of them active.

    Unknown session ids raise KeyError.
    """
    def __init__(self) -> None:
        self._sessions: Dict[str, Session] = {}
        self.active_id: Optional[str] = None

    def create(self, req: SessionCreateRequest) -> Session:
        rows = read_map_rows(req.map_path)
        grid = Grid.from_rows(rows)
        return self.create_session(req.session_id, grid, req.players, req.seed, map_path=req.map_path)

    def create_session(self,
                       session_id: str,
                       grid: Grid,
                       players: int,
                       seed: Optional[int] = None,
                       map_path: str = "",
                      ) -> Session:
        if not _SESSION_ID_RE.fullmatch(session_id):
            raise NotAlphanumericId(grid=grid)
        if session_id in self._sessions:
            raise DuplicateId(grid=grid)
        if seed is not None and seed < 0:
            raise OutOfPlayerRange(grid=grid)
        sess = Session(session_id=session_id, grid=grid, players=players, seed=seed, map_path=map_path)
        self._sessions[session_id] = sess
        self.active_id = session_id
        _dbg(f"[store] created {session_id} players={players} seed={seed}")
        audit_write(session_id, {
            "type": "session_start",
            "map": map_path,
            "players": sess.letters,
            "seed": seed,
            "rows": grid.render(),
        })
        return sess

    @property
    def active(self) -> Optional[Session]:
        if self.active_id is None:
            return None
        return self._sessions.get(self.active_id)

    def get(self, session_id: str) -> Session:
        return self._sessions[session_id]

    def sessions(self) -> list[Session]:
        return list(self._sessions.values())

    def __len__(self) -> int:
        return len(self._sessions)

    def delete(self, session_id: str) -> None:
        del self._sessions[session_id]
        if self.active_id == session_id:
            self.active_id = None
        audit_write(session_id, {"type": "session_delete"})

    def switch(self, session_id: str) -> Session:
        sess = self._sessions[session_id]
        if self.active_id == session_id:
            raise AlreadyActive()
        self.active_id = session_id
        return sess

    def describe(self, session_id: Optional[str] = None) -> list[str]:
        if session_id is not None:
            sess = self.get(session_id)
            return [sess.describe(active=session_id == self.active_id)]
        return [s.describe(active=s.session_id == self.active_id) for s in self._sessions.values()]
