import os
import sys
from typing import Optional

from pydantic import BaseModel


class Settings(BaseModel):
    debug: bool = False
    audit_dir: Optional[str] = None

    @classmethod
    def from_env(cls) -> 'Settings':
        # tracing is on when CAMPUS_CHAOS_DEBUG is set or when running under a test runner
        debug = (
            bool(os.getenv('CAMPUS_CHAOS_DEBUG'))
            or ('unittest' in sys.modules)
            or ('PYTEST_CURRENT_TEST' in os.environ)
        )
        audit_dir = os.getenv('CAMPUS_CHAOS_AUDIT_DIR') or None
        return cls(debug=debug, audit_dir=audit_dir)


settings = Settings.from_env()


def _dbg(*args, **kwargs):
    if settings.debug:
        print(*args, file=sys.stderr, **kwargs)
