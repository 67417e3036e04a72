from __future__ import annotations

import time
import uuid


def new_id(prefix: str = "id") -> str:
    """Return ``<prefix>_<epoch-ms>_<random>``.

    Unique with overwhelming probability inside one process; collisions are
    neither detected nor retried.
    """
    return f"{prefix}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:6]}"
