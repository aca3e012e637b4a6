# nurse_roster/storage/state_store.py

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Union

from nurse_roster.config import state_file_path

logger = logging.getLogger(__name__)

_LOCK = threading.Lock()

PathLike = Union[str, Path]

# Shape of a fresh roster record
EMPTY_STATE: Dict[str, Any] = {
    "nurses": [],
    "duties": [],
    "requests": [],
    "currentUserId": None,
}


def _resolve(path: Optional[PathLike]) -> Path:
    return Path(path) if path is not None else state_file_path()


# ==================================================
# WRITE STATE (ATOMIC)
# ==================================================

def write_state(data: Dict[str, Any], path: Optional[PathLike] = None) -> None:
    """
    Atomically replace the persisted roster record.

    - Thread-safe
    - Crash-safe (temp file + replace)
    """
    target = _resolve(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = target.with_name(f"{target.name}.tmp")

    with _LOCK:
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

        os.replace(tmp_path, target)


# ==================================================
# READ STATE (SAFE)
# ==================================================

def read_state(path: Optional[PathLike] = None) -> Dict[str, Any]:
    """
    Read the persisted roster record.

    Returns:
    - Parsed record
    - A fresh empty record if the file does not exist or is unreadable
    """
    target = _resolve(path)

    if not target.exists():
        return dict(EMPTY_STATE)

    try:
        with open(target, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        # Never break the UI due to state corruption
        logger.error("Could not read roster state from %s: %s", target, e)
        return dict(EMPTY_STATE)

    if not isinstance(data, dict):
        logger.error("Roster state in %s is not an object, ignoring it", target)
        return dict(EMPTY_STATE)

    return {**EMPTY_STATE, **data}
