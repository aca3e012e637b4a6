"""
RUNTIME CONFIGURATION

All settings come from environment variables with safe defaults.

Variables:
- NURSE_ROSTER_DATA_DIR: directory holding the state file (default: data)
- NURSE_ROSTER_STATE_FILE: state file name (default: roster_state.json)
- LOG_LEVEL: root log level for the Streamlit app (default: INFO)
"""

import os
from pathlib import Path

DATA_DIR = Path(os.getenv("NURSE_ROSTER_DATA_DIR", "data"))
STATE_FILE_NAME = os.getenv("NURSE_ROSTER_STATE_FILE", "roster_state.json")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def state_file_path() -> Path:
    """Default location of the persisted roster record."""
    return DATA_DIR / STATE_FILE_NAME
