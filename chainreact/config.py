"""
Configuration - Environment-driven settings.

All values are read once at import time. Hosts override them by
exporting the variables before the process starts.
"""

import os

CHAINREACT_ENV = os.getenv("CHAINREACT_ENV", "development")

# Loop-safety bound for cascade resolution
MAX_CASCADE_ROUNDS = int(os.getenv("CHAINREACT_MAX_CASCADE_ROUNDS", "100"))

# AI level used when a request does not name one (1-5)
DEFAULT_DIFFICULTY = int(os.getenv("CHAINREACT_DEFAULT_DIFFICULTY", "3"))

# Number of snapshots kept per game session for undo
UNDO_DEPTH = int(os.getenv("CHAINREACT_UNDO_DEPTH", "10"))

LOG_LEVEL = os.getenv("CHAINREACT_LOG_LEVEL", "INFO").upper()

ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")
