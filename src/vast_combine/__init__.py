# src/vast_combine/__init__.py
# ----------------------------
# Top-level package initializer for vast-combine.
# Controls which submodules are exported when doing:
#   from vast_combine import *

__version__ = "2.5.1"

__all__ = [
    "cli",
    "combine",
    "config_loader",
    "config_schema",
    "stages",
]
