# src/vast_combine/stages/stage_utils.py
# -------------------------------------
# shared helpers for the sub-pipeline Stage* classes.

from __future__ import annotations
from typing import Iterable, List

from ..config_schema import RunConfig
from ..lib.tools import resolve_tool


# IR analysis version -> infix used by its scripts and coverage key files
IR_VERSION_INFIX = {1: "", 2: "_v2"}


def flag(value: bool) -> str:
    """Render a boolean the way the collaborator scripts expect it."""
    return "1" if value else "0"


def make_vast_cmd(
    script: str,
    cfg: RunConfig,
    *,
    extra: Iterable[str] | None = None,
) -> List[str]:
    """Return a collaborator command with the common -sp/-dbDir/-len/-verbose options."""
    cmd: List[str] = [
        resolve_tool(script, cfg.bin_dir),
        f"-sp={cfg.species}",
        f"-dbDir={cfg.db_dir}",
        f"-len={cfg.token_length}",
        f"-verbose={flag(cfg.verbose)}",
    ]
    if extra:
        cmd.extend(extra)
    return cmd


def coverage_key_name(species: str, n: int, ir_version: int) -> str:
    return f"Coverage_key{IR_VERSION_INFIX[ir_version]}-{species}{n}.IRQ"
