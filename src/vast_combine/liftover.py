from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List

from .config_schema import RunConfig
from .errors import MissingArtifactError, MissingLiftoverDictionaryError
from .lib import tools
from .lib.paths import CombinePaths
from .lib.tools import resolve_tool


logger = logging.getLogger(__name__)

LIFTOVER_SCRIPT = "LftOvr_INCLUSION_LEVELS_FULL.pl"
LIFTOVER_STEP = "LIFTOVER"


def liftover_dictionary(cfg: RunConfig) -> Path:
    """Return the dictionary for ``cfg.assembly``, failing loudly if it is absent."""
    path = cfg.liftover_dictionary
    if path is None:
        raise ValueError(f"No liftover from the native assembly to '{cfg.assembly}'")
    if not path.exists():
        raise MissingLiftoverDictionaryError(path)
    return path


def build_liftover_cmd(cfg: RunConfig, table: Path, dictionary: Path, output: Path) -> List[str]:
    return [
        resolve_tool(LIFTOVER_SCRIPT, cfg.bin_dir),
        "translate",
        str(table),
        str(dictionary),
        str(output),
    ]


def lift_over_final_table(cfg: RunConfig, table: Path, paths: CombinePaths) -> Path:
    """Translate ``table`` coordinates to ``cfg.assembly`` in place.

    The transformed table is written next to the original and renamed over it,
    so the visible final table is never half written.
    """
    dictionary = liftover_dictionary(cfg)
    lifted = table.with_name(table.name + ".lifted")
    logger.info("Lifting over %s to %s", table.name, cfg.assembly)
    try:
        tools.run_tool(
            build_liftover_cmd(cfg, table, dictionary, lifted),
            name=LIFTOVER_STEP,
            cwd=paths.output_dir,
            log_path=paths.tool_log(LIFTOVER_STEP),
        )
    except Exception:
        lifted.unlink(missing_ok=True)
        raise
    if not lifted.exists():
        raise MissingArtifactError(lifted, stage=LIFTOVER_STEP)
    os.replace(lifted, table)
    return table
