from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import List, Optional

from ..config_schema import RunConfig


# (RunConfig attribute, flag recorded in the command log)
_LOGGED_FLAGS = (
    ("skip_intron_retention", "-noIR"),
    ("only_intron_retention", "-onlyIR"),
    ("only_exon_skipping", "-onlyEX"),
    ("skip_annotation", "-noANNOT"),
    ("use_all_exclusion_junctions", "-use_all_excl_eej"),
    ("only_expression", "-exprONLY"),
    ("skip_expression", "-no_expr"),
    ("counts_in_expression", "-C"),
    ("normalize_expression", "-norm"),
    ("install_normalization_dependency", "-install_limma"),
    ("compress", "-z"),
)


def format_command_args(cfg: RunConfig) -> str:
    """Render the resolved options the way they would be typed on the command line."""
    parts: List[str] = [
        f"-sp {cfg.species}",
        f"-o {cfg.output_dir}",
        f"-IR_version {cfg.ir_version}",
        f"-extra_eej {cfg.extra_eej}",
    ]
    if cfg.assembly:
        parts.append(f"-a {cfg.assembly}")
    parts.extend(flag for attr, flag in _LOGGED_FLAGS if getattr(cfg, attr))
    return " ".join(parts)


def format_timestamp(now: datetime) -> str:
    return now.strftime("%Y-%m-%d (%H:%M)")


def append_command_log(
    log_path: Path, cfg: RunConfig, version: str, now: Optional[datetime] = None
) -> str:
    """Append one line describing this run to the persistent command log."""
    now = now or datetime.now()
    line = f"[VAST-TOOLS v{version}, {format_timestamp(now)}] vast-tools combine {format_command_args(cfg)}"
    with open(log_path, "a") as fh:
        fh.write(line + "\n")
    return line
