# src/vast_combine/lib/paths.py
# -----------------------------
# Utilities for constructing the file paths a combine run reads and writes.
# CombinePaths encapsulates the layout of an align/combine output directory;
# the module-level helpers encode the output file naming grammar that
# downstream tooling depends on.

from __future__ import annotations
from pathlib import Path  # for filesystem path operations
import os


COMMAND_LOG_NAME = "VTS_LOG_commands.txt"
RUN_LOG_NAME = "combine_run.log"


def format_path(p: Path, root: Path | None = None) -> str:
    """Return a user-friendly string for ``p``.

    Paths inside ``root`` are rendered relative to it; otherwise ``os.path.relpath``
    is used. The current user's home directory is collapsed to ``~``.
    """
    p = Path(p).expanduser()
    if root is not None:
        try:
            p = p.resolve().relative_to(Path(root).resolve())
        except ValueError:
            p = Path(os.path.relpath(p, root))
    home = Path.home()
    try:
        p = Path("~") / p.relative_to(home)
    except ValueError:
        pass
    return str(p)


def inclusion_table_name(tag: str, species: str, n: int, normalized: bool = True) -> str:
    """``INCLUSION_LEVELS_<TAG>-<sp><N>[-n].tab`` for one sub-pipeline table."""
    suffix = "-n" if normalized else ""
    return f"INCLUSION_LEVELS_{tag}-{species}{n}{suffix}.tab"


def final_table_name(species: str, n: int, assembly_suffix: str = "") -> str:
    return f"INCLUSION_LEVELS_FULL-{species}{n}{assembly_suffix}.tab"


def expression_table_names(species: str, m: int) -> dict[str, str]:
    """Names of the (up to three) cRPKM summary tables for ``m`` samples."""
    return {
        "crpkm": f"cRPKM-{species}{m}.tab",
        "counts": f"cRPKM_AND_COUNTS-{species}{m}.tab",
        "norm": f"cRPKM-{species}{m}-NORM.tab",
    }


class CombinePaths:
    """
    Canonical directories and files inside one output directory:
      - to_combine: per-sample splicing intermediates written by align
      - expr_out:   per-sample cRPKM files written by align
      - raw_incl:   per-pipeline inclusion tables written during combine
      - raw_reads:  per-pipeline read count tables written during combine

    The final tables are written directly into ``output_dir``.
    """

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir).expanduser().resolve()

    @property
    def to_combine(self) -> Path:
        return self.output_dir / "to_combine"

    @property
    def expr_out(self) -> Path:
        return self.output_dir / "expr_out"

    @property
    def raw_incl(self) -> Path:
        return self.output_dir / "raw_incl"

    @property
    def raw_reads(self) -> Path:
        return self.output_dir / "raw_reads"

    @property
    def command_log(self) -> Path:
        return self.output_dir / COMMAND_LOG_NAME

    @property
    def run_log(self) -> Path:
        return self.output_dir / RUN_LOG_NAME

    @property
    def tool_log_dir(self) -> Path:
        return self.output_dir / "combine_logs"

    def tool_log(self, name: str) -> Path:
        """Path capturing stdout/stderr of the collaborator run for ``name``."""
        return self.tool_log_dir / f"{name}.log"

    def bootstrap(self) -> None:
        """Create the working sub-folders combine writes into."""
        for d in (self.raw_incl, self.raw_reads, self.tool_log_dir):
            d.mkdir(exist_ok=True)
