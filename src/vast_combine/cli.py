# src/vast_combine/cli.py

import sys
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import click
from click.core import ParameterSource

from . import __version__
from .combine import run_combine
from .config_loader import load_options, options_from_mapping, resolve_config
from .errors import CombineError
from .lib.logging import setup_run_logging
from .lib.paths import RUN_LOG_NAME, format_path


logger = logging.getLogger(__name__)

ERROR_PREFIX = "[vast combine error]"

# CLI parameter names that map one-to-one onto CombineOptions fields
_OPTION_PARAMS = (
    "output_dir",
    "species",
    "assembly",
    "db_dir",
    "bin_dir",
    "compress",
    "verbose",
    "skip_intron_retention",
    "only_intron_retention",
    "only_exon_skipping",
    "skip_annotation",
    "ir_version",
    "extra_eej",
    "use_all_exclusion_junctions",
    "only_expression",
    "skip_expression",
    "counts_in_expression",
    "normalize_expression",
    "install_normalization_dependency",
)


# ────────────────────────── helpers ──────────────────────────
def _explicit_params(ctx: click.Context, params: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only the parameters the user actually supplied."""
    explicit = {}
    for name in _OPTION_PARAMS:
        source = ctx.get_parameter_source(name)
        if source in (ParameterSource.COMMANDLINE, ParameterSource.ENVIRONMENT):
            explicit[name] = params[name]
    return explicit


def build_options(ctx: click.Context, params: Dict[str, Any], config_file: Optional[Path]):
    """Merge a TOML config file (if any) with command line options; CLI wins."""
    if config_file is not None:
        return load_options(config_file, overrides=_explicit_params(ctx, params))
    given = {k: params[k] for k in _OPTION_PARAMS if params[k] is not None}
    return options_from_mapping(given)


def _fail(message: str) -> None:
    click.echo(f"{ERROR_PREFIX}: {message}", err=True)
    sys.exit(1)


# ────────────────────────── command ──────────────────────────
@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-o", "--output", "output_dir", default="vast_out", show_default=True,
              help="Output directory to combine samples from. Must contain the "
                   "sub-folders to_combine or expr_out from align steps.")
@click.option("-sp", "species", default=None, help="Species selection, e.g. Hsa, Mmu (mandatory).")
@click.option("-a", "assembly", default=None,
              help="Genome assembly of the output coordinates (only for Hsa: hg19/hg38, "
                   "default hg19; Mmu: mm9/mm10, default mm9). Non-native choices are lifted over.")
@click.option("--dbDir", "db_dir", default=None, help="Database directory (default VASTDB).")
@click.option("--bin-dir", "bin_dir", default=None, envvar="VAST_COMBINE_BIN",
              help="Directory holding the quantification scripts (default: search PATH).")
@click.option("-z", "compress", is_flag=True, default=False, help="Compress all output files using gzip.")
@click.option("-v/-q", "--verbose/--quiet", "verbose", default=True, show_default=True,
              help="Verbose messages.")
@click.option("--noIR", "skip_intron_retention", is_flag=True, default=False,
              help="Don't run intron retention pipeline.")
@click.option("--onlyIR", "only_intron_retention", is_flag=True, default=False,
              help="Only run intron retention pipeline.")
@click.option("--onlyEX", "only_exon_skipping", is_flag=True, default=False,
              help="Only run the exon skipping pipelines.")
@click.option("--noANNOT", "skip_annotation", is_flag=True, default=False,
              help="Don't use exons quantified directly from annotation.")
@click.option("--IR_version", "ir_version", type=int, default=2, show_default=True,
              help="Version of the IR analysis (1 or 2).")
@click.option("--extra_eej", "extra_eej", type=int, default=5, show_default=True,
              help="Use +/- extra_eej neighboring junctions to calculate skipping in "
                   "ANNOT and splice-site-based modules.")
@click.option("--use_all_excl_eej", "use_all_exclusion_junctions", is_flag=True, default=False,
              help="Use all exclusion EEJs (within extra_eej limit) in ss-based module.")
@click.option("--exprONLY", "only_expression", is_flag=True, default=False,
              help="Only create gene expression tables.")
@click.option("--no_expr", "skip_expression", is_flag=True, default=False,
              help="Do not create gene expression tables.")
@click.option("-C", "counts_in_expression", is_flag=True, default=False,
              help="Also create a cRPKM plus read counts summary table.")
@click.option("--norm", "normalize_expression", is_flag=True, default=False,
              help="Also create a cRPKM table normalized with limma's normalizeBetweenArrays.")
@click.option("--install_limma", "install_normalization_dependency", is_flag=True, default=False,
              help="Install limma if needed for normalization.")
@click.option("--config", "config_file", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              default=None, help="TOML file with a [combine] table of options.")
@click.version_option(__version__, prog_name="vast-combine")
@click.pass_context
def main(ctx: click.Context, config_file: Optional[Path], **params) -> None:
    """Combine multiple samples analyzed using "vast-tools align" into a single summary table."""
    try:
        options = build_options(ctx, params, config_file)
        cfg = resolve_config(options)
    except CombineError as e:
        _fail(str(e))

    setup_run_logging(cfg.output_dir / RUN_LOG_NAME, mode="a", verbose=cfg.verbose)
    logger.info("Loading options%s", f" from {config_file}" if config_file else "")

    try:
        summary = run_combine(cfg)
    except CombineError as e:
        logger.error("Combine failed: %s", e)
        _fail(str(e))

    if summary.final_table is not None:
        click.echo(f"Final table: {click.style(format_path(summary.final_table), fg='cyan')}")
    if summary.expression is not None:
        for path in summary.expression.tables.values():
            click.echo(f"Expression table: {click.style(format_path(path), fg='cyan')}")
    logger.info("Completed")
    sys.exit(0)


if __name__ == "__main__":  # pragma: no cover
    main()
