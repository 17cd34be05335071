import logging
import re
import tomllib
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from .config_schema import CombineOptions, RunConfig, SPECIES_ASSEMBLIES
from .errors import InvalidConfigError


logger = logging.getLogger(__name__)

_SPECIES_RE = re.compile(r"^[A-Za-z0-9_]+$")


def _parse_options(data: Mapping[str, Any], source: str) -> CombineOptions:
    try:
        return CombineOptions.model_validate(dict(data))
    except ValidationError as e:
        raise InvalidConfigError("INVALID_PARAMETER", f"Invalid options in {source}: {e}") from e


def load_options(path: str | Path, overrides: Optional[Mapping[str, Any]] = None) -> CombineOptions:
    """Read the ``[combine]`` table of a TOML file, then apply ``overrides``.

    Keys at the top level are accepted too, for one-table files.
    """
    try:
        with open(path, "rb") as fh:
            data = tomllib.load(fh)
    except tomllib.TOMLDecodeError as e:
        raise InvalidConfigError("INVALID_PARAMETER", f"Could not parse {path}: {e}") from e
    table: Dict[str, Any] = dict(data.get("combine", data))
    table.update(overrides or {})
    return _parse_options(table, str(path))


def options_from_mapping(data: Mapping[str, Any]) -> CombineOptions:
    return _parse_options(data, "command line")


def resolve_assembly(species: str, requested: Optional[str]) -> str:
    """Return the output assembly for ``species``.

    Species without an assembly choice always resolve to "" (native
    coordinates), whatever was requested.
    """
    choices = SPECIES_ASSEMBLIES.get(species)
    if choices is None:
        if requested:
            logger.info("Ignoring assembly %s: not applicable for species %s", requested, species)
        return ""
    if requested is None:
        return choices[0]
    if requested not in choices:
        raise InvalidConfigError(
            "INVALID_ASSEMBLY",
            f"Specified assembly {requested} either unknown or inapplicable for species {species}",
        )
    return requested


def _default_db_root(bin_dir: Optional[Path]) -> Path:
    if bin_dir is not None:
        return bin_dir.parent / "VASTDB"
    return Path("VASTDB")


def resolve_config(options: CombineOptions) -> RunConfig:
    """Validate raw options and build the immutable RunConfig."""
    species = options.species
    if not species or not _SPECIES_RE.match(species):
        raise InvalidConfigError("INVALID_SPECIES", "Needs species 3-letter key (e.g. -sp Hsa)")

    assembly = resolve_assembly(species, options.assembly)

    if options.ir_version not in (1, 2):
        raise InvalidConfigError("INVALID_PARAMETER", "IR version must be either 1 or 2.")
    if options.extra_eej < 0:
        raise InvalidConfigError("INVALID_PARAMETER", "extra_eej must be zero or a positive integer.")

    output_dir = Path(options.output_dir).expanduser()
    if not output_dir.is_dir():
        raise InvalidConfigError(
            "MISSING_OUTPUT_DIR", f"The output directory {output_dir} does not exist"
        )

    bin_dir = Path(options.bin_dir).expanduser().resolve() if options.bin_dir else None
    db_root = Path(options.db_dir).expanduser() if options.db_dir else _default_db_root(bin_dir)
    db_dir = db_root.resolve() / species
    if not db_dir.is_dir():
        raise InvalidConfigError(
            "MISSING_DATABASE_DIR", f"The database directory {db_dir} does not exist"
        )

    return RunConfig(
        species=species,
        assembly=assembly,
        db_dir=db_dir,
        output_dir=output_dir.resolve(),
        bin_dir=bin_dir,
        skip_intron_retention=options.skip_intron_retention,
        only_intron_retention=options.only_intron_retention,
        only_exon_skipping=options.only_exon_skipping,
        skip_annotation=options.skip_annotation,
        only_expression=options.only_expression,
        skip_expression=options.skip_expression,
        use_all_exclusion_junctions=options.use_all_exclusion_junctions,
        counts_in_expression=options.counts_in_expression,
        normalize_expression=options.normalize_expression,
        install_normalization_dependency=options.install_normalization_dependency,
        compress=options.compress,
        verbose=options.verbose,
        extra_eej=options.extra_eej,
        ir_version=options.ir_version,
    )
