from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from pathlib import Path


# Species with a choice of output coordinates: native assembly first.
SPECIES_ASSEMBLIES = {
    "Hsa": ("hg19", "hg38"),
    "Mmu": ("mm9", "mm10"),
}

# Non-native target assembly -> liftover dictionary shipped under <db>/FILES.
LIFTOVER_DICTIONARIES = {
    "hg38": "lftOvr_dict_from_hg19_to_hg38.pdat",
    "mm10": "lftOvr_dict_from_mm9_to_mm10.pdat",
}

# Read length token every collaborator is called with.
GLOBAL_TOKEN_LENGTH = 50


class CombineOptions(BaseModel):
    """Raw combine options, as given on the command line or in a TOML file."""

    model_config = ConfigDict(extra="forbid")

    species: Optional[str] = None
    assembly: Optional[str] = None
    db_dir: Optional[str] = None
    bin_dir: Optional[str] = None
    output_dir: str = "vast_out"

    skip_intron_retention: bool = False
    only_intron_retention: bool = False
    only_exon_skipping: bool = False
    skip_annotation: bool = False
    only_expression: bool = False
    skip_expression: bool = False
    use_all_exclusion_junctions: bool = False
    counts_in_expression: bool = False
    normalize_expression: bool = False
    install_normalization_dependency: bool = False
    compress: bool = False
    verbose: bool = True

    extra_eej: int = 5
    ir_version: int = 2

    @field_validator("species", "assembly", "db_dir", "bin_dir", mode="before")
    def _blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v


class RunConfig(BaseModel):
    """Validated, immutable configuration for one combine run."""

    model_config = ConfigDict(frozen=True)

    species: str
    # "" means the pipeline's native coordinates (no choice for the species)
    assembly: str = ""
    db_dir: Path
    output_dir: Path
    bin_dir: Optional[Path] = None

    skip_intron_retention: bool = False
    only_intron_retention: bool = False
    only_exon_skipping: bool = False
    skip_annotation: bool = False
    only_expression: bool = False
    skip_expression: bool = False
    use_all_exclusion_junctions: bool = False
    counts_in_expression: bool = False
    normalize_expression: bool = False
    install_normalization_dependency: bool = False
    compress: bool = False
    verbose: bool = True

    extra_eej: int = Field(default=5, ge=0)
    ir_version: int = 2
    token_length: int = GLOBAL_TOKEN_LENGTH

    @property
    def native_assembly(self) -> str:
        return SPECIES_ASSEMBLIES.get(self.species, ("",))[0]

    @property
    def assembly_suffix(self) -> str:
        """Filename fragment for the output coordinates: "" for native coordinates, else "-<assembly>"."""
        if not self.assembly or self.assembly == self.native_assembly:
            return ""
        return f"-{self.assembly}"

    @property
    def needs_liftover(self) -> bool:
        return self.assembly in LIFTOVER_DICTIONARIES

    @property
    def liftover_dictionary(self) -> Optional[Path]:
        name = LIFTOVER_DICTIONARIES.get(self.assembly)
        return self.db_dir / "FILES" / name if name else None
