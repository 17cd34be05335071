from pathlib import Path

import pytest

from vast_combine.config_loader import load_options, resolve_assembly, resolve_config
from vast_combine.config_schema import CombineOptions
from vast_combine.errors import InvalidConfigError


@pytest.mark.parametrize("species", ["Dre", "Gga", "Bta"])
@pytest.mark.parametrize("requested", [None, "hg38", "mm10", "danRer10"])
def test_other_species_always_native(species, requested):
    assert resolve_assembly(species, requested) == ""


def test_human_defaults_and_choices(make_cfg):
    assert make_cfg().assembly == "hg19"
    assert make_cfg().assembly_suffix == ""
    assert make_cfg(assembly="hg38").assembly_suffix == "-hg38"
    assert make_cfg(assembly="hg38").assembly == "hg38"
    assert make_cfg(assembly="hg19").needs_liftover is False
    assert make_cfg(assembly="hg38").needs_liftover is True


def test_mouse_defaults_and_choices(make_cfg):
    assert make_cfg(species="Mmu").assembly == "mm9"
    cfg = make_cfg(species="Mmu", assembly="mm10")
    assert cfg.assembly_suffix == "-mm10"
    assert cfg.liftover_dictionary.name == "lftOvr_dict_from_mm9_to_mm10.pdat"


@pytest.mark.parametrize("species,bad", [("Hsa", "mm10"), ("Hsa", "hg18"), ("Mmu", "hg38"), ("Hsa", "xhg19")])
def test_wrong_assembly_for_species(make_cfg, species, bad):
    with pytest.raises(InvalidConfigError) as exc:
        make_cfg(species=species, assembly=bad)
    assert exc.value.code == "INVALID_ASSEMBLY"
    assert bad in str(exc.value) and species in str(exc.value)


def test_other_species_ignores_assembly(make_cfg):
    cfg = make_cfg(species="Dre", assembly="hg38")
    assert cfg.assembly == ""
    assert cfg.assembly_suffix == ""
    assert cfg.needs_liftover is False


@pytest.mark.parametrize("version", [0, 3, -1])
def test_ir_version_must_be_1_or_2(make_cfg, version):
    with pytest.raises(InvalidConfigError) as exc:
        make_cfg(ir_version=version)
    assert exc.value.code == "INVALID_PARAMETER"


def test_negative_extra_eej_rejected(make_cfg):
    with pytest.raises(InvalidConfigError) as exc:
        make_cfg(extra_eej=-1)
    assert exc.value.code == "INVALID_PARAMETER"


@pytest.mark.parametrize("species", [None, "", "H sa", "../Hsa"])
def test_species_must_be_a_token(make_cfg, species):
    with pytest.raises(InvalidConfigError) as exc:
        make_cfg(species=species)
    assert exc.value.code == "INVALID_SPECIES"


def test_missing_output_dir(make_cfg, workspace):
    with pytest.raises(InvalidConfigError) as exc:
        make_cfg(output_dir=str(workspace / "nope"))
    assert exc.value.code == "MISSING_OUTPUT_DIR"


def test_missing_database_dir(make_cfg):
    with pytest.raises(InvalidConfigError) as exc:
        make_cfg(species="Gga")
    assert exc.value.code == "MISSING_DATABASE_DIR"


def test_database_dir_is_per_species(make_cfg, workspace):
    cfg = make_cfg(species="Mmu")
    assert cfg.db_dir == (workspace / "VASTDB" / "Mmu").resolve()


def test_db_root_defaults_next_to_bin_dir(workspace):
    bin_dir = workspace / "bin"
    bin_dir.mkdir()
    cfg = resolve_config(
        CombineOptions(species="Hsa", output_dir=str(workspace / "vast_out"), bin_dir=str(bin_dir))
    )
    assert cfg.db_dir == (workspace / "VASTDB" / "Hsa").resolve()
    assert cfg.bin_dir == bin_dir.resolve()


def test_run_config_is_immutable(make_cfg):
    cfg = make_cfg()
    with pytest.raises(Exception):
        cfg.species = "Mmu"


def test_load_options_from_toml(tmp_path: Path):
    cfg_path = tmp_path / "combine.toml"
    cfg_path.write_text(
        """
[combine]
species = "Mmu"
assembly = "mm10"
only_exon_skipping = true
extra_eej = 3
"""
    )
    opts = load_options(cfg_path, overrides={"extra_eej": 7})
    assert opts.species == "Mmu"
    assert opts.assembly == "mm10"
    assert opts.only_exon_skipping is True
    assert opts.extra_eej == 7
    assert opts.ir_version == 2


def test_load_options_rejects_unknown_keys(tmp_path: Path):
    cfg_path = tmp_path / "combine.toml"
    cfg_path.write_text('species = "Hsa"\nunknown_flag = true\n')
    with pytest.raises(InvalidConfigError) as exc:
        load_options(cfg_path)
    assert exc.value.code == "INVALID_PARAMETER"


def test_load_options_rejects_malformed_toml(tmp_path: Path):
    cfg_path = tmp_path / "combine.toml"
    cfg_path.write_text('[combine]\nspecies = "Hsa\n')
    with pytest.raises(InvalidConfigError) as exc:
        load_options(cfg_path)
    assert exc.value.code == "INVALID_PARAMETER"
    assert "combine.toml" in str(exc.value)
