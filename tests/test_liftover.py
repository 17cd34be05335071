from pathlib import Path

import pytest

from vast_combine.errors import MissingLiftoverDictionaryError, SubPipelineError
from vast_combine.liftover import build_liftover_cmd, lift_over_final_table, liftover_dictionary


def _translate(cmd, cwd):
    _, mode, table, _dictionary, output = cmd
    assert mode == "translate"
    Path(output).write_text(Path(table).read_text().replace("chr1:1000-2000", "chr1:1500-2500"))


def test_dictionary_selected_from_assembly(make_cfg, workspace):
    cfg = make_cfg(assembly="hg38")
    expected = workspace / "VASTDB" / "Hsa" / "FILES" / "lftOvr_dict_from_hg19_to_hg38.pdat"
    expected.write_text("")
    assert liftover_dictionary(cfg) == expected.resolve()


def test_missing_dictionary_is_fatal(make_cfg, paths, fake_tools):
    cfg = make_cfg(species="Mmu", assembly="mm10")
    table = paths.output_dir / "INCLUSION_LEVELS_FULL-Mmu5-mm10.tab"
    table.write_text("chr1:1000-2000\n")
    with pytest.raises(MissingLiftoverDictionaryError) as exc:
        lift_over_final_table(cfg, table, paths)
    assert exc.value.path.name == "lftOvr_dict_from_mm9_to_mm10.pdat"
    assert fake_tools.calls == []


def test_liftover_replaces_table(make_cfg, paths, fake_tools):
    cfg = make_cfg(species="Mmu", assembly="mm10")
    cfg.liftover_dictionary.write_text("")
    paths.bootstrap()
    table = paths.output_dir / "INCLUSION_LEVELS_FULL-Mmu5-mm10.tab"
    table.write_text("EVENT\tchr1:1000-2000\n")
    fake_tools.effects["LIFTOVER"] = _translate

    assert lift_over_final_table(cfg, table, paths) == table
    assert table.read_text() == "EVENT\tchr1:1500-2500\n"
    assert not table.with_name(table.name + ".lifted").exists()
    cmd = fake_tools.cmd_for("LIFTOVER")
    assert cmd == build_liftover_cmd(cfg, table, cfg.liftover_dictionary, table.with_name(table.name + ".lifted"))


def test_failed_liftover_keeps_original(make_cfg, paths, fake_tools):
    cfg = make_cfg(assembly="hg38")
    cfg.liftover_dictionary.write_text("")
    paths.bootstrap()
    table = paths.output_dir / "INCLUSION_LEVELS_FULL-Hsa2-hg38.tab"
    table.write_text("EVENT\tchr1:1000-2000\n")

    def _half_write(cmd, cwd):
        Path(cmd[-1]).write_text("EVENT\tchr1:15")
        raise SubPipelineError("LIFTOVER", cmd, 2)

    fake_tools.effects["LIFTOVER"] = _half_write
    with pytest.raises(SubPipelineError):
        lift_over_final_table(cfg, table, paths)
    assert table.read_text() == "EVENT\tchr1:1000-2000\n"
    assert not table.with_name(table.name + ".lifted").exists()
