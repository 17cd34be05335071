import gzip
from datetime import datetime

import pytest

from vast_combine.errors import SubPipelineError
from vast_combine.lib.command_log import append_command_log
from vast_combine.lib.compress import gzip_files
from vast_combine.lib.tools import resolve_tool, run_piped, run_tool


def test_run_tool_captures_output(tmp_path):
    log = tmp_path / "tool.log"
    code = run_tool(["sh", "-c", "echo hello; pwd -P"], name="ECHO", cwd=tmp_path, log_path=log)
    assert code == 0
    lines = log.read_text().splitlines()
    assert lines[0] == "hello"
    assert lines[1] == str(tmp_path.resolve())


def test_run_tool_raises_on_failure(tmp_path):
    with pytest.raises(SubPipelineError) as exc:
        run_tool(["sh", "-c", "exit 3"], name="BOOM", cwd=tmp_path, log_path=tmp_path / "b.log")
    assert exc.value.stage == "BOOM"
    assert exc.value.returncode == 3
    assert "exit 3" in str(exc.value)


def test_run_tool_missing_executable(tmp_path):
    with pytest.raises(SubPipelineError) as exc:
        run_tool([str(tmp_path / "no_such_script.pl")], name="MISSING", cwd=tmp_path)
    assert exc.value.returncode is None


def test_run_piped_concatenates_inputs(tmp_path):
    a = tmp_path / "a.tab"
    b = tmp_path / "b.tab"
    a.write_text("row1\n")
    b.write_text("row2\nrow3\n")
    out = tmp_path / "out.tab"
    run_piped(["cat"], [a, b], out, name="CAT", cwd=tmp_path, log_path=tmp_path / "cat.log")
    assert out.read_text() == "row1\nrow2\nrow3\n"


def test_run_piped_failure(tmp_path):
    a = tmp_path / "a.tab"
    a.write_text("row1\n")
    with pytest.raises(SubPipelineError):
        run_piped(["sh", "-c", "exit 1"], [a], tmp_path / "out.tab", name="FULL", cwd=tmp_path)


def test_resolve_tool(tmp_path):
    assert resolve_tool("Add_to_FULL.pl") == "Add_to_FULL.pl"
    assert resolve_tool("Add_to_FULL.pl", tmp_path) == str(tmp_path / "Add_to_FULL.pl")


def test_gzip_files(tmp_path):
    a = tmp_path / "a.tab"
    a.write_text("data\n")
    already = tmp_path / "b.tab.gz"
    already.write_bytes(gzip.compress(b"x"))
    out = gzip_files([a, already, tmp_path / "missing.tab"])
    assert out == [tmp_path / "a.tab.gz"]
    assert not a.exists()
    with gzip.open(out[0], "rt") as fh:
        assert fh.read() == "data\n"


def test_command_log_appends(make_cfg, paths):
    cfg = make_cfg(assembly="hg38", skip_annotation=True, counts_in_expression=True)
    when = datetime(2024, 3, 7, 9, 5)
    append_command_log(paths.command_log, cfg, "2.5.1", now=when)
    append_command_log(paths.command_log, cfg, "2.5.1", now=when)
    lines = paths.command_log.read_text().splitlines()
    assert len(lines) == 2
    assert lines[0].startswith("[VAST-TOOLS v2.5.1, 2024-03-07 (09:05)] vast-tools combine -sp Hsa")
    assert "-IR_version 2 -extra_eej 5 -a hg38 -noANNOT -C" in lines[0]
