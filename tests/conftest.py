import sys
from pathlib import Path

import pytest

# Make package importable
sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from vast_combine.config_loader import resolve_config
from vast_combine.config_schema import CombineOptions
from vast_combine.errors import SubPipelineError
from vast_combine.lib import tools
from vast_combine.lib.paths import CombinePaths, inclusion_table_name
from vast_combine.stages.stage_utils import coverage_key_name


class FakeTools:
    """In-process stand-in for the collaborator scripts.

    ``outputs`` maps a step name to files (relative to cwd) the fake should
    create; ``effects`` maps a step name to a callable(cmd, cwd) run instead;
    ``fail`` names steps that exit non-zero.
    """

    def __init__(self):
        self.calls = []
        self.outputs = {}
        self.effects = {}
        self.fail = set()

    def produce_tables(self, species, n, ir_version=2):
        """Make every sub-pipeline write the table it is expected to write."""
        for tag in ("COMBI", "EXSK", "MULTI", "MIC", "ANNOT", "ALT5", "ALT3"):
            self.outputs[tag] = [f"raw_incl/{inclusion_table_name(tag, species, n)}"]
        self.outputs["IR"] = [f"raw_incl/{inclusion_table_name('IR', species, n, normalized=False)}"]
        self.outputs["IR_COVERAGE"] = [f"to_combine/{coverage_key_name(species, n, ir_version)}"]

    @property
    def names(self):
        return [name for name, _ in self.calls]

    def cmd_for(self, name):
        for n, cmd in self.calls:
            if n == name:
                return cmd
        raise KeyError(name)

    def run_tool(self, cmd, *, name, cwd, log_path=None):
        self.calls.append((name, [str(c) for c in cmd]))
        if name in self.fail:
            raise SubPipelineError(name, cmd, 1)
        if name in self.effects:
            self.effects[name](cmd, Path(cwd))
        for rel in self.outputs.get(name, []):
            p = Path(cwd) / rel
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_text(f"{name}\tchr1:1000-2000\n")
        return 0

    def run_piped(self, cmd, inputs, output, *, name, cwd, log_path=None):
        self.calls.append((name, [str(c) for c in cmd]))
        if name in self.fail:
            # a collaborator that dies mid-stream leaves partial stdout behind
            Path(output).write_text(Path(inputs[0]).read_text() if inputs else "")
            raise SubPipelineError(name, cmd, 1)
        Path(output).write_text("".join(Path(p).read_text() for p in inputs))
        return 0


@pytest.fixture
def fake_tools(monkeypatch):
    fake = FakeTools()
    monkeypatch.setattr(tools, "run_tool", fake.run_tool)
    monkeypatch.setattr(tools, "run_piped", fake.run_piped)
    return fake


@pytest.fixture
def workspace(tmp_path):
    """An output directory plus a VASTDB root holding Hsa, Mmu and Dre."""
    out = tmp_path / "vast_out"
    out.mkdir()
    db_root = tmp_path / "VASTDB"
    for sp in ("Hsa", "Mmu", "Dre"):
        (db_root / sp / "FILES").mkdir(parents=True)
    return tmp_path


@pytest.fixture
def make_cfg(workspace):
    def _make(**kwargs):
        data = {
            "species": "Hsa",
            "output_dir": str(workspace / "vast_out"),
            "db_dir": str(workspace / "VASTDB"),
        }
        data.update(kwargs)
        return resolve_config(CombineOptions(**data))

    return _make


@pytest.fixture
def paths(workspace):
    return CombinePaths((workspace / "vast_out").resolve())


def add_samples(paths, n_exsk=0, n_ir=0, ir_suffix="IR2", n_expr=0):
    """Drop empty per-sample intermediate files into an output directory."""
    paths.to_combine.mkdir(exist_ok=True)
    paths.expr_out.mkdir(exist_ok=True)
    for i in range(n_exsk):
        (paths.to_combine / f"sample{i}.exskX").write_text("")
    for i in range(n_ir):
        (paths.to_combine / f"sample{i}.{ir_suffix}").write_text("")
    for i in range(n_expr):
        (paths.expr_out / f"sample{i}.cRPKM").write_text("")
