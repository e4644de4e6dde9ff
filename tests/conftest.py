import enum
import json
import types

import pytest

from playground.playground_catalog import CatalogLoader
from playground.playground_config import PlaygroundConfig
from playground.playground_gateway import EvaluationGateway
from playground.playground_runtime import Playground


class ExecResultStatus(enum.Enum):
    Ok = 0
    Err = 1


class ExecResult:
    def __init__(self, status, value, output=None):
        self.status = status
        self._value = value
        self._output = output

    def get_value(self):
        return self._value


class ExecResultWithOutput(ExecResult):
    def get_output(self):
        return self._output


def make_module(evaluate, *, with_output=False):
    """
    Build a fake evaluation module. `evaluate(program)` returns ('ok', value),
    ('ok', value, output) or ('err', message).
    """
    calls = []

    def exec_(program):
        calls.append(program)
        tag, value, *rest = evaluate(program)
        status = ExecResultStatus.Ok if tag == 'ok' else ExecResultStatus.Err
        cls = ExecResultWithOutput if with_output else ExecResult
        return cls(status, value, rest[0] if rest else None)

    return types.SimpleNamespace(exec=exec_, ExecResultStatus=ExecResultStatus, calls=calls)


def write_examples(root, examples):
    """Write an examples tree: examples is a list of (name, file, contents)."""
    root.mkdir(parents=True, exist_ok=True)
    manifest = [{"name": name, "file": file} for name, file, _ in examples]
    (root / "index.json").write_text(json.dumps(manifest), encoding="utf-8")
    for _, file, contents in examples:
        (root / file).write_text(contents, encoding="utf-8")
    return root


@pytest.fixture
def examples_root(tmp_path):
    return write_examples(tmp_path / "examples", [
        ("Identity", "id.rufus", "fun x -> x"),
        ("Twice", "twice.rufus", "let twice = fun f x -> f (f x) in\ntwice"),
    ])


def make_playground(examples_root, module=None, loader=None):
    config = PlaygroundConfig(examples_root=str(examples_root))
    if loader is None:
        loader = (lambda: module) if module is not None else _failing_loader
    gateway = EvaluationGateway(loader=loader)
    return Playground(config, gateway=gateway, catalog=CatalogLoader(config))


def _failing_loader():
    raise ModuleNotFoundError("No module named 'rufus_wasm'")
