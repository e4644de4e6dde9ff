from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

DEFAULT_EXAMPLES_ROOT = "./examples"
DEFAULT_MODULE = "rufus_wasm"
EDITOR_ROWS = 15


@dataclass(frozen=True)
class PlaygroundConfig:
    """Settings for one playground host."""
    examples_root: str = DEFAULT_EXAMPLES_ROOT
    module: str = DEFAULT_MODULE
    default_program: str = ""
    editor_rows: int = EDITOR_ROWS
    http: Dict[str, Any] = field(default_factory=lambda: {"timeout": None, "headers": {}})
    # Directory that relative examples roots resolve against; the config file's directory when loaded from one.
    base_dir: Optional[str] = None

    @property
    def manifest_locator(self) -> str:
        return join_locator(self.examples_root, "index.json")


def join_locator(root: str, name: str) -> str:
    if not root:
        return name
    return root.rstrip("/") + "/" + name.lstrip("/")


def _normalize_keys(cfg: Dict[str, Any]) -> Dict[str, Any]:
    known = {f.name for f in fields(PlaygroundConfig)}
    out: Dict[str, Any] = {}
    for key, value in cfg.items():
        name = str(key).replace("-", "_")
        if name not in known:
            raise ValueError(f"Unknown config key: {key!r}")
        out[name] = value
    return out


def _validate(config: PlaygroundConfig) -> PlaygroundConfig:
    if not isinstance(config.examples_root, str):
        raise ValueError("examples-root must be a string")
    if not isinstance(config.module, str) or not config.module:
        raise ValueError("module must be a non-empty string")
    if not isinstance(config.default_program, str):
        raise ValueError("default-program must be a string")
    if not isinstance(config.editor_rows, int) or config.editor_rows < 1:
        raise ValueError("editor-rows must be a positive integer")
    if not isinstance(config.http, dict):
        raise ValueError("http must be a mapping")
    return config


def load_config(path: Optional[str] = None, **overrides: Any) -> PlaygroundConfig:
    """
    Build a config from defaults, an optional YAML file, then keyword overrides.
    Keys may be written kebab-case (examples-root) or snake_case.
    """
    config = PlaygroundConfig()
    if path is not None:
        p = Path(path)
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        values = _normalize_keys(raw)
        if "http" in values:
            values["http"] = {**config.http, **(values["http"] or {})}
        values.setdefault("base_dir", str(p.parent.resolve()))
        config = replace(config, **values)
    if overrides:
        config = replace(config, **_normalize_keys(overrides))
    return _validate(config)
