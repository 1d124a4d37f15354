# python/gpusnap/config.py
# Snapshot harness configuration and the process-wide update toggle.
# RELEVANT FILES: python/gpusnap/snapshot/store.py, python/gpusnap/pytest_plugin.py, tests/test_config.py
from __future__ import annotations

import copy
import json
import os
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Union

from .padding import COPY_BYTES_PER_ROW_ALIGNMENT

ConfigSource = Union["SnapshotConfig", Mapping[str, Any], str, Path, None]

UPDATE_ENV_VAR = "GPUSNAP_UPDATE"
UPDATE_FLAGS = ("--update", "-u")

_TRUTHY = {"1", "true", "yes", "on"}


class SnapshotMode(str, Enum):
    ASSERT = "assert"
    UPDATE = "update"


_MODES = {
    "assert": SnapshotMode.ASSERT,
    "check": SnapshotMode.ASSERT,
    "update": SnapshotMode.UPDATE,
    "record": SnapshotMode.UPDATE,
}


def _normalize_key(value: Any) -> str:
    return "".join(
        c
        for c in str(value).strip().lower()
        if c not in {"-", "_", " ", "."}
    )


def parse_mode(value: Any) -> SnapshotMode:
    if isinstance(value, SnapshotMode):
        return value
    if isinstance(value, bool):
        return SnapshotMode.UPDATE if value else SnapshotMode.ASSERT
    key = _normalize_key(value)
    if key not in _MODES:
        raise ValueError(f"Unknown snapshot mode: {value!r}")
    return _MODES[key]


def mode_from_args(argv: Optional[Sequence[str]] = None) -> SnapshotMode:
    args = sys.argv[1:] if argv is None else argv
    return SnapshotMode.UPDATE if any(a in UPDATE_FLAGS for a in args) else SnapshotMode.ASSERT


def mode_from_env(environ: Optional[Mapping[str, str]] = None) -> SnapshotMode:
    env = os.environ if environ is None else environ
    raw = env.get(UPDATE_ENV_VAR, "")
    return SnapshotMode.UPDATE if raw.strip().lower() in _TRUTHY else SnapshotMode.ASSERT


def current_mode(
    argv: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> SnapshotMode:
    """Read the update toggle from the invocation arguments and environment.

    Evaluated on every call; nothing is cached between calls.
    """
    if mode_from_args(argv) is SnapshotMode.UPDATE:
        return SnapshotMode.UPDATE
    return mode_from_env(environ)


def _clean_extension(value: Any, label: str) -> str:
    ext = str(value).strip().lstrip(".")
    if not ext:
        raise ValueError(f"{label} must be a non-empty extension")
    if "/" in ext or "\\" in ext:
        raise ValueError(f"{label} must not contain path separators")
    return ext


@dataclass
class SnapshotConfig:
    directory_name: str = "__snapshots__"
    default_extension: str = "snap"
    image_extension: str = "png"
    alignment: int = COPY_BYTES_PER_ROW_ALIGNMENT
    update: Optional[bool] = None

    def to_dict(self) -> dict:
        return {
            "directory_name": self.directory_name,
            "default_extension": self.default_extension,
            "image_extension": self.image_extension,
            "alignment": self.alignment,
            "update": self.update,
        }

    def validate(self) -> None:
        if not self.directory_name or Path(self.directory_name).name != self.directory_name:
            raise ValueError("directory_name must be a single path component")
        self.default_extension = _clean_extension(self.default_extension, "default_extension")
        self.image_extension = _clean_extension(self.image_extension, "image_extension")
        if int(self.alignment) <= 0:
            raise ValueError("alignment must be positive")

    def resolve_mode(self) -> SnapshotMode:
        if self.update is not None:
            return parse_mode(self.update)
        return current_mode()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], default: Optional["SnapshotConfig"] = None) -> "SnapshotConfig":
        base = copy.deepcopy(default) if default is not None else cls()
        if "directory_name" in data:
            base.directory_name = str(data["directory_name"])
        if "directory" in data and "directory_name" not in data:
            base.directory_name = str(data["directory"])
        if "default_extension" in data:
            base.default_extension = str(data["default_extension"])
        if "image_extension" in data:
            base.image_extension = str(data["image_extension"])
        if "alignment" in data:
            base.alignment = int(data["alignment"])
        if "update" in data:
            raw = data["update"]
            base.update = None if raw is None else parse_mode(raw) is SnapshotMode.UPDATE
        if "mode" in data and "update" not in data:
            base.update = parse_mode(data["mode"]) is SnapshotMode.UPDATE
        base.validate()
        return base


def _load_json_source(source: Union[str, Path]) -> Mapping[str, Any]:
    if isinstance(source, Path):
        return json.loads(source.read_text(encoding="utf-8"))
    text = source.strip()
    if text.startswith("{"):
        return json.loads(text)
    return json.loads(Path(source).read_text(encoding="utf-8"))


def load_snapshot_config(source: ConfigSource = None, **overrides: Any) -> SnapshotConfig:
    """Build a SnapshotConfig from a mapping, JSON text, a JSON file or nothing."""
    if isinstance(source, SnapshotConfig):
        config = copy.deepcopy(source)
    elif source is None:
        config = SnapshotConfig()
    elif isinstance(source, Mapping):
        config = SnapshotConfig.from_mapping(source)
    elif isinstance(source, (str, Path)):
        data = _load_json_source(source)
        if not isinstance(data, Mapping):
            raise TypeError("snapshot config JSON must be an object")
        config = SnapshotConfig.from_mapping(data)
    else:
        raise TypeError(f"Unsupported config source: {type(source).__name__}")

    if overrides:
        config = SnapshotConfig.from_mapping(overrides, default=config)
    config.validate()
    return config


__all__ = [
    "UPDATE_ENV_VAR",
    "UPDATE_FLAGS",
    "SnapshotMode",
    "SnapshotConfig",
    "parse_mode",
    "mode_from_args",
    "mode_from_env",
    "current_mode",
    "load_snapshot_config",
]
