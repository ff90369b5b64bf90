"""Configuration loading for emimport (.emimport.yml)."""

from __future__ import annotations

import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .models import MemberPolicy

CONFIG_FILENAME = ".emimport.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class EmImportConfig:
    """Represents the settings defined in .emimport.yml."""

    root: Path
    output: Optional[Path] = None
    log_file: Optional[Path] = None
    build_path: Optional[Path] = None
    library_file: Optional[Path] = None
    clang_args: List[str] = field(default_factory=list)
    skip_function_bodies: bool = False
    members: MemberPolicy = MemberPolicy.MARKED


def load_config(config_path: Path) -> EmImportConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return EmImportConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    clang_data = _as_dict(data.get("clang"))

    return EmImportConfig(
        root=root,
        output=_as_path(root, data.get("output")),
        log_file=_as_path(root, data.get("log_file")),
        build_path=_as_path(root, data.get("build_path")),
        library_file=_as_path(root, data.get("library_file")),
        clang_args=_as_str_list(clang_data.get("args")),
        skip_function_bodies=_as_bool(data.get("skip_function_bodies")) or False,
        members=_as_member_policy(data.get("members")),
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and value != "" else None


def _as_path(root: Path, value: Any) -> Optional[Path]:
    text = _as_str(value)
    if text is None:
        return None
    path = Path(text).expanduser()
    return path if path.is_absolute() else root / path


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return shlex.split(value)
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


def _as_member_policy(value: Any) -> MemberPolicy:
    if value is None:
        return MemberPolicy.MARKED
    try:
        return MemberPolicy(str(value).strip().lower())
    except ValueError as exc:
        choices = ", ".join(policy.value for policy in MemberPolicy)
        raise ConfigError(f"Unknown members policy {value!r}; expected one of: {choices}") from exc
