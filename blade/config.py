from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from blade.core.errors import ValidationError


CONFIG_FILENAME = "config.yml"
MANIFEST_FILENAME = "plugin_manifest.json"

_TRUTHY = ("1", "true", "yes")


@dataclass(frozen=True)
class BladeConfig:
    """
    Inputs that decide where plugins are searched for and whether the
    precomputed manifest is used.
    """

    config_dir: Optional[Path] = None
    env: Mapping[str, str] = field(default_factory=dict)
    plugin_manifest_path: Optional[Path] = None
    use_manifest: bool = True


def _default_config_dir(env: Mapping[str, str]) -> Optional[Path]:
    explicit = env.get("BLADE_CONFIG_DIR")
    if explicit:
        return Path(explicit).expanduser()
    home = env.get("HOME")
    if home:
        p = Path(home) / ".blade"
        if p.is_dir():
            return p
    return None


def _read_config_file(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        return {}
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValidationError(
            code="config.invalid",
            message=f"Config file must contain a mapping: {path}",
            data={"path": str(path)},
        )
    return raw


def _resolve_manifest_path(raw: Any, config_dir: Optional[Path]) -> Optional[Path]:
    if isinstance(raw, str) and raw.strip():
        p = Path(raw.strip()).expanduser()
        if not p.is_absolute() and config_dir is not None:
            p = config_dir / p
        return p
    if raw is not None:
        raise ValidationError(code="config.invalid", message="plugin_manifest must be a non-empty string")
    if config_dir is not None:
        return config_dir / MANIFEST_FILENAME
    return None


def load_config(
    config_dir: Optional[Path | str] = None,
    env: Optional[Mapping[str, str]] = None,
    use_manifest: Optional[bool] = None,
) -> BladeConfig:
    """
    Resolve configuration.

    Priority:
      config dir:   argument, BLADE_CONFIG_DIR, $HOME/.blade (if it exists)
      use_manifest: argument, BLADE_NO_MANIFEST, config.yml, default True
    """
    env = dict(os.environ if env is None else env)
    cdir = Path(config_dir).expanduser() if config_dir else _default_config_dir(env)

    file_cfg = _read_config_file(cdir / CONFIG_FILENAME) if cdir is not None else {}

    manifest_path = _resolve_manifest_path(file_cfg.get("plugin_manifest"), cdir)

    if use_manifest is None:
        if str(env.get("BLADE_NO_MANIFEST", "")).strip().lower() in _TRUTHY:
            use_manifest = False
        else:
            raw_use = file_cfg.get("use_manifest", True)
            if not isinstance(raw_use, bool):
                raise ValidationError(code="config.invalid", message="use_manifest must be a boolean")
            use_manifest = raw_use

    return BladeConfig(
        config_dir=cdir,
        env=env,
        plugin_manifest_path=manifest_path,
        use_manifest=bool(use_manifest),
    )
