from __future__ import annotations

from pathlib import Path


def _package_dir(package_name: str) -> Path:
    """
    Return the on-disk directory for an imported package.

    Note:
    This assumes the package is installed in a filesystem-backed environment
    (typical for pip/wheel installs and editable installs). Built-in command
    files are activated from source, so a zipimport-style install is not
    supported.
    """
    module = __import__(package_name, fromlist=["__file__"])
    p = getattr(module, "__file__", None)
    if not isinstance(p, str) or not p:
        raise RuntimeError(f"Cannot resolve package directory for: {package_name}")
    return Path(p).resolve().parent


def builtin_commands_dir() -> Path:
    """
    Directory holding the command files shipped with blade (help, rehash, ...).
    """
    return _package_dir("blade.commands")
