from __future__ import annotations

import hashlib
import importlib.machinery
import importlib.util
import logging
import re
import sys
from pathlib import Path
from types import ModuleType

from blade.core.errors import PluginActivationError
from blade.registry.command_registry import CommandRegistry


logger = logging.getLogger(__name__)

_REGISTER_HOOK = "register_commands"


def _module_name_for(path: Path) -> str:
    stem = re.sub(r"\W", "_", path.stem)
    digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:10]
    return f"blade_plugin_{stem}_{digest}"


def activate_plugin_file(path: Path | str, registry: CommandRegistry) -> ModuleType:
    """
    Execute a plugin source file so that it registers its commands.

    The file runs as a fresh module every time; if it defines
    `register_commands(registry)` that hook is called with registrations
    tagged by this path. Any failure aborts with PluginActivationError.
    """
    p = Path(path).expanduser().absolute()
    if not p.is_file():
        raise PluginActivationError(
            code="plugin.activation_failed",
            message=f"Plugin file not found: {p}",
            data={"path": str(p)},
        )

    module_name = _module_name_for(p)
    # Explicit loader: plugin sources are Python whatever their suffix.
    loader = importlib.machinery.SourceFileLoader(module_name, str(p))
    spec = importlib.util.spec_from_file_location(module_name, p, loader=loader)
    if spec is None or spec.loader is None:
        raise PluginActivationError(
            code="plugin.activation_failed",
            message=f"Not a loadable Python source file: {p}",
            data={"path": str(p)},
        )

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
        hook = getattr(module, _REGISTER_HOOK, None)
        if callable(hook):
            with registry.loading_from(p):
                hook(registry)
    except Exception as e:  # noqa: BLE001
        sys.modules.pop(module_name, None)
        raise PluginActivationError(
            code="plugin.activation_failed",
            message=f"Failed to activate plugin file: {p}",
            data={"path": str(p), "error": repr(e)},
        ) from e

    logger.debug("activated plugin file %s", p)
    return module
