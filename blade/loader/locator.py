from __future__ import annotations

import glob
import os
from pathlib import Path
from typing import List, Mapping, Optional

from blade.resources import builtin_commands_dir


TOOL_NAME = "blade"
PLUGIN_GLOB = "*.py"


def _glob_files(root: Path | str, pattern: str = PLUGIN_GLOB) -> List[str]:
    # Escape the root so "[", "*" and "?" in directory names match literally.
    return sorted(p for p in glob.glob(os.path.join(glob.escape(str(root)), pattern)) if os.path.isfile(p))


class PluginLocator:
    """
    Enumerates plugin source files from the search roots:

    - <config_dir>/plugins/blade/*.py (when a config dir is configured)
    - $HOME/.blade/plugins/blade/*.py (when HOME is set)

    plus the command files bundled with blade itself.
    """

    def __init__(self, config_dir: Optional[Path | str], env: Optional[Mapping[str, str]] = None):
        self._config_dir = Path(config_dir).expanduser() if config_dir else None
        self._env = os.environ if env is None else env

    @property
    def config_dir(self) -> Optional[Path]:
        return self._config_dir

    def search_roots(self) -> List[Path]:
        roots: List[Path] = []
        if self._config_dir is not None:
            roots.append(self._config_dir.absolute() / "plugins" / TOOL_NAME)
        home = self._env.get("HOME")
        if home:
            roots.append(Path(home) / f".{TOOL_NAME}" / "plugins" / TOOL_NAME)
        return roots

    def site_subcommands(self) -> List[str]:
        """
        Union of matches under every search root, in root order.

        A file reachable from two roots (config dir inside HOME) is listed twice.
        """
        files: List[str] = []
        for root in self.search_roots():
            files.extend(_glob_files(root))
        return files

    def builtin_subcommands(self) -> List[str]:
        return [p for p in _glob_files(builtin_commands_dir()) if os.path.basename(p) != "__init__.py"]
