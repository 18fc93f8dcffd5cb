from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Type

from blade.config import BladeConfig
from blade.core.command import Command
from blade.core.errors import CommandNotFound, ManifestEntryInvalid
from blade.core.words import category_words, find_longest_key, positional_arguments
from blade.manifest import REHASH_HINT, CommandManifest, regenerate_hint
from blade.registry.command_registry import CommandRegistry

from .activation import activate_plugin_file
from .locator import PluginLocator


logger = logging.getLogger(__name__)


class SubcommandLoader:
    """
    Public methods of a subcommand loader:

    - load_commands()            activates every available subcommand file
    - load_command(args)         activates the files needed for the given args
    - list_commands(category)    category -> command names, optionally filtered
    - subcommand_files()         every file this loader could activate
    - command_class_from(args)   the command class for the user's arguments
    """

    def __init__(self, config: BladeConfig, registry: CommandRegistry):
        self._config = config
        self._registry = registry

    @property
    def config(self) -> BladeConfig:
        return self._config

    @property
    def registry(self) -> CommandRegistry:
        return self._registry

    @classmethod
    def for_config(cls, config: BladeConfig, registry: CommandRegistry) -> "SubcommandLoader":
        path = config.plugin_manifest_path
        if config.use_manifest and path is not None and path.is_file():
            logger.debug("using plugin manifest %s", path)
            return HashedCommandLoader(config, registry, CommandManifest.load(path))
        logger.debug("no plugin manifest in use; scanning plugin directories")
        return DirectoryCommandLoader(config, registry)

    def load_commands(self) -> bool:
        raise NotImplementedError

    def load_command(self, args: Sequence[str]) -> Any:
        raise NotImplementedError

    def subcommand_files(self) -> List[str]:
        raise NotImplementedError

    def list_commands(self, category: Optional[str] = None) -> Dict[str, List[str]]:
        self.load_commands()
        by_category = self._registry.subcommands_by_category
        if category and category in by_category:
            return {category: list(by_category[category])}
        return {k: list(by_category[k]) for k in sorted(by_category.keys())}

    def guess_category(self, args: Sequence[str]) -> Optional[str]:
        self.load_commands()
        return find_longest_key(self._registry.subcommands_by_category, category_words(args), " ")

    def command_class_from(self, args: Sequence[str]) -> Optional[Type[Command]]:
        cmd_words = positional_arguments(args)
        self.load_command(cmd_words)
        subcommands = self._registry.subcommands
        key = find_longest_key(subcommands, cmd_words, "_")
        if key is not None:
            logger.debug("resolved %r to command %s", list(args), key)
            return subcommands[key]
        if not args:
            return None
        return subcommands.get(str(args[0]).replace("-", "_"))


class DirectoryCommandLoader(SubcommandLoader):
    """
    Discovers command files by scanning the plugin directories on every process.
    """

    def __init__(self, config: BladeConfig, registry: CommandRegistry):
        super().__init__(config, registry)
        self._locator = PluginLocator(config.config_dir, config.env)
        self._loaded = False

    @property
    def locator(self) -> PluginLocator:
        return self._locator

    def subcommand_files(self) -> List[str]:
        return self._locator.builtin_subcommands() + self._locator.site_subcommands()

    def load_commands(self, *, reload: bool = False) -> bool:
        if self._loaded and not reload:
            return True
        for path in self.subcommand_files():
            activate_plugin_file(path, self._registry)
        self._loaded = True
        return True

    def load_command(self, args: Sequence[str]) -> bool:
        # Without a manifest there is no way to know which file holds a command.
        return self.load_commands()


class HashedCommandLoader(SubcommandLoader):
    """
    Loads a subcommand from the precomputed paths recorded in the plugin manifest.
    """

    def __init__(self, config: BladeConfig, registry: CommandRegistry, manifest: CommandManifest):
        super().__init__(config, registry)
        self._manifest = manifest

    @property
    def manifest(self) -> CommandManifest:
        return self._manifest

    def _manifest_location(self) -> str:
        p = self._manifest.path or self._config.plugin_manifest_path
        return str(p) if p is not None else "the plugin manifest"

    def _check_paths_exist(self, key: str, paths: Sequence[str]) -> None:
        """
        A manifest written before a plugin file was removed still names it.
        """
        for path in paths:
            if not Path(path).expanduser().is_file():
                raise ManifestEntryInvalid(
                    code="manifest.entry_stale",
                    message="Cached information for subcommand '{}' names a file that no longer exists: {}. {}".format(
                        key, path, regenerate_hint(self._manifest_location())
                    ),
                    data={"command": key, "path": path},
                )

    def subcommand_files(self) -> List[str]:
        return self._manifest.all_paths()

    def subcommand_for_args(self, args: Sequence[str]) -> Optional[str]:
        return find_longest_key(self._manifest, positional_arguments(args), "_")

    def load_commands(self) -> bool:
        seen = set()
        for key, entry in self._manifest.items():
            if not entry.is_valid():
                logger.warning("skipping malformed manifest entry %s", key)
                continue
            paths = [p for p in dict.fromkeys(entry.paths or []) if p not in seen]
            self._check_paths_exist(key, paths)
            for path in paths:
                seen.add(path)
                activate_plugin_file(path, self._registry)
        return True

    def load_command(self, args: Sequence[str]) -> bool:
        key = self.subcommand_for_args(args)
        entry = self._manifest.get(key) if key is not None else None
        if entry is None:
            raise CommandNotFound(
                code="command.not_found",
                message="Cannot find subcommand for: '{}'. If you recently installed this command, try running: {}".format(
                    " ".join(args), REHASH_HINT
                ),
                data={"args": list(args)},
            )
        if not entry.is_valid():
            raise ManifestEntryInvalid(
                code="manifest.entry_invalid",
                message="Cached information for this subcommand appears to be improperly formatted. "
                + regenerate_hint(self._manifest_location()),
                data={"command": key},
            )
        paths = entry.paths or []
        self._check_paths_exist(key, paths)
        for path in paths:
            activate_plugin_file(path, self._registry)
        return True
