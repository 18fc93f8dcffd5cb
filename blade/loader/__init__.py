from .activation import activate_plugin_file
from .locator import PluginLocator
from .subcommand_loader import DirectoryCommandLoader, HashedCommandLoader, SubcommandLoader

__all__ = [
  "activate_plugin_file",
  "PluginLocator",
  "SubcommandLoader",
  "DirectoryCommandLoader",
  "HashedCommandLoader",
]
