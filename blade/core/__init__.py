from .command import Command, CommandContext, snake_case_name
from .errors import (
  BladeError,
  CommandNotFound,
  ManifestEntryInvalid,
  ManifestInvalid,
  PluginActivationError,
  ValidationError,
)
from .words import category_words, find_longest_key, positional_arguments

__all__ = [
  "Command",
  "CommandContext",
  "snake_case_name",
  "BladeError",
  "CommandNotFound",
  "ManifestEntryInvalid",
  "ManifestInvalid",
  "PluginActivationError",
  "ValidationError",
  "category_words",
  "find_longest_key",
  "positional_arguments",
]
