from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar


@dataclass(frozen=True)
class BladeError(Exception):
    code: str
    message: str
    data: dict[str, Any] | None = None

    exit_code: ClassVar[int] = 1

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class ValidationError(BladeError):
    pass


class PluginActivationError(BladeError):
    pass


class ManifestInvalid(BladeError):
    pass


class ManifestEntryInvalid(BladeError):
    pass


class CommandNotFound(BladeError):
    # Reserved so wrappers can tell "unknown subcommand" apart from failures.
    exit_code: ClassVar[int] = 10
