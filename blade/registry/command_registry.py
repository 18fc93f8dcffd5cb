from __future__ import annotations

import inspect
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Type

from blade.core.command import Command
from blade.core.errors import ValidationError
from blade.core.words import positional_arguments


class CommandRegistry:
    """
    Name -> command class, plus a category -> names grouping for listings.

    Plugin files populate it as a side effect of activation. Re-registering a
    name replaces the earlier class (last activation wins); nothing is ever
    removed otherwise.
    """

    def __init__(self) -> None:
        self._subcommands: Dict[str, Type[Command]] = {}
        self._names_by_category: Dict[str, List[str]] = {}
        self._files_by_name: Dict[str, List[str]] = {}
        self._loading_from: Optional[str] = None

    @property
    def subcommands(self) -> Dict[str, Type[Command]]:
        return self._subcommands

    @property
    def subcommands_by_category(self) -> Dict[str, List[str]]:
        return self._names_by_category

    def register(self, command_cls: Type[Command]) -> None:
        if not inspect.isclass(command_cls) or not issubclass(command_cls, Command):
            raise ValidationError(
                code="command.invalid",
                message="Only Command subclasses can be registered",
                data={"object": repr(command_cls)},
            )
        name = command_cls.command_name()
        words = name.split("_")
        if positional_arguments(words) != words:
            raise ValidationError(
                code="command.invalid",
                message=f"Command name is not a sequence of command words: {name}",
                data={"name": name},
            )

        previous = self._subcommands.get(name)
        if previous is not None:
            self._drop_from_category(name, previous.command_category())
        self._subcommands[name] = command_cls

        names = self._names_by_category.setdefault(command_cls.command_category(), [])
        if name not in names:
            names.append(name)

        if self._loading_from is not None:
            files = self._files_by_name.setdefault(name, [])
            if self._loading_from not in files:
                files.append(self._loading_from)

    def _drop_from_category(self, name: str, category: str) -> None:
        names = self._names_by_category.get(category)
        if not names or name not in names:
            return
        names.remove(name)
        if not names:
            del self._names_by_category[category]

    @contextmanager
    def loading_from(self, path: Path | str) -> Iterator[None]:
        """
        Tag registrations made inside the block with their source file.
        """
        prev = self._loading_from
        self._loading_from = str(path)
        try:
            yield
        finally:
            self._loading_from = prev

    def get(self, name: str) -> Optional[Type[Command]]:
        return self._subcommands.get(name)

    def files_for(self, name: str) -> List[str]:
        return list(self._files_by_name.get(name, []))

    def names(self) -> List[str]:
        return sorted(self._subcommands.keys())

    def categories(self) -> List[str]:
        return sorted(self._names_by_category.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._subcommands

    def __len__(self) -> int:
        return len(self._subcommands)
