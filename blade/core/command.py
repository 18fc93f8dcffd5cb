from __future__ import annotations

import argparse
import re
import sys
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, List, Optional, TextIO

if TYPE_CHECKING:
    from blade.config import BladeConfig
    from blade.loader.subcommand_loader import SubcommandLoader
    from blade.registry.command_registry import CommandRegistry


_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def snake_case_name(class_name: str) -> str:
    """
    NodeShow -> node_show, SSLCheck -> ssl_check.
    """
    return _CAMEL_BOUNDARY_RE.sub("_", class_name).lower()


@dataclass(frozen=True)
class CommandContext:
    """
    What a running subcommand can see of the process that resolved it.
    """

    config: "BladeConfig"
    registry: "CommandRegistry"
    loader: "SubcommandLoader"
    stdout: TextIO = field(default_factory=lambda: sys.stdout)


class Command:
    """
    Base class for subcommand implementations.

    Plugin files define subclasses and register them from their
    `register_commands(registry)` hook. How `run()` does its work is up to
    the plugin; blade only locates and activates it.
    """

    name: ClassVar[Optional[str]] = None
    category: ClassVar[Optional[str]] = None
    summary: ClassVar[str] = ""

    def __init__(self, ctx: CommandContext):
        self.ctx = ctx

    @classmethod
    def command_name(cls) -> str:
        return cls.name or snake_case_name(cls.__name__)

    @classmethod
    def words(cls) -> List[str]:
        return cls.command_name().split("_")

    @classmethod
    def command_category(cls) -> str:
        return cls.category or cls.words()[0]

    @classmethod
    def usage(cls) -> str:
        return "blade " + " ".join(cls.words())

    def configure_parser(self, parser: argparse.ArgumentParser) -> None:
        pass

    def invoke(self, argv: List[str]) -> int:
        parser = argparse.ArgumentParser(prog=self.usage(), description=self.summary or None)
        self.configure_parser(parser)
        ns = parser.parse_args(argv)
        rc = self.run(ns)
        return 0 if rc is None else int(rc)

    def run(self, ns: argparse.Namespace) -> Any:
        raise NotImplementedError

    def out(self, text: str = "") -> None:
        print(text, file=self.ctx.stdout)
