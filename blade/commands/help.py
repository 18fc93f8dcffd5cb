from __future__ import annotations

import argparse

from blade.core.command import Command


class Help(Command):
    summary = "List available subcommands, optionally for one category"

    def configure_parser(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("words", nargs="*", help="Category words (e.g. 'node' or 'plugin')")

    def run(self, ns: argparse.Namespace) -> int:
        loader = self.ctx.loader
        category = loader.guess_category(ns.words) if ns.words else None
        listing = loader.list_commands(category)
        for name, names in listing.items():
            self.out(f"** {name.upper()} COMMANDS **")
            for cmd_name in sorted(names):
                cmd_cls = self.ctx.registry.get(cmd_name)
                if cmd_cls is None:
                    continue
                line = cmd_cls.usage()
                if cmd_cls.summary:
                    line += f"  # {cmd_cls.summary}"
                self.out(line)
            self.out()
        return 0


def register_commands(registry) -> None:
    registry.register(Help)
