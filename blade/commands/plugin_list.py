from __future__ import annotations

import argparse
import json

from blade.core.command import Command


class PluginList(Command):
    summary = "Show the plugin files the active loader would activate"

    def configure_parser(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--json", action="store_true", help="Output JSON")

    def run(self, ns: argparse.Namespace) -> int:
        files = self.ctx.loader.subcommand_files()
        if ns.json:
            self.out(json.dumps(files, ensure_ascii=False, indent=2))
        else:
            for f in files:
                self.out(f)
        return 0


def register_commands(registry) -> None:
    registry.register(PluginList)
