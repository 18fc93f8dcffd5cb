from __future__ import annotations

import argparse
from pathlib import Path

from blade.core.command import Command
from blade.core.errors import ValidationError
from blade.loader.subcommand_loader import DirectoryCommandLoader
from blade.manifest import generate_manifest, write_manifest
from blade.registry.command_registry import CommandRegistry


class Rehash(Command):
    summary = "Scan plugin directories and regenerate the plugin manifest"

    def configure_parser(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--output", help="Manifest path (default: the configured plugin manifest)")

    def run(self, ns: argparse.Namespace) -> int:
        config = self.ctx.config
        out_path = Path(ns.output).expanduser() if ns.output else config.plugin_manifest_path
        if out_path is None:
            raise ValidationError(
                code="rehash.no_manifest_path",
                message="No config dir is configured; pass --output or set BLADE_CONFIG_DIR",
            )

        # Always scan: the manifest in use may be the stale thing being replaced.
        registry = CommandRegistry()
        DirectoryCommandLoader(config, registry).load_commands()
        manifest = generate_manifest(registry)
        write_manifest(out_path, manifest)
        self.out(f"Wrote {len(manifest)} commands to {out_path}")
        return 0


def register_commands(registry) -> None:
    registry.register(Rehash)
