from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Dict, List, Optional, Sequence, TextIO, Type

from blade.config import load_config
from blade.core.command import Command, CommandContext
from blade.core.errors import BladeError, CommandNotFound
from blade.core.words import positional_arguments
from blade.loader.subcommand_loader import SubcommandLoader
from blade.registry.command_registry import CommandRegistry


def _format_cli_error(e: Exception) -> str:
    """
    Print-friendly error formatting for CLI commands.
    - Always includes code/message (via __str__) when it's a BladeError
    - Includes structured `data` payload when present
    """
    if isinstance(e, BladeError) and isinstance(e.data, dict) and e.data:
        return str(e) + "\n" + json.dumps(e.data, ensure_ascii=False, indent=2)
    return str(e)


def _global_parser() -> argparse.ArgumentParser:
    # add_help=False: "-h" belongs to the subcommand being invoked.
    parser = argparse.ArgumentParser(prog="blade", add_help=False, allow_abbrev=False)
    parser.add_argument("--config-dir", help="Config directory (default: $BLADE_CONFIG_DIR or ~/.blade)")
    parser.add_argument("--no-manifest", action="store_true", help="Ignore the plugin manifest and scan plugin dirs")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


def _strip_command_words(args: Sequence[str], command_cls: Type[Command]) -> List[str]:
    """
    Remove the words naming the command, leaving the arguments for the command itself.

    The resolver matches a leading run of positional words, so exactly those
    entries are dropped; options between them stay where they were.
    """
    words = command_cls.words()
    if positional_arguments(args)[: len(words)] != words:
        # Matched through the first-argument fallback ("foo-bar" -> foo_bar).
        return list(args[1:])
    rest: List[str] = []
    matched = 0
    for arg in args:
        if matched < len(words) and positional_arguments([arg]):
            matched += 1
            continue
        rest.append(arg)
    return rest


def _print_listing(listing: Dict[str, List[str]], registry: CommandRegistry, out: TextIO) -> None:
    for category, names in listing.items():
        print(f"** {category.upper()} COMMANDS **", file=out)
        for name in sorted(names):
            cmd_cls = registry.get(name)
            if cmd_cls is not None:
                print(cmd_cls.usage(), file=out)
        print("", file=out)


def main(argv: Optional[Sequence[str]] = None) -> int:
    raw = list(sys.argv[1:] if argv is None else argv)
    gns, args = _global_parser().parse_known_args(raw)
    _configure_logging(gns.verbose)

    try:
        config = load_config(gns.config_dir, use_manifest=False if gns.no_manifest else None)
        registry = CommandRegistry()
        loader = SubcommandLoader.for_config(config, registry)

        if not args:
            print("Usage: blade <subcommand> [ARGS]", file=sys.stderr)
            _print_listing(loader.list_commands(), registry, sys.stdout)
            return 1

        command_cls = loader.command_class_from(args)
        if command_cls is None:
            print("FATAL: Cannot find subcommand for: '{}'".format(" ".join(args)), file=sys.stderr)
            _print_listing(loader.list_commands(loader.guess_category(args)), registry, sys.stdout)
            return CommandNotFound.exit_code

        ctx = CommandContext(config=config, registry=registry, loader=loader)
        return command_cls(ctx).invoke(_strip_command_words(args, command_cls))
    except BladeError as e:
        print(_format_cli_error(e), file=sys.stderr)
        return e.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
