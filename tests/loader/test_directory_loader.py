import tempfile
import textwrap
import unittest
from pathlib import Path
from unittest.mock import patch

from blade.config import BladeConfig
from blade.core.errors import PluginActivationError
from blade.loader.subcommand_loader import DirectoryCommandLoader
from blade.registry.command_registry import CommandRegistry


_NODE_PLUGIN = textwrap.dedent(
    """
    from blade.core.command import Command

    class Node(Command):
        def run(self, ns):
            return 0

    class NodeShow(Command):
        def run(self, ns):
            return 0

    class CookbookSiteShare(Command):
        category = "cookbook site"

        def run(self, ns):
            return 0

    class SslCheck(Command):
        def run(self, ns):
            return 0

    def register_commands(registry):
        for cls in (Node, NodeShow, CookbookSiteShare, SslCheck):
            registry.register(cls)
    """
)


def _write_plugin(config_dir: Path, filename: str, source: str) -> Path:
    p = config_dir / "plugins" / "blade" / filename
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(source, encoding="utf-8")
    return p


class TestDirectoryCommandLoader(unittest.TestCase):
    def setUp(self) -> None:
        self._td = tempfile.TemporaryDirectory()
        self.config_dir = Path(self._td.name)
        self.plugin_path = _write_plugin(self.config_dir, "node.py", _NODE_PLUGIN)
        self.registry = CommandRegistry()
        self.loader = DirectoryCommandLoader(BladeConfig(config_dir=self.config_dir, env={}), self.registry)

    def tearDown(self) -> None:
        self._td.cleanup()

    def test_longest_command_wins(self) -> None:
        cls = self.loader.command_class_from(["node", "show", "node1"])
        self.assertIsNotNone(cls)
        self.assertEqual(cls.command_name(), "node_show")

    def test_flags_are_ignored(self) -> None:
        cls = self.loader.command_class_from(["--format", "node", "-l", "show"])
        self.assertEqual(cls.command_name(), "node_show")

    def test_shorter_command_when_longer_missing(self) -> None:
        cls = self.loader.command_class_from(["node", "delete", "node1"])
        self.assertEqual(cls.command_name(), "node")

    def test_unknown_command_is_none(self) -> None:
        self.assertIsNone(self.loader.command_class_from(["frobnicate"]))

    def test_empty_args_is_none(self) -> None:
        self.assertIsNone(self.loader.command_class_from([]))

    def test_first_argument_fallback_replaces_hyphens(self) -> None:
        # "ssl-check" is one word, so the longest-match lookup tries "ssl-check" and misses.
        cls = self.loader.command_class_from(["ssl-check", "--verify"])
        self.assertEqual(cls.command_name(), "ssl_check")

    def test_subcommand_files_builtins_then_site(self) -> None:
        files = self.loader.subcommand_files()
        self.assertEqual(files[-1], str(self.plugin_path))
        self.assertTrue(any(f.endswith("help.py") for f in files))

    def test_list_commands(self) -> None:
        listing = self.loader.list_commands()
        self.assertEqual(listing["node"], ["node", "node_show"])
        self.assertIn("cookbook site", listing)
        self.assertIn("help", listing)

    def test_list_commands_for_category(self) -> None:
        self.assertEqual(self.loader.list_commands("node"), {"node": ["node", "node_show"]})

    def test_list_commands_unknown_category_returns_all(self) -> None:
        listing = self.loader.list_commands("nope")
        self.assertIn("node", listing)
        self.assertIn("help", listing)

    def test_guess_category(self) -> None:
        self.assertEqual(self.loader.guess_category(["cookbook-site", "whatever"]), "cookbook site")
        self.assertEqual(self.loader.guess_category(["node", "frob"]), "node")
        self.assertIsNone(self.loader.guess_category(["frob"]))

    def test_scans_once_per_loader(self) -> None:
        with patch("blade.loader.subcommand_loader.activate_plugin_file") as activate:
            self.loader.load_commands()
            calls = activate.call_count
            self.loader.command_class_from(["node", "show"])
            self.loader.list_commands()
            self.assertEqual(activate.call_count, calls)
            self.loader.load_commands(reload=True)
            self.assertEqual(activate.call_count, calls * 2)

    def test_broken_plugin_aborts_resolution(self) -> None:
        _write_plugin(self.config_dir, "zz_broken.py", "raise RuntimeError('boom')\n")
        with self.assertRaises(PluginActivationError):
            self.loader.command_class_from(["node", "show"])


if __name__ == "__main__":
    unittest.main()
