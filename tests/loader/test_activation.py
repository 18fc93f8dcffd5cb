import tempfile
import textwrap
import unittest
from pathlib import Path

from blade.core.errors import PluginActivationError
from blade.loader.activation import activate_plugin_file
from blade.registry.command_registry import CommandRegistry


_PLUGIN = textwrap.dedent(
    """
    from blade.core.command import Command

    class DataBagShow(Command):
        summary = "Show a data bag"

        def run(self, ns):
            return 0

    def register_commands(registry):
        registry.register(DataBagShow)
    """
)


class TestActivatePluginFile(unittest.TestCase):
    def test_registers_commands_from_hook(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "data_bag.py"
            p.write_text(_PLUGIN, encoding="utf-8")
            reg = CommandRegistry()
            module = activate_plugin_file(p, reg)
            self.assertTrue(hasattr(module, "DataBagShow"))
            self.assertIn("data_bag_show", reg)
            self.assertEqual(reg.files_for("data_bag_show"), [str(p.absolute())])

    def test_any_suffix_is_python_source(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "a.plugin"
            p.write_text(_PLUGIN, encoding="utf-8")
            reg = CommandRegistry()
            activate_plugin_file(p, reg)
            self.assertIn("data_bag_show", reg)

    def test_file_without_hook_registers_nothing(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "empty.py"
            p.write_text("X = 1\n", encoding="utf-8")
            reg = CommandRegistry()
            activate_plugin_file(p, reg)
            self.assertEqual(len(reg), 0)

    def test_reactivation_overwrites_with_fresh_class(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "data_bag.py"
            p.write_text(_PLUGIN, encoding="utf-8")
            reg = CommandRegistry()
            activate_plugin_file(p, reg)
            first = reg.get("data_bag_show")
            activate_plugin_file(p, reg)
            self.assertIsNot(reg.get("data_bag_show"), first)
            self.assertEqual(len(reg), 1)

    def test_syntax_error_propagates(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "broken.py"
            p.write_text("def oops(:\n", encoding="utf-8")
            with self.assertRaises(PluginActivationError) as ctx:
                activate_plugin_file(p, CommandRegistry())
            self.assertEqual(ctx.exception.code, "plugin.activation_failed")
            self.assertEqual(ctx.exception.data["path"], str(p.absolute()))
            self.assertIsInstance(ctx.exception.__cause__, SyntaxError)

    def test_hook_error_propagates(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "bad_hook.py"
            p.write_text("def register_commands(registry):\n    registry.register(object)\n", encoding="utf-8")
            with self.assertRaises(PluginActivationError):
                activate_plugin_file(p, CommandRegistry())

    def test_missing_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(PluginActivationError) as ctx:
                activate_plugin_file(Path(td) / "gone.py", CommandRegistry())
            self.assertIn("not found", ctx.exception.message)


if __name__ == "__main__":
    unittest.main()
