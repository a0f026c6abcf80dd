"""
Shell behavioral tests (read-dispatch-print loop over a rich Console).

Scope
- Validate the welcome line, responses and fault output.
- Validate fancy fault panels and console input until end of input.

Conventions
- Test method names follow CamelCase per project convention.
- Output is captured with a colorless Console writing to a StringIO.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase, mock

from rich.console import Console

from taptalk.demo import build
from taptalk.shell import Shell


def _console():
    return Console(file=io.StringIO(), width=100, color_system=None, highlight=False)


class TestShell(TestCase):
    """Behavioral tests for Shell."""

    def setUp(self):
        self.console = _console()

    def output(self):
        return self.console.file.getvalue()

    def testDefaultWelcome(self):
        shell = Shell(build(), console=self.console)
        self.assertEqual(shell.welcome, 'Test command set, type "help", to show command list!')

    def testRunOverLines(self):
        status = Shell(build(), console=self.console, colorful=False).run(["tu cw the bird is the word", "xyz"])
        self.assertEqual(status, 0)
        self.assertEqual(self.output().splitlines(), [
            'Test command set, type "help", to show command list!',
            "5",
            "Command not found!",
        ])

    def testScriptedRunSkipsConsole(self):
        shell = Shell(build(), console=self.console, welcome="hi")
        with mock.patch.object(self.console, "input") as read:
            shell.run([])
        read.assert_not_called()
        self.assertEqual(self.output(), "hi\n")

    def testFancyFaults(self):
        Shell(build(), console=self.console, colorful=False, fancy=True).run(["xyz"])
        output = self.output()
        self.assertIn("Unknown Command", output)
        self.assertIn("11102", output)
        self.assertIn("Command not found!", output)

    def testReadsConsoleUntilEndOfInput(self):
        shell = Shell(build(), console=self.console, colorful=False, welcome="hi")
        with mock.patch.object(self.console, "input", side_effect=["tu cw a b", "", EOFError()]) as read:
            self.assertEqual(shell.run(), 0)
        self.assertEqual(read.call_count, 3)
        read.assert_called_with("> ")
        self.assertEqual(self.output().splitlines(), ["hi", "2", "Please enter a command!"])

    def testInterruptEndsSession(self):
        shell = Shell(build(), console=self.console, colorful=False, welcome="hi")
        with mock.patch.object(self.console, "input", side_effect=KeyboardInterrupt()):
            self.assertEqual(shell.run(), 0)

    def testHostStyles(self):
        shell = Shell(build(), console=self.console)
        with mock.patch("__main__.__styles__", {"fault": "red"}, create=True):
            self.assertEqual(shell.styles["fault"], "red")
            self.assertEqual(shell.styles["unknown"], "")
        self.assertEqual(Shell(build(), console=self.console, colorful=False)._style("fault"), "")


if __name__ == "__main__":
    unittest.main()
