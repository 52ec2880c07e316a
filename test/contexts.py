"""
Contexts module behavioral tests (declarations, option parsing, help listing).

Scope
- Validate option declaration, lookup and the ConfigurationError policy.
- Validate the per-command token grammar and the consumed-token count.
- Validate fault messages raised while parsing options.
- Validate the exact help listing layout.

Conventions
- Test method names follow CamelCase per project convention.
- Contexts are built directly around a commander and a callback command.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase

from rich.console import Console

from atcommander import Commander, Context, OptionBool, OptionString, OptionInt, OptionChoice, command
from atcommander.faults import CommandException, ConfigurationError, UnknownOptionError, ValueSyntaxError


def make_commander():
    return Commander(console=Console(file=io.StringIO(), width=120, color_system=None))


@command(descr="command 1")
def noop(context):
    pass


class TestContextDeclare(TestCase):
    """Option management through a context."""

    def setUp(self):
        self.commander = make_commander()
        self.context = Context(self.commander, noop)

    def testDeclareAndLookup(self):
        opt = OptionBool(False)
        self.context.declare("opt", opt, "option")
        self.assertIs(self.context.option("opt"), opt)
        self.assertEqual(self.context.descrs, {"opt": "option"})

    def testLookupMissingReturnsNone(self):
        self.assertIsNone(self.context.option("missing"))

    def testSharesCommanderLoggerAndConsole(self):
        self.assertIs(self.context.logger, self.commander.logger)
        self.assertIs(self.context.console, self.commander.console)
        self.assertIs(self.context.commander, self.commander)
        self.assertIs(self.context.command, noop)

    def testDuplicateNameRaises(self):
        self.context.declare("opt", OptionBool(False), "option")
        with self.assertRaises(ConfigurationError) as cm:
            self.context.declare("opt", OptionBool(True), "option")
        self.assertEqual(str(cm.exception), "option name opt is already used")

    def testReservedHelpNameRaises(self):
        with self.assertRaises(ConfigurationError) as cm:
            self.context.declare("help", OptionBool(True), "option")
        self.assertEqual(str(cm.exception), "illegal option name: help")

    def testConfigurationErrorIsValueError(self):
        self.assertTrue(issubclass(ConfigurationError, ValueError))

    def testDeclareTypeChecks(self):
        with self.assertRaises(TypeError):
            self.context.declare(1, OptionBool(False))
        with self.assertRaises(TypeError):
            self.context.declare("opt", False)
        with self.assertRaises(TypeError):
            self.context.declare("opt", OptionBool(False), 3)

    def testOptionsMappingIsACopy(self):
        self.context.declare("opt", OptionBool(False))
        self.context.options.pop("opt")
        self.assertIsNotNone(self.context.option("opt"))


class TestContextParse(TestCase):
    """Per-command token grammar."""

    def setUp(self):
        self.context = Context(make_commander(), noop)
        self.context.declare("opt1", OptionBool(False), "option 1")
        self.context.declare("opt2", OptionBool(False), "option 2")
        self.context.declare("opt3", OptionBool(True), "option 3")
        self.context.declare("opt4", OptionBool(True), "option 4")

    def testParseBooleans(self):
        self.assertEqual(self.context.parse(["opt1", "opt2+", "opt3-"]), 3)
        self.assertIs(self.context.option("opt1").value, True)
        self.assertIs(self.context.option("opt2").value, True)
        self.assertIs(self.context.option("opt3").value, False)
        self.assertIs(self.context.option("opt4").value, True)
        self.assertEqual(str(self.context), "[opt1:true opt2:true opt3:false opt4:true]")

    def testStopsAtCommandMarker(self):
        self.assertEqual(self.context.parse(["opt1", "@next", "opt2"]), 1)
        self.assertIs(self.context.option("opt2").value, False)

    def testEmptyInput(self):
        self.assertEqual(self.context.parse([]), 0)

    def testHelpFlag(self):
        self.assertFalse(self.context.help_requested)
        self.assertEqual(self.context.parse(["help", "opt1"]), 2)
        self.assertTrue(self.context.help_requested)

    def testUnknownOptionRaises(self):
        with self.assertRaises(UnknownOptionError) as cm:
            self.context.parse(["opt"])
        self.assertEqual(str(cm.exception), "unknown option: opt")
        self.assertIn("opt1", cm.exception.options["suggestions"])

    def testIllegalValueIsPrefixed(self):
        with self.assertRaises(ValueSyntaxError) as cm:
            self.context.parse(["opt1=X"])
        self.assertEqual(str(cm.exception), "opt1: illegal OptionBool value: =X")

    def testFirstFaultAbortsParsing(self):
        with self.assertRaises(UnknownOptionError):
            self.context.parse(["opt1", "nope", "opt2"])
        self.assertIs(self.context.option("opt1").value, True)
        self.assertIs(self.context.option("opt2").value, False)


class TestContextValues(TestCase):
    """Value splitting on the first '=' only."""

    def testSplitsOnFirstEquals(self):
        context = Context(make_commander(), noop)
        context.declare("name", OptionString("x"))
        self.assertEqual(context.parse(["name=a=b"]), 1)
        self.assertEqual(context.option("name").value, "a=b")

    def testBareStringClears(self):
        context = Context(make_commander(), noop)
        context.declare("name", OptionString("x"))
        context.parse(["name"])
        self.assertEqual(context.option("name").value, "")

    def testSuffixOnStringRejected(self):
        context = Context(make_commander(), noop)
        context.declare("name", OptionString("x"))
        with self.assertRaises(ValueSyntaxError) as cm:
            context.parse(["name+"])
        self.assertEqual(str(cm.exception), "name: illegal OptionString value: +")

    def testPlainValueErrorBecomesValueSyntaxError(self):
        class Even(OptionInt):
            def set(self, token, /):
                super().set(token)
                if self.value % 2:
                    raise ValueError("odd number")

        context = Context(make_commander(), noop)
        context.declare("n", Even())
        with self.assertRaises(ValueSyntaxError) as cm:
            context.parse(["n=3"])
        self.assertEqual(str(cm.exception), "n: odd number")

    def testConfigurationErrorIsNotWrapped(self):
        class Misconfigured(OptionBool):
            def set(self, token, /):
                raise ConfigurationError("option is not ready")

        context = Context(make_commander(), noop)
        context.declare("flag", Misconfigured())
        with self.assertRaises(ConfigurationError) as cm:
            context.parse(["flag"])
        self.assertNotIsInstance(cm.exception, CommandException)
        self.assertEqual(str(cm.exception), "option is not ready")


class TestContextHelp(TestCase):
    """Exact per-command help listing."""

    def setUp(self):
        self.commander = make_commander()
        self.context = Context(self.commander, noop)
        self.context.declare("opt2", OptionBool(True), "option 2")
        self.context.declare("opt1", OptionBool(False), "option 1")

    def testHelptextLayout(self):
        self.assertEqual(
            self.context.helptext("cmd1").plain,
            "An atcommander application\n"
            "Copyright (c) the atcommander authors.\n"
            "\n"
            "@cmd1: command 1\n"
            "options:\n"
            "  help\tShow this help and exit\n"
            "  opt1[+-]\toption 1\n"
            "  opt2[+-]\toption 2 (default true)\n"
        )

    def testSilentDefaults(self):
        context = Context(self.commander, noop)
        context.declare("count", OptionInt(0), "count")
        context.declare("label", OptionString(""), "label")
        context.declare("limit", OptionInt(3), "limit")
        context.declare("mode", OptionChoice(("a", "b")), "mode")
        self.assertEqual(
            context.helptext("x").plain.split("options:\n")[1],
            "  help\tShow this help and exit\n"
            "  count=INT\tcount\n"
            "  label=VALUE\tlabel\n"
            "  limit=INT\tlimit (default 3)\n"
            '  mode={a,b}\tmode (default "a")\n'
        )

    def testHelpPrintsOnConsole(self):
        self.context.help("cmd1")
        self.assertEqual(
            self.commander.console.file.getvalue(),
            "An atcommander application\n"
            "Copyright (c) the atcommander authors.\n"
            "\n"
            "@cmd1: command 1\n"
            "options:\n"
            "  help\tShow this help and exit\n"
            "  opt1[+-]\toption 1\n"
            "  opt2[+-]\toption 2 (default true)\n"
        )


if __name__ == "__main__":
    unittest.main()
