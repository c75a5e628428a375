# python
"""
Input binders behavioral tests.

Scope
- ArgvInput token grammar: long/short options, shortcut sets, "--" sentinel,
  positional assignment and array accumulation.
- Faults raised while binding and validation, and the no-partial-binding rule.
- StringInput shell splitting and ArrayInput mapping keys.
- Pre-binding peeks used by the dispatcher.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from keelson import Argument, Option, Definition, Mode, ArgvInput, StringInput, ArrayInput
from keelson.faults import (
    MalformedInputError,
    MissingArgumentError,
    MissingValueError,
    TooManyArgumentsError,
    UnexpectedValueError,
    UnknownArgumentError,
    UnknownOptionError,
)


def definition(*elements):
    return Definition(elements)


class TestArgvInputOptions(TestCase):
    """Long and short option parsing."""

    def setUp(self):
        self.definition = definition(
            Option("verbose", "v"),
            Option("quiet", "q"),
            Option("foo", "f", Mode.REQUIRED),
            Option("level", "l", Mode.OPTIONAL, default="1"),
        )

    def testLongSwitch(self):
        input = ArgvInput(["--verbose"], self.definition)
        self.assertIs(input.get_option("verbose"), True)
        self.assertIs(input.get_option("quiet"), False)

    def testLongInlineValue(self):
        input = ArgvInput(["--foo=bar=baz"], self.definition)
        self.assertEqual(input.get_option("foo"), "bar=baz")

    def testLongSpacedValue(self):
        input = ArgvInput(["--foo", "bar"], self.definition)
        self.assertEqual(input.get_option("foo"), "bar")

    def testLongRequiredValueMissing(self):
        with self.assertRaises(MissingValueError):
            ArgvInput(["--foo"], self.definition)

    def testNextDashTokenIsNotConsumedAsValue(self):
        with self.assertRaises(MissingValueError):
            ArgvInput(["--foo", "-v"], self.definition)

    def testOptionalValueFallsBackToDefault(self):
        input = ArgvInput(["--level", "-v"], self.definition)
        self.assertEqual(input.get_option("level"), "1")
        self.assertIs(input.get_option("verbose"), True)

    def testSwitchRejectsInlineValue(self):
        with self.assertRaises(UnexpectedValueError):
            ArgvInput(["--verbose=yes"], self.definition)

    def testUnknownLongOptionCarriesSuggestions(self):
        with self.assertRaises(UnknownOptionError) as context:
            ArgvInput(["--verbos"], self.definition)
        self.assertEqual(str(context.exception), "the '--verbos' option does not exist")
        self.assertIn("verbose", context.exception.suggestions)

    def testShortSwitch(self):
        input = ArgvInput(["-v"], self.definition)
        self.assertIs(input.get_option("verbose"), True)

    def testShortInlineValue(self):
        input = ArgvInput(["-fbar"], self.definition)
        self.assertEqual(input.get_option("foo"), "bar")

    def testShortSpacedValue(self):
        input = ArgvInput(["-f", "bar"], self.definition)
        self.assertEqual(input.get_option("foo"), "bar")

    def testShortcutSetOfSwitches(self):
        input = ArgvInput(["-vq"], self.definition)
        self.assertIs(input.get_option("verbose"), True)
        self.assertIs(input.get_option("quiet"), True)

    def testShortcutSetEndsAtFirstValueOption(self):
        input = ArgvInput(["-vfbar"], self.definition)
        self.assertIs(input.get_option("verbose"), True)
        self.assertEqual(input.get_option("foo"), "bar")

    def testShortcutSetLastValueOptionTakesNextToken(self):
        input = ArgvInput(["-vf", "bar"], self.definition)
        self.assertEqual(input.get_option("foo"), "bar")

    def testShortcutSetAndSeparateShortcutsBindAlike(self):
        elements = (Option("v", "v"), Option("o", "o", Mode.REQUIRED))
        grouped = ArgvInput(["-vo", "value"], definition(*elements))
        separate = ArgvInput(["-v", "-o", "value"], definition(*elements))
        self.assertEqual(grouped.options, {"v": True, "o": "value"})
        self.assertEqual(separate.options, grouped.options)

    def testLongInlineAndSpacedBindAlike(self):
        elements = (Option("name", mode=Mode.REQUIRED),)
        self.assertEqual(
            ArgvInput(["--name=val"], definition(*elements)).options,
            ArgvInput(["--name", "val"], definition(*elements)).options,
        )

    def testShortcutSetUnknownShortcut(self):
        with self.assertRaises(UnknownOptionError) as context:
            ArgvInput(["-vx"], self.definition)
        self.assertEqual(str(context.exception), "the '-x' option does not exist")

    def testMultiLetterShortcut(self):
        input = ArgvInput(["-ab"], definition(Option("all-branches", "ab")))
        self.assertIs(input.get_option("all-branches"), True)

    def testArrayOptionAccumulates(self):
        input = ArgvInput(
            ["--tag", "a", "-t", "b", "--tag=c"],
            definition(Option("tag", "t", Mode.REQUIRED, array=True)),
        )
        self.assertEqual(input.get_option("tag"), ["a", "b", "c"])


class TestArgvInputArguments(TestCase):
    """Positional assignment."""

    def testRequiredAndOptionalArguments(self):
        input = ArgvInput(["a"], definition(
            Argument("first", Mode.REQUIRED),
            Argument("second", Mode.OPTIONAL, default="two"),
        ))
        self.assertEqual(input.arguments, {"first": "a", "second": "two"})

    def testArrayArgumentCollectsSurplus(self):
        input = ArgvInput(["a", "b", "c", "d"], definition(
            Argument("first", Mode.REQUIRED),
            Argument("rest", Mode.OPTIONAL, array=True),
        ))
        self.assertEqual(input.get_argument("first"), "a")
        self.assertEqual(input.get_argument("rest"), ["b", "c", "d"])

    def testTooManyArguments(self):
        with self.assertRaises(TooManyArgumentsError):
            ArgvInput(["a", "b"], definition(Argument("only")))

    def testSentinelDisablesOptions(self):
        input = ArgvInput(["--", "--foo"], definition(Argument("name"), Option("foo")))
        self.assertEqual(input.get_argument("name"), "--foo")
        self.assertIs(input.get_option("foo"), False)

    def testSingleDashIsPositional(self):
        input = ArgvInput(["-"], definition(Argument("path")))
        self.assertEqual(input.get_argument("path"), "-")

    def testEmptyTokenIsPositional(self):
        input = ArgvInput([""], definition(Argument("path")))
        self.assertEqual(input.get_argument("path"), "")

    def testMissingRequiredArgument(self):
        with self.assertRaises(MissingArgumentError) as context:
            ArgvInput([], definition(Argument("first", Mode.REQUIRED), Argument("second", Mode.REQUIRED)))
        self.assertIn("'first'", str(context.exception))
        self.assertEqual(context.exception.exitcode, 2)

    def testRequiredCountBoundary(self):
        elements = (
            Argument("a", Mode.REQUIRED),
            Argument("b", Mode.REQUIRED),
            Argument("c", Mode.OPTIONAL),
        )
        ArgvInput(["1", "2"], definition(*elements))
        with self.assertRaises(MissingArgumentError):
            ArgvInput(["1"], definition(*elements))


class TestBinding(TestCase):
    """Binding lifecycle."""

    def testFailedBindLeavesNothingBound(self):
        input = ArgvInput(["--verbose", "a", "--unknown"])
        with self.assertRaises(UnknownOptionError):
            input.bind(definition(Argument("name"), Option("verbose")))
        self.assertEqual(input.arguments, {"name": None})
        self.assertEqual(input.options, {"verbose": False})

    def testRebindStartsFresh(self):
        input = ArgvInput(["a"])
        input.bind(definition(Argument("first")))
        self.assertEqual(input.get_argument("first"), "a")
        input.bind(definition(Argument("other")))
        self.assertEqual(input.arguments, {"other": "a"})

    def testSetAndGetValues(self):
        input = ArgvInput([], definition(Argument("name"), Option("verbose")))
        input.set_argument("name", "x")
        input.set_option("verbose", True)
        self.assertEqual(input.get_argument("name"), "x")
        self.assertIs(input.get_option("verbose"), True)
        with self.assertRaises(KeyError):
            input.set_argument("missing", "x")
        with self.assertRaises(KeyError):
            input.get_option("missing")

    def testPositionalIndexResolvesToArgumentName(self):
        input = ArgvInput(["a"], definition(Argument("first"), Argument("second")))
        self.assertEqual(input.get_argument(0), "a")
        self.assertIsNone(input.get_argument(1))
        input.set_argument(1, "z")
        self.assertEqual(input.arguments, {"first": "a", "second": "z"})
        with self.assertRaises(KeyError):
            input.get_argument(2)

    def testNonFaultErrorAlsoLeavesNothingBound(self):
        input = ArrayInput({"name": "x", 1: "y"})
        with self.assertRaises(TypeError):
            input.bind(definition(Argument("name")))
        self.assertEqual(input.arguments, {"name": None})

    def testInteractiveDefaultsToTrue(self):
        input = ArgvInput([])
        self.assertTrue(input.interactive)
        input.interactive = False
        self.assertFalse(input.interactive)


class TestParameterPeeks(TestCase):
    """Pre-binding introspection."""

    def setUp(self):
        self.input = ArgvInput(["-v", "cache:clear", "--env=prod", "--pool", "redis"])

    def testFirstArgument(self):
        self.assertEqual(self.input.first_argument(), "cache:clear")
        self.assertIsNone(ArgvInput(["-v"]).first_argument())

    def testHasParameterOption(self):
        self.assertTrue(self.input.has_parameter_option("-v"))
        self.assertTrue(self.input.has_parameter_option(["--quiet", "--pool"]))
        self.assertFalse(self.input.has_parameter_option("--quiet"))

    def testGetParameterOption(self):
        self.assertEqual(self.input.get_parameter_option("--env"), "prod")
        self.assertEqual(self.input.get_parameter_option(["--pool"]), "redis")
        self.assertIs(self.input.get_parameter_option("--missing"), False)
        self.assertEqual(self.input.get_parameter_option("--missing", default="x"), "x")

    def testStringRejoinsTokens(self):
        self.assertEqual(str(ArgvInput(["say", "hello world"])), "say 'hello world'")


class TestStringInput(TestCase):

    def testShellSplitting(self):
        input = StringInput("greet 'John Doe' --times=2", definition(
            Argument("command"),
            Argument("who"),
            Option("times", mode=Mode.REQUIRED),
        ))
        self.assertEqual(input.get_argument("who"), "John Doe")
        self.assertEqual(input.get_option("times"), "2")

    def testNonStringRejected(self):
        with self.assertRaises(TypeError):
            StringInput(["greet"])

    def testUnbalancedQuoteIsMalformedInput(self):
        with self.assertRaises(MalformedInputError) as context:
            StringInput("greet 'unclosed")
        self.assertEqual(context.exception.exitcode, 2)
        self.assertEqual(context.exception.options["string"], "greet 'unclosed")


class TestArrayInput(TestCase):

    def setUp(self):
        self.definition = definition(
            Argument("name"),
            Option("verbose", "v"),
            Option("foo", "f", Mode.REQUIRED),
            Option("level", mode=Mode.OPTIONAL, default="1"),
        )

    def testKeysMapToSlots(self):
        input = ArrayInput({"name": "x", "-v": None, "--foo": "bar", "--level": None}, self.definition)
        self.assertEqual(input.get_argument("name"), "x")
        self.assertIs(input.get_option("verbose"), True)
        self.assertEqual(input.get_option("foo"), "bar")
        self.assertEqual(input.get_option("level"), "1")

    def testRequiredValueMissing(self):
        with self.assertRaises(MissingValueError):
            ArrayInput({"--foo": None}, self.definition)

    def testUnknownArgument(self):
        with self.assertRaises(UnknownArgumentError):
            ArrayInput({"other": "x"}, self.definition)

    def testUnknownOption(self):
        with self.assertRaises(UnknownOptionError):
            ArrayInput({"--other": "x"}, self.definition)

    def testOptionalArgumentDoesNotStandInForRequiredOne(self):
        with self.assertRaises(MissingArgumentError) as context:
            ArrayInput({"b": "x"}, definition(Argument("a", Mode.REQUIRED), Argument("b")))
        self.assertEqual(context.exception.options["missing"], ("a",))

    def testPeeks(self):
        input = ArrayInput({"--env": "prod", "command": "cache:clear"})
        self.assertEqual(input.first_argument(), "cache:clear")
        self.assertTrue(input.has_parameter_option("--env"))
        self.assertEqual(input.get_parameter_option("--env"), "prod")
        self.assertIs(input.get_parameter_option("--missing"), False)


if __name__ == "__main__":
    unittest.main()
