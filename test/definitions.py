"""
Definitions module behavioral tests (keys, metadata, hooks, decorators).

Scope
- Validate key normalization: "--" long prefix, "-" short prefix, empty short key means none.
- Validate construction errors: empty long key, non-string metadata, bad metavars.
- Validate the default parse() hook and Flag/Option dispatch.
- Validate the @flag/@option decorators.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from arcline import Definition, Flag, Option, flag, option
from arcline.faults import DefinitionError, DefinitionExit, MissingValueNotice


class Noop(Definition):
    def execute(self):
        pass


class TestDefinition(TestCase):
    """Behavioral tests for the abstract Definition contract."""

    def testLongKeyGetsDoubleDashPrefix(self):
        for key in ("verbose", "v", "dry-run", "x1"):
            with self.subTest(key=key):
                self.assertEqual(Noop(key).long_key, "--" + key)

    def testLongKeyWithPrefixIsKeptAsIs(self):
        self.assertEqual(Noop("--verbose").long_key, "--verbose")

    def testEmptyLongKeyRejected(self):
        for short_key, description in (("", ""), ("v", ""), ("", "text"), ("v", "text")):
            with self.subTest(short_key=short_key, description=description):
                with self.assertRaises(DefinitionError):
                    Noop("", short_key, description)

    def testEmptyLongKeyIsValueError(self):
        with self.assertRaises(ValueError):
            Noop("")

    def testNonStringLongKeyRejected(self):
        with self.assertRaises(TypeError):
            Noop(42)

    def testShortKeyGetsSingleDashPrefix(self):
        self.assertEqual(Noop("verbose", "v").short_key, "-v")
        self.assertEqual(Noop("verbose", "-v").short_key, "-v")

    def testEmptyShortKeyMeansNoShortForm(self):
        self.assertIsNone(Noop("verbose").short_key)
        self.assertIsNone(Noop("verbose", "").short_key)

    def testKeysListLongThenShort(self):
        self.assertEqual(Noop("verbose", "v").keys, ("--verbose", "-v"))
        self.assertEqual(Noop("verbose").keys, ("--verbose",))

    def testDescriptionDefaultsToNone(self):
        self.assertIsNone(Noop("verbose").description)
        self.assertIsNone(Noop("verbose", "v", "").description)
        self.assertEqual(Noop("verbose", "v", "Print more.").description, "Print more.")

    def testNonStringDescriptionRejected(self):
        with self.assertRaises(TypeError):
            Noop("verbose", "v", 3)

    def testMetavarsAreStoredAsTuple(self):
        self.assertEqual(Noop("pair", metavars=["LEFT", "RIGHT"]).metavars, ("LEFT", "RIGHT"))

    def testMetavarsPlainStringRejected(self):
        with self.assertRaises(TypeError):
            Noop("pair", metavars="LEFT")

    def testBlankMetavarRejected(self):
        with self.assertRaises(DefinitionError):
            Noop("pair", metavars=("LEFT", " "))

    def testDefaultParseConsumesNothing(self):
        self.assertEqual(Noop("verbose").parse(2, ["prog", "--verbose", "extra"]), 0)

    def testAbstractDefinitionCannotBeInstantiated(self):
        with self.assertRaises(TypeError):
            Definition("verbose")

    def testReprShowsKeys(self):
        representation = repr(Noop("verbose", "v"))
        self.assertIn("'--verbose'", representation)
        self.assertIn("'-v'", representation)


class TestFlag(TestCase):
    """Behavioral tests for callback-bound flags."""

    def testExecuteCallsCallback(self):
        calls = []
        Flag("verbose", "v", "", lambda: calls.append("called")).execute()
        self.assertEqual(calls, ["called"])

    def testExecuteWithoutCallbackIsNoop(self):
        Flag("verbose").execute()

    def testNonZeroIntegerResultFails(self):
        with self.assertRaises(DefinitionExit) as context:
            Flag("verbose", "v", "", lambda: 3).execute()
        self.assertEqual(context.exception.code, 3)

    def testZeroAndBooleanResultsSucceed(self):
        for result in (0, True, False, None, "ok"):
            with self.subTest(result=result):
                Flag("verbose", "v", "", lambda: result).execute()

    def testNonCallableCallbackRejected(self):
        with self.assertRaises(TypeError):
            Flag("verbose", "v", "", "not callable")

    def testDecoratorBuildsFlag(self):
        calls = []

        @flag("verbose", "v", "Print more.")
        def verbose():
            calls.append("verbose")

        self.assertIsInstance(verbose, Flag)
        self.assertEqual(verbose.keys, ("--verbose", "-v"))
        self.assertEqual(verbose.description, "Print more.")
        verbose()
        self.assertEqual(calls, ["verbose"])

    def testDecoratorRejectsNonCallable(self):
        with self.assertRaises(TypeError):
            flag("verbose")(42)


class TestOption(TestCase):
    """Behavioral tests for value-bearing options."""

    def testParseConsumesOneTokenPerMetavar(self):
        received = []
        pair = Option("pair", "p", "", lambda left, right: received.append((left, right)), metavars=("L", "R"))
        self.assertEqual(pair.parse(2, ["prog", "--pair", "a", "b", "--other"]), 2)
        pair.execute()
        self.assertEqual(received, [("a", "b")])

    def testDefaultMetavarIsSingleValue(self):
        self.assertEqual(Option("output").metavars, ("VALUE",))

    def testEmptyMetavarsRejected(self):
        with self.assertRaises(DefinitionError):
            Option("output", metavars=())

    def testMissingValueFailsWithMissingExitCode(self):
        output = Option("output", "o", missing_exit_code=4)
        with self.assertRaises(DefinitionExit) as context:
            output.parse(2, ["prog", "--output"])
        self.assertEqual(context.exception.code, 4)
        self.assertIsInstance(context.exception.notice, MissingValueNotice)
        self.assertIn("<VALUE>", context.exception.notice.options["hint"])
        self.assertEqual(set(context.exception.notice.options), {"code", "title", "hint"})

    def testMissingValueDefaultsToExitCodeOne(self):
        with self.assertRaises(DefinitionExit) as context:
            Option("output").parse(2, ["prog", "--output"])
        self.assertEqual(context.exception.code, 1)

    def testRepeatedMatchesKeepTheirOwnValues(self):
        received = []
        tag = Option("tag", "t", "", received.append)
        tag.parse(2, ["prog", "--tag", "a", "--tag", "b"])
        tag.parse(4, ["prog", "--tag", "a", "--tag", "b"])
        tag.execute()
        tag.execute()
        self.assertEqual(received, ["a", "b"])

    def testResetDropsPendingValues(self):
        received = []
        tag = Option("tag", "t", "", received.append)
        tag.parse(2, ["prog", "--tag", "stale"])
        tag.reset()
        tag.parse(2, ["prog", "--tag", "fresh"])
        tag.execute()
        self.assertEqual(received, ["fresh"])

    def testDecoratorBuildsOption(self):
        @option("output", "o", "Write to FILE.", metavars=("FILE",), missing_exit_code=9)
        def output(file):
            return file

        self.assertIsInstance(output, Option)
        self.assertEqual(output.metavars, ("FILE",))
        self.assertEqual(output.missing_exit_code, 9)
        self.assertEqual(output("a.txt"), "a.txt")


class TestDefinitionExit(TestCase):
    """Behavioral tests for the exit signal raised by hooks."""

    def testCarriesCode(self):
        self.assertEqual(DefinitionExit(7).code, 7)
        self.assertEqual(DefinitionExit().code, 0)

    def testRejectsNonIntegerCodes(self):
        for code in (True, "1", 1.0):
            with self.subTest(code=code):
                with self.assertRaises(TypeError):
                    DefinitionExit(code)

    def testRejectsNonNoticePayload(self):
        with self.assertRaises(TypeError):
            DefinitionExit(1, "not a notice")


if __name__ == "__main__":
    unittest.main()
