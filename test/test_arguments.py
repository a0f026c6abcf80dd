"""
Arguments module behavioral tests.

Scope
- Validate Argument declarations: position, name, description, kind, default rules.
- Validate the per-argument pipeline: whitespace skipping, omission, defaults,
  single-token vs multisegmented consumption, conversion and validation faults.
- Validate built-in kinds and kind composition (derive, sequence, boolean).

Conventions
- Test method names follow CamelCase per project convention.
- Faults are checked through their exact user-facing message.
"""

from __future__ import annotations

import unittest
from datetime import datetime
from decimal import Decimal
from unittest import TestCase

from taptalk import (
    ALLOWED_FORBIDDEN,
    BOOLEAN,
    CHARACTER,
    DATETIME,
    DECIMAL,
    FLOAT,
    INTEGER,
    INTEGER_ARRAY,
    NON_NEGATIVE_INTEGER,
    STRING,
    YES_NO,
    Argument,
    ArgumentKind,
    ArgumentState,
    Synonyms,
    boolean,
    sequence,
)
from taptalk.faults import (
    EmptyDescriptionError,
    InvalidArgumentError,
    MalformedArgumentError,
    MissingArgumentError,
    UnparsableArgumentError,
)
from taptalk.utils import Unset


def _convert(kind, token):
    argument = Argument(0, "x", "test argument", kind, multisegmented=kind.multisegmented)
    state, remainder = argument.__parse__(token)
    return state.value


class TestArgumentDeclaration(TestCase):
    """Behavioral tests for Argument construction."""

    def testDefaults(self):
        argument = Argument(0, "word", "a word")
        self.assertIs(argument.type, STRING)
        self.assertFalse(argument.optional)
        self.assertFalse(argument.multisegmented)
        self.assertIs(argument.default, Unset)
        self.assertFalse(argument.special)

    def testSpecialFlags(self):
        self.assertTrue(Argument(0, "word", "a word", optional=True).special)
        self.assertTrue(Argument(0, "text", "a text", multisegmented=True).special)

    def testNegativePositionRejected(self):
        with self.assertRaises(MalformedArgumentError):
            Argument(-1, "word", "a word")

    def testBooleanPositionRejected(self):
        with self.assertRaises(MalformedArgumentError):
            Argument(True, "word", "a word")

    def testMalformedNamesRejected(self):
        for name in ("", "Word", "two words", "snake_case", 7):
            with self.subTest(name=name), self.assertRaises(MalformedArgumentError):
                Argument(0, name, "a word")

    def testEmptyDescriptionRejected(self):
        with self.assertRaises(EmptyDescriptionError):
            Argument(0, "word", "   ")

    def testDescriptionTrimmed(self):
        self.assertEqual(Argument(0, "word", "  a word ").descr, "a word")

    def testTypeMustBeKind(self):
        with self.assertRaises(MalformedArgumentError):
            Argument(0, "count", "a count", int)

    def testDefaultRequiresOptional(self):
        with self.assertRaises(MalformedArgumentError):
            Argument(0, "word", "a word", default="bird")

    def testDefaultMustBeString(self):
        with self.assertRaises(MalformedArgumentError):
            Argument(0, "count", "a count", INTEGER, optional=True, default=3)

    def testArrayKindMustBeMultisegmented(self):
        with self.assertRaises(MalformedArgumentError):
            Argument(0, "values", "some values", INTEGER_ARRAY)
        self.assertTrue(Argument(0, "values", "some values", INTEGER_ARRAY, multisegmented=True).multisegmented)

    def testArgumentIsReadOnly(self):
        argument = Argument(0, "word", "a word")
        with self.assertRaises(AttributeError):
            argument._name = "other"
        with self.assertRaises(AttributeError):
            argument.name = "other"

    def testRepr(self):
        self.assertTrue(repr(Argument(0, "word", "a word")).startswith("argument(position=0, name='word'"))


class TestArgumentPipeline(TestCase):
    """Behavioral tests for Argument.__parse__."""

    def testRequiredArgumentMissing(self):
        with self.assertRaises(MissingArgumentError) as context:
            Argument(0, "word", "a word").__parse__("   ")
        self.assertEqual(context.exception.message, 'Argument "word" is missing!')

    def testOptionalWithoutDefaultIsOmitted(self):
        argument = Argument(0, "char", "a character", CHARACTER, optional=True)
        self.assertEqual(argument.__parse__("  "), (ArgumentState(None, True, argument), ""))

    def testOptionalDefaultIsConverted(self):
        argument = Argument(0, "times", "repetitions", INTEGER, optional=True, default="3")
        self.assertEqual(argument.__parse__(""), (ArgumentState(3, True, argument), ""))

    def testDefaultMatchesExplicitValue(self):
        argument = Argument(0, "times", "repetitions", INTEGER, optional=True, default="7")
        omitted, _ = argument.__parse__("")
        explicit, _ = argument.__parse__("7")
        self.assertEqual(omitted.value, explicit.value)
        self.assertTrue(omitted.omitted)
        self.assertFalse(explicit.omitted)

    def testBrokenDefaultIsParseFault(self):
        argument = Argument(1, "times", "repetitions", INTEGER, optional=True, default="one")
        with self.assertRaises(UnparsableArgumentError) as context:
            argument.__parse__("")
        self.assertEqual(context.exception.message, 'Error parsing argument "times". Integer value expected.')

    def testTokenStopsAtWhitespace(self):
        argument = Argument(0, "word", "a word")
        state, remainder = argument.__parse__("  abc def")
        self.assertEqual(state.value, "abc")
        self.assertFalse(state.omitted)
        self.assertEqual(remainder, " def")

    def testMultisegmentedTakesTheRest(self):
        argument = Argument(0, "text", "a text", multisegmented=True)
        state, remainder = argument.__parse__("  the bird  is ")
        self.assertEqual(state.value, "the bird  is ")
        self.assertEqual(remainder, "")

    def testValidationFault(self):
        argument = Argument(0, "count", "a count", NON_NEGATIVE_INTEGER)
        with self.assertRaises(InvalidArgumentError) as context:
            argument.__parse__("-3")
        self.assertEqual(context.exception.message, 'Error validating argument "count". Non-negative value expected.')
        self.assertEqual(argument.__parse__("0")[0].value, 0)

    def testArgumentsAreNotMutatedByParsing(self):
        argument = Argument(0, "word", "a word", optional=True, default="bird")
        before = repr(argument)
        argument.__parse__("first")
        argument.__parse__("")
        self.assertEqual(repr(argument), before)


class TestArgumentKinds(TestCase):
    """Behavioral tests for built-in and composed kinds."""

    def assertParseFault(self, kind, token, message):
        with self.assertRaises(UnparsableArgumentError) as context:
            _convert(kind, token)
        self.assertEqual(context.exception.message, message)

    def testInteger(self):
        self.assertEqual(_convert(INTEGER, "-42"), -42)
        self.assertParseFault(INTEGER, "4.2", 'Error parsing argument "x". Integer value expected.')

    def testIntegerAcceptsAsciiDigitsOnly(self):
        self.assertEqual(_convert(INTEGER, "+7"), 7)
        for token in ("1_000", "٣", "+", "0x10"):
            with self.subTest(token=token):
                self.assertParseFault(INTEGER, token, 'Error parsing argument "x". Integer value expected.')
        self.assertParseFault(INTEGER_ARRAY, "1 1_0", 'Error parsing element #2 of "x" argument. Integer value expected.')

    def testFloat(self):
        self.assertEqual(_convert(FLOAT, "2.5"), 2.5)
        self.assertParseFault(FLOAT, "abc", 'Error parsing argument "x". Numeric value expected.')

    def testDecimal(self):
        self.assertEqual(_convert(DECIMAL, "0.1"), Decimal("0.1"))
        self.assertParseFault(DECIMAL, "abc", 'Error parsing argument "x". Numeric value expected.')

    def testIntegerArray(self):
        self.assertEqual(_convert(INTEGER_ARRAY, "1 2  3"), [1, 2, 3])
        self.assertParseFault(INTEGER_ARRAY, "1 x 3", 'Error parsing element #2 of "x" argument. Integer value expected.')

    def testEmptyArrayFromDefault(self):
        argument = Argument(0, "values", "values", INTEGER_ARRAY, optional=True, multisegmented=True, default="")
        self.assertEqual(argument.__parse__("")[0].value, [])

    def testString(self):
        self.assertEqual(_convert(STRING, "Bird"), "Bird")

    def testCharacter(self):
        self.assertEqual(_convert(CHARACTER, "é"), "é")
        self.assertParseFault(CHARACTER, "ab", 'Error parsing argument "x". Character expected.')

    def testDatetime(self):
        self.assertEqual(_convert(DATETIME, "2024-05-06T07:08:09"), datetime(2024, 5, 6, 7, 8, 9))
        self.assertParseFault(DATETIME, "yesterday", 'Error parsing argument "x". Wrong datetime format.')

    def testBooleanFamilies(self):
        cases = (
            (BOOLEAN, "T", True), (BOOLEAN, "false", False),
            (YES_NO, "y", True), (YES_NO, "No", False),
            (ALLOWED_FORBIDDEN, "allowed", True), (ALLOWED_FORBIDDEN, "f", False),
        )
        for kind, token, expected in cases:
            with self.subTest(kind=kind.label, token=token):
                self.assertIs(_convert(kind, token), expected)

    def testBooleanFaultListsSynonyms(self):
        self.assertParseFault(BOOLEAN, "yes", 'Error parsing argument "x". Permissible values are: true, t; or: false, f.')
        self.assertParseFault(YES_NO, "t", 'Error parsing argument "x". Permissible values are: yes, y; or: no, n.')

    def testBooleanRequiresSynonyms(self):
        with self.assertRaises(TypeError):
            boolean(("yes", "no"))
        self.assertEqual(boolean(Synonyms.YES_NO).label, "yes-no")

    def testDeriveKeepsUntouchedFields(self):
        even = INTEGER.derive(
            label="even integer",
            validator=lambda value: value % 2 == 0,
            invalid='Error validating argument "{name}". Even value expected.',
        )
        self.assertEqual(_convert(even, "4"), 4)
        with self.assertRaises(InvalidArgumentError) as context:
            _convert(even, "3")
        self.assertEqual(context.exception.message, 'Error validating argument "x". Even value expected.')
        self.assertIs(INTEGER.validator, Unset)
        self.assertIs(even.converter, INTEGER.converter)

    def testSequenceOfFloats(self):
        floats = sequence(FLOAT)
        self.assertEqual(floats.label, "float array")
        self.assertTrue(floats.multisegmented)
        self.assertEqual(_convert(floats, "1.5 2"), [1.5, 2.0])

    def testCustomKindLookupFault(self):
        colors = ArgumentKind("color", {"red": 1, "green": 2}.__getitem__, "Only red or green are expected.")
        self.assertEqual(_convert(colors, "green"), 2)
        self.assertParseFault(colors, "blue", 'Error parsing argument "x". Only red or green are expected.')

    def testKindLabelRequired(self):
        with self.assertRaises(MalformedArgumentError):
            ArgumentKind(" ", int, "Integer value expected.")

    def testKindConverterMustBeCallable(self):
        with self.assertRaises(MalformedArgumentError):
            ArgumentKind("integer", 3, "Integer value expected.")


if __name__ == "__main__":
    unittest.main()
