"""
Kinds module behavioral tests (classification, zero values, casts).

Scope
- Validate classify() for every supported annotation and a sample of unsupported ones.
- Validate zero values (fresh lists, zero instant, None for optional timestamps).
- Validate width casts and the zero-instant check.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import typing
import unittest
from datetime import datetime, timedelta, timezone
from unittest import TestCase

from clix.kinds import *


class TestClassify(TestCase):
    """Mapping declared types to kinds."""

    def testScalars(self):
        expected = {
            str: Kind.TEXT,
            int32: Kind.INT32,
            int: Kind.INT64,
            int64: Kind.INT64,
            uint32: Kind.UINT32,
            uint64: Kind.UINT64,
            bool: Kind.BOOL,
            float: Kind.FLOAT64,
            float64: Kind.FLOAT64,
            timedelta: Kind.DURATION,
            datetime: Kind.TIMESTAMP,
        }
        for hint, kind in expected.items():
            with self.subTest(hint=hint):
                self.assertIs(classify(hint), kind)

    def testOptionalTimestamp(self):
        self.assertIs(classify(datetime | None), Kind.OPTIONAL_TIMESTAMP)
        self.assertIs(classify(typing.Optional[datetime]), Kind.OPTIONAL_TIMESTAMP)
        self.assertIs(classify(None | datetime), Kind.OPTIONAL_TIMESTAMP)

    def testSequences(self):
        expected = {
            list[str]: Kind.TEXT_LIST,
            list[int32]: Kind.INT32_LIST,
            list[int]: Kind.INT64_LIST,
            list[int64]: Kind.INT64_LIST,
            list[uint32]: Kind.UINT32_LIST,
            list[uint64]: Kind.UINT64_LIST,
            list[float]: Kind.FLOAT64_LIST,
            list[float64]: Kind.FLOAT64_LIST,
            typing.List[str]: Kind.TEXT_LIST,
        }
        for hint, kind in expected.items():
            with self.subTest(hint=hint):
                self.assertIs(classify(hint), kind)

    def testUnsupported(self):
        for hint in (dict, list, bytes, list[bool], list[list[str]], tuple[str], str | None, int | str, set[int]):
            with self.subTest(hint=hint):
                self.assertIsNone(classify(hint))


class TestKind(TestCase):
    """Kind attributes, zero values and casts."""

    def testGetters(self):
        self.assertEqual(Kind.TEXT.getter, "string")
        self.assertEqual(Kind.BOOL.getter, "boolean")
        self.assertEqual(Kind.TIMESTAMP.getter, "timestamp")
        self.assertEqual(Kind.OPTIONAL_TIMESTAMP.getter, "timestamp")
        self.assertEqual(Kind.UINT64_LIST.getter, "uint64_list")

    def testTimestampKindsAreDistinct(self):
        self.assertIsNot(Kind.TIMESTAMP, Kind.OPTIONAL_TIMESTAMP)
        self.assertEqual(len(Kind), 16)

    def testWidths(self):
        self.assertEqual((Kind.INT32.width, Kind.INT32.signed), (32, True))
        self.assertEqual((Kind.UINT64.width, Kind.UINT64.signed), (64, False))
        self.assertIsNone(Kind.FLOAT64.width)
        self.assertTrue(Kind.INT32_LIST.sequence)
        self.assertFalse(Kind.INT32.sequence)

    def testZeroValues(self):
        self.assertEqual(Kind.TEXT.zero(), "")
        self.assertEqual(Kind.INT32.zero(), 0)
        self.assertEqual(Kind.UINT64.zero(), 0)
        self.assertIs(Kind.BOOL.zero(), False)
        self.assertEqual(Kind.FLOAT64.zero(), 0.0)
        self.assertIsInstance(Kind.FLOAT64.zero(), float)
        self.assertEqual(Kind.DURATION.zero(), timedelta(0))
        self.assertEqual(Kind.TIMESTAMP.zero(), ZERO_TIME)
        self.assertIsNone(Kind.OPTIONAL_TIMESTAMP.zero())

    def testZeroListsAreFresh(self):
        self.assertEqual(Kind.TEXT_LIST.zero(), [])
        self.assertIsNot(Kind.TEXT_LIST.zero(), Kind.TEXT_LIST.zero())

    def testCastNarrows(self):
        self.assertEqual(Kind.INT32.cast(2 ** 31 - 1), 2 ** 31 - 1)
        self.assertEqual(Kind.INT32.cast(2 ** 31), -2 ** 31)
        self.assertEqual(Kind.UINT32.cast(-1), 2 ** 32 - 1)
        self.assertEqual(Kind.INT64.cast(2 ** 63), -2 ** 63)
        self.assertEqual(Kind.UINT64_LIST.cast([-1, 1]), [2 ** 64 - 1, 1])

    def testCastCoercesFloatsAndBooleans(self):
        self.assertIsInstance(Kind.FLOAT64.cast(1), float)
        self.assertEqual(Kind.FLOAT64_LIST.cast([1, 2]), [1.0, 2.0])
        self.assertIs(Kind.BOOL.cast(1), True)

    def testCastPassesThroughOthers(self):
        moment = datetime(2020, 1, 1, tzinfo=timezone.utc)
        self.assertIs(Kind.TIMESTAMP.cast(moment), moment)
        self.assertEqual(Kind.TEXT.cast("x"), "x")
        self.assertEqual(Kind.TEXT_LIST.cast(("a", "b")), ["a", "b"])

    def testCastNoneListIsEmpty(self):
        self.assertEqual(Kind.INT64_LIST.cast(None), [])


class TestZeroTime(TestCase):
    """The zero instant."""

    def testZeroTimeValue(self):
        self.assertEqual(ZERO_TIME, datetime(1, 1, 1, tzinfo=timezone.utc))

    def testIsZero(self):
        self.assertTrue(iszero(ZERO_TIME))
        self.assertTrue(iszero(datetime.min))
        self.assertFalse(iszero(datetime(1970, 1, 1)))
        self.assertFalse(iszero(datetime(1970, 1, 1, tzinfo=timezone.utc)))


if __name__ == '__main__':
    unittest.main()
