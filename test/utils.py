"""
Utilities behavioral tests (Unset sentinel, coalesce, rename, narrow).

Scope
- Validate the Unset singleton (identity, falsiness, copy/pickle stability, finality).
- Validate coalesce() and rename().
- Validate narrow() for signed and unsigned widths.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import pickle
import unittest
from unittest import TestCase

from clix.sources import MappingSource
from clix.utils import *


class TestUnset(TestCase):
    """Semantics of the Unset sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsy(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)

    def testRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testCopyAndPickleKeepIdentity(self):
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testFinal(self):
        with self.assertRaises(TypeError):
            class Sub(UnsetType):  # NOQA: F-841
                pass


class TestCoalesce(TestCase):
    """coalesce() only replaces Unset."""

    def testReplacesUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testPreservesFalsyValues(self):
        for value in (None, 0, "", []):
            with self.subTest(value=value):
                self.assertIs(coalesce(value, "fallback"), value)


class TestRename(TestCase):
    """rename() on callables."""

    def testRenamesInPlace(self):
        def f():
            pass

        self.assertIs(rename(f, "do_work"), f)
        self.assertEqual((f.__name__, f.__qualname__), ("do_work", "do_work"))

    def testRenamesGeneratedGetters(self):
        self.assertEqual(MappingSource.int32.__name__, "int32")

    def testRejectsBadArguments(self):
        with self.assertRaises(TypeError):
            rename(3, "name")
        with self.assertRaises(TypeError):
            rename(lambda: None, 3)
        with self.assertRaises(TypeError):
            rename()


class TestNarrow(TestCase):
    """Fixed-width integer casts."""

    def testInRangeUnchanged(self):
        for value in (0, 1, -1, 2 ** 31 - 1, -2 ** 31):
            with self.subTest(value=value):
                self.assertEqual(narrow(value, 32), value)

    def testSignedWrapAround(self):
        self.assertEqual(narrow(2 ** 31, 32), -2 ** 31)
        self.assertEqual(narrow(2 ** 32 + 5, 32), 5)
        self.assertEqual(narrow(2 ** 63, 64), -2 ** 63)

    def testUnsignedWrapAround(self):
        self.assertEqual(narrow(-1, 32, signed=False), 2 ** 32 - 1)
        self.assertEqual(narrow(2 ** 32 + 100, 32, signed=False), 100)
        self.assertEqual(narrow(100, 64, signed=False), 100)

    def testAcceptsBooleans(self):
        self.assertEqual(narrow(True, 32), 1)

    def testRejectsNonIntegers(self):
        with self.assertRaises(TypeError):
            narrow(1.5, 32)

    def testRejectsBadWidth(self):
        with self.assertRaises(ValueError):
            narrow(1, 0)


if __name__ == '__main__':
    unittest.main()
