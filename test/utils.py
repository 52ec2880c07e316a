"""
Utils module behavioral tests (sentinel, coalesce, rename, mirror, slugify).

Scope
- Validate the Unset sentinel: singleton, falsey, usable in isinstance unions.
- Validate coalesce, the rename decorator and mirror snapshots.
- Validate slugify normalization.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from atcommander.utils import Unset, UnsetType, coalesce, rename, mirror, slugify


class Holder:
    def __init__(self):
        self._items = ["a", "b"]
        self._table = {"k": 1}
        self._tags = {"x"}
        self._label = "name"

    items = mirror("items")
    table = mirror("table")
    tags = mirror("tags")
    label = mirror("label")


class TestUnset(TestCase):
    """The "not provided" sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalseyAndPrintable(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testUnionInIsinstance(self):
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertTrue(isinstance("x", str | Unset))
        self.assertFalse(isinstance(1, str | Unset))

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            type("Derived", (UnsetType,), {})


class TestCoalesce(TestCase):
    """Unset replacement only."""

    def testReplacesUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testKeepsFalseyValues(self):
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce("", "fallback"), "")
        self.assertEqual(coalesce(0, 5), 0)


class TestRename(TestCase):
    """The rename decorator."""

    def testRenamesCallable(self):
        @rename("command")
        def wrapper():
            pass

        self.assertEqual(wrapper.__name__, "command")
        self.assertEqual(wrapper.__qualname__, "command")
        self.assertEqual(rename("x").__name__, "rename")

    def testRejectsBadArguments(self):
        with self.assertRaises(TypeError):
            rename(1)
        with self.assertRaises(TypeError):
            rename("x")("not callable")
        with self.assertRaises(TypeError):
            rename("x")(len)


class TestMirror(TestCase):
    """Read-only snapshots of private fields."""

    def testSnapshots(self):
        holder = Holder()
        self.assertEqual(holder.items, ("a", "b"))
        self.assertEqual(holder.table, {"k": 1})
        self.assertIsNot(holder.table, holder._table)
        self.assertEqual(holder.tags, frozenset({"x"}))
        self.assertEqual(holder.label, "name")

    def testReadOnly(self):
        with self.assertRaises(AttributeError):
            Holder().items = ()

    def testPropertyName(self):
        self.assertEqual(Holder.items.fget.__name__, "items")


class TestSlugify(TestCase):
    """Display name normalization."""

    def testSlugify(self):
        self.assertEqual(slugify("An atcommander application"), "an-atcommander-application")
        self.assertEqual(slugify("  My Tool v2!  "), "my-tool-v2")
        self.assertEqual(slugify("***"), "app")


if __name__ == "__main__":
    unittest.main()
