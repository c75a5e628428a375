# python
"""
Suggestion ranker behavioral tests.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from keelson import distance, suggest


class TestDistance(TestCase):

    def testKnownDistances(self):
        self.assertEqual(distance("kitten", "sitting"), 3)
        self.assertEqual(distance("", "abc"), 3)
        self.assertEqual(distance("abc", "abc"), 0)
        self.assertEqual(distance("foo", "foo:bar"), 4)

    def testSymmetric(self):
        self.assertEqual(distance("flaw", "lawn"), distance("lawn", "flaw"))


class TestSuggest(TestCase):

    def testCloseNamesAreKept(self):
        self.assertEqual(suggest("lst", ["list", "help", "cache:clear"]), ("list",))

    def testSubstringMatchesAreKept(self):
        self.assertEqual(
            suggest("foo", ["foo:bar", "foo:bar1", "foo1:bar", "zzz"]),
            ("foo:bar", "foo:bar1", "foo1:bar"),
        )

    def testEmptyQueryMatchesNothingBySubstring(self):
        self.assertEqual(suggest("", ["list", "help", "cache:clear"]), ())

    def testOrderedByDistanceThenInputOrder(self):
        self.assertEqual(suggest("foo", ["foo12", "fo", "foo1"]), ("fo", "foo1", "foo12"))

    def testUnrelatedNamesAreDropped(self):
        self.assertEqual(suggest("foo1", ["foo:bar"]), ())

    def testDuplicatesDropped(self):
        self.assertEqual(suggest("lst", ["list", "list"]), ("list",))

    def testLimit(self):
        names = ["a%d" % index for index in range(10)]
        self.assertEqual(len(suggest("a", names)), 5)
        self.assertEqual(len(suggest("a", names, limit=None)), 10)

    def testExplicitThreshold(self):
        self.assertEqual(suggest("abcd", ["abxy"], threshold=1), ())
        self.assertEqual(suggest("abcd", ["abxy"], threshold=2), ("abxy",))


if __name__ == "__main__":
    unittest.main()
