"""
Tests for covers/uses resolution.
"""
from typing import Protocol
import inspect
import unittest

from testmeta.analysis import CoverageResolver
from testmeta.core import (
    CodeUnitKind,
    Covers,
    CoversClass,
    CoversDefaultClass,
    CoversFunction,
    CoversMethod,
    CoversNothing,
    Uses,
    UsesDefaultClass,
    UsesFunction
)
from testmeta.exceptions import AmbiguousDefaultClassError, CodeCoverageError, InvalidCoversTargetError
from testmeta.introspection import InspectCodeUnitMapper, PythonIntrospector
from testmeta.metadata import MappingMetadataReader, MetadataStore


class CoveredClass:
    def public_method(self):
        return 1

    def other_method(self):
        return 2


class CoveredInterface(Protocol):
    def area(self) -> float:
        ...


def covered_function():
    return 3


class SubjectTest:
    def test_something(self):
        pass


def line_range(obj):
    lines, start = inspect.getsourcelines(obj)
    return (start, start + len(lines) - 1)


SOURCE_FILE = inspect.getsourcefile(CoveredClass)


class TestCoverageResolver(unittest.TestCase):
    """Test cases for the coverage resolver."""

    def setUp(self):
        self.introspector = PythonIntrospector(import_modules=False)
        self.introspector.register_class(CoveredClass, "app.CoveredClass")
        self.introspector.register_class(CoveredInterface, "app.CoveredInterface")
        self.introspector.register_class(SubjectTest, "app.SubjectTest")
        self.introspector.register_function(covered_function, "app.covered_function")

    def resolver(self, class_facts=(), method_facts=()):
        reader = MappingMetadataReader({
            "app.SubjectTest": {
                "class": list(class_facts),
                "methods": {"test_something": list(method_facts)}
            }
        }, introspector=self.introspector)
        store = MetadataStore(reader, self.introspector)
        return CoverageResolver(store, InspectCodeUnitMapper(self.introspector), self.introspector)

    def covered(self, class_facts=(), method_facts=()):
        return self.resolver(class_facts, method_facts).lines_to_be_covered("app.SubjectTest", "test_something")

    def test_covers_class(self):
        """Test that a covered class maps to its source lines."""
        lines = self.covered(method_facts=[CoversClass(class_name="app.CoveredClass")])
        self.assertEqual(lines, {SOURCE_FILE: [line_range(CoveredClass)]})

    def test_covers_function(self):
        lines = self.covered(class_facts=[CoversFunction(function_name="app.covered_function")])
        self.assertEqual(lines, {SOURCE_FILE: [line_range(covered_function)]})

    def test_no_covers_facts(self):
        self.assertEqual(self.covered(), {})

    def test_covers_nothing_on_method(self):
        self.assertIs(self.covered(method_facts=[CoversNothing()]), False)

    def test_covers_nothing_on_class(self):
        resolver = self.resolver(class_facts=[CoversNothing()])
        self.assertFalse(resolver.should_code_coverage_be_collected_for("app.SubjectTest", "test_something"))
        self.assertIs(resolver.lines_to_be_covered("app.SubjectTest", "test_something"), False)

    def test_method_covers_fact_wins_over_covers_nothing(self):
        resolver = self.resolver(
            class_facts=[CoversNothing()],
            method_facts=[CoversNothing(), CoversClass(class_name="app.CoveredClass")]
        )
        self.assertTrue(resolver.should_code_coverage_be_collected_for("app.SubjectTest", "test_something"))
        self.assertEqual(
            resolver.lines_to_be_covered("app.SubjectTest", "test_something"),
            {SOURCE_FILE: [line_range(CoveredClass)]}
        )

    def test_code_units(self):
        resolver = self.resolver(
            class_facts=[CoversFunction(function_name="app.covered_function")],
            method_facts=[CoversMethod(class_name="app.CoveredClass", method_name="public_method")]
        )
        units = resolver.code_units_to_be_covered("app.SubjectTest", "test_something")

        self.assertEqual(
            [(unit.kind, unit.name) for unit in units],
            [
                (CodeUnitKind.METHOD, "app.CoveredClass::public_method"),
                (CodeUnitKind.FUNCTION, "app.covered_function"),
            ]
        )

    def test_duplicate_targets_are_merged(self):
        resolver = self.resolver(
            class_facts=[CoversClass(class_name="app.CoveredClass")],
            method_facts=[CoversClass(class_name="app.CoveredClass"), Covers(target="app.CoveredClass")]
        )
        self.assertEqual(len(resolver.code_units_to_be_covered("app.SubjectTest", "test_something")), 1)

    def test_overlapping_ranges_are_merged(self):
        lines = self.covered(method_facts=[
            CoversClass(class_name="app.CoveredClass"),
            CoversMethod(class_name="app.CoveredClass", method_name="other_method"),
        ])
        self.assertEqual(lines, {SOURCE_FILE: [line_range(CoveredClass)]})

    def test_default_class_shortcut(self):
        shortcut = self.covered(
            class_facts=[CoversDefaultClass(class_name="app.CoveredClass")],
            method_facts=[Covers(target="::public_method")]
        )
        explicit = self.covered(
            method_facts=[CoversMethod(class_name="app.CoveredClass", method_name="public_method")]
        )
        self.assertEqual(shortcut, explicit)
        self.assertEqual(shortcut, {SOURCE_FILE: [line_range(CoveredClass.public_method)]})

    def test_method_default_class_takes_precedence(self):
        lines = self.covered(
            class_facts=[CoversDefaultClass(class_name="app.Missing")],
            method_facts=[CoversDefaultClass(class_name="app.CoveredClass"), Covers(target="::other_method")]
        )
        self.assertEqual(lines, {SOURCE_FILE: [line_range(CoveredClass.other_method)]})

    def test_more_than_one_default_class(self):
        with self.assertRaises(AmbiguousDefaultClassError):
            self.covered(class_facts=[
                CoversDefaultClass(class_name="app.CoveredClass"),
                CoversDefaultClass(class_name="app.Other"),
            ])

    def test_more_than_one_default_class_on_class_with_method_default(self):
        with self.assertRaises(AmbiguousDefaultClassError):
            self.covered(
                class_facts=[
                    CoversDefaultClass(class_name="app.CoveredClass"),
                    CoversDefaultClass(class_name="app.Other"),
                ],
                method_facts=[CoversDefaultClass(class_name="app.CoveredClass")]
            )

    def test_invalid_class_target(self):
        with self.assertRaises(InvalidCoversTargetError) as ctx:
            self.covered(method_facts=[CoversClass(class_name="app.Missing")])
        self.assertEqual(str(ctx.exception), 'Class "app.Missing" is not a valid target for code coverage')

    def test_invalid_method_target(self):
        with self.assertRaises(InvalidCoversTargetError) as ctx:
            self.covered(method_facts=[CoversMethod(class_name="app.CoveredClass", method_name="missing")])
        self.assertEqual(
            str(ctx.exception),
            'Method "app.CoveredClass::missing" is not a valid target for code coverage'
        )

    def test_invalid_function_target(self):
        with self.assertRaises(InvalidCoversTargetError) as ctx:
            self.covered(method_facts=[CoversFunction(function_name="app.missing")])
        self.assertEqual(str(ctx.exception), 'Function "app.missing" is not a valid target for code coverage')

    def test_invalid_free_form_target(self):
        with self.assertRaises(InvalidCoversTargetError) as ctx:
            self.covered(method_facts=[Covers(target="app.missing")])
        self.assertEqual(str(ctx.exception), '"covers app.missing" is invalid')

    def test_shortcut_without_default_class_is_invalid(self):
        with self.assertRaises(InvalidCoversTargetError) as ctx:
            self.covered(method_facts=[Covers(target="::public_method")])
        self.assertEqual(str(ctx.exception), '"covers ::public_method" is invalid')

    def test_interface_cannot_be_covered(self):
        with self.assertRaises(InvalidCoversTargetError) as ctx:
            self.covered(method_facts=[Covers(target="app.CoveredInterface")])
        self.assertEqual(str(ctx.exception), 'Trying to cover interface "app.CoveredInterface".')

    def test_errors_are_coverage_errors(self):
        with self.assertRaises(CodeCoverageError):
            self.covered(method_facts=[Covers(target="app.CoveredInterface")])

    def test_unknown_test_class(self):
        resolver = self.resolver()
        self.assertTrue(resolver.should_code_coverage_be_collected_for("app.Unknown", "test_something"))
        self.assertTrue(resolver.code_units_to_be_covered("app.Unknown", "test_something").is_empty())


class TestUsesResolution(unittest.TestCase):
    """Test cases for uses targets."""

    def setUp(self):
        self.introspector = PythonIntrospector(import_modules=False)
        self.introspector.register_class(CoveredClass, "app.CoveredClass")
        self.introspector.register_class(CoveredInterface, "app.CoveredInterface")
        self.introspector.register_class(SubjectTest, "app.SubjectTest")
        self.introspector.register_function(covered_function, "app.covered_function")

    def used(self, class_facts=(), method_facts=()):
        reader = MappingMetadataReader({
            "app.SubjectTest": {
                "class": list(class_facts),
                "methods": {"test_something": list(method_facts)}
            }
        }, introspector=self.introspector)
        store = MetadataStore(reader, self.introspector)
        resolver = CoverageResolver(store, InspectCodeUnitMapper(self.introspector), self.introspector)
        return resolver.lines_to_be_used("app.SubjectTest", "test_something")

    def test_uses_function(self):
        lines = self.used(method_facts=[UsesFunction(function_name="app.covered_function")])
        self.assertEqual(lines, {SOURCE_FILE: [line_range(covered_function)]})

    def test_interfaces_may_be_used(self):
        lines = self.used(method_facts=[Uses(target="app.CoveredInterface")])
        self.assertEqual(lines, {SOURCE_FILE: [line_range(CoveredInterface)]})

    def test_covers_nothing_does_not_affect_uses(self):
        lines = self.used(
            class_facts=[CoversNothing()],
            method_facts=[UsesFunction(function_name="app.covered_function")]
        )
        self.assertEqual(lines, {SOURCE_FILE: [line_range(covered_function)]})

    def test_uses_default_class(self):
        lines = self.used(
            class_facts=[UsesDefaultClass(class_name="app.CoveredClass")],
            method_facts=[Uses(target="::public_method")]
        )
        self.assertEqual(lines, {SOURCE_FILE: [line_range(CoveredClass.public_method)]})

    def test_covers_default_class_does_not_apply_to_uses(self):
        with self.assertRaises(InvalidCoversTargetError) as ctx:
            self.used(
                class_facts=[CoversDefaultClass(class_name="app.CoveredClass")],
                method_facts=[Uses(target="::public_method")]
            )
        self.assertEqual(str(ctx.exception), '"uses ::public_method" is invalid')

    def test_more_than_one_uses_default_class(self):
        with self.assertRaises(AmbiguousDefaultClassError):
            self.used(method_facts=[
                UsesDefaultClass(class_name="app.CoveredClass"),
                UsesDefaultClass(class_name="app.Other"),
            ])


if __name__ == "__main__":
    unittest.main()
