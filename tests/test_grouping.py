"""
Tests for groups, size, dependencies and boolean settings.
"""
import unittest

from testmeta.analysis import GroupingResolver, canonicalize_name
from testmeta.core import (
    BackupGlobals,
    BackupStaticProperties,
    CloneOption,
    Covers,
    CoversClass,
    CoversMethod,
    Depends,
    ExecutionOrderDependency,
    Group,
    PreserveGlobalState,
    RunClassInSeparateProcess,
    RunInSeparateProcess,
    RunTestsInSeparateProcesses,
    TestSize,
    Uses,
    UsesFunction
)
from testmeta.introspection import PythonIntrospector
from testmeta.metadata import MappingMetadataReader, MetadataStore


class InvoiceTest:
    def test_total(self):
        pass

    def test_tax(self):
        pass


class TestCanonicalizeName(unittest.TestCase):
    def test_lower_cases_and_trims_separators(self):
        self.assertEqual(canonicalize_name(".App.Billing.Invoice."), "app.billing.invoice")
        self.assertEqual(canonicalize_name("App.Invoice::total"), "app.invoice::total")


class TestGroupingResolver(unittest.TestCase):
    """Test cases for the grouping and classification resolver."""

    def setUp(self):
        self.introspector = PythonIntrospector(import_modules=False)
        self.introspector.register_class(InvoiceTest, "app.InvoiceTest")

    def resolver(self, class_facts=(), method_facts=()):
        reader = MappingMetadataReader({
            "app.InvoiceTest": {
                "class": list(class_facts),
                "methods": {"test_total": list(method_facts)}
            }
        }, introspector=self.introspector)
        return GroupingResolver(MetadataStore(reader, self.introspector))

    def test_groups(self):
        resolver = self.resolver(
            class_facts=[Group(group_name="billing"), CoversClass(class_name="App.Invoice")],
            method_facts=[
                Group(group_name="fast"),
                CoversMethod(class_name="App.Invoice", method_name="total"),
                Uses(target=".App.Money."),
                UsesFunction(function_name="App.round_half_up"),
            ]
        )
        self.assertEqual(resolver.groups("app.InvoiceTest", "test_total"), [
            "fast",
            "__covers_app.invoice::total",
            "__uses_app.money",
            "__uses_app.round_half_up",
            "billing",
            "__covers_app.invoice",
        ])

    def test_groups_are_deduplicated(self):
        resolver = self.resolver(
            class_facts=[Group(group_name="billing"), Covers(target="App.Invoice")],
            method_facts=[Group(group_name="billing"), CoversClass(class_name="app.invoice")]
        )
        self.assertEqual(resolver.groups("app.InvoiceTest", "test_total"), ["billing", "__covers_app.invoice"])

    def test_class_groups_only(self):
        resolver = self.resolver(
            class_facts=[Group(group_name="billing")],
            method_facts=[Group(group_name="fast")]
        )
        self.assertEqual(resolver.groups("app.InvoiceTest"), ["billing"])

    def test_groups_of_unknown_class(self):
        self.assertEqual(self.resolver().groups("app.Unknown", "test_total"), [])

    def test_size_priority(self):
        resolver = self.resolver(method_facts=[Group(group_name="small"), Group(group_name="large")])
        self.assertEqual(resolver.size("app.InvoiceTest", "test_total"), TestSize.LARGE)

        resolver = self.resolver(class_facts=[Group(group_name="small")], method_facts=[Group(group_name="medium")])
        self.assertEqual(resolver.size("app.InvoiceTest", "test_total"), TestSize.MEDIUM)

        resolver = self.resolver(class_facts=[Group(group_name="small")])
        self.assertEqual(resolver.size("app.InvoiceTest", "test_total"), TestSize.SMALL)

    def test_size_unknown(self):
        resolver = self.resolver(method_facts=[Group(group_name="billing")])
        self.assertEqual(resolver.size("app.InvoiceTest", "test_total"), TestSize.UNKNOWN)

    def test_dependencies_class_first(self):
        resolver = self.resolver(
            class_facts=[Depends(target="test_setup")],
            method_facts=[Depends(target="app.OtherTest::test_create")]
        )
        dependencies = resolver.dependencies("app.InvoiceTest", "test_total")

        self.assertEqual(
            [str(dependency) for dependency in dependencies],
            ["app.InvoiceTest::test_setup", "app.OtherTest::test_create"]
        )

    def test_dependencies_are_deduplicated(self):
        resolver = self.resolver(
            class_facts=[Depends(target="test_tax")],
            method_facts=[Depends(target="app.InvoiceTest::test_tax"), Depends(target="  ")]
        )
        self.assertEqual(
            resolver.dependencies("app.InvoiceTest", "test_total"),
            [ExecutionOrderDependency(class_name="app.InvoiceTest", method_name="test_tax")]
        )

    def test_dependency_on_whole_class(self):
        resolver = self.resolver(method_facts=[Depends(target="app.SetupTest::class")])
        dependency = resolver.dependencies("app.InvoiceTest", "test_total")[0]

        self.assertTrue(dependency.targets_class())
        self.assertEqual(dependency.target(), "app.SetupTest")

    def test_dependency_clone_options(self):
        resolver = self.resolver(method_facts=[
            Depends(target="test_tax", clone_option=CloneOption.DEEP),
            Depends(target="test_setup", clone_option=CloneOption.SHALLOW),
        ])
        deep, shallow = resolver.dependencies("app.InvoiceTest", "test_total")

        self.assertTrue(deep.uses_deep_clone())
        self.assertFalse(deep.uses_shallow_clone())
        self.assertTrue(shallow.uses_shallow_clone())

    def test_backup_settings(self):
        resolver = self.resolver(
            class_facts=[BackupGlobals(enabled=True), BackupStaticProperties(enabled=True)],
            method_facts=[BackupGlobals(enabled=False), BackupStaticProperties()]
        )
        settings = resolver.backup_settings("app.InvoiceTest", "test_total")

        self.assertIs(settings.backup_globals, False)
        self.assertIs(settings.backup_static_properties, True)

    def test_backup_settings_unset(self):
        settings = self.resolver().backup_settings("app.InvoiceTest", "test_total")
        self.assertIsNone(settings.backup_globals)
        self.assertIsNone(settings.backup_static_properties)

    def test_preserve_global_state(self):
        resolver = self.resolver(class_facts=[PreserveGlobalState(enabled=False)])
        self.assertIs(resolver.preserve_global_state("app.InvoiceTest", "test_total"), False)

        resolver = self.resolver(
            class_facts=[PreserveGlobalState(enabled=False)],
            method_facts=[PreserveGlobalState(enabled=True)]
        )
        self.assertIs(resolver.preserve_global_state("app.InvoiceTest", "test_total"), True)

    def test_process_isolation(self):
        self.assertFalse(self.resolver().process_isolation("app.InvoiceTest", "test_total"))

        resolver = self.resolver(class_facts=[RunTestsInSeparateProcesses()])
        self.assertTrue(resolver.process_isolation("app.InvoiceTest", "test_total"))
        self.assertFalse(resolver.class_process_isolation("app.InvoiceTest", "test_total"))

        resolver = self.resolver(method_facts=[RunInSeparateProcess()])
        self.assertTrue(resolver.process_isolation("app.InvoiceTest", "test_total"))
        self.assertFalse(resolver.process_isolation("app.InvoiceTest", "test_tax"))

    def test_class_process_isolation(self):
        resolver = self.resolver(class_facts=[RunClassInSeparateProcess()])
        self.assertTrue(resolver.class_process_isolation("app.InvoiceTest", "test_total"))
        self.assertFalse(resolver.process_isolation("app.InvoiceTest", "test_total"))


if __name__ == "__main__":
    unittest.main()
