#!/usr/bin/env python3
"""
Unit tests for plan execution.
"""

import unittest

from binder_targets import (
    Aged,
    Catalogue,
    Counter,
    Meter,
    Named,
    Pair,
    Person,
    Point,
    Positive,
    Settings,
    Tracked,
    Window,
)
from izumi.binder import ConstructionPlanner, MapValueSource, PlanNotExecutableError, execute_plan


def build(cls, values, using=None, accept_missing_nullable_as_null=True):
    return ConstructionPlanner().build(
        cls,
        cls,
        using if using is not None else cls,
        MapValueSource(values),
        accept_missing_nullable_as_null,
    )


class TestExecutionGating(unittest.TestCase):
    """Test that plans with errors never run."""

    def test_plan_with_errors_is_refused(self):
        """Test that the callable is never invoked for a plan with errors."""
        Tracked.calls = 0
        plan = build(Tracked, {"value": "not a number"})

        self.assertTrue(plan.has_errors)
        with self.assertRaises(PlanNotExecutableError) as ctx:
            plan.execute()

        self.assertEqual(Tracked.calls, 0)
        self.assertIs(ctx.exception.plan, plan)
        self.assertIn("WRONG_TYPE", str(ctx.exception))

    def test_plan_with_warnings_runs(self):
        """Test that warnings do not block execution."""
        plan = build(Aged, {})

        self.assertTrue(plan.has_warnings)
        self.assertIsNone(plan.execute().age)


class TestInvocation(unittest.TestCase):
    """Test how the chosen callable is invoked."""

    def test_positional_call(self):
        """Test a fully bound constructor."""
        point = build(Point, {"x": 1, "y": 2}).execute()

        self.assertIsInstance(point, Point)
        self.assertEqual((point.x, point.y), (1, 2))

    def test_optional_parameter_uses_callable_default(self):
        """Test that an omitted optional parameter keeps the callable's default."""
        self.assertEqual(build(Named, {}).execute().name, "x")
        self.assertEqual(build(Named, {"name": "given"}).execute().name, "given")

    def test_dataclass_defaults(self):
        """Test keyword invocation of a dataclass with defaults."""
        person = build(Person, {"name": "Ann", "age": 41}).execute()
        self.assertEqual(person, Person(name="Ann", age=41, nickname="n/a"))

    def test_keyword_only_parameters(self):
        """Test keyword-only parameters in both invocation modes."""
        full = build(Window, {"title": "t", "width": 640, "height": 200}).execute()
        self.assertEqual((full.title, full.width, full.height), ("t", 640, 200))

        partial = build(Window, {"title": "t", "width": 640}).execute()
        self.assertEqual((partial.title, partial.width, partial.height), ("t", 640, 480))

    def test_positional_only_parameters(self):
        """Test positional-only parameters when only a prefix is bound."""
        pair = build(Pair, {"first": 3}).execute()
        self.assertEqual((pair.first, pair.second), (3, 2))

    def test_positional_only_gap_fails_at_call_time(self):
        """Test that a positional-only parameter after an omitted one cannot be passed."""
        plan = build(Pair, {"second": 5})

        self.assertFalse(plan.has_errors)
        with self.assertLogs("izumi.binder.executor", level="ERROR"):
            with self.assertRaises(TypeError):
                plan.execute()

    def test_classmethod_factory(self):
        """Test a bound classmethod factory with a default."""
        point = build(Point, {"dx": 3}, using=Point.offset).execute()
        self.assertEqual((point.x, point.y), (3, 0))

    def test_raw_classmethod_function(self):
        """Test that the class is passed as receiver to an unbound classmethod function."""
        raw = Point.__dict__["offset"].__func__
        point = build(Point, {"dx": 1, "dy": 2}, using=raw).execute()
        self.assertEqual((point.x, point.y), (1, 2))

        point = build(Point, {"dx": 4}, using=raw).execute()
        self.assertEqual((point.x, point.y), (4, 0))

    def test_staticmethod_factory(self):
        """Test a staticmethod factory."""
        point = build(Point, {"text": "5,6"}, using=Point.parse).execute()
        self.assertEqual((point.x, point.y), (5, 6))

    def test_properties_are_applied_after_construction(self):
        """Test that settable properties are assigned on the new instance."""
        settings = build(Settings, {"host": "h", "port": 8080, "label": "main"}).execute()
        self.assertEqual((settings.host, settings.port, settings.label), ("h", 8080, "main"))

    def test_missing_properties_keep_constructor_values(self):
        """Test that properties without values are left untouched."""
        settings = build(Settings, {"host": "h"}).execute()
        self.assertEqual((settings.port, settings.label), (80, None))

    def test_property_descriptor_setter(self):
        """Test assignment through a property setter."""
        catalogue = build(Catalogue, {"title": "t", "pages": 12}).execute()
        self.assertEqual(catalogue.pages, 12)

    def test_annotated_metadata_that_cannot_be_hashed(self):
        """Test keyword invocation when a parameter carries dict metadata in Annotated."""
        plan = build(Meter, {"length": 3})

        self.assertFalse(plan.has_errors)
        meter = plan.execute()
        self.assertEqual((meter.length, meter.note), (3, ""))

    def test_execute_plan_function(self):
        """Test the module-level executor."""
        counter = execute_plan(build(Counter, {"count": 2}))
        self.assertEqual(counter.count, 2)


class TestFailurePropagation(unittest.TestCase):
    """Test that failures raised by the callable surface to the caller."""

    def test_callable_failure_is_logged_and_reraised(self):
        """Test that the original exception propagates with a note."""
        plan = build(Positive, {"value": -1})
        self.assertFalse(plan.has_errors)

        with self.assertLogs("izumi.binder.executor", level="ERROR") as logs:
            with self.assertRaises(ValueError) as ctx:
                plan.execute()

        self.assertEqual(str(ctx.exception), "value must be positive")
        self.assertIn("while constructing Positive via Positive", ctx.exception.__notes__)
        self.assertIn("Positive", logs.output[0])

    def test_repeated_execution_builds_new_instances(self):
        """Test that a plan can be executed many times."""
        plan = build(Point, {"x": 1, "y": 1})
        self.assertIsNot(plan.execute(), plan.execute())


if __name__ == "__main__":
    unittest.main()
