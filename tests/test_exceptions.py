"""Tests for inversa custom exceptions."""

import unittest

from inversa.exceptions import ConfigurationError, ConstructionError, LifecycleHookError, NotFoundError


class Engine:
    pass


class TestConfigurationError(unittest.TestCase):
    def test_message_is_preserved(self) -> None:
        err = ConfigurationError("two constructors")
        self.assertEqual(str(err), "two constructors")

    def test_is_an_exception(self) -> None:
        self.assertTrue(issubclass(ConfigurationError, Exception))


class TestConstructionError(unittest.TestCase):
    def test_message_names_component(self) -> None:
        err = ConstructionError(Engine, "RuntimeError: boom")
        self.assertEqual(str(err), "Cannot construct Engine: RuntimeError: boom")
        self.assertIs(err.component, Engine)

    def test_chains_cause(self) -> None:
        with self.assertRaises(ConstructionError) as ctx:
            try:
                raise RuntimeError("boom")
            except RuntimeError as exc:
                raise ConstructionError(Engine, str(exc)) from exc
        self.assertIsInstance(ctx.exception.__cause__, RuntimeError)


class TestNotFoundError(unittest.TestCase):
    def test_message_with_name(self) -> None:
        err = NotFoundError("primary", Engine)
        self.assertEqual(str(err), "Not found with name primary and type Engine")
        self.assertEqual(err.name, "primary")
        self.assertIs(err.base, Engine)

    def test_message_without_name(self) -> None:
        err = NotFoundError(None, Engine)
        self.assertEqual(str(err), "Not found with name None and type Engine")

    def test_non_class_type_label(self) -> None:
        err = NotFoundError(None, "Engine")
        self.assertIn("'Engine'", str(err))


class TestLifecycleHookError(unittest.TestCase):
    def test_single_failure(self) -> None:
        cause = RuntimeError("x")
        err = LifecycleHookError("pre_destroy", "db", [("db", cause)])
        self.assertEqual(str(err), "pre_destroy failed for 'db'")
        self.assertEqual(err.hook, "pre_destroy")
        self.assertEqual(err.name, "db")
        self.assertEqual(err.failures, [("db", cause)])

    def test_counts_additional_failures(self) -> None:
        err = LifecycleHookError(
            "pre_destroy", "db", [("db", RuntimeError()), ("cache", RuntimeError())]
        )
        self.assertEqual(str(err), "pre_destroy failed for 'db' (and 1 more)")

    def test_failures_default_to_empty(self) -> None:
        self.assertEqual(LifecycleHookError("post_construct", "db").failures, [])


if __name__ == "__main__":
    unittest.main()
