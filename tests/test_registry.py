"""Tests for perfprofile.registry — named profile configurations."""

from __future__ import annotations

import unittest

from profile_test_helpers import make_config

from perfprofile.registry import (
    DEFAULT_CONFIGS,
    DuplicateNameError,
    NotFoundError,
    ProfileRegistry,
    ProfileRegistryError,
    bootstrap_registry,
    default_registry,
)


class TestProfileRegistry(unittest.TestCase):
    def test_register_and_get(self) -> None:
        registry = ProfileRegistry()
        config = make_config()
        registry.register("cpu", config)
        self.assertIs(registry.get("cpu"), config)
        self.assertIn("cpu", registry)
        self.assertEqual(len(registry), 1)

    def test_duplicate_name_rejected(self) -> None:
        registry = ProfileRegistry()
        first = make_config()
        registry.register("cpu", first)
        with self.assertRaises(DuplicateNameError) as ctx:
            registry.register("cpu", make_config())
        self.assertEqual(ctx.exception.name, "cpu")
        # The original entry is kept.
        self.assertIs(registry.get("cpu"), first)

    def test_not_found(self) -> None:
        registry = ProfileRegistry()
        registry.register("cpu", make_config())
        with self.assertRaises(NotFoundError) as ctx:
            registry.get("unknown_profile")
        self.assertEqual(ctx.exception.name, "unknown_profile")
        self.assertIn("unknown_profile", str(ctx.exception))
        self.assertIn("cpu", str(ctx.exception))

    def test_not_found_is_key_error(self) -> None:
        with self.assertRaises(KeyError):
            ProfileRegistry().get("x")

    def test_error_hierarchy(self) -> None:
        self.assertTrue(issubclass(DuplicateNameError, ProfileRegistryError))
        self.assertTrue(issubclass(NotFoundError, ProfileRegistryError))
        self.assertTrue(issubclass(ProfileRegistryError, LookupError))

    def test_names_in_registration_order(self) -> None:
        registry = ProfileRegistry()
        registry.register("b", make_config())
        registry.register("a", make_config())
        self.assertEqual(registry.names(), ["b", "a"])


class TestBootstrapRegistry(unittest.TestCase):
    def test_defaults_present(self) -> None:
        registry = bootstrap_registry()
        self.assertIn("default_cpu", registry)
        self.assertIn("default_iter", registry)
        self.assertEqual(registry.get("default_cpu").criterion.name, "CPU time")
        self.assertEqual(registry.get("default_iter").criterion.name, "Iterations")

    def test_idempotent(self) -> None:
        registry = bootstrap_registry()
        before = len(registry)
        bootstrap_registry(registry)
        self.assertEqual(len(registry), before)
        self.assertIs(registry.get("default_cpu"), DEFAULT_CONFIGS["default_cpu"])

    def test_fills_given_registry(self) -> None:
        registry = ProfileRegistry()
        registry.register("mine", make_config())
        result = bootstrap_registry(registry)
        self.assertIs(result, registry)
        self.assertEqual(registry.names(), ["mine", "default_cpu", "default_iter"])

    def test_conflicting_default_name(self) -> None:
        registry = ProfileRegistry()
        registry.register("default_cpu", make_config())
        with self.assertRaises(DuplicateNameError):
            bootstrap_registry(registry)

    def test_conflict_registers_nothing(self) -> None:
        registry = ProfileRegistry()
        taken = make_config()
        registry.register("default_iter", taken)
        with self.assertRaises(DuplicateNameError) as ctx:
            bootstrap_registry(registry)
        self.assertEqual(ctx.exception.name, "default_iter")
        self.assertEqual(registry.names(), ["default_iter"])
        self.assertIs(registry.get("default_iter"), taken)

    def test_unknown_name_after_bootstrap(self) -> None:
        with self.assertRaises(NotFoundError):
            bootstrap_registry().get("unknown_profile")


class TestDefaultRegistry(unittest.TestCase):
    def test_same_instance(self) -> None:
        self.assertIs(default_registry(), default_registry())

    def test_bootstrapped(self) -> None:
        self.assertIn("default_cpu", default_registry())


if __name__ == "__main__":
    unittest.main()
