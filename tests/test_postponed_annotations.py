"""Tests for components whose annotations are postponed strings."""

from __future__ import annotations

import unittest
from typing import TYPE_CHECKING, Optional

from inversa.binding import bindings_for
from inversa.exceptions import ConstructionError
from inversa.inversa_container import InversaContainer

if TYPE_CHECKING:
    from logging import Logger


class Engine:
    pass


class Owner:
    pass


class Garage:
    def __init__(self, engine: Engine, owner: Optional[Owner] = None) -> None:
        self.engine = engine
        self.owner = owner


class Workshop:
    def __init__(self, engine: Engine, **loggers: Logger) -> None:
        self.engine = engine
        self.loggers = loggers


class Car:
    def __init__(self, engine: Engine, log: Optional[Logger] = None) -> None:
        self.engine = engine
        self.log = log


class TestPostponedAnnotations(unittest.TestCase):
    def setUp(self) -> None:
        self.container = InversaContainer()
        self.container.register(Engine)

    def test_string_annotations_are_resolved(self) -> None:
        bindings = bindings_for(Garage)
        self.assertIs(bindings[0].type, Engine)
        self.assertEqual(bindings[1].type, Optional[Owner])

    def test_dependencies_injected(self) -> None:
        self.container.register(Owner)
        self.container.register(Garage)
        garage = self.container.lookup(Garage)
        self.assertIs(garage.engine, self.container.lookup(Engine))
        self.assertIs(garage.owner, self.container.lookup(Owner))

    def test_unresolved_optional_keeps_default(self) -> None:
        self.container.register(Garage)
        self.assertIsNone(self.container.lookup(Garage).owner)

    def test_resolvable_parameters_survive_unresolvable_signature(self) -> None:
        self.assertIs(bindings_for(Workshop)[0].type, Engine)
        self.container.register(Workshop)
        self.assertIs(self.container.lookup(Workshop).engine, self.container.lookup(Engine))

    def test_unresolvable_parameter_is_named(self) -> None:
        with self.assertRaises(TypeError) as ctx:
            bindings_for(Car)
        self.assertIn("parameter 'log'", str(ctx.exception))

    def test_unresolvable_parameter_fails_registration(self) -> None:
        with self.assertRaises(ConstructionError) as ctx:
            self.container.register(Car)
        self.assertIn("parameter 'log'", str(ctx.exception))
        self.assertIsInstance(ctx.exception.__cause__, TypeError)
        self.assertNotIn("car", self.container)


if __name__ == "__main__":
    unittest.main()
