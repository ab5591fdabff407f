"""inversa — A minimal inversion-of-control container for Python."""

import logging

from inversa.binding import Dependency, Named
from inversa.decorators import constructor, constructor_properties
from inversa.exceptions import ConfigurationError, ConstructionError, LifecycleHookError, NotFoundError
from inversa.inversa_container import InversaContainer
from inversa.lifecycle import Disposable, HookErrorPolicy, Initializable, LifecycleHook

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "InversaContainer",
    "Named",
    "Dependency",
    "Initializable",
    "Disposable",
    "LifecycleHook",
    "HookErrorPolicy",
    "ConfigurationError",
    "ConstructionError",
    "NotFoundError",
    "LifecycleHookError",
    "constructor",
    "constructor_properties",
]
