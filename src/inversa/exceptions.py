"""Custom exceptions for the inversa IoC container."""

from typing import Any, List, Optional, Tuple


def _type_label(base: Any) -> str:
    return getattr(base, "__name__", None) or repr(base)


class ConfigurationError(Exception):
    """Raised when a component is declared in a way the container cannot use.

    Examples:
        >>> raise ConfigurationError("Engine must have 1 public constructor or none")
        Traceback (most recent call last):
            ...
        inversa.exceptions.ConfigurationError: Engine must have 1 public constructor or none
    """


class ConstructionError(Exception):
    """Raised when building a component instance fails.

    The original failure is chained as ``__cause__``.

    Args:
        component: The class that was being built.
        message: Description of the failure.
    """

    def __init__(self, component: type, message: str) -> None:
        super().__init__(f"Cannot construct {_type_label(component)}: {message}")
        self.component = component


class NotFoundError(Exception):
    """Raised when a lookup cannot select a single instance.

    Covers a missing instance as well as an ambiguous type match that the
    optional name could not settle.

    Args:
        name: The name that was asked for, or ``None``.
        base: The type that was asked for.

    Examples:
        >>> raise NotFoundError("primary", int)
        Traceback (most recent call last):
            ...
        inversa.exceptions.NotFoundError: Not found with name primary and type int
    """

    def __init__(self, name: Optional[str], base: Any) -> None:
        super().__init__(f"Not found with name {name} and type {_type_label(base)}")
        self.name = name
        self.base = base


class LifecycleHookError(Exception):
    """Raised by a strict container when a lifecycle hook fails.

    Args:
        hook: The hook method name (``post_construct`` or ``pre_destroy``).
        name: Registry name of the first failing instance.
        failures: Every ``(name, exception)`` pair collected by the call.
    """

    def __init__(
        self,
        hook: str,
        name: str,
        failures: "List[Tuple[str, BaseException]] | None" = None,
    ) -> None:
        message = f"{hook} failed for '{name}'"
        if failures and len(failures) > 1:
            message = f"{message} (and {len(failures) - 1} more)"
        super().__init__(message)
        self.hook = hook
        self.name = name
        self.failures = failures or []
