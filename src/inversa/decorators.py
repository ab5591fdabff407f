"""Decorators that describe how the container builds a component.

These decorators only stamp metadata; the container reads it back when the
class is registered.
"""

from typing import Any, Callable, Tuple, TypeVar, Union

from inversa.exceptions import ConfigurationError

F = TypeVar("F", bound=Callable[..., Any])

CONSTRUCTOR_MARK = "__inversa_constructor__"
PROPERTIES_MARK = "__inversa_constructor_properties__"


def constructor(fn: Callable[..., Any]) -> classmethod:
    """Declare an alternate constructor for a component class.

    The decorated function becomes a classmethod. A class that declares one
    public ``@constructor`` is built through it instead of ``__init__``;
    declaring two or more makes the class unregistrable.

    Args:
        fn: A function taking the class as its first argument.

    Returns:
        The function wrapped in ``classmethod``.

    Examples:
        >>> class Engine:
        ...     def __init__(self, cylinders: int) -> None:
        ...         self.cylinders = cylinders
        ...     @constructor
        ...     def v8(cls) -> "Engine":
        ...         return cls(8)
        >>> Engine.v8().cylinders
        8
    """
    if isinstance(fn, (classmethod, staticmethod)):
        fn = fn.__func__
    setattr(fn, CONSTRUCTOR_MARK, True)
    return classmethod(fn)


def constructor_properties(*names: str) -> Callable[[F], F]:
    """Give the registry names used to resolve each constructor parameter.

    The names are matched one-for-one, in declaration order, with the
    parameters of the decorated ``__init__`` or ``@constructor`` method
    (``self``/``cls`` excluded). They replace the parameters' own names when
    the container looks up arguments by name.

    Raises:
        ConfigurationError: If no names are given.

    Examples:
        >>> class Car:
        ...     @constructor_properties("v8")
        ...     def __init__(self, engine: object) -> None:
        ...         self.engine = engine
        >>> getattr(Car.__init__, PROPERTIES_MARK)
        ('v8',)
    """
    if not names:
        raise ConfigurationError("constructor_properties requires at least one name")

    def decorator(target: F) -> F:
        inner: Union[F, Callable[..., Any]] = target
        if isinstance(target, (classmethod, staticmethod)):
            inner = target.__func__
        setattr(inner, PROPERTIES_MARK, tuple(names))
        return target

    return decorator


def declared_properties(target: Callable[..., Any]) -> "Tuple[str, ...] | None":
    """Return the names stamped by :func:`constructor_properties`, if any."""
    inner = getattr(target, "__func__", target)
    return getattr(inner, PROPERTIES_MARK, None)
