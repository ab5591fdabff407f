"""Constructor discovery and parameter binding.

Turns a component class (or an explicit factory) into the list of
``(name, type)`` pairs the container has to look up before it can call it.
"""

import inspect
from typing import (
    Annotated,
    Any,
    Callable,
    Dict,
    List,
    NamedTuple,
    Optional,
    Tuple,
    get_args,
    get_origin,
    get_type_hints,
)

from inversa.decorators import CONSTRUCTOR_MARK, declared_properties

_EMPTY = inspect.Parameter.empty
_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


class Named:
    """Marker for choosing the registry name of a constructor parameter.

    Use with ``typing.Annotated`` when the parameter's own identifier is not
    the name the dependency is registered under.

    Args:
        name: The registry name to fall back on when the type alone is
            ambiguous.

    Examples:
        >>> from typing import Annotated
        >>> class Database:
        ...     pass
        >>> class Report:
        ...     def __init__(self, db: Annotated[Database, Named("primary")]):
        ...         self.db = db
        >>> Named("primary")
        Named('primary')
    """

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"Named({self.name!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Named) and self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)


class Dependency(NamedTuple):
    """A factory argument declared as data: registry name and expected type.

    The type is required. It is matched first, so the name only decides
    between several instances of that type.

    Examples:
        >>> Dependency("port", int)
        Dependency(name='port', type=<class 'int'>)
    """

    name: str
    type: Any


class Binding(NamedTuple):
    """One constructor parameter, ready to be resolved.

    ``parameter`` is the identifier used to pass the value, ``name`` the
    registry name used to look it up.
    """

    parameter: str
    name: str
    type: Any
    kind: Any = inspect.Parameter.POSITIONAL_OR_KEYWORD
    default: Any = _EMPTY

    @property
    def has_default(self) -> bool:
        return self.default is not _EMPTY


def public_constructors(cls: type) -> List[Callable[..., Any]]:
    """Return the public constructors of *cls*.

    Public ``@constructor`` classmethods are collected along the MRO, own
    class first, in definition order. A name redefined in a subclass hides
    the parent's definition. When there are none, the class itself is the
    only constructor.
    """
    seen = set()
    found: List[Callable[..., Any]] = []
    for klass in cls.__mro__:
        for attr, member in vars(klass).items():
            if attr in seen:
                continue
            seen.add(attr)
            if attr.startswith("_") or not isinstance(member, classmethod):
                continue
            if getattr(member.__func__, CONSTRUCTOR_MARK, False):
                found.append(getattr(cls, attr))
    return found or [cls]


def bindings_for(target: Callable[..., Any]) -> List[Binding]:
    """Produce one binding per parameter of *target*, in declaration order.

    Names come from ``@constructor_properties`` when present, then from an
    ``Annotated[..., Named(...)]`` marker, then from the parameter itself.
    Variadic parameters are never bound. A callable whose signature cannot
    be inspected has no bindings.

    Raises:
        TypeError: If the explicit name list does not match the parameters,
            or a string annotation cannot be resolved.
    """
    try:
        sig = inspect.signature(target)
    except (ValueError, TypeError):
        return []

    params = [p for p in sig.parameters.values() if p.kind not in _VARIADIC]
    explicit = declared_properties(_signature_source(target))
    if explicit is not None and len(explicit) != len(params):
        raise TypeError(
            f"{len(explicit)} constructor properties given for "
            f"{len(params)} parameters"
        )

    source = _signature_source(target)
    hints = _type_hints(source)
    bindings: List[Binding] = []
    for index, param in enumerate(params):
        annotation = hints.get(param.name, param.annotation)
        if isinstance(annotation, str):
            annotation = _resolve_annotation(source, param.name, annotation)
        dep_type, marked = _extract_type_and_name(annotation)
        if explicit is not None:
            name = explicit[index]
        else:
            name = marked or param.name
        bindings.append(Binding(param.name, name, dep_type, param.kind, param.default))
    return bindings


def bindings_from_dependencies(dependencies: "List[Dependency]") -> List[Binding]:
    """Turn declared dependencies into positional bindings."""
    return [
        Binding(name, name, dep_type, inspect.Parameter.POSITIONAL_ONLY)
        for name, dep_type in dependencies
    ]


def _signature_source(target: Callable[..., Any]) -> Callable[..., Any]:
    if inspect.isclass(target):
        return target.__init__
    return getattr(target, "__func__", target)


def _type_hints(source: Callable[..., Any]) -> Dict[str, Any]:
    try:
        return get_type_hints(source, include_extras=True)
    except (NameError, TypeError, AttributeError):
        return {}


def _resolve_annotation(source: Callable[..., Any], parameter: str, annotation: str) -> Any:
    """Evaluate one postponed annotation against the globals of *source*.

    Used when ``get_type_hints`` gives up on the whole signature, so that
    the parameters that do resolve keep their types.
    """
    namespace = dict(getattr(source, "__globals__", None) or {})
    try:
        return eval(annotation, namespace)
    except (NameError, AttributeError, SyntaxError, TypeError) as exc:
        raise TypeError(
            f"cannot resolve annotation {annotation!r} of parameter '{parameter}'"
        ) from exc


def _extract_type_and_name(annotation: Any) -> Tuple[Any, Optional[str]]:
    """Split an annotation into its type and optional :class:`Named` marker.

    ``Annotated[T, Named("x")]`` gives ``(T, "x")``; an unannotated
    parameter gives ``(object, None)``.
    """
    if annotation is _EMPTY:
        return object, None
    if get_origin(annotation) is Annotated:
        args = get_args(annotation)
        base_type = args[0]
        for extra in args[1:]:
            if isinstance(extra, Named):
                return base_type, extra.name
        return base_type, None
    return annotation, None
