"""Main IoC container for inversa."""

import inspect
import logging
import types
from typing import Any, Callable, Dict, List, Optional, Sequence, TextIO, Tuple, Type, TypeVar, Union, get_args, get_origin

from inversa.binding import Binding, Dependency, bindings_for, bindings_from_dependencies, public_constructors
from inversa.exceptions import ConfigurationError, ConstructionError, LifecycleHookError, NotFoundError
from inversa.lifecycle import HookErrorPolicy, LifecycleHook

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING = object()
_UNION_ORIGINS = tuple(
    origin for origin in (Union, getattr(types, "UnionType", None)) if origin is not None
)


def _is_assignable(instance: Any, base: Any) -> bool:
    """``isinstance`` that also accepts ``Any``, unions and generic aliases."""
    if base is object or base is Any:
        return True
    origin = get_origin(base)
    if origin in _UNION_ORIGINS:
        return any(_is_assignable(instance, arg) for arg in get_args(base))
    if origin is not None:
        base = origin
    try:
        return isinstance(instance, base)
    except TypeError:
        return False


def _type_path(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


class InversaContainer:
    """An inversion-of-control container holding named singletons.

    Components are built once, at registration, with their constructor
    arguments looked up among the instances already registered. Instances
    are kept in registration order, which is also the order in which
    ``stop`` tears them down.

    Each container is independent; create one at the application entry
    point and pass it around.

    Args:
        hook_errors: What to do when a lifecycle hook raises. Defaults to
            ``HookErrorPolicy.BEST_EFFORT``, which logs and carries on.

    Examples:
        >>> container = InversaContainer()
        >>> class Engine:
        ...     pass
        >>> class Car:
        ...     def __init__(self, engine: Engine) -> None:
        ...         self.engine = engine
        >>> container.register(Engine)
        >>> container.register(Car)
        >>> container.lookup(Car).engine is container.lookup(Engine)
        True
    """

    def __init__(self, hook_errors: HookErrorPolicy = HookErrorPolicy.BEST_EFFORT) -> None:
        self._instances: Dict[str, Any] = {}
        self._hook_errors = hook_errors

    def register(
        self,
        cls: type,
        name: Optional[str] = None,
        *,
        factory: Optional[Callable[..., Any]] = None,
        dependencies: Optional[Sequence[Dependency]] = None,
    ) -> None:
        """Build an instance of *cls* and store it under *name*.

        The class must expose at most one public constructor: either a
        single ``@constructor`` classmethod or its ``__init__``. Every
        constructor parameter is resolved with :meth:`lookup`, using the
        parameter's type and its registry name (see
        :func:`~inversa.decorators.constructor_properties` and
        :class:`~inversa.binding.Named`). A parameter that cannot be resolved
        but has a default keeps its default.

        Once built, the instance's ``post_construct`` hook runs, and then the
        instance is stored. A failed registration leaves the registry as it
        was.

        Args:
            cls: The component class.
            name: Registry name. Defaults to the lower-cased class name.
            factory: Callable used instead of the class's constructors. It
                must return an instance of *cls*.
            dependencies: Arguments of the constructor (or *factory*)
                declared as data. They are looked up in order and passed
                positionally, and the signature is not inspected.

        Raises:
            ConfigurationError: If *cls* is not a class, *name* is empty or
                *cls* has more than one public constructor.
            ConstructionError: If the instance cannot be built.
            LifecycleHookError: If ``post_construct`` raises and the
                container is strict.

        Examples:
            >>> container = InversaContainer()
            >>> container.register(dict, "settings")
            >>> container.lookup(dict)
            {}
        """
        if not inspect.isclass(cls):
            raise ConfigurationError(f"Only classes can be registered, got {cls!r}")
        if name is None:
            name = cls.__name__.lower()
        if not name:
            raise ConfigurationError("Registration name must be a non-empty string")

        if factory is None:
            constructors = public_constructors(cls)
            if len(constructors) > 1:
                raise ConfigurationError(
                    f"{cls.__name__} must have 1 public constructor or none, "
                    f"found {len(constructors)}"
                )
            factory = constructors[0]

        try:
            if dependencies is not None:
                bindings = bindings_from_dependencies(list(dependencies))
            else:
                bindings = bindings_for(factory)
            instance = self._create_instance(factory, bindings)
            if not isinstance(instance, cls):
                raise TypeError(
                    f"factory returned {type(instance).__name__}, "
                    f"not an instance of {cls.__name__}"
                )
        except Exception as exc:
            raise ConstructionError(cls, f"{type(exc).__name__}: {exc}") from exc

        failure = self._run_hook(LifecycleHook.POST_CONSTRUCT, name, instance)
        if failure is not None:
            raise LifecycleHookError(
                LifecycleHook.POST_CONSTRUCT.value, name, [(name, failure)]
            ) from failure

        self._instances[name] = instance
        logger.debug("Registered %s as '%s'", cls.__name__, name)

    def register_instance(self, name: str, instance: Any) -> None:
        """Store a ready-made *instance* under *name*.

        The ``post_construct`` hook is not run; the instance still takes
        part in ``stop``. An existing entry with the same name is replaced.

        Raises:
            ConfigurationError: If *name* is empty or *instance* is ``None``.

        Examples:
            >>> container = InversaContainer()
            >>> container.register_instance("port", 8080)
            >>> container.lookup(int)
            8080
        """
        if not name:
            raise ConfigurationError("Instance name must be a non-empty string")
        if instance is None:
            raise ConfigurationError(f"Cannot register None as '{name}'")
        self._instances[name] = instance
        logger.debug("Registered instance of %s as '%s'", type(instance).__name__, name)

    def lookup(self, base: Type[T], name: Optional[str] = None) -> T:
        """Return the instance of *base*, using *name* to break ties.

        If exactly one registered instance is an instance of *base*, it is
        returned whatever *name* says. Otherwise the entry stored at *name*
        is returned when it is an instance of *base*.

        Args:
            base: The requested type; a class, ABC or runtime-checkable
                protocol. ``object`` matches everything.
            name: Optional registry name.

        Returns:
            The matching instance.

        Raises:
            NotFoundError: If nothing matches, or several instances match
                and *name* does not select one of the right type.

        Examples:
            >>> container = InversaContainer()
            >>> container.register_instance("a", "alpha")
            >>> container.register_instance("b", "beta")
            >>> container.lookup(str, "b")
            'beta'
        """
        matches = self.lookup_all(base)
        if len(matches) == 1:
            return matches[0]

        if name is not None:
            instance = self._instances.get(name, _MISSING)
            if instance is not _MISSING and _is_assignable(instance, base):
                logger.debug(
                    "Resolved '%s' by name (%d instances of %s)",
                    name, len(matches), getattr(base, "__name__", base),
                )
                return instance

        raise NotFoundError(name, base)

    def lookup_all(self, base: Type[T]) -> List[T]:
        """Return every instance of *base*, in registration order.

        Examples:
            >>> container = InversaContainer()
            >>> container.register_instance("a", 1)
            >>> container.register_instance("b", 2)
            >>> container.lookup_all(int)
            [1, 2]
        """
        return [
            instance
            for instance in self._instances.values()
            if _is_assignable(instance, base)
        ]

    def names(self) -> List[str]:
        """Return the registered names, in registration order."""
        return list(self._instances)

    def stop(self) -> None:
        """Run the ``pre_destroy`` hook of every instance, in registration order.

        Entries stay in the registry. Calling ``stop`` again runs the hooks
        again.

        Raises:
            LifecycleHookError: If the container is strict and at least one
                hook failed. Raised after every hook has been run.
        """
        logger.info("Stopping IoC container")
        failures: List[Tuple[str, BaseException]] = []
        for name, instance in list(self._instances.items()):
            failure = self._run_hook(LifecycleHook.PRE_DESTROY, name, instance)
            if failure is not None:
                failures.append((name, failure))

        if failures:
            first_name, first = failures[0]
            raise LifecycleHookError(
                LifecycleHook.PRE_DESTROY.value, first_name, failures
            ) from first

    def log(self, stream: Optional[TextIO] = None) -> None:
        """Describe every entry as ``name: <name> -> instanceOf: <type>``.

        Lines go to *stream* when given, otherwise to the package logger at
        INFO level.

        Examples:
            >>> import io
            >>> container = InversaContainer()
            >>> container.register_instance("greeting", "hello")
            >>> out = io.StringIO()
            >>> container.log(out)
            >>> out.getvalue()
            'name: greeting -> instanceOf: builtins.str\\n'
        """
        for name, instance in self._instances.items():
            line = f"name: {name} -> instanceOf: {_type_path(type(instance))}"
            if stream is None:
                logger.info("%s", line)
            else:
                stream.write(line + "\n")

    def _create_instance(self, factory: Callable[..., Any], bindings: List[Binding]) -> Any:
        """Call *factory* with every binding resolved from the registry."""
        args: List[Any] = []
        kwargs: Dict[str, Any] = {}
        for binding in bindings:
            try:
                value = self.lookup(binding.type, binding.name)
            except NotFoundError:
                if not binding.has_default:
                    raise
                value = binding.default

            if binding.kind is inspect.Parameter.POSITIONAL_ONLY:
                args.append(value)
            else:
                kwargs[binding.parameter] = value

        return factory(*args, **kwargs)

    def _run_hook(self, hook: LifecycleHook, name: str, instance: Any) -> Optional[Exception]:
        """Invoke *hook* on *instance*.

        Returns the exception raised by the hook when the container is
        strict; under best effort the failure is logged and ``None`` is
        returned.
        """
        method = hook.bound_to(instance)
        if method is None:
            return None
        try:
            method()
        except Exception as exc:
            if self._hook_errors is HookErrorPolicy.STRICT:
                return exc
            logger.exception("%s failed for '%s'", hook.value, name)
        return None

    def __len__(self) -> int:
        return len(self._instances)

    def __contains__(self, name: object) -> bool:
        return name in self._instances
