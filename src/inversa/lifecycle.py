"""Lifecycle hooks and the policy applied when they fail."""

from enum import Enum
from typing import Any, Callable, Optional, Protocol, runtime_checkable


@runtime_checkable
class Initializable(Protocol):
    """Component that wants a callback once the container has built it.

    Examples:
        >>> class Pool:
        ...     def post_construct(self) -> None:
        ...         self.ready = True
        >>> isinstance(Pool(), Initializable)
        True
    """

    def post_construct(self) -> None: ...


@runtime_checkable
class Disposable(Protocol):
    """Component that wants a callback when the container stops."""

    def pre_destroy(self) -> None: ...


class LifecycleHook(Enum):
    """The two hooks the container dispatches.

    The value is the name of the method invoked on the instance.

    Attributes:
        POST_CONSTRUCT: After a class-based registration builds the instance.
        PRE_DESTROY: For every stored instance during ``stop``.
    """

    POST_CONSTRUCT = "post_construct"
    PRE_DESTROY = "pre_destroy"

    @property
    def interface(self) -> type:
        if self is LifecycleHook.POST_CONSTRUCT:
            return Initializable
        return Disposable

    def bound_to(self, instance: Any) -> Optional[Callable[[], Any]]:
        """Return the hook method of *instance*, or ``None`` if it has none.

        Only methods defined on the instance's class count, so a class
        registered as an instance never has its hooks called unbound.
        """
        if not isinstance(instance, self.interface):
            return None
        if not callable(getattr(type(instance), self.value, None)):
            return None
        method = getattr(instance, self.value)
        return method if callable(method) else None


class HookErrorPolicy(Enum):
    """What the container does when a lifecycle hook raises.

    Attributes:
        BEST_EFFORT: Log the failure and carry on.
        STRICT: Raise :class:`~inversa.exceptions.LifecycleHookError`.

    Examples:
        >>> HookErrorPolicy.BEST_EFFORT
        <HookErrorPolicy.BEST_EFFORT: 'best_effort'>
    """

    BEST_EFFORT = "best_effort"
    STRICT = "strict"
