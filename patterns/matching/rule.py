"""
Rules and rule constructors.

A Rule pairs a guard (predicate over the key) with a handler (function
of the key). Guards and handlers are plain callables; the functions in
this module are the usual ways to build them.

Example:
    target = Patterns.of(
        when(equals_to(3), then("b")),
        when(lambda i: i > 0, then_apply(str)),
        when_match(Decimal, lambda d: d.is_nan(), then("nan")),
        or_else(then("a")),
    )
"""

from typing import Any, Callable, Generic, Optional, Type, TypeVar, Union
from dataclasses import dataclass, field
from functools import wraps


K = TypeVar("K")
V = TypeVar("V")
T = TypeVar("T")


class _Nothing:
    """Marker returned by narrow() when the key is not an instance of the type."""

    _instance: Optional["_Nothing"] = None

    def __new__(cls) -> "_Nothing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOTHING"


NOTHING = _Nothing()


def narrow(clazz: Type[T], key: Any) -> Union[T, _Nothing]:
    """Return `key` viewed as `clazz`, or NOTHING if it is not an instance."""
    if isinstance(key, clazz):
        return key
    return NOTHING


def describe(func: Callable) -> str:
    """Human-readable name of a guard for reprs and traces."""
    description = getattr(func, "_pattern_description", None)
    if description:
        return description
    return getattr(func, "__qualname__", None) or repr(func)


def _labelled(func: Callable, description: str) -> Callable:
    func._pattern_description = description  # type: ignore
    return func


@dataclass(frozen=True)
class Rule(Generic[K, V]):
    """
    Immutable (guard, handler) pair.

    Guard and handler are private to the rule; use matches() and apply().

    Attributes:
        description: Label used in repr and evaluation traces
    """
    _guard: Callable[[K], bool] = field(repr=False)
    _handler: Callable[[K], V] = field(repr=False)
    description: str = ""

    def __post_init__(self):
        if not callable(self._guard):
            raise TypeError(f"guard must be callable, got {type(self._guard).__name__}")
        if not callable(self._handler):
            raise TypeError(f"handler must be callable, got {type(self._handler).__name__}")
        if not self.description:
            object.__setattr__(self, "description", f"when({describe(self._guard)})")

    def matches(self, key: K) -> bool:
        """Evaluate the guard against `key`."""
        return bool(self._guard(key))

    def apply(self, key: K) -> V:
        """Run the handler on `key`."""
        return self._handler(key)


# =============================================================================
# GUARDS
# =============================================================================

def anything() -> Callable[[Any], bool]:
    """Guard accepting every key."""
    def guard(key: Any) -> bool:
        return True
    return _labelled(guard, "anything")


def equals_to(target: Any) -> Callable[[Any], bool]:
    """Guard accepting keys equal to `target` (None-safe)."""
    def guard(key: Any) -> bool:
        return key == target
    return _labelled(guard, f"equals_to({target!r})")


def instance_of(
    clazz: Type[T],
    where: Optional[Callable[[T], bool]] = None
) -> Callable[[Any], bool]:
    """
    Guard accepting instances of `clazz`, optionally also requiring `where`.

    `where` only ever sees keys that passed the isinstance check.
    """
    if not isinstance(clazz, type):
        raise TypeError(f"clazz must be a type, got {type(clazz).__name__}")

    def guard(key: Any) -> bool:
        narrowed = narrow(clazz, key)
        if narrowed is NOTHING:
            return False
        return where is None or bool(where(narrowed))

    if where is None:
        return _labelled(guard, f"instance_of({clazz.__name__})")
    return _labelled(guard, f"instance_of({clazz.__name__}, {describe(where)})")


# =============================================================================
# HANDLERS
# =============================================================================

def then(value: V) -> Callable[[Any], V]:
    """Handler ignoring the key and returning `value`."""
    def handler(key: Any) -> V:
        return value
    return handler


def then_supply(supplier: Callable[[], V]) -> Callable[[Any], V]:
    """Handler ignoring the key and calling `supplier()` on every match."""
    if not callable(supplier):
        raise TypeError("supplier must be callable")

    def handler(key: Any) -> V:
        return supplier()
    return handler


def then_apply(function: Callable[[K], V]) -> Callable[[K], V]:
    """Handler applying `function` to the key."""
    if not callable(function):
        raise TypeError("function must be callable")

    @wraps(function)
    def handler(key: K) -> V:
        return function(key)
    return handler


def then_accept_with(consumer: Callable[[K], Any]) -> Callable[[K], None]:
    """Handler passing the key to `consumer` and discarding its return value."""
    if not callable(consumer):
        raise TypeError("consumer must be callable")

    @wraps(consumer)
    def handler(key: K) -> None:
        consumer(key)
    return handler


def then_run(action: Callable[[], Any]) -> Callable[[Any], None]:
    """Handler ignoring the key and calling `action()`."""
    if not callable(action):
        raise TypeError("action must be callable")

    def handler(key: Any) -> None:
        action()
    return handler


# =============================================================================
# RULES
# =============================================================================

def when(when: Callable[[K], bool], then: Callable[[K], V]) -> Rule[K, V]:
    """
    Define a rule.

    Args:
        when: Guard; the rule applies to keys it accepts
        then: Handler applied to accepted keys

    Returns:
        Rule
    """
    return Rule(when, then)


def or_else(then: Callable[[K], V]) -> Rule[K, V]:
    """Catch-all rule. Put it last to give the rule set a default."""
    return Rule(anything(), then, "or_else")


def or_else_throw(exception_factory: Callable[[K], BaseException]) -> Rule[K, Any]:
    """
    Catch-all rule raising `exception_factory(key)`.

    Useful to reject unexpected keys with a domain error.
    """
    if not callable(exception_factory):
        raise TypeError("exception_factory must be callable")

    def handler(key: K) -> Any:
        raise exception_factory(key)
    return Rule(anything(), handler, "or_else_throw")


def when_match(
    clazz: Type[T],
    when: Callable[[T], Any],
    then: Optional[Callable[[T], V]] = None
) -> Rule[Any, V]:
    """
    Define a rule matching on the runtime type of the key.

    Two forms:
        when_match(B, handler)             # isinstance(key, B)
        when_match(C, predicate, handler)  # isinstance(key, C) and predicate(key)

    The predicate is only evaluated for keys that are instances of
    `clazz`, so it may rely on the attributes of `clazz`. The handler
    receives the key narrowed to `clazz`.
    """
    if then is None:
        handler, where = when, None
    else:
        handler, where = then, when

    guard = instance_of(clazz, where)

    def narrowed_handler(key: Any) -> V:
        return handler(narrow(clazz, key))

    return Rule(guard, narrowed_handler, describe(guard))
