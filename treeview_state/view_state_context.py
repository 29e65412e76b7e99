"""Provide/inject plumbing for view-state collaborators.

UI consumers never import a cache instance; they look one up by an
``InjectionKey`` that an outer scope supplied with :func:`provide`. Scopes are
kept on a thread-local stack so nested ``with provide(...)`` blocks shadow
outer ones and threads never see each other's scopes.

A lookup for a key nobody provided is a programming error and raises
``NotProvidedError`` at the point of use.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .debug_mode import DebugModeState
    from .view_state_cache import ViewStateCache

_SCOPE_STACK_LOCAL = threading.local()


def _scope_stack() -> list[tuple["InjectionKey", Any]]:
    """Return a thread-local stack of provided ``(key, value)`` pairs."""
    stack = getattr(_SCOPE_STACK_LOCAL, "stack", None)
    if stack is None:
        stack = []
        _SCOPE_STACK_LOCAL.stack = stack
    return stack


class NotProvidedError(RuntimeError):
    """Raised when :func:`inject` finds no value for a key."""


class InjectionKey:
    """Identity token for provide/inject lookups.

    Two keys with the same ``name`` are still different keys; lookups compare
    by identity only.
    """

    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"InjectionKey({self.name!r})"


VIEW_STATE_KEY = InjectionKey("view_state")
DEBUG_MODE_KEY = InjectionKey("debug_mode")


class _NoDefaultSentinel:
    __slots__ = ()

    def __repr__(self) -> str:
        return "NO_DEFAULT"


_NO_DEFAULT = _NoDefaultSentinel()


@contextmanager
def provide(key: InjectionKey, value: Any) -> Iterator[Any]:
    """Context manager that makes ``value`` injectable under ``key``.

    Parameters
    ----------
    key : InjectionKey
        Lookup token.
    value : Any
        Object handed to :func:`inject` callers inside the block.

    Yields
    ------
    Any
        The same value passed in.
    """
    if not isinstance(key, InjectionKey):
        raise TypeError(f"provide() expects an InjectionKey, got {type(key).__name__}")
    entry = (key, value)
    stack = _scope_stack()
    stack.append(entry)
    try:
        yield value
    finally:
        for i in range(len(stack) - 1, -1, -1):
            if stack[i] is entry:
                del stack[i]
                break


def inject(key: InjectionKey, default: Any = _NO_DEFAULT) -> Any:
    """Return the innermost value provided for ``key``.

    Raises
    ------
    NotProvidedError
        If nothing was provided for ``key`` and no ``default`` was given.
    """
    for provided_key, value in reversed(_scope_stack()):
        if provided_key is key:
            return value
    if default is not _NO_DEFAULT:
        return default
    raise NotProvidedError(
        f"No value provided for {key!r}. "
        "Wrap the consumer in `with provide(key, value):` first."
    )


def use_view_state() -> ViewStateCache:
    """Return the injected ``ViewStateCache`` or raise ``NotProvidedError``."""
    return inject(VIEW_STATE_KEY)


def use_debug_mode() -> DebugModeState:
    """Return the injected ``DebugModeState`` or raise ``NotProvidedError``."""
    return inject(DEBUG_MODE_KEY)
