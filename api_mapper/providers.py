"""Pluggable value providers for routes, query strings, headers and fields.

A provider is any object with a ``lookup(route)`` method. It receives the
original, undecorated route template and returns either a value or the
``NOT_FOUND`` sentinel. ``None``, ``False`` and ``""`` are legitimate values.
"""

import os
from collections.abc import Callable, Mapping
from typing import Any, Final, Protocol, runtime_checkable


class _NotFound:
    """Sentinel type signaling that a provider has no value for a route."""

    _instance: "_NotFound | None" = None

    def __new__(cls) -> "_NotFound":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND: Final = _NotFound()


@runtime_checkable
class Provider(Protocol):
    """Anything that can supply a value for a route."""

    def lookup(self, route: str) -> Any: ...


class ConstantProvider:
    """Provider returning the same value for every route."""

    def __init__(self, value: Any) -> None:
        self._value = value

    def lookup(self, route: str) -> Any:
        return self._value


class CallableProvider:
    """Provider delegating to a function of the route."""

    def __init__(self, func: Callable[[str], Any]) -> None:
        self._func = func

    def lookup(self, route: str) -> Any:
        return self._func(route)


class EnvironmentProvider:
    """Provider reading an environment variable.

    Args:
        name: Environment variable name.
        environ: Mapping to read from. Defaults to ``os.environ`` at lookup time.
    """

    def __init__(self, name: str, environ: Mapping[str, str] | None = None) -> None:
        self._name = name
        self._environ = environ

    def lookup(self, route: str) -> Any:
        environ = os.environ if self._environ is None else self._environ
        return environ.get(self._name, NOT_FOUND)


class ForwardedForHeaderProvider:
    """Header provider forwarding the inbound client address.

    The peer address of the request being served is injected by the caller,
    typically from the web framework's request object.
    """

    HEADER_NAME = "X-Forwarded-For"

    def __init__(self, remote_addr: str | None) -> None:
        self._remote_addr = remote_addr

    def lookup(self, route: str) -> Any:
        if not self._remote_addr:
            return NOT_FOUND
        return f"{self.HEADER_NAME}: {self._remote_addr}"
