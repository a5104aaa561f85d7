"""Route template resolution and URL building."""

import random
import re
from collections.abc import Mapping, Sequence
from typing import Any, NamedTuple, Protocol

from api_mapper._internal.routing.encoding import encode_form, encode_path_value
from api_mapper.exceptions import ApiMapperConfigError, RoutePlaceholderMissingError
from api_mapper.providers import NOT_FOUND, Provider

DEFAULT_BASE_URL = "http://localhost"

PLACEHOLDER_PATTERN = re.compile(r"\{[^}]+\}")


class RandomSource(Protocol):
    """Subset of ``random.Random`` used to pick a base URL."""

    def choice(self, seq: Sequence[str]) -> str: ...


class ResolvedRoute(NamedTuple):
    """Outcome of building a route.

    Attributes:
        url: Absolute URL including the query string.
        path: Route with every placeholder substituted.
        parameters: Parameters serialized into the query string.
    """

    url: str
    path: str
    parameters: dict[str, Any]


class RouteBuilder:
    """Turns a route template and parameters into an absolute URL.

    Placeholders look like ``{name}``. Each one is resolved, in order, from the
    parameters (key ``"{name}"``, consumed on use) and then from the route
    provider registered under the same decorated key. Remaining parameters,
    completed by the query providers, become the query string.
    """

    def __init__(
        self,
        base_url: str | Sequence[str] = DEFAULT_BASE_URL,
        *,
        rng: RandomSource | None = None,
    ) -> None:
        if isinstance(base_url, str):
            candidates = [base_url or DEFAULT_BASE_URL]
        else:
            candidates = list(base_url)
        if not candidates:
            raise ApiMapperConfigError("At least one base URL is required")
        self._base_urls = candidates
        self._rng = rng if rng is not None else random.Random()
        self._route_providers: dict[str, Provider] = {}
        self._query_providers: dict[str, Provider] = {}

    @property
    def base_urls(self) -> list[str]:
        """Candidate base URLs, in configuration order."""
        return list(self._base_urls)

    # =========================================================================
    # Registries
    # =========================================================================

    @property
    def route_providers(self) -> dict[str, Provider]:
        return dict(self._route_providers)

    def set_route_providers(self, providers: Mapping[str, Provider]) -> None:
        self._route_providers = dict(providers)

    def add_route_provider(self, name: str, provider: Provider) -> None:
        """Register a provider for the placeholder ``name`` (e.g. ``"{token}"``)."""
        self._route_providers[name] = provider

    @property
    def query_providers(self) -> dict[str, Provider]:
        return dict(self._query_providers)

    def set_query_providers(self, providers: Mapping[str, Provider]) -> None:
        self._query_providers = dict(providers)

    def add_query_provider(self, name: str, provider: Provider) -> None:
        """Register a provider for the query parameter ``name``."""
        self._query_providers[name] = provider

    # =========================================================================
    # Building
    # =========================================================================

    def build(self, route: str, parameters: Mapping[str, Any] | None = None) -> ResolvedRoute:
        """Resolve ``route`` against ``parameters`` and the registered providers.

        Args:
            route: Route template, e.g. ``"{token}/ticket/list/{root}"``.
            parameters: Placeholder values (decorated keys) and query parameters.
                The mapping is copied, never mutated.

        Returns:
            The resolved route.

        Raises:
            RoutePlaceholderMissingError: If a placeholder cannot be resolved.
        """
        remaining = dict(parameters or {})
        resolved: dict[str, Any] = {}
        path = route

        for placeholder in PLACEHOLDER_PATTERN.findall(route):
            if placeholder in resolved:
                value = resolved[placeholder]
            elif placeholder in remaining:
                value = remaining.pop(placeholder)
            else:
                value = self._lookup(self._route_providers, placeholder, route)
                if value is NOT_FOUND:
                    raise RoutePlaceholderMissingError(placeholder, route)
            resolved[placeholder] = value
            path = path.replace(placeholder, encode_path_value(value), 1)

        # Query providers see the original route and never override the caller
        for name, provider in self._query_providers.items():
            value = provider.lookup(route)
            if value is not NOT_FOUND and name not in remaining:
                remaining[name] = value

        query = encode_form(remaining)
        return ResolvedRoute(url=self._join(path, query), path=path, parameters=remaining)

    def build_url(self, route: str, parameters: Mapping[str, Any] | None = None) -> str:
        """Build the absolute URL for ``route``. See :meth:`build`."""
        return self.build(route, parameters).url

    def _lookup(self, providers: Mapping[str, Provider], name: str, route: str) -> Any:
        provider = providers.get(name)
        if provider is None:
            return NOT_FOUND
        return provider.lookup(route)

    def _join(self, path: str, query: str) -> str:
        if len(self._base_urls) == 1:
            base_url = self._base_urls[0]
        else:
            base_url = self._rng.choice(self._base_urls)
        url = f"{base_url.rstrip('/')}/{path.lstrip('/')}"
        if query:
            separator = "&" if "?" in path else "?"
            url = f"{url}{separator}{query}"
        return url
