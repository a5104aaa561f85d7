"""Header and post-field assembly for outgoing requests."""

from collections.abc import Mapping
from typing import Any, NamedTuple

from api_mapper._internal.routing.encoding import encode_form
from api_mapper.providers import NOT_FOUND, Provider

SAFE_METHODS: frozenset[str] = frozenset({"GET", "HEAD"})

HeaderEntry = str | tuple[str, str]


def is_safe_method(verb: str) -> bool:
    """Check whether ``verb`` must be sent without a body (GET, HEAD)."""
    return verb.upper() in SAFE_METHODS


class AssembledRequest(NamedTuple):
    """Headers and payload for one call.

    Attributes:
        headers: Header entries, ``"Name: value"`` strings or ``(name, value)`` pairs.
        fields: Merged post fields, ``None`` for safe methods.
        body: Form-encoded fields, ``None`` for safe methods.
    """

    headers: list[HeaderEntry]
    fields: dict[str, Any] | None
    body: str | None


class RequestAssembler:
    """Merges provider-supplied headers and post fields into a request."""

    def __init__(self) -> None:
        self._header_providers: dict[str, Provider] = {}
        self._field_providers: dict[str, Provider] = {}

    @property
    def header_providers(self) -> dict[str, Provider]:
        return dict(self._header_providers)

    def set_header_providers(self, providers: Mapping[str, Provider]) -> None:
        self._header_providers = dict(providers)

    def add_header_provider(self, name: str, provider: Provider) -> None:
        self._header_providers[name] = provider

    @property
    def field_providers(self) -> dict[str, Provider]:
        return dict(self._field_providers)

    def set_field_providers(self, providers: Mapping[str, Provider]) -> None:
        self._field_providers = dict(providers)

    def add_field_provider(self, name: str, provider: Provider) -> None:
        self._field_providers[name] = provider

    def assemble(
        self,
        verb: str,
        route: str,
        fields: Mapping[str, Any] | None = None,
    ) -> AssembledRequest:
        """Collect headers and, for non-safe verbs, fields and body.

        Args:
            verb: HTTP verb, any case.
            route: Original route template, passed to every provider.
            fields: Caller-supplied post fields. Ignored for safe verbs.

        Returns:
            The assembled request parts.
        """
        headers = self.collect_headers(route)
        if is_safe_method(verb):
            return AssembledRequest(headers=headers, fields=None, body=None)

        merged = self.merge_fields(route, fields)
        return AssembledRequest(headers=headers, fields=merged, body=encode_form(merged))

    def collect_headers(self, route: str) -> list[HeaderEntry]:
        """Gather header entries from every header provider, in order."""
        headers: list[HeaderEntry] = []
        for provider in self._header_providers.values():
            value = provider.lookup(route)
            if value is NOT_FOUND:
                continue
            # A list (or a tuple of entries) carries several header lines
            if isinstance(value, list) or (
                isinstance(value, tuple) and not _is_header_pair(value)
            ):
                headers.extend(value)
            else:
                headers.append(value)
        return headers

    def merge_fields(self, route: str, fields: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Fill in post fields the caller did not set from the field providers."""
        merged = dict(fields or {})
        for name, provider in self._field_providers.items():
            if name in merged:
                continue
            value = provider.lookup(route)
            if value is not NOT_FOUND:
                merged[name] = value
        return merged


def _is_header_pair(value: tuple[Any, ...]) -> bool:
    return (
        len(value) == 2
        and all(isinstance(item, str) for item in value)
        and ":" not in value[0]
    )
