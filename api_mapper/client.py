"""Dynamic API-call dispatcher."""

import json
import os
import sys
from collections.abc import Mapping, Sequence
from typing import Any

from api_mapper._internal.http import DEFAULT_TIMEOUT, HttpClient, HttpxClient, create_http_client
from api_mapper._internal.redaction import redact_payload
from api_mapper._internal.routing import RequestAssembler, RouteBuilder, is_safe_method
from api_mapper._internal.routing.builder import DEFAULT_BASE_URL, RandomSource
from api_mapper.exceptions import ApiMapperConfigError, MissingArgumentsError
from api_mapper.listeners import ListenerLike, ListenerRegistry
from api_mapper.models import CallResult
from api_mapper.providers import Provider

DEFAULT_TIMEOUT_MS = int(DEFAULT_TIMEOUT * 1000)


class ApiMapper:
    """Builds API calls from route templates and dispatches their results.

    A call takes a verb, a route template and optional parameters and fields::

        mapper = ApiMapper(base_url="https://api.example.com")
        mapper.add_route_provider("{token}", ConstantProvider("abc"))
        result = mapper.get("{token}/ticket/list/{root}", {"{root}": "12", "key1": "value2"})
        # GET https://api.example.com/abc/ticket/list/12?key1=value2

    Any verb works through :meth:`call`; the common ones have shortcuts.
    Every result is passed to the registered listeners before being returned.

    Use `ApiMapper.from_env()` to create a mapper from environment variables.
    """

    def __init__(
        self,
        http_client: HttpClient | None = None,
        *,
        base_url: str | Sequence[str] = DEFAULT_BASE_URL,
        verify: bool = True,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        rng: RandomSource | None = None,
        debug: bool = False,
    ) -> None:
        """Initialize the mapper.

        Args:
            http_client: Transport performing the requests. When omitted, an
                httpx-backed client is created and owned by the mapper.
            base_url: Base URL, or several candidates picked at random per call.
            verify: Verify TLS certificates (only used for the owned client).
            timeout_ms: Request timeout in milliseconds (only used for the owned client).
            rng: Random source used to pick among several base URLs.
            debug: Enable debug logging to stderr.
        """
        self._owns_client = http_client is None
        if http_client is None:
            http_client = HttpxClient(create_http_client(timeout=timeout_ms / 1000, verify=verify))
        self._http_client = http_client
        self._verify = verify
        self._timeout_ms = timeout_ms
        self._debug = debug
        self._route_builder = RouteBuilder(base_url, rng=rng)
        self._assembler = RequestAssembler()
        self._listeners = ListenerRegistry()

    @classmethod
    def from_env(cls, http_client: HttpClient | None = None) -> "ApiMapper":
        """Create a mapper from environment variables.

        Optional environment variables:
            API_MAPPER_BASE_URL: Base URL, comma-separated for several candidates.
            API_MAPPER_VERIFY_SSL: Set to "0" to disable certificate verification.
            API_MAPPER_TIMEOUT_MS: Request timeout in milliseconds.
            API_MAPPER_DEBUG: Set to "1" to enable debug logging.

        Returns:
            A configured ApiMapper.

        Raises:
            ValueError: If API_MAPPER_TIMEOUT_MS is not an integer.
            ApiMapperConfigError: If API_MAPPER_BASE_URL holds no URL.
        """
        raw_base_url = os.environ.get("API_MAPPER_BASE_URL", DEFAULT_BASE_URL)
        base_urls = [url.strip() for url in raw_base_url.split(",") if url.strip()]
        if not base_urls:
            raise ApiMapperConfigError(f"Invalid API_MAPPER_BASE_URL: {raw_base_url!r}")

        verify = os.environ.get("API_MAPPER_VERIFY_SSL", "1") != "0"
        timeout_ms = int(os.environ.get("API_MAPPER_TIMEOUT_MS", str(DEFAULT_TIMEOUT_MS)))
        debug = os.environ.get("API_MAPPER_DEBUG", "") == "1"

        return cls(
            http_client,
            base_url=base_urls[0] if len(base_urls) == 1 else base_urls,
            verify=verify,
            timeout_ms=timeout_ms,
            debug=debug,
        )

    def _log_debug(self, message: str) -> None:
        """Log a debug message to stderr if debug mode is enabled."""
        if self._debug:
            print(f"[api-mapper] {message}", file=sys.stderr)

    # =========================================================================
    # Configuration
    # =========================================================================

    @property
    def http_client(self) -> HttpClient:
        return self._http_client

    @property
    def route_builder(self) -> RouteBuilder:
        return self._route_builder

    @property
    def assembler(self) -> RequestAssembler:
        return self._assembler

    @property
    def listeners(self) -> ListenerRegistry:
        return self._listeners

    def add_route_provider(self, name: str, provider: Provider) -> None:
        """Register a provider for a route placeholder, e.g. ``"{token}"``."""
        self._route_builder.add_route_provider(name, provider)

    def set_route_providers(self, providers: Mapping[str, Provider]) -> None:
        self._route_builder.set_route_providers(providers)

    def add_query_provider(self, name: str, provider: Provider) -> None:
        """Register a provider for a query parameter, used unless the caller sets it."""
        self._route_builder.add_query_provider(name, provider)

    def set_query_providers(self, providers: Mapping[str, Provider]) -> None:
        self._route_builder.set_query_providers(providers)

    def add_header_provider(self, name: str, provider: Provider) -> None:
        self._assembler.add_header_provider(name, provider)

    def set_header_providers(self, providers: Mapping[str, Provider]) -> None:
        self._assembler.set_header_providers(providers)

    def add_field_provider(self, name: str, provider: Provider) -> None:
        """Register a provider for a post field, used unless the caller sets it."""
        self._assembler.add_field_provider(name, provider)

    def set_field_providers(self, providers: Mapping[str, Provider]) -> None:
        self._assembler.set_field_providers(providers)

    def add_listener(self, listener: ListenerLike) -> None:
        self._listeners.add(listener)

    def set_listeners(self, listeners: Sequence[ListenerLike]) -> None:
        self._listeners.reset(listeners)

    # =========================================================================
    # Calls
    # =========================================================================

    def call(self, verb: str, *arguments: Any) -> CallResult:
        """Perform an HTTP call.

        ``arguments`` are, in order:
            route: Route template (required), e.g. ``"{token}/ticket/list/{root}"``.
            parameters: Placeholder values and query parameters, e.g.
                ``{"{root}": "12", "key1": "value2"}`` gives
                ``{token}/ticket/list/12?key1=value2``.
            fields: Post fields, ignored for GET and HEAD.

        Args:
            verb: HTTP verb, any case. Not limited to the standard verbs.
            *arguments: ``route[, parameters[, fields]]``.

        Returns:
            The call result, after every listener has handled it.

        Raises:
            MissingArgumentsError: If no route is given.
            RoutePlaceholderMissingError: If a placeholder cannot be resolved.
        """
        if not arguments or arguments[0] is None:
            raise MissingArgumentsError(verb)
        if len(arguments) > 3:
            raise TypeError(
                f"ApiMapper.{verb}() takes at most 3 arguments ({len(arguments)} given)"
            )

        route: str = arguments[0]
        parameters: Mapping[str, Any] | None = arguments[1] if len(arguments) > 1 else None
        fields: Mapping[str, Any] | None = arguments[2] if len(arguments) > 2 else None

        resolved = self._route_builder.build(route, parameters)
        request = self._assembler.assemble(verb, route, fields)

        method = verb.upper()
        self._log_debug(
            f"{method} {resolved.url.partition('?')[0]} parameters={redact_payload(resolved.parameters)}"
            + (f" fields={redact_payload(request.fields)}" if request.fields is not None else "")
        )
        if is_safe_method(verb):
            response = self._http_client.perform(verb, resolved.url, request.headers)
        else:
            response = self._http_client.perform(verb, resolved.url, request.headers, request.body)
        self._log_debug(f"{method} {route} -> {getattr(response, 'status_code', '?')}")

        result = CallResult(
            method=method,
            route=route,
            url=resolved.url,
            response=response,
            parameters=resolved.parameters,
            fields=request.fields,
            json_body=self._decode_json(response),
        )

        self._listeners.notify(result)
        return result

    def _decode_json(self, response: Any) -> Any:
        """Decode the response body, returning None if it is not JSON."""
        try:
            return json.loads(response.content)
        except (ValueError, TypeError, AttributeError):
            self._log_debug("Response body is not valid JSON")
            return None

    def get(self, *arguments: Any) -> CallResult:
        return self.call("get", *arguments)

    def head(self, *arguments: Any) -> CallResult:
        return self.call("head", *arguments)

    def post(self, *arguments: Any) -> CallResult:
        return self.call("post", *arguments)

    def put(self, *arguments: Any) -> CallResult:
        return self.call("put", *arguments)

    def patch(self, *arguments: Any) -> CallResult:
        return self.call("patch", *arguments)

    def delete(self, *arguments: Any) -> CallResult:
        return self.call("delete", *arguments)

    def options(self, *arguments: Any) -> CallResult:
        return self.call("options", *arguments)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> None:
        """Close the HTTP client if the mapper created it."""
        if self._owns_client and isinstance(self._http_client, HttpxClient):
            self._http_client.close()

    def __enter__(self) -> "ApiMapper":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
