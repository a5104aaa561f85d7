"""HTTP client collaborator and shared httpx configuration."""

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

import httpx

from api_mapper._version import __version__

DEFAULT_TIMEOUT = 30.0
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


@runtime_checkable
class HttpClient(Protocol):
    """Transport used by ``ApiMapper`` to perform one request.

    The returned response handle must expose ``content`` (bytes).
    """

    def perform(
        self,
        verb: str,
        url: str,
        headers: Sequence[str | tuple[str, str]],
        body: str | None = None,
    ) -> Any: ...


def create_http_client(
    *,
    timeout: float = DEFAULT_TIMEOUT,
    verify: bool = True,
) -> httpx.Client:
    """Create configured HTTP client.

    Args:
        timeout: Request timeout in seconds.
        verify: Verify TLS certificates.

    Returns:
        Configured httpx.Client instance.
    """
    return httpx.Client(
        timeout=timeout,
        verify=verify,
        headers={"User-Agent": f"api-mapper/{__version__}"},
    )


def to_header_pairs(headers: Sequence[str | tuple[str, str]]) -> list[tuple[str, str]]:
    """Normalize ``"Name: value"`` lines and pairs into ``(name, value)`` pairs."""
    pairs: list[tuple[str, str]] = []
    for header in headers:
        if isinstance(header, str):
            name, separator, value = header.partition(":")
            if not separator:
                raise ValueError(f"Malformed header line: {header!r}")
            pairs.append((name.strip(), value.strip()))
        else:
            name, value = header
            pairs.append((name, value))
    return pairs


class HttpxClient:
    """``HttpClient`` backed by an ``httpx.Client``.

    Status codes are not interpreted; transport errors from httpx propagate.
    """

    def __init__(self, client: httpx.Client | None = None) -> None:
        self._client = client if client is not None else create_http_client()

    @property
    def client(self) -> httpx.Client:
        return self._client

    def perform(
        self,
        verb: str,
        url: str,
        headers: Sequence[str | tuple[str, str]],
        body: str | None = None,
    ) -> httpx.Response:
        pairs = to_header_pairs(headers)
        if body is not None and not any(name.lower() == "content-type" for name, _ in pairs):
            pairs.append(("Content-Type", FORM_CONTENT_TYPE))
        return self._client.request(
            verb.upper(),
            url,
            headers=pairs,
            content=body.encode("utf-8") if body is not None else None,
        )

    def close(self) -> None:
        self._client.close()
