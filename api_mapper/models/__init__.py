"""Public models for api-mapper."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CallResult(BaseModel):
    """Record of one completed API call, handed to listeners and returned.

    Fields:
        method: Uppercased HTTP verb
        route: Original route template
        url: Resolved absolute URL
        response: Raw response handle from the HTTP client
        parameters: Query parameters actually sent (provider-augmented)
        fields: Post fields actually sent, None for safe methods
        json_body: Decoded JSON body, None when the body is not valid JSON
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    method: str
    route: str
    url: str
    response: Any = Field(repr=False)
    parameters: dict[str, Any] = Field(default_factory=dict)
    fields: dict[str, Any] | None = None
    json_body: Any = None

    @property
    def status_code(self) -> int | None:
        """HTTP status of the response, if the response handle has one."""
        return getattr(self.response, "status_code", None)


__all__ = ["CallResult"]
