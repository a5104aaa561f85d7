"""Public exceptions for api-mapper."""


class ApiMapperError(Exception):
    """Base exception for all api-mapper errors."""


class MissingArgumentsError(ApiMapperError):
    """A call was made without a route."""

    def __init__(self, verb: str) -> None:
        super().__init__(f"No route has been passed to ApiMapper.{verb}()")
        self.verb = verb


class RoutePlaceholderMissingError(ApiMapperError):
    """A route placeholder has neither a parameter nor a provider value."""

    def __init__(self, placeholder: str, route: str) -> None:
        super().__init__(f"Route placeholder not found: {placeholder} in {route}")
        self.placeholder = placeholder
        self.route = route


class ApiMapperConfigError(ApiMapperError):
    """Configuration error (invalid base URL, malformed env vars)."""
