"""api-mapper: build HTTP calls from route templates and pluggable providers.

Public API:
    ApiMapper - Dispatcher turning (verb, route, parameters, fields) into calls
    CallResult - Record of one call, handed to listeners
    ConstantProvider, CallableProvider, EnvironmentProvider,
    ForwardedForHeaderProvider, NOT_FOUND - Providers and their sentinel
    ListenerRegistry, RecordingListener - Call observers

Internal:
    _internal.routing - URL building and request assembly
    _internal.http - HTTP client collaborator
"""

from api_mapper._internal.http import HttpClient, HttpxClient
from api_mapper._version import __version__
from api_mapper.client import ApiMapper
from api_mapper.exceptions import (
    ApiMapperConfigError,
    ApiMapperError,
    MissingArgumentsError,
    RoutePlaceholderMissingError,
)
from api_mapper.listeners import Listener, ListenerRegistry, RecordingListener
from api_mapper.models import CallResult
from api_mapper.providers import (
    NOT_FOUND,
    CallableProvider,
    ConstantProvider,
    EnvironmentProvider,
    ForwardedForHeaderProvider,
    Provider,
)

__all__ = [
    "__version__",
    "ApiMapper",
    "CallResult",
    "HttpClient",
    "HttpxClient",
    "Provider",
    "NOT_FOUND",
    "ConstantProvider",
    "CallableProvider",
    "EnvironmentProvider",
    "ForwardedForHeaderProvider",
    "Listener",
    "ListenerRegistry",
    "RecordingListener",
    "ApiMapperError",
    "ApiMapperConfigError",
    "MissingArgumentsError",
    "RoutePlaceholderMissingError",
]
