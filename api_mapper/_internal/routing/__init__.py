"""URL and request construction."""

from api_mapper._internal.routing.assembler import (
    AssembledRequest,
    RequestAssembler,
    is_safe_method,
)
from api_mapper._internal.routing.builder import ResolvedRoute, RouteBuilder

__all__ = [
    "AssembledRequest",
    "RequestAssembler",
    "ResolvedRoute",
    "RouteBuilder",
    "is_safe_method",
]
