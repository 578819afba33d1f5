from servemux.library.exceptions import (
    ServeMuxError,
    RouteConfigurationError,
    DuplicateRouteError,
    InvalidPatternError,
    RouterFrozenError,
    ListenerBindError,
)
from servemux.library.response import Request, ResponseWriter
from servemux.library.router import PathRouter, Route

__all__ = [
    'ServeMuxError',
    'RouteConfigurationError',
    'DuplicateRouteError',
    'InvalidPatternError',
    'RouterFrozenError',
    'ListenerBindError',
    'Request',
    'ResponseWriter',
    'PathRouter',
    'Route',
]
