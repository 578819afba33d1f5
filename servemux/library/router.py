import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from servemux.constants import CATCH_ALL_PATTERN
from servemux.library.exceptions import (
    DuplicateRouteError,
    InvalidPatternError,
    RouteConfigurationError,
    RouterFrozenError,
)

"""
Path router for the servemux listeners.

A PathRouter holds an ordered table of (pattern, handler) routes. Patterns
are either exact paths such as '/hello' or prefixes ending in '/' such as
'/hello/'. Lookups prefer an exact match, then the longest matching prefix.
The catch-all '/' is simply the shortest possible prefix.
"""

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Route:
    """A single (pattern, handler) registration."""

    pattern: str
    handler: Callable

    @property
    def is_prefix(self) -> bool:
        return self.pattern.endswith('/')

    @property
    def description(self) -> str:
        return (self.handler.__doc__ or "No description").strip().splitlines()[0]


class PathRouter:
    """
    Route table mapping URL paths to handler functions.

    Routes are registered at startup and the table is frozen before the
    listener starts serving. After `freeze()` the router is read-only, so
    `dispatch()` can be called from any number of request threads without
    locking.
    """

    def __init__(self, name: str = 'default'):
        self.name = name
        self._routes: List[Route] = []
        self._exact: Dict[str, Route] = {}
        # prefix routes, longest pattern first
        self._prefixes: List[Route] = []
        self._frozen = False

    def __len__(self) -> int:
        return len(self._routes)

    def __contains__(self, pattern: str) -> bool:
        return pattern in self._exact or any(r.pattern == pattern for r in self._prefixes)

    def __repr__(self) -> str:
        patterns = ', '.join(r.pattern for r in self._routes)
        return f"PathRouter(name={self.name!r}, routes=[{patterns}])"

    @property
    def routes(self) -> Tuple[Route, ...]:
        """Registered routes in registration order."""
        return tuple(self._routes)

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def has_catch_all(self) -> bool:
        return CATCH_ALL_PATTERN in self

    def register(self, pattern: str, handler: Callable) -> Route:
        """
        Add a route to the table.

        Args:
            pattern (str): exact path ('/hello') or prefix ending in '/' ('/hello/')
            handler (callable): called as handler(writer, request)

        Returns:
            Route: the new route

        Raises:
            RouterFrozenError: the router is already serving
            InvalidPatternError: empty pattern, pattern not rooted at '/' or a
                non-callable handler
            DuplicateRouteError: the exact pattern is already registered
        """
        if self._frozen:
            raise RouterFrozenError(pattern)
        if not isinstance(pattern, str) or not pattern:
            raise InvalidPatternError("pattern must be a non-empty string", pattern)
        if not pattern.startswith('/'):
            raise InvalidPatternError("pattern must start with '/'", pattern)
        if not callable(handler):
            raise InvalidPatternError("handler must be callable", pattern)
        if pattern in self:
            raise DuplicateRouteError(pattern)

        route = Route(pattern, handler)
        self._routes.append(route)
        if route.is_prefix:
            self._prefixes.append(route)
            self._prefixes.sort(key=lambda r: len(r.pattern), reverse=True)
        else:
            self._exact[pattern] = route

        logger.debug("[%s] registered %s route %s -> %s", self.name,
                     'prefix' if route.is_prefix else 'exact', pattern,
                     getattr(handler, '__name__', repr(handler)))
        return route

    def route(self, pattern: str):
        """Decorator form of `register()`."""
        def decorator(func):
            self.register(pattern, func)
            return func
        return decorator

    def freeze(self, require_catch_all: bool = False) -> 'PathRouter':
        """
        Lock the route table before serving.

        Args:
            require_catch_all (bool): when True the router must be total, so a
                missing '/' route is reported here instead of at request time.

        Raises:
            RouteConfigurationError: the table is empty or lacks a required catch-all
        """
        if not self._routes:
            raise RouteConfigurationError(f"router '{self.name}' has no routes")
        if require_catch_all and not self.has_catch_all:
            raise RouteConfigurationError(
                f"router '{self.name}' requires a catch-all route", CATCH_ALL_PATTERN)
        self._frozen = True
        logger.debug("[%s] route table frozen with %d routes", self.name, len(self._routes))
        return self

    def match(self, path: str) -> Optional[Route]:
        """Return the most specific route for `path`, or None."""
        route = self._exact.get(path)
        if route is not None:
            return route

        # longest prefix wins; '/' is last as the shortest prefix
        for route in self._prefixes:
            if path.startswith(route.pattern):
                return route
        return None

    def dispatch(self, path: str) -> Optional[Callable]:
        """Return the handler for `path`, or None when nothing matches."""
        route = self.match(path)
        return route.handler if route else None

    def redirect_for(self, path: str) -> Optional[str]:
        """
        Return the subtree path to redirect to, or None.

        A request for '/tree' is redirected to '/tree/' when only the subtree
        pattern '/tree/' is registered. The redirect takes precedence over
        shorter prefixes and the catch-all, but never over an exact match.
        """
        if not path or path in self._exact or path.endswith('/'):
            return None
        target = path + '/'
        if any(r.pattern == target for r in self._prefixes):
            return target
        return None
