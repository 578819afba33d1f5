import logging

from servemux.constants import LISTENER_MUX, LISTENER_SIMPLE
from servemux.library.router import PathRouter
from servemux.daemon.routes.hello_routes import MUX_ROUTES, SIMPLE_ROUTES

logger = logging.getLogger(__name__)

# listener name -> (routes, require_catch_all)
LISTENERS = {
    LISTENER_MUX: (MUX_ROUTES, True),
    LISTENER_SIMPLE: (SIMPLE_ROUTES, False),
}


def build_router(name: str, routes: dict, require_catch_all: bool = False) -> PathRouter:
    """Register `routes` on a new PathRouter and freeze it."""
    router = PathRouter(name)
    for pattern, func in routes.items():
        router.register(pattern, func)
    return router.freeze(require_catch_all=require_catch_all)


def build_listener_router(name: str) -> PathRouter:
    """
    Build the frozen router for one of the known listeners.

    Raises:
        KeyError: `name` is not a known listener
    """
    try:
        routes, require_catch_all = LISTENERS[name]
    except KeyError:
        raise KeyError(f"Unknown listener '{name}', expected one of {sorted(LISTENERS)}") from None

    router = build_router(name, routes, require_catch_all=require_catch_all)
    for route in router.routes:
        logger.info("[%s] %s -> %s", name, route.pattern, route.description)
    return router
