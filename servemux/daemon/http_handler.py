import logging
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler
from html import escape
from urllib.parse import quote

from servemux.library.response import Request, ResponseWriter

"""
HTTP handler for the servemux listeners.

Defines the MuxHandler class, which dispatches every HTTP request, whatever
its method, to the route handler selected by the PathRouter attached to
the server as `self.server.router`.
"""

logger = logging.getLogger(__name__)

# request bodies up to this size are drained so the connection can be reused
MAX_DISCARD_BYTES = 256 * 1024


class MuxHandler(BaseHTTPRequestHandler):
    """
    HTTP/1.1 request handler backed by a PathRouter.

    Each request gets its own Request and ResponseWriter, so route handlers
    never share state. Paths with no route fall back to the standard
    `send_error(404)` page of the listener.
    """

    protocol_version = 'HTTP/1.1'
    # idle keep-alive connections are dropped after this many seconds
    timeout = 30

    def do_GET(self):
        self.dispatch()

    def do_HEAD(self):
        self.dispatch()

    def do_POST(self):
        self.dispatch()

    def do_PUT(self):
        self.dispatch()

    def do_PATCH(self):
        self.dispatch()

    def do_DELETE(self):
        self.dispatch()

    def do_OPTIONS(self):
        self.dispatch()

    def dispatch(self):
        """
        Route the current request.

        Order of resolution:
        - redirect '/tree' to '/tree/' when only the subtree is registered
        - the most specific route from the router
        - the listener's default 404 page
        """
        request = Request.from_handler(self)
        router = self.server.router
        logger.debug("[%s] routing %s request to %s", router.name, request.method, request.path)

        # no route reads a body, drop it before answering
        self._discard_body()

        redirect = router.redirect_for(request.path)
        if redirect:
            self._redirect(request, redirect)
            return

        route_func = router.dispatch(request.path)
        if route_func is None:
            logger.debug("[%s] no route for %s", router.name, request.path)
            self.send_error(HTTPStatus.NOT_FOUND, f"No route for {request.path}")
            return

        writer = ResponseWriter(self, head=request.method == 'HEAD')
        try:
            route_func(writer, request)
            writer.finish()
        except (BrokenPipeError, ConnectionResetError) as e:
            logger.debug("[%s] client went away while writing %s: %s", router.name, request.path, e)
            self.close_connection = True
        except Exception as e:
            logger.exception("Exception during route dispatch: %s", e)
            if writer.finished:
                self.close_connection = True
            else:
                self.send_error(HTTPStatus.INTERNAL_SERVER_ERROR, f"Internal Server Error: {e}")

    def _discard_body(self):
        if 'chunked' in self.headers.get('Transfer-Encoding', '').lower():
            self.close_connection = True
            return
        try:
            length = int(self.headers.get('Content-Length', '0'))
        except ValueError:
            length = 0
        if length <= 0:
            return
        if length > MAX_DISCARD_BYTES:
            self.close_connection = True
            return
        self.rfile.read(length)

    def _redirect(self, request: Request, location: str):
        location = quote(location, safe='/')
        if request.query:
            location = f"{location}?{request.query}"
        logger.debug("redirecting %s to %s", request.path, location)

        writer = ResponseWriter(self, head=request.method == 'HEAD')
        writer.set_header('Location', location)
        if request.method in ('GET', 'HEAD'):
            writer.set_header('Content-Type', 'text/html; charset=utf-8')
            writer.write_header(HTTPStatus.MOVED_PERMANENTLY)
            writer.write(f'<a href="{escape(location)}">Moved Permanently</a>.\n\n')
        else:
            writer.write_header(HTTPStatus.MOVED_PERMANENTLY)
        writer.finish()

    def log_message(self, format, *args):
        """
        Send access logs through the module logger instead of stderr.
        """
        logger.debug("%s - %s", self.address_string(), format % args)
