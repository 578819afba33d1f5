from http import HTTPStatus


def handle_hello_name(writer, request):
    """Greet the name that follows /hello/ in the path."""
    # Only the first occurrence of '/hello/' is removed, wherever it appears.
    name = request.path.replace('/hello/', '', 1)
    writer.write(f"Hello {name}\n")


def handle_hello_world(writer, request):
    """Greet the world."""
    writer.write("Hello, world!\n")


def handle_not_found(writer, request):
    """Catch-all answering 404 with the requested path."""
    writer.set_header('Content-Type', 'text/plain')
    writer.write_header(HTTPStatus.NOT_FOUND)
    writer.write(f"Oops Not found\nURL: {request.path}\n")


# These dictionaries map URL patterns to their route handler functions, one
# per listener. Patterns ending in '/' match every path below them; the
# '/' pattern is the catch-all.
MUX_ROUTES = {
    '/hello/': handle_hello_name,
    '/hello': handle_hello_world,
    '/': handle_not_found,
}

SIMPLE_ROUTES = {
    '/hello': handle_hello_world,
}
