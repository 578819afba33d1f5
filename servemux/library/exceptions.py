class ServeMuxError(Exception):
    """Base class for all servemux errors."""


class RouteConfigurationError(ServeMuxError):
    def __init__(self, message: str, pattern: str = None):
        """
        Raised at startup when the route table cannot be built as requested.

        Args:
            message (str): The error message describing what went wrong.
            pattern (str): The route pattern involved, if any.
        """
        self.pattern = pattern
        if pattern is not None:
            message = f"[{pattern}] {message}"
        super().__init__(message)


class DuplicateRouteError(RouteConfigurationError):
    """Exception raised when a pattern is registered twice."""
    def __init__(self, pattern: str):
        super().__init__("pattern is already registered", pattern)


class InvalidPatternError(RouteConfigurationError):
    """Exception raised for empty patterns or patterns not rooted at '/'."""
    def __init__(self, message: str, pattern: str = None):
        super().__init__(message, pattern)


class RouterFrozenError(RouteConfigurationError):
    """Exception raised when registering on a router that is already serving."""
    def __init__(self, pattern: str = None):
        super().__init__("router is frozen, routes must be registered before serving", pattern)


class ListenerBindError(ServeMuxError):
    def __init__(self, host: str, port: int, reason: str):
        """
        Fatal error raised when the listener socket cannot be bound.

        Args:
            host (str): Address the listener tried to bind.
            port (int): Port the listener tried to bind.
            reason (str): Operating system reason, e.g. address already in use.
        """
        self.host = host
        self.port = port
        super().__init__(f"Unable to bind {host}:{port}: {reason}")
