# constants.py

### Listener names
LISTENER_MUX = 'mux'
LISTENER_SIMPLE = 'simple'

### Listener defaults
DEFAULT_HOST = '0.0.0.0'
MUX_HTTP_PORT = 8080
SIMPLE_HTTP_PORT = 3000

### Routing
CATCH_ALL_PATTERN = '/'

### Responses
DEFAULT_CONTENT_TYPE = 'text/plain; charset=utf-8'

### Logging
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_LEVEL = "WARNING"

### Environment Keys
ENV_PREFIX = "SERVEMUX_"
