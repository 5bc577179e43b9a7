"""API Manager - RESTful запросы и upload с retry через делегата."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .core.api_manager import ApiManager
from .core.config import ApiManagerConfig, ConnectivityConfig, TimeoutConfig
from .core.connectivity import ConnectivityProbe, SocketConnectivityProbe, StaticConnectivityProbe
from .core.delegate import ApiManagerDelegate, RequestKind
from .core.env_config import ConfigFileLoader, load_from_env
from .core.exceptions import (
    ApiManagerException,
    ConfigurationError,
    ConfigValidationError,
    TransportError,
    TransportTimeoutError,
    TransportConnectionError,
    ProxyError,
    TooManyRedirectsError,
    EncodingError,
)
from .core.headers import Headers, merge_headers
from .core.logging import LoggingConfig
from .core.models import (
    NOT_CONNECTED_STATUS,
    DataRequest,
    HTTPMethod,
    Outcome,
    ParameterEncoding,
    UploadRequest,
)
from .core.transport import HttpxTransport, RequestsTransport, Transport, TransportResponse

# Set up logging - add NullHandler to prevent "No handler found" warnings
# Users can configure logging themselves using logging.getLogger('api_manager')
logging.getLogger('api_manager').addHandler(logging.NullHandler())

try:
    __version__ = version("api-manager-core")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__all__ = [
    "ApiManager",
    "ApiManagerConfig",
    "ConnectivityConfig",
    "TimeoutConfig",
    "LoggingConfig",
    "ConnectivityProbe",
    "SocketConnectivityProbe",
    "StaticConnectivityProbe",
    "ApiManagerDelegate",
    "RequestKind",
    "ConfigFileLoader",
    "load_from_env",
    "ApiManagerException",
    "ConfigurationError",
    "ConfigValidationError",
    "TransportError",
    "TransportTimeoutError",
    "TransportConnectionError",
    "ProxyError",
    "TooManyRedirectsError",
    "EncodingError",
    "Headers",
    "merge_headers",
    "NOT_CONNECTED_STATUS",
    "DataRequest",
    "HTTPMethod",
    "Outcome",
    "ParameterEncoding",
    "UploadRequest",
    "HttpxTransport",
    "RequestsTransport",
    "Transport",
    "TransportResponse",
]
