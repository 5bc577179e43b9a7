"""Core API Manager модули."""

from .api_manager import ApiManager
from .config import ApiManagerConfig, ConnectivityConfig, TimeoutConfig
from .connectivity import ConnectivityProbe, SocketConnectivityProbe, StaticConnectivityProbe
from .delegate import DEFAULT_DELEGATE, ApiManagerDelegate, DelegateRef, RequestKind
from .exceptions import (
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
from .headers import Headers, default_upload_headers, merge_headers
from .models import (
    NOT_CONNECTED_STATUS,
    DataRequest,
    HTTPMethod,
    Outcome,
    ParameterEncoding,
    UploadRequest,
)
from .transport import HttpxTransport, RequestsTransport, Transport, TransportResponse, create_transport

__all__ = [
    "ApiManager",
    "ApiManagerConfig",
    "ConnectivityConfig",
    "TimeoutConfig",
    "ConnectivityProbe",
    "SocketConnectivityProbe",
    "StaticConnectivityProbe",
    "DEFAULT_DELEGATE",
    "ApiManagerDelegate",
    "DelegateRef",
    "RequestKind",
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
    "default_upload_headers",
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
    "create_transport",
]
