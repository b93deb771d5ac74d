"""HTTP transport for the upload API."""
from .config import TransportConfig, TimeoutConfig, SSLConfig, ProxyConfig
from .models import Action, TransportResponse
from .http_transport import AiohttpTransport

__all__ = [
    'AiohttpTransport',
    'Action',
    'TransportResponse',
    'TransportConfig',
    'TimeoutConfig',
    'SSLConfig',
    'ProxyConfig',
]
