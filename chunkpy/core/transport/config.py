"""
Transport configuration module.

Provides the configuration for the HTTP upload transport.
"""
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Union
import ssl

import aiohttp


@dataclass
class ProxyConfig:
    """
    Proxy configuration.
    
    Supports HTTP and HTTPS proxies.
    """
    url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    
    def to_aiohttp_proxy(self) -> Optional[str]:
        """Convert to aiohttp proxy format."""
        if not self.url:
            return None
        
        if self.username and self.password and '://' in self.url:
            protocol, rest = self.url.split('://', 1)
            return f"{protocol}://{self.username}:{self.password}@{rest}"
        
        return self.url


@dataclass
class SSLConfig:
    """SSL/TLS configuration."""
    verify: bool = True
    ca_file: Optional[str] = None
    check_hostname: bool = True
    
    def create_ssl_context(self) -> Union[ssl.SSLContext, bool]:
        """Create SSL context from configuration."""
        if not self.verify:
            return False  # aiohttp: skip verification
        
        context = ssl.create_default_context()
        if self.ca_file:
            context.load_verify_locations(self.ca_file)
        context.check_hostname = self.check_hostname
        return context


@dataclass
class TimeoutConfig:
    """
    Timeout configuration.
    
    A request running past `total` is reported as a transport failure
    and retried like a dropped connection.
    """
    total: float = 20.0
    connect: float = 10.0
    sock_read: Optional[float] = None
    
    def to_aiohttp_timeout(self) -> aiohttp.ClientTimeout:
        """Convert to aiohttp ClientTimeout."""
        return aiohttp.ClientTimeout(
            total=self.total,
            connect=self.connect,
            sock_read=self.sock_read
        )


@dataclass
class TransportConfig:
    """
    Complete transport configuration.
    
    Attributes:
        url: Upload API endpoint; the action and file name go in the query
        user_agent: User-Agent header value
        extra_headers: Additional headers sent with every request
    """
    url: str = 'http://localhost/api.php'
    user_agent: str = 'chunkpy/1.0.0'
    extra_headers: Dict[str, str] = field(default_factory=dict)
    proxy: Optional[ProxyConfig] = None
    ssl: SSLConfig = field(default_factory=SSLConfig)
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    limit_per_host: int = 2
    
    @classmethod
    def for_url(cls, url: str, **kwargs) -> 'TransportConfig':
        """Create configuration for an endpoint."""
        return cls(url=url, **kwargs)
    
    def get_connector_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp TCPConnector."""
        return {
            'limit_per_host': self.limit_per_host,
            'ssl': self.ssl.create_ssl_context(),
        }
    
    def get_session_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp ClientSession."""
        return {
            'headers': {'User-Agent': self.user_agent, **self.extra_headers},
            'timeout': self.timeout.to_aiohttp_timeout(),
        }
