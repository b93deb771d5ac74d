"""
chunkpy - Resumable chunked uploads over unreliable networks.

Usage:
    >>> from chunkpy import UploadFacade
    >>> 
    >>> async with UploadFacade("https://example.com/api.php") as uploader:
    ...     engine = await uploader.upload("backup.tar")
    ...     print(engine.phase)
"""
import logging

from .core.upload import (
    UploadEngine,
    UploadFacade,
    UploadConfig,
    ChunkSizeConfig,
    RetryConfig,
    Phase,
    UploadStatus,
    FileSource,
    MemorySource,
    AdaptiveChunkSizer,
)
from .core.transport import (
    AiohttpTransport,
    Action,
    TransportResponse,
    TransportConfig,
    TimeoutConfig,
    SSLConfig,
    ProxyConfig,
)
from .core.exceptions import (
    UploadError,
    InvalidInputError,
    UploadStateError,
    TransportError,
    ApplicationError,
    RequestFailedError,
    MalformedResponseError,
    SizeMismatchError,
)

__version__ = '1.0.0'


def setup_logging(level=logging.INFO):
    """
    Configure logging for chunkpy modules.
    
    This ensures that all chunkpy loggers are properly configured
    to show log messages at the specified level.
    
    Args:
        level: Logging level (default: logging.INFO)
    """
    loggers = [
        'chunkpy',
        'chunkpy.transport',
        'chunkpy.upload',
        'chunkpy.upload.engine',
        'chunkpy.upload.file',
        'chunkpy.upload.sizing',
    ]
    
    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.propagate = True


__all__ = [
    'UploadEngine',
    'UploadFacade',
    'UploadConfig',
    'ChunkSizeConfig',
    'RetryConfig',
    'Phase',
    'UploadStatus',
    'FileSource',
    'MemorySource',
    'AdaptiveChunkSizer',
    'AiohttpTransport',
    'Action',
    'TransportResponse',
    'TransportConfig',
    'TimeoutConfig',
    'SSLConfig',
    'ProxyConfig',
    'UploadError',
    'InvalidInputError',
    'UploadStateError',
    'TransportError',
    'ApplicationError',
    'RequestFailedError',
    'MalformedResponseError',
    'SizeMismatchError',
    'setup_logging',
]
