"""
Upload module for resumable chunked uploads.

The engine sends a file in adaptive chunks through a pluggable transport
and can pause, resume and cancel without re-sending confirmed bytes.
"""
from .engine import UploadEngine
from .facade import UploadFacade
from .config import UploadConfig, ChunkSizeConfig, RetryConfig
from .models import Phase, ChunkCursor, Timers, UploadStatus
from .progress import ProgressAccountant
from .protocols import ByteSource, TransportProtocol
from .services import FileSource, MemorySource
from .strategies import AdaptiveChunkSizer, RetryStrategy, BackoffRetryStrategy

__all__ = [
    # Main classes
    'UploadEngine',
    'UploadFacade',
    
    # Configuration
    'UploadConfig',
    'ChunkSizeConfig',
    'RetryConfig',
    
    # Models
    'Phase',
    'ChunkCursor',
    'Timers',
    'UploadStatus',
    'ProgressAccountant',
    
    # Sources
    'FileSource',
    'MemorySource',
    
    # Strategies
    'AdaptiveChunkSizer',
    'RetryStrategy',
    'BackoffRetryStrategy',
    
    # Protocols
    'ByteSource',
    'TransportProtocol',
]
