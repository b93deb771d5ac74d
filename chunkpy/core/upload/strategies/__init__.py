"""Upload strategies module."""
from .sizing import AdaptiveChunkSizer
from .retry import RetryStrategy, BackoffRetryStrategy

__all__ = [
    'AdaptiveChunkSizer',
    'RetryStrategy',
    'BackoffRetryStrategy',
]
