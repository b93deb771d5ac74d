"""
Upload configuration.

All values are fixed when the engine is constructed.
"""
from dataclasses import dataclass, field

from ..exceptions import InvalidInputError


@dataclass
class ChunkSizeConfig:
    """Bounds of the adaptive chunk size, in bytes."""
    minimum: int = 1024
    maximum: int = 20 * 1024 * 1024


@dataclass
class RetryConfig:
    """
    Retry configuration.
    
    Controls replay of requests that failed at the transport level.
    """
    limit: int = 3
    interval: float = 1.0
    backoff: float = 2.0
    max_delay: float = 16.0
    
    def calculate_delay(self, attempt: int) -> float:
        """Calculate delay before retry number `attempt` (1-based)."""
        delay = self.interval * (self.backoff ** max(attempt - 1, 0))
        return min(delay, self.max_delay)


@dataclass
class UploadConfig:
    """
    Complete upload configuration.
    
    Attributes:
        chunk_size: Chunk size bounds
        file_size_limit: Largest accepted file, bytes
        interval: Recommended duration of one append request, seconds
        retry: Transport retry settings
    """
    chunk_size: ChunkSizeConfig = field(default_factory=ChunkSizeConfig)
    file_size_limit: int = 2 * 1024 * 1024 * 1024
    interval: float = 3.0
    retry: RetryConfig = field(default_factory=RetryConfig)
    
    def __post_init__(self):
        """Validate configuration."""
        if self.chunk_size.minimum <= 0:
            raise InvalidInputError("Minimum chunk size must be positive")
        if self.chunk_size.maximum < self.chunk_size.minimum:
            raise InvalidInputError(
                f"Maximum chunk size {self.chunk_size.maximum} is below "
                f"minimum {self.chunk_size.minimum}"
            )
        if self.interval <= 0:
            raise InvalidInputError("Request interval must be positive")
        if self.retry.limit < 0 or self.retry.interval < 0:
            raise InvalidInputError("Retry limit and interval cannot be negative")
    
    @classmethod
    def default(cls) -> 'UploadConfig':
        """Create default configuration."""
        return cls()
