"""Retry strategies using Strategy Pattern."""
from abc import ABC, abstractmethod

from ..config import RetryConfig


class RetryStrategy(ABC):
    """Abstract retry strategy for transport failures."""
    
    @abstractmethod
    def should_retry(self, retry_count: int) -> bool:
        """Determines if the failed request is replayed."""
        pass
    
    @abstractmethod
    def delay(self, retry_count: int) -> float:
        """Seconds to wait before replay number `retry_count`."""
        pass


class BackoffRetryStrategy(RetryStrategy):
    """Bounded retries with exponential backoff."""
    
    def __init__(self, config: RetryConfig = None):
        self.config = config or RetryConfig()
    
    def should_retry(self, retry_count: int) -> bool:
        """Retries until the count exceeds the configured limit."""
        return retry_count <= self.config.limit
    
    def delay(self, retry_count: int) -> float:
        """Waits with exponential backoff."""
        return self.config.calculate_delay(retry_count)
