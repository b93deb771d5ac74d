"""Tests for retry strategies."""
import pytest
from chunkpy.core.upload.config import RetryConfig
from chunkpy.core.upload.strategies import BackoffRetryStrategy, RetryStrategy


class TestBackoffRetryStrategy:
    """Test suite for BackoffRetryStrategy."""
    
    def test_default_config(self):
        """Test default limit of three retries."""
        strategy = BackoffRetryStrategy()
        
        assert strategy.config.limit == 3
        assert isinstance(strategy, RetryStrategy)
    
    def test_should_retry_within_limit(self):
        """Test retries are allowed up to the limit."""
        strategy = BackoffRetryStrategy(RetryConfig(limit=3))
        
        assert strategy.should_retry(1)
        assert strategy.should_retry(3)
        assert not strategy.should_retry(4)
    
    def test_zero_limit(self):
        """Test a zero limit stalls on the first failure."""
        strategy = BackoffRetryStrategy(RetryConfig(limit=0))
        
        assert not strategy.should_retry(1)
    
    def test_exponential_delay(self):
        """Test delay doubles per attempt."""
        strategy = BackoffRetryStrategy(RetryConfig(interval=1.0, backoff=2.0))
        
        assert strategy.delay(1) == 1.0
        assert strategy.delay(2) == 2.0
        assert strategy.delay(3) == 4.0
    
    def test_delay_capped(self):
        """Test delay never exceeds max_delay."""
        strategy = BackoffRetryStrategy(RetryConfig(interval=1.0, backoff=2.0, max_delay=5.0))
        
        assert strategy.delay(10) == 5.0
    
    def test_constant_interval(self):
        """Test backoff of 1 gives a fixed interval."""
        config = RetryConfig(interval=1.5, backoff=1.0)
        
        assert [config.calculate_delay(n) for n in (1, 2, 3)] == [1.5, 1.5, 1.5]
