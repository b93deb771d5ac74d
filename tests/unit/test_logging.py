"""Tests for logging helpers."""
import logging

from chunkpy import setup_logging
from chunkpy.core.logging import get_logger


class TestGetLogger:
    """Test suite for get_logger."""
    
    def test_returns_named_logger(self):
        """Test logger name and propagation."""
        logger = get_logger('chunkpy.test')
        
        assert logger.name == 'chunkpy.test'
        assert logger.propagate is True
    
    def test_same_instance(self):
        """Test repeated calls return the same logger."""
        assert get_logger('chunkpy.test') is get_logger('chunkpy.test')
    
    def test_keeps_explicit_level(self):
        """Test a level set before the first lookup is not overridden."""
        logging.getLogger('chunkpy.test.explicit').setLevel(logging.DEBUG)
        
        assert get_logger('chunkpy.test.explicit').level == logging.DEBUG


class TestSetupLogging:
    """Test suite for setup_logging."""
    
    def test_sets_package_levels(self):
        """Test every package logger gets the level."""
        setup_logging(logging.DEBUG)
        try:
            assert logging.getLogger('chunkpy').level == logging.DEBUG
            assert logging.getLogger('chunkpy.upload.engine').level == logging.DEBUG
            assert logging.getLogger('chunkpy.transport').level == logging.DEBUG
        finally:
            setup_logging(logging.WARNING)
