"""Upload services module."""
from .source_service import FileSource, MemorySource

__all__ = [
    'FileSource',
    'MemorySource',
]
