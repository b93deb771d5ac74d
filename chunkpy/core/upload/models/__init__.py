"""Upload models."""
from .upload_models import (
    Phase,
    ChunkCursor,
    Timers,
    UploadStatus
)

__all__ = [
    'Phase',
    'ChunkCursor',
    'Timers',
    'UploadStatus'
]
