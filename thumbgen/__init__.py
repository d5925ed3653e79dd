"""
Thumbnail handler for object-storage upload events.

When an image is uploaded to a bucket, the handler downloads it, fits it
into a bounding box without upscaling, and uploads the result next to the
original as ``thumb_<name>``. Thumbnails themselves and non-image uploads
are skipped.

Supports both S3 and local filesystem storage.
"""

__version__ = "1.0.0"

from .errors import (
    ThumbnailError,
    RetrievableError,
    PermanentError,
    ObjectNotFoundError,
    InvalidEventError,
    ImageProcessingError,
    DecodeError,
    UnsupportedFormatError,
    EncodeError,
)
from .object_ref import ObjectRef, ObjectEvent
from .thumbnail_spec import ThumbnailSpec, ImageBuffer
from .thumbnail_generator import ThumbnailGenerator
from .naming import NamingPolicy, NamingResult, SkipReason
from .pipeline import ThumbnailPipeline, PipelineResult, PipelineStage, PipelineStatus
from .handler_config import HandlerConfig
from .s3_config import S3Config
from .s3_client import S3Client
from .local_client import LocalConfig, LocalClient
from .processing_stats import ProcessingStats

__all__ = [
    "ThumbnailError",
    "RetrievableError",
    "PermanentError",
    "ObjectNotFoundError",
    "InvalidEventError",
    "ImageProcessingError",
    "DecodeError",
    "UnsupportedFormatError",
    "EncodeError",
    "ObjectRef",
    "ObjectEvent",
    "ThumbnailSpec",
    "ImageBuffer",
    "ThumbnailGenerator",
    "NamingPolicy",
    "NamingResult",
    "SkipReason",
    "ThumbnailPipeline",
    "PipelineResult",
    "PipelineStage",
    "PipelineStatus",
    "HandlerConfig",
    "S3Config",
    "S3Client",
    "LocalConfig",
    "LocalClient",
    "ProcessingStats",
]
