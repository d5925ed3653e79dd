"""
Error taxonomy for the thumbnail pipeline.

Skips (non-image uploads, thumbnails re-triggering the handler) are not
errors and never appear here. Everything below propagates to the caller.
"""

from typing import Optional


class ThumbnailError(Exception):
    """Base class for all pipeline failures."""

    retryable = False

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        self.stage = stage


class RetrievableError(ThumbnailError):
    """Transient store fault; the transport may redeliver the event."""

    retryable = True


class PermanentError(ThumbnailError):
    """Terminal failure; redelivering the same event fails the same way."""


class ObjectNotFoundError(PermanentError):
    """Source object was deleted after the event fired."""


class InvalidEventError(PermanentError):
    """Trigger payload or object path cannot be processed."""


class ImageProcessingError(PermanentError):
    """Image-data failure. The same bytes always fail the same way."""


class DecodeError(ImageProcessingError):
    pass


class UnsupportedFormatError(ImageProcessingError):
    pass


class EncodeError(ImageProcessingError):
    pass
