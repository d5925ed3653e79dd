"""
ThumbnailPipeline - Runs download, resize and upload for one storage event.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import ThumbnailError
from .naming import NamingPolicy, SkipReason
from .object_ref import ObjectEvent, ObjectRef
from .thumbnail_generator import ThumbnailGenerator


class PipelineStage(str, Enum):
    RECEIVED = 'received'
    CLASSIFIED = 'classified'
    SKIPPED = 'skipped'
    DOWNLOADED = 'downloaded'
    RESIZED = 'resized'
    UPLOADED = 'uploaded'
    COMPLETED = 'completed'
    FAILED = 'failed'


class PipelineStatus(str, Enum):
    COMPLETED = 'completed'
    SKIPPED = 'skipped'


@dataclass(frozen=True)
class PipelineResult:
    """
    Successful outcome of one invocation.

    Attributes:
        status: completed or skipped
        source: The object named by the event
        reason: Why the object was skipped (skipped only)
        thumbnail: Where the thumbnail was written (completed only)
        width: Thumbnail width (completed only)
        height: Thumbnail height (completed only)
        size: Thumbnail size in bytes (completed only)
    """
    status: PipelineStatus
    source: ObjectRef
    reason: Optional[SkipReason] = None
    thumbnail: Optional[ObjectRef] = None
    width: Optional[int] = None
    height: Optional[int] = None
    size: Optional[int] = None

    @property
    def skipped(self) -> bool:
        return self.status == PipelineStatus.SKIPPED

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            'status': self.status.value,
            'source': self.source.to_dict(),
            'reason': self.reason.value if self.reason else None,
            'thumbnail': self.thumbnail.to_dict() if self.thumbnail else None,
            'width': self.width,
            'height': self.height,
            'size': self.size,
        }


class ThumbnailPipeline:
    """
    Sequences one event through classify -> download -> resize -> upload.

    The store is injected and must provide download(bucket, path) and
    upload(bucket, path, data, content_type). The pipeline keeps no state
    between calls to handle(), so one instance can serve concurrent and
    duplicate deliveries; duplicate uploads write identical bytes to the same
    path.
    """

    def __init__(
        self,
        store,
        thumbnail_generator: Optional[ThumbnailGenerator] = None,
        naming: Optional[NamingPolicy] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize pipeline.

        Args:
            store: Object store client (S3Client, LocalClient, ...)
            thumbnail_generator: Resizer (default: 200x200, no enlargement)
            naming: Naming policy (default: 'thumb_' prefix)
            logger: Optional logger instance
        """
        self.store = store
        self.thumb_gen = thumbnail_generator or ThumbnailGenerator()
        self.naming = naming or NamingPolicy()
        self.logger = logger or logging.getLogger(__name__)

    def handle(self, event: ObjectEvent) -> PipelineResult:
        """
        Process one upload event.

        Returns:
            PipelineResult with status completed, or skipped plus a reason

        Raises:
            RetrievableError: Transient store fault; safe to redeliver
            PermanentError: Source missing, bad path or bad image data
        """
        source = event.ref
        stage = PipelineStage.RECEIVED

        try:
            naming = self.naming.classify(source.path, event.content_type)
            stage = PipelineStage.CLASSIFIED
            if not naming.is_eligible:
                self.logger.info(f"Skipping {source} ({naming.reason.value}, content type {event.content_type!r})")
                return PipelineResult(
                    status=PipelineStatus.SKIPPED,
                    source=source,
                    reason=naming.reason,
                )

            target = ObjectRef(bucket=source.bucket, path=naming.derived_path)

            self.logger.debug(f"Downloading: {source}")
            image_data = self.store.download(source.bucket, source.path)
            stage = PipelineStage.DOWNLOADED

            self.logger.debug(f"Generating thumbnail: {source} ({len(image_data)} bytes)")
            thumbnail = self.thumb_gen.generate(image_data, event.content_type)
            del image_data
            stage = PipelineStage.RESIZED

            self.logger.debug(f"Uploading: {target}")
            self.store.upload(target.bucket, target.path, thumbnail.data, event.content_type)
            stage = PipelineStage.UPLOADED

        except ThumbnailError as e:
            e.stage = self._failed_stage(stage).value
            if e.retryable:
                self.logger.warning(f"Retryable failure for {source} during {e.stage}: {e}")
            else:
                self.logger.error(f"Failed to process {source} during {e.stage}: {e}")
            raise

        self.logger.info(
            f"Generated: {target} {thumbnail.width}x{thumbnail.height} ({thumbnail.size} bytes)"
        )
        return PipelineResult(
            status=PipelineStatus.COMPLETED,
            source=source,
            thumbnail=target,
            width=thumbnail.width,
            height=thumbnail.height,
            size=thumbnail.size,
        )

    @staticmethod
    def _failed_stage(last_completed: PipelineStage) -> PipelineStage:
        """The stage that was running when the failure happened."""
        return {
            PipelineStage.RECEIVED: PipelineStage.CLASSIFIED,
            PipelineStage.CLASSIFIED: PipelineStage.DOWNLOADED,
            PipelineStage.DOWNLOADED: PipelineStage.RESIZED,
            PipelineStage.RESIZED: PipelineStage.UPLOADED,
        }[last_completed]
