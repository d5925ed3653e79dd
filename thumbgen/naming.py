"""
NamingPolicy - Decides which objects get thumbnails and what they are called.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SkipReason(str, Enum):
    """Why an object is not processed. Skips are normal outcomes, not errors."""
    NOT_IMAGE = 'not_image'
    ALREADY_THUMBNAIL = 'already_thumbnail'
    NOT_A_FILE = 'not_a_file'


@dataclass(frozen=True)
class NamingResult:
    """
    Classification of one object path.

    Attributes:
        is_eligible: True if a thumbnail should be generated
        is_already_thumbnail: True if the basename carries the thumbnail prefix
        derived_path: Thumbnail path for eligible objects, '' otherwise
        reason: Why the object is skipped, None when eligible
    """
    is_eligible: bool
    is_already_thumbnail: bool
    derived_path: str = ''
    reason: Optional[SkipReason] = None


class NamingPolicy:
    """
    Maps original paths to thumbnail paths and recognizes thumbnails.

    A thumbnail lives next to its original with the prefix prepended to the
    filename: photos/cat.jpg -> photos/thumb_cat.jpg. Recognizing that prefix
    stops a thumbnail upload from re-triggering the handler.
    """

    DEFAULT_PREFIX = 'thumb_'
    IMAGE_TYPE_PREFIX = 'image/'

    def __init__(self, prefix: str = DEFAULT_PREFIX):
        if not prefix:
            raise ValueError("Thumbnail prefix must not be empty")
        self.prefix = prefix

    @staticmethod
    def _split(path: str):
        """Split into (directory including trailing '/', basename)."""
        head, sep, basename = path.rpartition('/')
        return head + sep, basename

    def is_thumbnail(self, path: str) -> bool:
        """Check if a path names a thumbnail."""
        return self._split(path or '')[1].startswith(self.prefix)

    def is_image(self, content_type: Optional[str]) -> bool:
        """Check if a content type declares an image."""
        return isinstance(content_type, str) and content_type.strip().lower().startswith(self.IMAGE_TYPE_PREFIX)

    def thumbnail_path(self, path: str) -> str:
        """Convert an original path to its thumbnail path."""
        # An empty directory part means the bucket root
        dirname, basename = self._split(path)
        return f"{dirname}{self.prefix}{basename}"

    def original_path(self, thumbnail_path: str) -> Optional[str]:
        """Convert a thumbnail path back to its original path, None if not a thumbnail."""
        dirname, basename = self._split(thumbnail_path)
        if not basename.startswith(self.prefix):
            return None
        return f"{dirname}{basename[len(self.prefix):]}"

    def classify(self, path: str, content_type: Optional[str] = None) -> NamingResult:
        """
        Classify an object. Never raises.

        Args:
            path: Object path within its bucket
            content_type: Declared content type, if any

        Returns:
            NamingResult; derived_path is set only when eligible
        """
        path = path or ''
        basename = self._split(path)[1]
        already_thumbnail = basename.startswith(self.prefix)

        if not self.is_image(content_type):
            reason = SkipReason.NOT_IMAGE
        elif already_thumbnail:
            reason = SkipReason.ALREADY_THUMBNAIL
        elif not basename:
            reason = SkipReason.NOT_A_FILE
        else:
            return NamingResult(
                is_eligible=True,
                is_already_thumbnail=False,
                derived_path=self.thumbnail_path(path),
            )

        return NamingResult(
            is_eligible=False,
            is_already_thumbnail=already_thumbnail,
            reason=reason,
        )
