"""
ObjectRef / ObjectEvent - Identify a stored object and the upload that created it.
"""

import urllib.parse
from dataclasses import dataclass, asdict
from typing import Optional

from .errors import InvalidEventError


@dataclass(frozen=True)
class ObjectRef:
    """
    Identifies an object in a bucket.

    Attributes:
        bucket: Bucket name
        path: Object key/path within the bucket
    """
    bucket: str
    path: str

    @property
    def uri(self) -> str:
        return f"{self.bucket}/{self.path}"

    def to_dict(self) -> dict:
        return asdict(self)

    def __str__(self) -> str:
        return self.uri


@dataclass(frozen=True)
class ObjectEvent:
    """
    One finalized-upload notification.

    Attributes:
        ref: The uploaded object
        content_type: Declared content type, None when the transport omits it
    """
    ref: ObjectRef
    content_type: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: dict) -> 'ObjectEvent':
        """
        Parse a trigger payload.

        Accepts a flat storage-finalize record ({bucket, name, contentType}),
        the same record inside a CloudEvent envelope ({data: {...}}), or an S3
        notification ({Records: [{s3: {...}}]} or a single record).

        Raises:
            InvalidEventError: If no bucket or object name can be found
        """
        if not isinstance(payload, dict):
            raise InvalidEventError(f"Event payload must be a mapping, got {type(payload).__name__}")

        if isinstance(payload.get('data'), dict):
            payload = payload['data']

        records = payload.get('Records')
        if isinstance(records, list):
            if not records:
                raise InvalidEventError("Event contains no records")
            payload = records[0]

        if isinstance(payload.get('s3'), dict):
            s3_info = payload['s3']
            bucket = (s3_info.get('bucket') or {}).get('name')
            name = (s3_info.get('object') or {}).get('key')
            if name:
                # S3 notifications URL-encode keys
                name = urllib.parse.unquote_plus(name)
            content_type = payload.get('contentType')
        else:
            bucket = payload.get('bucket')
            name = payload.get('name')
            content_type = payload.get('contentType', payload.get('content_type'))

        if not bucket or not name:
            raise InvalidEventError("Event is missing bucket or object name")
        if content_type is not None and not isinstance(content_type, str):
            raise InvalidEventError(f"Event content type must be a string, got {type(content_type).__name__}")

        return cls(
            ref=ObjectRef(bucket=str(bucket), path=str(name)),
            content_type=content_type or None,
        )
