"""
LocalClient - Filesystem-backed object store for development and testing.

Each bucket is a directory under root_path; object paths are relative paths
inside it.
"""

import logging
import os
import tempfile
from dataclasses import dataclass
from typing import List, Optional

from .errors import InvalidEventError, ObjectNotFoundError, PermanentError, RetrievableError


@dataclass
class LocalConfig:
    """
    Local storage configuration.

    Attributes:
        root_path: Directory containing one subdirectory per bucket
    """
    root_path: str

    def validate(self) -> List[str]:
        """Return a list of configuration errors (empty if valid)."""
        errors = []
        if not self.root_path:
            errors.append("Local root path is required")
        elif not os.path.isdir(self.root_path):
            errors.append(f"Local root path does not exist: {self.root_path}")
        return errors


class LocalClient:
    """
    Object store on the local filesystem.

    Uploads are written to a temporary file in the destination directory and
    moved into place with os.replace, so readers never observe a partial
    object. Content types are not persisted.
    """

    def __init__(self, config: LocalConfig, logger: Optional[logging.Logger] = None):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

    def resolve(self, bucket: str, key: str) -> str:
        """
        Get the filesystem path for an object.

        Raises:
            InvalidEventError: If bucket or key would escape the root directory
        """
        root = os.path.realpath(self.config.root_path)
        bucket_dir = os.path.realpath(os.path.join(root, bucket))
        if not bucket or os.path.dirname(bucket_dir) != root:
            raise InvalidEventError(f"Invalid bucket name: {bucket!r}")

        full_path = os.path.realpath(os.path.join(bucket_dir, key.lstrip('/')))
        if not key or not full_path.startswith(bucket_dir + os.sep):
            raise InvalidEventError(f"Invalid object path: {key!r}")
        return full_path

    def exists(self, bucket: str, key: str) -> bool:
        """Check if an object exists."""
        return os.path.isfile(self.resolve(bucket, key))

    def download(self, bucket: str, key: str) -> bytes:
        """Read an object's bytes."""
        path = self.resolve(bucket, key)
        try:
            with open(path, 'rb') as f:
                return f.read()
        except (FileNotFoundError, IsADirectoryError) as e:
            raise ObjectNotFoundError(f"download {bucket}/{key}: object not found") from e
        except PermissionError as e:
            raise PermanentError(f"download {bucket}/{key}: {e}") from e
        except OSError as e:
            raise RetrievableError(f"download {bucket}/{key}: {e}") from e

    def upload(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str = 'application/octet-stream'
    ) -> None:
        """Write an object atomically, replacing any existing one."""
        path = self.resolve(bucket, key)
        directory = os.path.dirname(path)
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix='.upload-')
            with os.fdopen(fd, 'wb') as f:
                f.write(data)
            os.replace(tmp_path, path)
            tmp_path = None
        except PermissionError as e:
            raise PermanentError(f"upload {bucket}/{key}: {e}") from e
        except OSError as e:
            raise RetrievableError(f"upload {bucket}/{key}: {e}") from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)

        self.logger.debug(f"Wrote {len(data)} bytes to {path} ({content_type})")
