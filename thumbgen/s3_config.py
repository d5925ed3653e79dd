"""
S3Config - Connection settings for S3-compatible object storage.
"""

import os
from dataclasses import dataclass
from typing import List, Optional


def _env_bool(value: Optional[str], default: bool) -> bool:
    if value is None or value == '':
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass
class S3Config:
    """
    S3/MinIO connection settings.

    Buckets are not configured here; each event names its own bucket.
    Leaving endpoint and keys empty uses AWS's default endpoint and
    credential chain.

    Attributes:
        endpoint: Endpoint URL (e.g., https://minio.example.com:9000)
        access_key: Access key ID
        secret_key: Secret access key
        region: Region name
        verify_ssl: Verify TLS certificates
    """
    endpoint: Optional[str] = None
    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    region: Optional[str] = None
    verify_ssl: bool = True

    @classmethod
    def from_env(cls) -> 'S3Config':
        """Create config from S3_* environment variables."""
        return cls(
            endpoint=os.getenv('S3_ENDPOINT') or None,
            access_key=os.getenv('S3_ACCESS_KEY') or None,
            secret_key=os.getenv('S3_SECRET_KEY') or None,
            region=os.getenv('S3_REGION') or None,
            verify_ssl=_env_bool(os.getenv('S3_VERIFY_SSL'), True),
        )

    def validate(self) -> List[str]:
        """Return a list of configuration errors (empty if valid)."""
        errors = []
        if self.endpoint and not self.endpoint.startswith(('http://', 'https://')):
            errors.append(f"S3_ENDPOINT must be an http(s) URL, got {self.endpoint!r}")
        if bool(self.access_key) != bool(self.secret_key):
            errors.append("S3_ACCESS_KEY and S3_SECRET_KEY must be set together")
        return errors
