"""
S3Client - S3/MinIO operations for downloading and uploading objects.
"""

import logging
import threading
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectionError as BotoConnectionError,
    HTTPClientError,
    IncompleteReadError,
)

from .errors import ObjectNotFoundError, PermanentError, RetrievableError, ThumbnailError
from .s3_config import S3Config


class S3Client:
    """
    Object store backed by S3 or an S3-compatible service.

    botocore failures are translated into RetrievableError (transient) or
    PermanentError (terminal). The boto3 client is created on first use and
    only read after that, so one S3Client can serve every invocation in a
    process.
    """

    NOT_FOUND_CODES = {'404', 'NoSuchKey', 'NoSuchBucket', 'NotFound'}
    RETRYABLE_CODES = {
        '429', '500', '502', '503', '504',
        'InternalError', 'ServiceUnavailable', 'SlowDown', 'Throttling',
        'ThrottlingException', 'RequestTimeout', 'RequestTimeTooSkewed',
        'RequestLimitExceeded',
    }
    # ConnectionError covers endpoint, proxy, SSL and connect-timeout failures;
    # HTTPClientError covers closed connections, read timeouts and streaming resets
    TRANSIENT_EXCEPTIONS = (
        BotoConnectionError,
        HTTPClientError,
        IncompleteReadError,
    )

    def __init__(self, config: S3Config, logger: Optional[logging.Logger] = None):
        """
        Initialize S3 client.

        Args:
            config: S3 configuration
            logger: Optional logger instance
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self._client = None
        self._lock = threading.Lock()

    @property
    def client(self):
        """Return the underlying boto3 client, creating it on first use."""
        if self._client is None:
            with self._lock:
                if self._client is None:
                    self._client = boto3.client(
                        's3',
                        endpoint_url=self.config.endpoint,
                        aws_access_key_id=self.config.access_key,
                        aws_secret_access_key=self.config.secret_key,
                        region_name=self.config.region,
                        config=Config(
                            signature_version='s3v4',
                            s3={'addressing_style': 'path'}
                        ),
                        verify=self.config.verify_ssl
                    )
        return self._client

    def translate_error(self, error: Exception, action: str, bucket: str, key: str) -> ThumbnailError:
        """Map a botocore exception to the pipeline error taxonomy."""
        location = f"{bucket}/{key}"

        if isinstance(error, ClientError):
            code = str(error.response.get('Error', {}).get('Code', ''))
            status = error.response.get('ResponseMetadata', {}).get('HTTPStatusCode') or 0

            if code in self.NOT_FOUND_CODES:
                return ObjectNotFoundError(f"{action} {location}: object not found ({code})")
            if code in self.RETRYABLE_CODES or status == 429 or status >= 500:
                return RetrievableError(f"{action} {location}: transient error ({code or status})")
            return PermanentError(f"{action} {location}: {code or status}")

        if isinstance(error, self.TRANSIENT_EXCEPTIONS):
            return RetrievableError(f"{action} {location}: {error}")

        return PermanentError(f"{action} {location}: {error}")

    def exists(self, bucket: str, key: str) -> bool:
        """Check if an object exists in S3."""
        try:
            self.client.head_object(Bucket=bucket, Key=key)
            return True
        except ClientError as e:
            if e.response['Error']['Code'] in self.NOT_FOUND_CODES:
                return False
            raise self.translate_error(e, 'head', bucket, key) from e
        except BotoCoreError as e:
            raise self.translate_error(e, 'head', bucket, key) from e

    def download(self, bucket: str, key: str) -> bytes:
        """Download an object from S3."""
        try:
            response = self.client.get_object(Bucket=bucket, Key=key)
            return response['Body'].read()
        except (ClientError, BotoCoreError) as e:
            raise self.translate_error(e, 'download', bucket, key) from e

    def upload(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str = 'application/octet-stream'
    ) -> None:
        """
        Upload an object to S3.

        A single PutObject replaces the whole object; readers see either the
        old object or the new one, never a partial write.
        """
        try:
            self.client.put_object(
                Bucket=bucket,
                Key=key,
                Body=data,
                ContentType=content_type
            )
        except (ClientError, BotoCoreError) as e:
            raise self.translate_error(e, 'upload', bucket, key) from e
