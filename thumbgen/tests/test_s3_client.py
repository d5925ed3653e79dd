"""Tests for S3Client class."""

from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import (
    ClientError,
    EndpointConnectionError,
    NoCredentialsError,
    ProxyConnectionError,
    ReadTimeoutError,
    ResponseStreamingError,
)

from thumbgen.errors import ObjectNotFoundError, PermanentError, RetrievableError
from thumbgen.s3_client import S3Client


def client_error(code, status=400, operation='GetObject'):
    return ClientError(
        {'Error': {'Code': code}, 'ResponseMetadata': {'HTTPStatusCode': status}},
        operation
    )


class TestS3Client:
    """Tests for S3Client class."""

    @pytest.fixture
    def client_with_mock(self, s3_config):
        """Fixture providing S3Client with mocked boto3."""
        mock_boto = MagicMock()
        with patch('thumbgen.s3_client.boto3.client', return_value=mock_boto) as factory:
            client = S3Client(s3_config)
            # Store refs so tests can configure mock behavior
            client._test_mock = mock_boto
            client._test_factory = factory
            yield client

    def test_client_created_lazily_once(self, client_with_mock):
        client_with_mock._test_factory.assert_not_called()

        client_with_mock.download('b', 'k')
        client_with_mock.download('b', 'k')

        client_with_mock._test_factory.assert_called_once()
        kwargs = client_with_mock._test_factory.call_args.kwargs
        assert kwargs['endpoint_url'] == 'https://test-endpoint.example.com:9000'
        assert kwargs['region_name'] == 'us-east-1'

    def test_download(self, client_with_mock):
        """Test downloading an object."""
        mock_body = MagicMock()
        mock_body.read.return_value = b'image data'
        client_with_mock._test_mock.get_object.return_value = {'Body': mock_body}

        result = client_with_mock.download('photos-bucket', 'photos/cat.jpg')

        assert result == b'image data'
        client_with_mock._test_mock.get_object.assert_called_once_with(
            Bucket='photos-bucket', Key='photos/cat.jpg'
        )

    def test_upload(self, client_with_mock):
        """Test uploading an object."""
        client_with_mock.upload('photos-bucket', 'photos/thumb_cat.jpg', b'data', 'image/jpeg')

        client_with_mock._test_mock.put_object.assert_called_once_with(
            Bucket='photos-bucket',
            Key='photos/thumb_cat.jpg',
            Body=b'data',
            ContentType='image/jpeg',
        )

    def test_exists_true(self, client_with_mock):
        client_with_mock._test_mock.head_object.return_value = {}

        assert client_with_mock.exists('b', 'some/key.jpg') is True

    def test_exists_false(self, client_with_mock):
        client_with_mock._test_mock.head_object.side_effect = client_error('404', 404, 'HeadObject')

        assert client_with_mock.exists('b', 'nonexistent/key.jpg') is False

    def test_exists_forbidden(self, client_with_mock):
        client_with_mock._test_mock.head_object.side_effect = client_error('403', 403, 'HeadObject')

        with pytest.raises(PermanentError):
            client_with_mock.exists('b', 'key.jpg')

    @pytest.mark.parametrize('code', ['NoSuchKey', 'NoSuchBucket', '404'])
    def test_download_missing(self, client_with_mock, code):
        client_with_mock._test_mock.get_object.side_effect = client_error(code, 404)

        with pytest.raises(ObjectNotFoundError):
            client_with_mock.download('b', 'photos/cat.jpg')

    @pytest.mark.parametrize('code,status', [
        ('SlowDown', 503),
        ('InternalError', 500),
        ('RequestTimeout', 400),
        ('Throttling', 400),
        ('SomethingNew', 502),
    ])
    def test_download_transient(self, client_with_mock, code, status):
        client_with_mock._test_mock.get_object.side_effect = client_error(code, status)

        with pytest.raises(RetrievableError):
            client_with_mock.download('b', 'photos/cat.jpg')

    def test_download_connection_error(self, client_with_mock):
        client_with_mock._test_mock.get_object.side_effect = EndpointConnectionError(
            endpoint_url='https://test-endpoint.example.com:9000'
        )

        with pytest.raises(RetrievableError):
            client_with_mock.download('b', 'photos/cat.jpg')

    def test_download_stream_reset(self, client_with_mock):
        body = MagicMock()
        body.read.side_effect = ResponseStreamingError(error='Connection reset by peer')
        client_with_mock._test_mock.get_object.return_value = {'Body': body}

        with pytest.raises(RetrievableError) as exc_info:
            client_with_mock.download('b', 'photos/cat.jpg')

        assert exc_info.value.retryable is True

    @pytest.mark.parametrize('error', [
        ProxyConnectionError(proxy_url='http://proxy.example.com:3128', error='refused'),
        ReadTimeoutError(endpoint_url='https://test-endpoint.example.com:9000'),
    ])
    def test_download_network_errors_retryable(self, client_with_mock, error):
        client_with_mock._test_mock.get_object.side_effect = error

        with pytest.raises(RetrievableError):
            client_with_mock.download('b', 'photos/cat.jpg')

    def test_download_access_denied(self, client_with_mock):
        client_with_mock._test_mock.get_object.side_effect = client_error('AccessDenied', 403)

        with pytest.raises(PermanentError) as exc_info:
            client_with_mock.download('b', 'photos/cat.jpg')

        assert not isinstance(exc_info.value, ObjectNotFoundError)

    def test_upload_transient(self, client_with_mock):
        client_with_mock._test_mock.put_object.side_effect = client_error('ServiceUnavailable', 503, 'PutObject')

        with pytest.raises(RetrievableError):
            client_with_mock.upload('b', 'photos/thumb_cat.jpg', b'data', 'image/jpeg')

    def test_upload_no_credentials(self, client_with_mock):
        client_with_mock._test_mock.put_object.side_effect = NoCredentialsError()

        with pytest.raises(PermanentError):
            client_with_mock.upload('b', 'photos/thumb_cat.jpg', b'data', 'image/jpeg')

    def test_original_exception_chained(self, client_with_mock):
        original = client_error('NoSuchKey', 404)
        client_with_mock._test_mock.get_object.side_effect = original

        with pytest.raises(ObjectNotFoundError) as exc_info:
            client_with_mock.download('b', 'k')

        assert exc_info.value.__cause__ is original
