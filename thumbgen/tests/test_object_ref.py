"""Tests for ObjectRef and ObjectEvent."""

import pytest

from thumbgen.errors import InvalidEventError, PermanentError
from thumbgen.object_ref import ObjectEvent, ObjectRef


class TestObjectRef:

    def test_value_semantics(self):
        assert ObjectRef('b', 'photos/cat.jpg') == ObjectRef('b', 'photos/cat.jpg')
        assert len({ObjectRef('b', 'x'), ObjectRef('b', 'x')}) == 1

    def test_uri(self):
        assert ObjectRef('b', 'photos/cat.jpg').uri == 'b/photos/cat.jpg'

    def test_immutable(self):
        ref = ObjectRef('b', 'x')

        with pytest.raises(AttributeError):
            ref.path = 'y'


class TestObjectEventFromDict:
    """Tests for parsing trigger payloads."""

    def test_storage_finalize_record(self):
        event = ObjectEvent.from_dict({
            'bucket': 'b',
            'name': 'photos/cat.jpg',
            'contentType': 'image/jpeg',
            'size': '12345',
        })

        assert event.ref == ObjectRef('b', 'photos/cat.jpg')
        assert event.content_type == 'image/jpeg'

    def test_cloud_event_envelope(self):
        event = ObjectEvent.from_dict({
            'id': '1234',
            'type': 'google.cloud.storage.object.v1.finalized',
            'data': {'bucket': 'b', 'name': 'cat.png', 'contentType': 'image/png'},
        })

        assert event.ref == ObjectRef('b', 'cat.png')
        assert event.content_type == 'image/png'

    def test_missing_content_type(self):
        event = ObjectEvent.from_dict({'bucket': 'b', 'name': 'cat.jpg'})

        assert event.content_type is None

    def test_empty_content_type(self):
        event = ObjectEvent.from_dict({'bucket': 'b', 'name': 'cat.jpg', 'contentType': ''})

        assert event.content_type is None

    def test_s3_notification(self):
        event = ObjectEvent.from_dict({
            'Records': [{
                'eventSource': 'aws:s3',
                's3': {
                    'bucket': {'name': 'photos-bucket'},
                    'object': {'key': 'summer+2024/my%20cat.jpg', 'size': 1024},
                },
            }]
        })

        assert event.ref == ObjectRef('photos-bucket', 'summer 2024/my cat.jpg')
        assert event.content_type is None

    @pytest.mark.parametrize('payload', [
        {},
        {'bucket': 'b'},
        {'name': 'cat.jpg'},
        {'Records': []},
        {'s3': {'bucket': {'name': 'b'}, 'object': {}}},
        {'bucket': 'b', 'name': 'cat.jpg', 'contentType': 123},
        {'bucket': 'b', 'name': 'cat.jpg', 'contentType': ['image/jpeg']},
        'not a dict',
    ])
    def test_invalid_payloads(self, payload):
        with pytest.raises(InvalidEventError) as exc_info:
            ObjectEvent.from_dict(payload)

        assert isinstance(exc_info.value, PermanentError)
