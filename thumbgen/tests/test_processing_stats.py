"""Tests for ProcessingStats class."""

import time

from thumbgen.errors import DecodeError, RetrievableError
from thumbgen.naming import SkipReason
from thumbgen.object_ref import ObjectRef
from thumbgen.pipeline import PipelineResult, PipelineStatus
from thumbgen.processing_stats import ProcessingStats


class TestProcessingStats:
    """Tests for ProcessingStats class."""

    def test_record_results(self):
        stats = ProcessingStats(total_to_process=4)

        stats.record_result(PipelineResult(
            status=PipelineStatus.COMPLETED,
            source=ObjectRef('b', 'cat.jpg'),
            thumbnail=ObjectRef('b', 'thumb_cat.jpg'),
            width=200, height=150, size=4096,
        ))
        stats.record_result(PipelineResult(
            status=PipelineStatus.SKIPPED,
            source=ObjectRef('b', 'doc.pdf'),
            reason=SkipReason.NOT_IMAGE,
        ))

        assert stats.completed == 1
        assert stats.bytes_generated == 4096
        assert stats.skipped == 1
        assert stats.skip_reasons == {'not_image': 1}
        assert stats.remaining_count == 2

    def test_record_errors(self):
        stats = ProcessingStats(total_to_process=2)

        stats.record_error('a.jpg', RetrievableError("timeout"))
        stats.record_error('b.jpg', DecodeError("garbage"))

        assert stats.retryable_errors == 1
        assert stats.permanent_errors == 1
        assert stats.errors == 2
        assert stats.error_details == ['a.jpg: timeout', 'b.jpg: garbage']
        assert stats.remaining_count == 0

    def test_rate_per_second(self):
        stats = ProcessingStats()
        stats.start_time = time.time() - 10
        stats.completed = 100

        assert 9 <= stats.rate_per_second <= 11

    def test_completed_count(self):
        stats = ProcessingStats()
        stats.completed = 50
        stats.record_skip('exists')
        stats.permanent_errors = 5

        assert stats.completed_count == 56
