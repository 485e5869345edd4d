"""Tests for correlation-aware logging."""

import logging

from mini_markup_parser.shared.logging import CorrelationLogger, get_logger


class TestCorrelationLogger:
    """Test structured logging fields."""

    def test_component_defaults_to_last_name_segment(self):
        """Test default component naming."""
        logger = get_logger("mini_markup_parser.api.parser")
        assert logger.component == "parser"

    def test_records_carry_correlation_fields(self, caplog):
        """Test that emitted records include component and correlation ID."""
        logger = get_logger("mini_markup_parser.test", "req-42", "unit")

        with caplog.at_level(logging.INFO, logger="mini_markup_parser.test"):
            logger.info("hello", extra={"bytes_processed": 10})

        record = caplog.records[-1]
        assert record.getMessage() == "hello"
        assert record.component == "unit"
        assert record.correlation_id == "req-42"
        assert record.bytes_processed == 10

    def test_debug_filtered_by_level(self, caplog):
        """Test that level filtering applies."""
        logger = get_logger("mini_markup_parser.test")

        with caplog.at_level(logging.INFO, logger="mini_markup_parser.test"):
            logger.debug("hidden")

        assert not [r for r in caplog.records if r.getMessage() == "hidden"]

    def test_bind_keeps_component(self):
        """Test rebinding to another correlation ID."""
        logger = CorrelationLogger("mini_markup_parser.test", "first", "unit")
        bound = logger.bind("second")

        assert bound.correlation_id == "second"
        assert bound.component == "unit"
        assert logger.correlation_id == "first"
        assert bound.fields == {}

    def test_exception_logs_traceback(self, caplog):
        """Test exception logging."""
        logger = get_logger("mini_markup_parser.test", component="unit")

        with caplog.at_level(logging.ERROR, logger="mini_markup_parser.test"):
            try:
                raise RuntimeError("boom")
            except RuntimeError:
                logger.exception("failed")

        record = caplog.records[-1]
        assert record.exc_info is not None
        assert record.component == "unit"

    def test_bound_fields_reach_records(self, caplog):
        """Test fields bound with bind()."""
        logger = get_logger("mini_markup_parser.test", component="unit")
        bound = logger.bind("req-7", source_name="doc.html")

        with caplog.at_level(logging.INFO, logger="mini_markup_parser.test"):
            bound.info("parsed")

        record = caplog.records[-1]
        assert record.correlation_id == "req-7"
        assert record.source_name == "doc.html"
        assert logger.fields == {}

    def test_timed_reports_duration_and_fields(self, caplog):
        """Test the timing context manager."""
        logger = get_logger("mini_markup_parser.test", component="unit")

        with caplog.at_level(logging.INFO, logger="mini_markup_parser.test"):
            with logger.timed("Batch", logging.INFO) as fields:
                fields["file_count"] = 3

        record = caplog.records[-1]
        assert record.getMessage() == "Batch finished"
        assert record.file_count == 3
        assert record.duration_ms >= 0

    def test_timed_logs_when_block_raises(self, caplog):
        """Test that the record is emitted even if the block fails."""
        logger = get_logger("mini_markup_parser.test")

        with caplog.at_level(logging.DEBUG, logger="mini_markup_parser.test"):
            try:
                with logger.timed("Failing step"):
                    raise ValueError("bad")
            except ValueError:
                pass

        assert caplog.records[-1].getMessage() == "Failing step finished"
