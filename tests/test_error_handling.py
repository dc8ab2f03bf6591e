"""
Tests for the error taxonomy and diagnostic reporting.

Covers the exception classes raised by the synthesis core and the
ErrorHandler used to record and report them.
"""

import logging
from datetime import datetime

import pytest

from envelope_tracking.error_handling import (
    ConfigurationError,
    DomainError,
    EnvelopeTrackingError,
    ErrorCategory,
    ErrorHandler,
    ErrorSeverity,
    create_error_context,
    get_error_handler,
    with_error_handling,
)
from envelope_tracking.models import DetroughConfiguration
from envelope_tracking.validation import ValidationError


class TestErrorClasses:
    """Test custom error classes."""

    def test_base_error_creation(self):
        """Test EnvelopeTrackingError creation and attributes."""
        error = EnvelopeTrackingError("Test error", ErrorCategory.SYSTEM_ERROR, ErrorSeverity.HIGH)

        assert str(error) == "Test error"
        assert error.category == ErrorCategory.SYSTEM_ERROR
        assert error.severity == ErrorSeverity.HIGH
        assert isinstance(error.timestamp, datetime)

    def test_configuration_error_creation(self):
        """Test ConfigurationError creation and attributes."""
        error = ConfigurationError("gain must be positive", "gain")

        assert error.category == ErrorCategory.CONFIGURATION_ERROR
        assert error.severity == ErrorSeverity.MEDIUM
        assert error.parameter == "gain"
        assert isinstance(error, EnvelopeTrackingError)

    def test_domain_error_creation(self):
        """Test DomainError creation and attributes."""
        error = DomainError("zero peak", "scale_for_tracker")

        assert error.category == ErrorCategory.DOMAIN_ERROR
        assert error.severity == ErrorSeverity.HIGH
        assert error.operation == "scale_for_tracker"

    def test_validation_error_is_configuration_error(self):
        """Test that validation failures are configuration errors."""
        with pytest.raises(ConfigurationError) as excinfo:
            DetroughConfiguration(minimum_voltage=5.0, maximum_voltage=3.5)

        assert isinstance(excinfo.value, ValidationError)
        assert excinfo.value.parameter == "minimum_voltage"


class TestErrorContext:
    """Test error context creation and usage."""

    def test_create_error_context(self):
        """Test error context creation."""
        context = create_error_context("synthesize", "DetroughSynthesizer", waveform="LTE")

        assert context.operation == "synthesize"
        assert context.component == "DetroughSynthesizer"
        assert context.parameters["waveform"] == "LTE"
        assert isinstance(context.timestamp, datetime)
        assert "numpy_version" in context.system_info


class TestErrorHandler:
    """Test ErrorHandler functionality."""

    def setup_method(self):
        """Set up test fixtures."""
        self.error_handler = ErrorHandler()

    def test_initialization(self):
        """Test ErrorHandler initialization."""
        assert len(self.error_handler.error_history) == 0
        assert self.error_handler.statistics["total_errors"] == 0

    @pytest.mark.parametrize(
        "error,category,severity",
        [
            (ConfigurationError("bad"), ErrorCategory.CONFIGURATION_ERROR, ErrorSeverity.MEDIUM),
            (DomainError("bad"), ErrorCategory.DOMAIN_ERROR, ErrorSeverity.HIGH),
            (ZeroDivisionError("x"), ErrorCategory.COMPUTATION_ERROR, ErrorSeverity.HIGH),
            (RuntimeError("result is NaN"), ErrorCategory.COMPUTATION_ERROR, ErrorSeverity.MEDIUM),
            (RuntimeError("bad parameter"), ErrorCategory.CONFIGURATION_ERROR, ErrorSeverity.MEDIUM),
            (TypeError("unsupported"), ErrorCategory.VALIDATION_ERROR, ErrorSeverity.MEDIUM),
            (KeyboardInterrupt(), ErrorCategory.SYSTEM_ERROR, ErrorSeverity.CRITICAL),
            (RuntimeError("other"), ErrorCategory.SYSTEM_ERROR, ErrorSeverity.MEDIUM),
        ],
    )
    def test_error_classification(self, error, category, severity):
        """Test error classification by category and severity."""
        assert self.error_handler._classify_error(error) == (category, severity)

    def test_handle_error_records_report(self):
        """Test that handled errors are recorded with diagnostics."""
        context = create_error_context("scale", "TrackerOutputScaler")

        report = self.error_handler.handle_error(DomainError("zero peak", "scale"), context)

        assert report.error_id.startswith("ERR_")
        assert report.category == ErrorCategory.DOMAIN_ERROR
        assert report.message == "zero peak"
        assert report.context is context
        assert report.diagnostic_data == {"error_type": "DomainError", "operation": "scale"}
        assert self.error_handler.error_history == [report]

    def test_statistics(self):
        """Test error statistics by category and severity."""
        self.error_handler.handle_error(ConfigurationError("a", "gain"))
        self.error_handler.handle_error(ConfigurationError("b"))
        self.error_handler.handle_error(DomainError("c"))

        stats = self.error_handler.get_error_statistics()

        assert stats["total_errors"] == 3
        assert stats["configuration_errors"] == 2
        assert stats["domain_errors"] == 1
        assert stats["category_breakdown"] == {"configuration_error": 2, "domain_error": 1}
        assert stats["severity_breakdown"] == {"medium": 2, "high": 1}

    def test_history_is_bounded(self):
        """Test that the error history does not grow without bound."""
        for i in range(ErrorHandler.MAX_HISTORY + 1):
            self.error_handler.handle_error(ConfigurationError(f"error {i}"))

        assert len(self.error_handler.error_history) <= ErrorHandler.MAX_HISTORY
        assert self.error_handler.error_history[-1].message == f"error {ErrorHandler.MAX_HISTORY}"

    def test_logging_by_severity(self, caplog):
        """Test that errors are logged at a severity-dependent level."""
        with caplog.at_level(logging.DEBUG, logger="envelope_tracking.error_handling"):
            self.error_handler.handle_error(DomainError("peak is zero"))

        records = [r for r in caplog.records if "peak is zero" in r.getMessage()]
        assert len(records) == 1
        assert records[0].levelno == logging.ERROR

    def test_log_level_threshold(self, caplog):
        """Test that errors below the handler's log level are not logged."""
        handler = ErrorHandler(log_level=logging.ERROR)

        with caplog.at_level(logging.DEBUG, logger="envelope_tracking.error_handling"):
            handler.handle_error(ConfigurationError("quiet"))

        assert "quiet" not in caplog.text

    def test_diagnostic_report(self):
        """Test diagnostic report rendering."""
        self.error_handler.handle_error(DomainError("zero peak"))

        report = self.error_handler.generate_diagnostic_report()

        assert "ENVELOPE TRACKING DIAGNOSTIC REPORT" in report
        assert "Total Errors: 1" in report
        assert "domain_error: zero peak" in report
        assert "NumPy Version" in report

    def test_clear_error_history(self):
        """Test clearing history and statistics."""
        self.error_handler.handle_error(DomainError("x"))

        self.error_handler.clear_error_history()

        assert self.error_handler.error_history == []
        assert self.error_handler.statistics["total_errors"] == 0


class TestErrorHandlingDecorator:
    """Test the with_error_handling decorator."""

    def test_reraises_and_records(self):
        """Test that failures are recorded globally and re-raised."""

        @with_error_handling(operation="normalize", component="tests")
        def failing():
            raise DomainError("cannot normalize")

        handler = get_error_handler()
        before = handler.statistics["domain_errors"]

        with pytest.raises(DomainError, match="cannot normalize"):
            failing()

        assert handler.statistics["domain_errors"] == before + 1
        assert handler.error_history[-1].context.operation == "normalize"

    def test_passes_through_results(self):
        """Test that successful calls are unaffected."""

        @with_error_handling()
        def add(a, b):
            """Add two numbers."""
            return a + b

        assert add(2, 3) == 5
        assert add.__name__ == "add"
        assert add.__doc__ == "Add two numbers."
