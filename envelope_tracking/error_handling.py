"""
Error taxonomy and diagnostic reporting for envelope-tracking waveform synthesis.

This module defines the exceptions raised by the synthesis core and a
centralized handler that collaborators can use to record, classify and
report failures.
"""

import logging
import sys
import traceback
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

import numpy as np

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories for classification."""

    CONFIGURATION_ERROR = "configuration_error"
    DOMAIN_ERROR = "domain_error"
    COMPUTATION_ERROR = "computation_error"
    VALIDATION_ERROR = "validation_error"
    SYSTEM_ERROR = "system_error"


@dataclass
class ErrorContext:
    """Context information for error handling."""

    operation: str
    component: str
    parameters: Dict[str, Any]
    timestamp: datetime
    system_info: Dict[str, Any]


@dataclass
class ErrorReport:
    """Error report kept in the handler history."""

    error_id: str
    category: ErrorCategory
    severity: ErrorSeverity
    message: str
    context: ErrorContext
    traceback_info: str
    diagnostic_data: Dict[str, Any]


class EnvelopeTrackingError(Exception):
    """Base exception class for envelope synthesis errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.SYSTEM_ERROR,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category
        self.severity = severity
        self.context = context
        self.timestamp = datetime.now()


class ConfigurationError(EnvelopeTrackingError):
    """Invalid or inconsistent configuration, detected before any buffer work."""

    def __init__(
        self,
        message: str,
        parameter: str = "",
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
    ):
        super().__init__(message, ErrorCategory.CONFIGURATION_ERROR, severity)
        self.parameter = parameter


class DomainError(EnvelopeTrackingError):
    """A computation step whose result would be undefined (NaN or infinite)."""

    def __init__(
        self,
        message: str,
        operation: str = "",
        severity: ErrorSeverity = ErrorSeverity.HIGH,
    ):
        super().__init__(message, ErrorCategory.DOMAIN_ERROR, severity)
        self.operation = operation


class ErrorHandler:
    """Centralized error recording and reporting.

    Synthesis is a pure computation, so there is nothing to recover from;
    the handler classifies failures, keeps a bounded history and renders
    diagnostic reports for whoever drives the synthesis.
    """

    MAX_HISTORY = 1000

    def __init__(self, log_level: int = logging.WARNING):
        """Initialize error handler.

        Args:
            log_level: Minimum log level for error reporting
        """
        self.log_level = log_level
        self.error_history: List[ErrorReport] = []
        self.statistics = {
            "total_errors": 0,
            "configuration_errors": 0,
            "domain_errors": 0,
            "critical_failures": 0,
        }

        logger.debug("ErrorHandler initialized")

    def handle_error(
        self, error: Exception, context: Optional[ErrorContext] = None
    ) -> ErrorReport:
        """Record an error and return its report.

        Args:
            error: Exception that occurred
            context: Context information about the error

        Returns:
            ErrorReport describing the failure
        """
        error_id = f"ERR_{datetime.now().strftime('%Y%m%d_%H%M%S')}_{len(self.error_history):04d}"

        category, severity = self._classify_error(error)

        report = ErrorReport(
            error_id=error_id,
            category=category,
            severity=severity,
            message=str(error),
            context=context or getattr(error, "context", None) or self._create_default_context(),
            traceback_info=traceback.format_exc(),
            diagnostic_data=self._collect_diagnostics(error),
        )

        self.statistics["total_errors"] += 1
        if category == ErrorCategory.CONFIGURATION_ERROR:
            self.statistics["configuration_errors"] += 1
        elif category == ErrorCategory.DOMAIN_ERROR:
            self.statistics["domain_errors"] += 1
        if severity == ErrorSeverity.CRITICAL:
            self.statistics["critical_failures"] += 1

        self._log_error(report)

        self.error_history.append(report)
        if len(self.error_history) > self.MAX_HISTORY:
            self.error_history = self.error_history[-self.MAX_HISTORY // 2 :]

        return report

    def _classify_error(self, error: Exception) -> tuple[ErrorCategory, ErrorSeverity]:
        """Classify error by category and severity.

        Args:
            error: Exception to classify

        Returns:
            Tuple of (category, severity)
        """
        if isinstance(error, EnvelopeTrackingError):
            return error.category, error.severity

        error_str = str(error).lower()
        error_type = type(error).__name__.lower()

        if isinstance(error, (ZeroDivisionError, FloatingPointError, OverflowError)):
            return ErrorCategory.COMPUTATION_ERROR, ErrorSeverity.HIGH

        if any(keyword in error_str for keyword in ["nan", "inf", "overflow", "divide"]):
            return ErrorCategory.COMPUTATION_ERROR, ErrorSeverity.MEDIUM

        if any(keyword in error_str for keyword in ["config", "parameter", "validation"]):
            return ErrorCategory.CONFIGURATION_ERROR, ErrorSeverity.MEDIUM

        if isinstance(error, (TypeError, ValueError)):
            return ErrorCategory.VALIDATION_ERROR, ErrorSeverity.MEDIUM

        if error_type in ["systemexit", "keyboardinterrupt"]:
            return ErrorCategory.SYSTEM_ERROR, ErrorSeverity.CRITICAL

        return ErrorCategory.SYSTEM_ERROR, ErrorSeverity.MEDIUM

    def _collect_diagnostics(self, error: Exception) -> Dict[str, Any]:
        diagnostics: Dict[str, Any] = {"error_type": type(error).__name__}
        if isinstance(error, ConfigurationError) and error.parameter:
            diagnostics["parameter"] = error.parameter
        if isinstance(error, DomainError) and error.operation:
            diagnostics["operation"] = error.operation
        return diagnostics

    def _create_default_context(self) -> ErrorContext:
        """Create default error context."""
        return ErrorContext(
            operation="unknown",
            component="unknown",
            parameters={},
            timestamp=datetime.now(),
            system_info=self._get_system_info(),
        )

    def _get_system_info(self) -> Dict[str, Any]:
        """Get system information for error context."""
        return {
            "python_version": sys.version,
            "platform": sys.platform,
            "numpy_version": np.__version__,
        }

    def _log_error(self, report: ErrorReport) -> None:
        """Log error report."""
        log_message = f"[{report.error_id}] {report.category.value.upper()}: {report.message}"

        if report.severity == ErrorSeverity.CRITICAL:
            level = logging.CRITICAL
        elif report.severity == ErrorSeverity.HIGH:
            level = logging.ERROR
        elif report.severity == ErrorSeverity.MEDIUM:
            level = logging.WARNING
        else:
            level = logging.INFO

        if level >= self.log_level:
            logger.log(level, log_message)

    def get_error_statistics(self) -> Dict[str, Any]:
        """Get error statistics.

        Returns:
            Dictionary with totals and per-category/per-severity breakdowns
        """
        category_breakdown: Dict[str, int] = {}
        severity_breakdown: Dict[str, int] = {}
        for report in self.error_history:
            category_breakdown[report.category.value] = (
                category_breakdown.get(report.category.value, 0) + 1
            )
            severity_breakdown[report.severity.value] = (
                severity_breakdown.get(report.severity.value, 0) + 1
            )

        return {
            **self.statistics,
            "category_breakdown": category_breakdown,
            "severity_breakdown": severity_breakdown,
        }

    def generate_diagnostic_report(self, include_traceback: bool = False) -> str:
        """Render a text diagnostic report.

        Args:
            include_traceback: Include traceback text of recent errors

        Returns:
            Multi-line report string
        """
        stats = self.get_error_statistics()
        report = []

        report.append("=" * 80)
        report.append("ENVELOPE TRACKING DIAGNOSTIC REPORT")
        report.append("=" * 80)
        report.append(f"Generated: {datetime.now().isoformat()}")
        report.append("")

        report.append("ERROR STATISTICS:")
        report.append(f"  Total Errors: {stats['total_errors']}")
        report.append(f"  Configuration Errors: {stats['configuration_errors']}")
        report.append(f"  Domain Errors: {stats['domain_errors']}")
        report.append(f"  Critical Failures: {stats['critical_failures']}")
        report.append("")

        if stats["category_breakdown"]:
            report.append("ERROR CATEGORIES:")
            for category, count in stats["category_breakdown"].items():
                report.append(f"  {category}: {count}")
            report.append("")

        if stats["severity_breakdown"]:
            report.append("ERROR SEVERITY:")
            for severity, count in stats["severity_breakdown"].items():
                report.append(f"  {severity}: {count}")
            report.append("")

        recent_errors = self.error_history[-10:]
        if recent_errors:
            report.append("RECENT ERRORS (last 10):")
            for error_report in recent_errors:
                report.append(
                    f"  [{error_report.error_id}] {error_report.category.value}: "
                    f"{error_report.message}"
                )
                if include_traceback and error_report.traceback_info:
                    report.append(f"    Traceback: {error_report.traceback_info}")
            report.append("")

        system_info = self._get_system_info()
        report.append("SYSTEM INFORMATION:")
        report.append(f"  Python Version: {system_info['python_version']}")
        report.append(f"  Platform: {system_info['platform']}")
        report.append(f"  NumPy Version: {system_info['numpy_version']}")
        report.append("=" * 80)

        return "\n".join(report)

    def clear_error_history(self) -> None:
        """Clear error history and reset statistics."""
        self.error_history.clear()
        for key in self.statistics:
            self.statistics[key] = 0
        logger.debug("Error history and statistics cleared")


# Global error handler instance
_global_error_handler: Optional[ErrorHandler] = None


def get_error_handler() -> ErrorHandler:
    """Get the global error handler instance."""
    global _global_error_handler
    if _global_error_handler is None:
        _global_error_handler = ErrorHandler()
    return _global_error_handler


def handle_error(error: Exception, context: Optional[ErrorContext] = None) -> ErrorReport:
    """Record an error using the global error handler.

    Args:
        error: Exception that occurred
        context: Context information about the error

    Returns:
        ErrorReport for the error
    """
    return get_error_handler().handle_error(error, context)


def create_error_context(operation: str, component: str, **parameters) -> ErrorContext:
    """Create error context for error handling.

    Args:
        operation: Name of the operation being performed
        component: Name of the component where error occurred
        **parameters: Additional parameters to include in context

    Returns:
        ErrorContext object
    """
    return ErrorContext(
        operation=operation,
        component=component,
        parameters=parameters,
        timestamp=datetime.now(),
        system_info=get_error_handler()._get_system_info(),
    )


def with_error_handling(operation: str = "", component: str = ""):
    """Decorator that records failures with the global handler and re-raises them.

    Args:
        operation: Name of the operation
        component: Name of the component
    """

    def decorator(func):
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                context = create_error_context(
                    operation=operation or func.__name__,
                    component=component or func.__module__,
                    args=str(args)[:200],
                    kwargs=str(kwargs)[:200],
                )
                handle_error(e, context)
                raise

        wrapper.__name__ = func.__name__
        wrapper.__doc__ = func.__doc__
        return wrapper

    return decorator
