"""
Error taxonomy and error reporting for the Host Discovery Module.

Only configuration errors are fatal. Range format errors skip one range,
identity query and registration errors end the processing of one address.
Unreachable hosts are not errors at all: the prober returns ``False``.
"""

from typing import Optional, Any, Dict
from enum import Enum
from dataclasses import dataclass

from .logger import Logger, get_logger


class ErrorType(Enum):
    """Enumeration for different types of errors."""
    CONFIGURATION_ERROR = "configuration_error"
    RANGE_FORMAT_ERROR = "range_format_error"
    IDENTITY_QUERY_ERROR = "identity_query_error"
    REGISTRATION_ERROR = "registration_error"
    UNEXPECTED_ERROR = "unexpected_error"


class ErrorSeverity(Enum):
    """Enumeration for error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class ErrorContext:
    """
    Context information for error handling.

    Attributes:
        error_type: Type of error that occurred
        severity: Severity level of the error
        operation: Operation that was being performed when error occurred
        component: Component/module where error occurred
        additional_info: Additional context information (address, range, ...)
    """
    error_type: ErrorType
    severity: ErrorSeverity
    operation: str
    component: str
    additional_info: Dict[str, Any] = None

    def __post_init__(self):
        if self.additional_info is None:
            self.additional_info = {}


class HostDiscoveryError(Exception):
    """Base exception class for Host Discovery Module."""

    def __init__(self, message: str, error_context: Optional[ErrorContext] = None):
        super().__init__(message)
        self.error_context = error_context


class ConfigurationError(HostDiscoveryError):
    """Exception for configuration-related errors. Always fatal."""
    pass


class RangeFormatError(HostDiscoveryError):
    """Exception for range specifications that cannot be expanded."""
    pass


class InvalidRangeFormat(RangeFormatError):
    """Raised when a range is neither valid CIDR nor valid dashed-octet notation."""

    def __init__(self, range_spec: str, reason: str):
        super().__init__(f"Invalid range '{range_spec}': {reason}")
        self.range_spec = range_spec
        self.reason = reason


class IdentityQueryError(HostDiscoveryError):
    """Base exception for SNMP identity query failures."""

    def __init__(self, address: str, message: str):
        super().__init__(message)
        self.address = address


class ConnectError(IdentityQueryError):
    """The SNMP session could not be established."""
    pass


class QueryError(IdentityQueryError):
    """The SNMP request failed after its retry."""
    pass


class UnexpectedTypeError(IdentityQueryError):
    """The SNMP response carried no string-typed value."""
    pass


class RegistrationError(HostDiscoveryError):
    """Exception for failures while registering a host with the monitoring system."""
    pass


class ErrorHandler:
    """
    Centralized error reporting.

    Logs an error at the level matching its severity, with operation,
    component and any additional context as structured details. Holds no
    mutable state, so one instance can be shared by every worker.
    """

    def __init__(self, logger: Optional[Logger] = None):
        """
        Initialize the ErrorHandler.

        Args:
            logger: Logger instance for error reporting
        """
        self.logger = logger or get_logger(__name__)

    def handle_error(self, error: Exception, context: ErrorContext) -> None:
        """
        Report an error according to its context.

        Args:
            error: The exception that occurred
            context: Error context information
        """
        error_msg = f"Error in {context.component}.{context.operation}: {str(error)}"
        details = dict(context.additional_info)

        if context.severity == ErrorSeverity.CRITICAL:
            self.logger.error(error_msg, exception=error, **details)
        elif context.severity == ErrorSeverity.HIGH:
            self.logger.error(error_msg, **details)
        elif context.severity == ErrorSeverity.MEDIUM:
            self.logger.warning(error_msg, **details)
        else:
            self.logger.debug(error_msg, **details)

        if context.error_type == ErrorType.CONFIGURATION_ERROR:
            self._suggest_configuration_fixes()

    def _suggest_configuration_fixes(self) -> None:
        """Provide configuration error solutions."""
        self.logger.info("Configuration error solutions:")
        self.logger.info("  - Check YAML/JSON syntax and indentation")
        self.logger.info("  - Verify all required configuration keys are present")
        self.logger.info("  - Ensure timeouts are positive and workers is at least 1")
        self.logger.info("  - Check file permissions for the configuration file")
