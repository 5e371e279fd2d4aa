"""
Utility functions and helper classes.
"""

from .logger import Logger, LogLevel, set_log_level, get_logger
from .error_handler import (
    ErrorHandler, ErrorContext, ErrorType, ErrorSeverity,
    HostDiscoveryError, ConfigurationError, RangeFormatError, InvalidRangeFormat,
    IdentityQueryError, ConnectError, QueryError, UnexpectedTypeError,
    RegistrationError
)

__all__ = [
    'Logger',
    'LogLevel',
    'set_log_level',
    'get_logger',
    'ErrorHandler',
    'ErrorContext',
    'ErrorType',
    'ErrorSeverity',
    'HostDiscoveryError',
    'ConfigurationError',
    'RangeFormatError',
    'InvalidRangeFormat',
    'IdentityQueryError',
    'ConnectError',
    'QueryError',
    'UnexpectedTypeError',
    'RegistrationError'
]
