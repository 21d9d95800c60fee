"""
Custom exceptions for the Nightjar Launch analyzer.

Structural failures (bad bundle, lookup misses, network and backend failures)
are raised as subclasses of NightjarException and rendered as text by the
tool boundary. Per-field extraction failures never reach this module.
"""

from typing import Any, Optional


class NightjarException(Exception):
    """Base exception for all Nightjar-specific errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            details: Optional dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# Bundle Exceptions
# =============================================================================


class BundleError(NightjarException):
    """Base exception for bundle validation and container location."""

    pass


class InvalidBundleFormatError(BundleError):
    """Text does not look like an Adobe Launch library."""

    def __init__(self, source_url: Optional[str] = None) -> None:
        """Initialize with the bundle source."""
        message = "The provided URL does not appear to be a valid Adobe Launch embed code"
        super().__init__(message, {"source_url": source_url} if source_url else None)


class ContainerNotFoundError(BundleError):
    """Bundle is valid but the container assignment is missing."""

    def __init__(self, marker: str) -> None:
        """Initialize with the marker that was searched for."""
        message = "Could not find container configuration"
        super().__init__(message, {"marker": marker})


# =============================================================================
# Lookup Exceptions
# =============================================================================


class LookupFailedError(NightjarException):
    """Base exception for queries against the parsed model."""

    pass


class NoModelParsedError(LookupFailedError):
    """An operation needs a parsed model but none exists yet."""

    def __init__(self) -> None:
        """Initialize with the uniform parse-first message."""
        super().__init__(
            "No embed code has been parsed yet. "
            "Please call parse_embed_code first or provide embed_code."
        )


class RuleNotFoundError(LookupFailedError):
    """Rule name not present in the parsed model."""

    def __init__(self, rule_name: str) -> None:
        """Initialize with rule name."""
        message = f"Rule '{rule_name}' not found in the parsed embed code"
        super().__init__(message)
        self.rule_name = rule_name


class DataElementNotFoundError(LookupFailedError):
    """Data element name not present in the parsed model."""

    def __init__(self, element_name: str) -> None:
        """Initialize with data element name."""
        message = f"Data element '{element_name}' not found in the parsed embed code"
        super().__init__(message)
        self.element_name = element_name


class VariableNotFoundError(LookupFailedError):
    """Analytics variable not referenced by any rule."""

    def __init__(self, variable_name: str) -> None:
        """Initialize with variable name."""
        message = f"Variable '{variable_name}' not found in the parsed embed code"
        super().__init__(message)
        self.variable_name = variable_name


class EmbedNotFoundError(LookupFailedError):
    """No Launch script tag found on an HTML page."""

    def __init__(self, page_url: str) -> None:
        """Initialize with the page URL."""
        message = "No Adobe Launch embed code found on this page"
        super().__init__(message, {"page_url": page_url})


# =============================================================================
# Network Exceptions
# =============================================================================


class NetworkError(NightjarException):
    """Fetching a remote resource failed."""

    def __init__(self, url: str, reason: str) -> None:
        """Initialize with URL and transport failure reason."""
        message = f"Failed to fetch {url}: {reason}"
        super().__init__(message)
        self.url = url
        self.reason = reason


# =============================================================================
# Generative Backend Exceptions
# =============================================================================


class BackendError(NightjarException):
    """Generative backend call failed."""

    pass


class BackendUnavailableError(BackendError):
    """Generative backend is not configured."""

    def __init__(self) -> None:
        """Initialize with configuration hint."""
        super().__init__("OpenAI API key is required for AI analysis")


# =============================================================================
# Configuration and Tool Exceptions
# =============================================================================


class ConfigurationError(NightjarException):
    """Configuration error."""

    pass


class ToolInputError(NightjarException):
    """Tool invoked with missing or invalid arguments."""

    def __init__(self, parameter: str) -> None:
        """Initialize with the missing parameter name."""
        super().__init__(f"Missing required parameter: {parameter}")
        self.parameter = parameter
