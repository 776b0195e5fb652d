"""Core custom exceptions for the application.

Upload rejections and transport failures are returned as values; these
exceptions only signal configuration or programming faults.
"""


class UploadGateError(Exception):
    """Base exception for upload policy errors."""


class ConfigurationError(UploadGateError):
    """Exception for configuration-related errors (e.g., malformed settings)."""


class MessageCatalogError(UploadGateError):
    """Raised when a message key is unknown or its parameters are missing."""
