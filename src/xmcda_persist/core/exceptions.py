"""Exceptions raised while reading or writing XMCDA documents."""


class XmcdaError(Exception):
    """Base exception for all XMCDA persistence errors."""

    def __init__(self, message: str, details: dict | None = None):
        """Initialize exception.

        Args:
            message: Error message
            details: Optional dictionary with additional context, such as the
                fragment kind and the offending identifiers
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return formatted error message."""
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class MalformedInputError(XmcdaError):
    """Bytes are not a well-formed XMCDA document."""
    pass


class UnsupportedVersionError(XmcdaError):
    """Declared XMCDA version has no normalization path to the requested one."""
    pass


class InvalidInputError(XmcdaError):
    """Well-formed input that violates a domain rule (duplicates, broken chain, dangling reference)."""
    pass
