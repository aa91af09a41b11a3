"""Custom exceptions for mailsift.

This module defines the exception hierarchy used throughout the
mailsift package. Fatal errors are raised to the caller; non-fatal
ones are recorded on ``Message.defects`` as exception instances.
"""


class MailsiftError(Exception):
    """Base exception for all mailsift errors.

    All custom exceptions in the mailsift package inherit from this
    class, allowing for broad exception catching when needed.

    Attributes:
        message: A human-readable description of the error.
    """

    def __init__(self, message: str = "An error occurred in mailsift") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: A description of the error that occurred.
        """
        self.message = message
        super().__init__(self.message)


class ConfigurationError(MailsiftError):
    """Raised when settings are missing or contain invalid values."""

    def __init__(self, message: str = "Configuration error") -> None:
        super().__init__(message)


class RawParseError(MailsiftError):
    """Raised when the raw header/body split cannot be performed."""

    def __init__(self, message: str = "Raw message parse error") -> None:
        super().__init__(message)


class UnexpectedEndOfInputError(RawParseError):
    """Raised when the input ends before the header/body separator."""

    def __init__(self, message: str = "unexpected EOF") -> None:
        super().__init__(message)


class HeaderError(MailsiftError):
    """Raised when a header field cannot be interpreted.

    Attributes:
        header: Name of the offending header, as it appeared in the input.
    """

    def __init__(self, message: str = "Header error", header: str = "") -> None:
        """Initialize the exception with a message and the header name.

        Args:
            message: A description of the header error.
            header: Name of the header that failed.
        """
        self.header = header
        super().__init__(message)


class AddressParseError(HeaderError):
    """Raised when an address or address list violates the grammar."""


class DateParseError(HeaderError):
    """Recorded when a Date header cannot be parsed."""


class BodyError(MailsiftError):
    """Raised when the message body cannot be split into parts."""

    def __init__(self, message: str = "Body parse error") -> None:
        super().__init__(message)


class InvalidMediaTypeError(BodyError):
    """Raised when a Content-Type value is not a valid media type."""


class MissingBoundaryError(BodyError):
    """Raised when a multipart media type has no boundary parameter."""

    def __init__(self, message: str = "multipart specified without boundary") -> None:
        super().__init__(message)


class MalformedMultipartError(BodyError):
    """Raised when a multipart body contains no delimiter line."""


class NestingTooDeepError(BodyError):
    """Raised when multipart nesting exceeds the configured depth."""


class DecodeError(MailsiftError):
    """Recorded when content or header text cannot be decoded."""

    def __init__(self, message: str = "Decode error") -> None:
        super().__init__(message)


class UnsupportedCharsetError(DecodeError):
    """Raised when a charset label names no known codec.

    Attributes:
        charset: The label as declared in the message.
    """

    def __init__(self, charset: str, message: str | None = None) -> None:
        self.charset = charset
        super().__init__(message or f"unsupported charset {charset!r}")


class EncodedWordError(DecodeError):
    """Raised when an RFC2047 encoded word is malformed."""


class InvalidBase64Error(DecodeError):
    """Raised when base64 content cannot be decoded."""


class MissingFilenameError(DecodeError):
    """Recorded when an attachment part declares no file name."""

    def __init__(
        self, message: str = "failed get filename from header Content-Disposition"
    ) -> None:
        super().__init__(message)
