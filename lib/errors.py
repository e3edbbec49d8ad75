"""Exceptions raised by the URL shortener core."""


class URLShortenerError(Exception):
    """Base class for all URL shortener errors."""


class ValidationError(URLShortenerError):
    """Malformed input URL or custom short code."""


class DuplicateCodeError(URLShortenerError):
    """A short code is already taken."""

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"Short code '{short_code}' already exists")


class ExhaustedRetriesError(URLShortenerError):
    """Random code generation kept colliding."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(
            f"Unable to generate a unique short code after {attempts} attempts"
        )


class NotFoundError(URLShortenerError):
    """No record exists for a short code."""

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"Short code '{short_code}' not found")


class StorageError(URLShortenerError):
    """The underlying database failed."""
