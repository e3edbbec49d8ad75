"""Short code generation utilities."""

import re
import secrets
import string
from typing import Optional


class ShortCodeGenerator:
    """Generate random short codes for URLs."""

    # Letters and digits without the look-alikes 0/O/o and 1/l/I
    ALPHABET = "".join(
        c for c in string.ascii_letters + string.digits if c not in "0Oo1lI"
    )

    # Characters accepted in any short code, generated or user-supplied
    CODE_PATTERN = re.compile(r"[A-Za-z0-9_-]+")

    def __init__(self, default_length: int = 8):
        """Initialize short code generator.

        Args:
            default_length: Default length for generated codes
        """
        if default_length < 1:
            raise ValueError("default_length must be at least 1")
        self.default_length = default_length

    def generate_random(self, length: Optional[int] = None) -> str:
        """Generate a random short code.

        Args:
            length: Length of the code (uses default if not specified)

        Returns:
            Random short code
        """
        length = length or self.default_length
        return "".join(secrets.choice(self.ALPHABET) for _ in range(length))

    @staticmethod
    def is_valid_format(code: str) -> bool:
        """Check that every character is a letter, digit, hyphen or underscore."""
        return bool(code) and ShortCodeGenerator.CODE_PATTERN.fullmatch(code) is not None
