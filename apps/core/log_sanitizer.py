"""
Log sanitization to prevent credential leakage.

Automatically redacts sensitive information from text logs including:
- Bearer tokens and raw JWTs
- Passwords
- Secrets
- Database URLs with passwords
"""
import re
import logging


class SanitizingFormatter(logging.Formatter):
    """
    Custom log formatter that sanitizes sensitive data.
    """

    # Regex patterns for sensitive data
    PATTERNS = [
        # Bearer tokens
        (re.compile(r'Bearer\s+([a-zA-Z0-9_\-\.]{20,})', re.IGNORECASE), r'Bearer [REDACTED]'),

        # JWT tokens (header.payload.signature format)
        (re.compile(r'eyJ[a-zA-Z0-9_\-]+\.eyJ[a-zA-Z0-9_\-]+\.[a-zA-Z0-9_\-]+'), r'[REDACTED_JWT]'),

        # Passwords
        (re.compile(r'password["\s:=]+([^\s,\]}"\']+)', re.IGNORECASE), r'password=[REDACTED]'),
        (re.compile(r'passwd["\s:=]+([^\s,\]}"\']+)', re.IGNORECASE), r'passwd=[REDACTED]'),

        # Secrets
        (re.compile(r'secret["\s:=]+([a-zA-Z0-9_\-]{20,})', re.IGNORECASE), r'secret=[REDACTED]'),

        # Database URLs with passwords
        (re.compile(r'://([^:/]+):([^@]+)@'), r'://\1:[REDACTED]@'),

        # Authorization headers
        (re.compile(r'Authorization["\s:]+([^\s,\]}"\']+)', re.IGNORECASE), r'Authorization: [REDACTED]'),
    ]

    def format(self, record):
        """
        Format log record and sanitize sensitive data.
        """
        sanitized_message = super().format(record)
        for pattern, replacement in self.PATTERNS:
            sanitized_message = pattern.sub(replacement, sanitized_message)

        return sanitized_message
