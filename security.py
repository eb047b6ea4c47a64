#!/usr/bin/env python3
"""Security validation utilities for mirror-to-gitea."""

import re
from typing import List, Optional


class SecurityValidator:
    """Security validation utilities for input sanitization and validation."""

    MAX_URL_LENGTH = 2048
    MAX_USERNAME_LENGTH = 39  # GitHub login limit
    MAX_ORG_NAME_LENGTH = 40  # Gitea name limit

    # GitHub logins: alphanumerics and single inner hyphens
    SAFE_USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?$")
    SAFE_ORG_NAME_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")

    @classmethod
    def validate_url(cls, url: str, allowed_schemes: Optional[List[str]] = None) -> str:
        """Validate an API base URL and strip trailing slashes."""
        if not url or not isinstance(url, str):
            raise ValueError("URL must be a non-empty string")

        if len(url) > cls.MAX_URL_LENGTH:
            raise ValueError(f"URL exceeds maximum length of {cls.MAX_URL_LENGTH}")

        if "\x00" in url or any(ord(c) < 32 for c in url):
            raise ValueError("URL contains null bytes or control characters")

        if not url.startswith(("http://", "https://")):
            raise ValueError("URL must use http or https scheme")

        if allowed_schemes:
            scheme = url.split("://")[0].lower()
            if scheme not in allowed_schemes:
                raise ValueError(
                    f"URL scheme '{scheme}' not in allowed schemes: {allowed_schemes}"
                )

        return url.rstrip("/")

    @classmethod
    def validate_username(cls, username: str) -> str:
        """Validate a GitHub login."""
        if not username or not isinstance(username, str):
            raise ValueError("Username must be a non-empty string")

        if len(username) > cls.MAX_USERNAME_LENGTH:
            raise ValueError(
                f"Username exceeds maximum length of {cls.MAX_USERNAME_LENGTH}"
            )

        if not cls.SAFE_USERNAME_PATTERN.match(username):
            raise ValueError("Username contains invalid characters")

        return username

    @classmethod
    def validate_org_name(cls, org_name: str) -> str:
        """Validate a Gitea organization name before it is put in a URL path."""
        if not org_name or not isinstance(org_name, str):
            raise ValueError("Organization name must be a non-empty string")

        if len(org_name) > cls.MAX_ORG_NAME_LENGTH:
            raise ValueError(
                f"Organization name exceeds maximum length of {cls.MAX_ORG_NAME_LENGTH}"
            )

        if ".." in org_name:
            raise ValueError("Organization name contains path traversal sequences")

        if not cls.SAFE_ORG_NAME_PATTERN.match(org_name):
            raise ValueError("Organization name contains invalid characters")

        return org_name

    @classmethod
    def sanitize_for_logging(cls, message: str) -> str:
        """Sanitize message for safe logging by removing potential credentials."""
        if not message:
            return message

        patterns = [
            (r"https?://[^:/@\s]+:[^@\s]+@", "https://[REDACTED]@"),  # URLs with credentials
            (r"\btoken(?:[=:]\s*|\s+)[A-Za-z0-9_.-]{16,}", "token=[REDACTED]"),  # Headers, assignments
            (r"\bbearer\s+[A-Za-z0-9_.-]{16,}", "Bearer [REDACTED]"),
            (r"github_pat_[A-Za-z0-9_]+", "[GITHUB_TOKEN_REDACTED]"),  # Fine-grained tokens
            (r"gh[pousr]_[A-Za-z0-9_]+", "[GITHUB_TOKEN_REDACTED]"),
        ]

        sanitized = message
        for pattern, replacement in patterns:
            sanitized = re.sub(pattern, replacement, sanitized, flags=re.IGNORECASE)

        return sanitized
