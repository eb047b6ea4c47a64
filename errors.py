#!/usr/bin/env python3
"""Error types and exit codes for mirror-to-gitea."""

from __future__ import annotations

# Exit codes
EXIT_SUCCESS = 0
EXIT_EXECUTION_ERROR = 1
EXIT_MISSING_ARGUMENTS = 2
EXIT_GITHUB_ERROR = 30
EXIT_GITEA_ERROR = 31
EXIT_AUTH_ERROR = 40


class MirrorError(Exception):
    """Base class for errors that terminate a run."""

    exit_code = EXIT_EXECUTION_ERROR


class ConfigurationError(MirrorError):
    """A required setting is missing or invalid."""

    exit_code = EXIT_MISSING_ARGUMENTS


class SourceApiError(MirrorError):
    """Listing repositories on GitHub failed; the work set is unusable."""

    exit_code = EXIT_GITHUB_ERROR


class SourceAuthError(SourceApiError):
    exit_code = EXIT_AUTH_ERROR


class DestinationIdentityError(MirrorError):
    """The Gitea account that should own the mirrors could not be resolved."""

    exit_code = EXIT_GITEA_ERROR


class DestinationAuthError(DestinationIdentityError):
    exit_code = EXIT_AUTH_ERROR


class MirrorCheckAmbiguous(Exception):
    """Existence lookup gave neither a found nor a clean not-found answer."""


class MirrorCreationError(Exception):
    """The migrate call for a single repository failed."""

    def __init__(self, repository: str, cause: str) -> None:
        super().__init__(f"{repository}: {cause}")
        self.repository = repository
        self.cause = cause
