#!/usr/bin/env python3
"""GitHub API wrapper for discovering the repositories to mirror."""

from __future__ import annotations

from typing import Iterable, List, Optional

import github
import requests

from config import DEFAULT_GITHUB_API_URL
from errors import SourceApiError, SourceAuthError
from logging_utils import Logger
from models import RepositoryDescriptor
from utils import RateLimiter, deduplicate_by_url


class GitHubSource:
    """Wrapper around GitHub API to enumerate a user's repositories."""

    def __init__(
        self, token: Optional[str], api_url: str = DEFAULT_GITHUB_API_URL
    ) -> None:
        self.api_url = api_url
        self.token = token
        self.api: Optional[github.Github] = None
        self.rate_limiter = RateLimiter(
            max_requests_per_minute=30
        )  # Unauthenticated GitHub allows 60/hour, stay conservative

    def connect(self) -> None:
        Logger.info(f"init github API: {self.api_url}")
        auth = github.Auth.Token(self.token) if self.token else None
        if self.api_url != DEFAULT_GITHUB_API_URL:
            self.api = github.Github(base_url=self.api_url, auth=auth)
        else:
            self.api = github.Github(auth=auth)

    def list_repositories(
        self, username: str, include_private: bool
    ) -> List[RepositoryDescriptor]:
        """Return the user's public repositories, plus owned ones if requested.

        Every page is fetched before returning; a failure on any page aborts
        the whole listing.
        """
        if self.api is None:
            raise SourceApiError("github API not initialized")

        Logger.info(f"discovering public repositories of: {username}")
        repositories = self._collect(
            lambda: self.api.get_user(username).get_repos(),
            f"public repositories of '{username}'",
        )

        if include_private:
            Logger.info("discovering repositories owned by the authenticated user")
            repositories += self._collect(
                lambda: self.api.get_user().get_repos(
                    visibility="all", affiliation="owner"
                ),
                "repositories of the authenticated user",
            )
            repositories = deduplicate_by_url(repositories)

        Logger.info(f"found {len(repositories)} repositories on GitHub")
        return repositories

    def _collect(self, fetch, what: str) -> List[RepositoryDescriptor]:
        try:
            self.rate_limiter.wait_if_needed("GitHub API")
            return self._normalize(fetch())
        except github.BadCredentialsException as e:
            raise SourceAuthError(
                f"authentication failed (github) while listing {what}: {e}"
            ) from e
        except github.GithubException as e:
            raise SourceApiError(f"failed to list {what}: {e}") from e
        except requests.RequestException as e:
            raise SourceApiError(f"failed to contact github api: {e}") from e

    @staticmethod
    def _normalize(raw_repositories: Iterable[object]) -> List[RepositoryDescriptor]:
        repositories: List[RepositoryDescriptor] = []
        # Iterating a PaginatedList fetches the following pages lazily
        for raw in raw_repositories:
            repo = RepositoryDescriptor(
                name=raw.name,
                url=raw.clone_url,
                private=bool(raw.private),
            )
            repositories.append(repo)
            Logger.debug(f"found: {repo.name}")
        return repositories
