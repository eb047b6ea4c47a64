#!/usr/bin/env python3
"""Configuration dataclasses for mirror-to-gitea."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from models import PlatformCredentials

DEFAULT_GITHUB_API_URL = "https://api.github.com"
DEFAULT_CONCURRENCY = 4
DEFAULT_REQUEST_TIMEOUT_S = 60.0


@dataclass
class GitHubConfig:
    """GitHub-specific configuration."""
    username: str
    token: Optional[str]
    api_url: str = DEFAULT_GITHUB_API_URL


@dataclass
class GiteaConfig:
    """Gitea-specific configuration."""
    url: str
    token: str
    org_name: Optional[str] = None
    request_timeout_s: float = DEFAULT_REQUEST_TIMEOUT_S


@dataclass
class MirrorBehaviorConfig:
    """Mirroring behavior configuration."""
    mirror_private: bool = False
    concurrency: int = DEFAULT_CONCURRENCY
    dry_run: bool = False


@dataclass
class Config:
    """Main configuration for GitHub-to-Gitea mirroring."""
    github: GitHubConfig
    gitea: GiteaConfig
    behavior: MirrorBehaviorConfig

    def credentials(self) -> PlatformCredentials:
        return PlatformCredentials(
            source_token=self.github.token,
            destination_url=self.gitea.url,
            destination_token=self.gitea.token,
        )
