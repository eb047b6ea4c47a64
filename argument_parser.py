#!/usr/bin/env python3
"""Command line argument parsing and configuration building."""

from __future__ import annotations

import argparse
import os
import sys
from typing import Mapping, Optional, Sequence

from config import (DEFAULT_CONCURRENCY, DEFAULT_GITHUB_API_URL,
                    DEFAULT_REQUEST_TIMEOUT_S, Config, GiteaConfig,
                    GitHubConfig, MirrorBehaviorConfig)
from errors import ConfigurationError
from logging_utils import Logger
from security import SecurityValidator

MAX_CONCURRENCY = 32


def _create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        description="Mirror GitHub repositories into Gitea as pull mirrors",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Every option falls back to the environment variable named in its help.

Examples:
  %(prog)s --github-username octocat --gitea-url https://git.example.com
  %(prog)s --github-username octocat --mirror-private --gitea-org backups
  GITHUB_USERNAME=octocat GITEA_URL=https://git.example.com \\
  GITEA_TOKEN=... %(prog)s --dry-run
        """,
    )
    return parser


def _add_github_arguments(parser: argparse.ArgumentParser) -> None:
    """Add GitHub-related arguments to parser."""
    parser.add_argument(
        "--github-username",
        dest="github_username",
        help="GitHub user whose repositories are mirrored (or GITHUB_USERNAME)",
    )
    parser.add_argument(
        "--github-token",
        dest="github_token",
        help="GitHub token, needed for private repositories (or GITHUB_TOKEN)",
    )
    parser.add_argument(
        "--github-api",
        dest="github_api_url",
        default=None,
        help=f"Base URL of the GitHub API (default: {DEFAULT_GITHUB_API_URL})",
    )


def _add_gitea_arguments(parser: argparse.ArgumentParser) -> None:
    """Add Gitea-related arguments to parser."""
    parser.add_argument(
        "--gitea-url",
        dest="gitea_url",
        help="Base URL of the Gitea instance (or GITEA_URL)",
    )
    parser.add_argument(
        "--gitea-token",
        dest="gitea_token",
        help="Gitea API token (or GITEA_TOKEN)",
    )
    parser.add_argument(
        "--gitea-org",
        dest="gitea_org",
        help="Create mirrors under this Gitea organization (or GITEA_ORG_NAME)",
    )


def _add_behavior_arguments(parser: argparse.ArgumentParser) -> None:
    """Add behavior and configuration arguments to parser."""
    parser.add_argument(
        "--mirror-private",
        action="store_true",
        dest="mirror_private",
        help="Also mirror private repositories (or MIRROR_PRIVATE_REPOSITORIES=true)",
    )
    parser.add_argument(
        "-d",
        "--dry-run",
        action="store_true",
        dest="dry_run",
        help="List repositories that would be mirrored without creating them",
    )
    parser.add_argument(
        "-c",
        "--concurrency",
        dest="concurrency",
        type=int,
        default=DEFAULT_CONCURRENCY,
        help=f"Number of repositories mirrored in parallel (default: {DEFAULT_CONCURRENCY})",
    )
    parser.add_argument(
        "--timeout",
        dest="timeout_s",
        type=float,
        default=DEFAULT_REQUEST_TIMEOUT_S,
        help="Seconds to wait for each Gitea request "
        f"(default: {DEFAULT_REQUEST_TIMEOUT_S:g})",
    )


def _env_flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() == "true"


def build_config(
    args: argparse.Namespace, environ: Optional[Mapping[str, str]] = None
) -> Config:
    """Merge parsed arguments with environment fallbacks and validate them.

    Required settings are checked in a fixed order and the first missing one
    raises ConfigurationError.
    """
    env = os.environ if environ is None else environ

    github_username = args.github_username or env.get("GITHUB_USERNAME")
    github_token = args.github_token or env.get("GITHUB_TOKEN") or None
    gitea_url = args.gitea_url or env.get("GITEA_URL")
    gitea_token = args.gitea_token or env.get("GITEA_TOKEN")
    gitea_org = args.gitea_org or env.get("GITEA_ORG_NAME") or None
    mirror_private = args.mirror_private or _env_flag(
        env.get("MIRROR_PRIVATE_REPOSITORIES")
    )

    if not github_username:
        raise ConfigurationError(
            "no github username specified (use --github-username or GITHUB_USERNAME)"
        )
    if not gitea_url:
        raise ConfigurationError(
            "no gitea url specified (use --gitea-url or GITEA_URL)"
        )
    if not gitea_token:
        raise ConfigurationError(
            "no gitea token specified (use --gitea-token or GITEA_TOKEN)"
        )
    if mirror_private and not github_token:
        raise ConfigurationError(
            "private mirroring requested but no github token specified "
            "(use --github-token or GITHUB_TOKEN)"
        )

    try:
        validated_username = SecurityValidator.validate_username(github_username)
        validated_gitea_url = SecurityValidator.validate_url(
            gitea_url, ["https", "http"]
        )
        validated_github_api_url = SecurityValidator.validate_url(
            args.github_api_url or DEFAULT_GITHUB_API_URL, ["https", "http"]
        )
        validated_org = (
            SecurityValidator.validate_org_name(gitea_org) if gitea_org else None
        )

        if args.concurrency < 1 or args.concurrency > MAX_CONCURRENCY:
            raise ValueError(f"concurrency must be between 1 and {MAX_CONCURRENCY}")
        if args.timeout_s <= 0 or args.timeout_s > 3600:
            raise ValueError("timeout must be between 0 and 3600 seconds")
    except ValueError as e:
        Logger.security_event(
            "CONFIG_VALIDATION_FAILED", f"configuration validation failed: {e}"
        )
        raise ConfigurationError(f"configuration validation error: {e}") from e

    if validated_gitea_url.startswith("http://"):
        Logger.warn("warning: gitea url uses plain http; tokens are sent unencrypted")

    return Config(
        github=GitHubConfig(
            username=validated_username,
            token=github_token,
            api_url=validated_github_api_url,
        ),
        gitea=GiteaConfig(
            url=validated_gitea_url,
            token=gitea_token,
            org_name=validated_org,
            request_timeout_s=float(args.timeout_s),
        ),
        behavior=MirrorBehaviorConfig(
            mirror_private=mirror_private,
            concurrency=args.concurrency,
            dry_run=args.dry_run,
        ),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = _create_argument_parser()
    _add_github_arguments(parser)
    _add_gitea_arguments(parser)
    _add_behavior_arguments(parser)
    return parser


def parse_arguments(argv: Optional[Sequence[str]] = None) -> Config:
    """Parse command line arguments and return configuration object."""
    args = build_parser().parse_args(argv)

    try:
        return build_config(args)
    except ConfigurationError as e:
        Logger.error(f"error: {e}. Exiting.")
        sys.exit(e.exit_code)
