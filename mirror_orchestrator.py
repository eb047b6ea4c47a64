#!/usr/bin/env python3
"""Main orchestrator for mirroring GitHub repositories into Gitea."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, List, Sequence

from config import Config
from errors import EXIT_EXECUTION_ERROR, EXIT_SUCCESS, MirrorError
from gitea_target import GiteaTarget
from github_source import GitHubSource
from logging_utils import Logger
from models import (DestinationAccount, MirrorOutcome, MirrorStatus,
                    RepositoryDescriptor)


class MirrorOrchestrator:
    def __init__(self, cfg: Config) -> None:
        self.cfg = cfg
        self.credentials = cfg.credentials()
        self.gh = GitHubSource(cfg.github.token, cfg.github.api_url)
        self.gitea = GiteaTarget.from_credentials(
            self.credentials, request_timeout_s=cfg.gitea.request_timeout_s
        )

    def run(self) -> int:
        try:
            self.gh.connect()
            repositories = self.gh.list_repositories(
                self.cfg.github.username,
                include_private=self.cfg.behavior.mirror_private,
            )

            account = self.gitea.resolve_account(self.cfg.gitea.org_name)

            if self.cfg.behavior.dry_run:
                total = len(repositories)
                for idx, repo in enumerate(repositories, start=1):
                    Logger.info(
                        f"[{idx}/{total}] would mirror: {repo.url} -> "
                        f"{account.name}/{repo.name}"
                    )
                Logger.info("dry-run completed")
                return EXIT_SUCCESS

            outcomes = self.mirror_all(repositories, account)
            failed = self._log_summary(outcomes)
            return EXIT_EXECUTION_ERROR if failed else EXIT_SUCCESS
        except MirrorError as e:
            Logger.error(str(e))
            return e.exit_code
        except Exception as e:
            Logger.error(f"unexpected error: {e}")
            return EXIT_EXECUTION_ERROR

    def mirror_all(
        self,
        repositories: Sequence[RepositoryDescriptor],
        account: DestinationAccount,
    ) -> List[MirrorOutcome]:
        """Mirror every repository with at most ``concurrency`` in flight.

        Returns once every task has finished, one outcome per repository in
        completion order.
        """
        outcomes: List[MirrorOutcome] = []
        if not repositories:
            return outcomes

        workers = self.cfg.behavior.concurrency
        with ThreadPoolExecutor(max_workers=workers) as executor:
            future_map = {
                executor.submit(self._mirror_one, repo, account): repo
                for repo in repositories
            }
            for future in as_completed(future_map):
                outcomes.append(future.result())
        return outcomes

    def _mirror_one(
        self, repository: RepositoryDescriptor, account: DestinationAccount
    ) -> MirrorOutcome:
        try:
            if self.gitea.repo_exists(account.name, repository.name):
                Logger.info(f"already mirrored: {repository.name}")
                return MirrorOutcome.skipped(repository.name)
            return self.gitea.create_mirror(
                repository, account, self.credentials.source_token
            )
        except Exception as e:
            Logger.error(f"failed to mirror '{repository.name}': {e}")
            return MirrorOutcome.failed(repository.name, str(e))

    @staticmethod
    def _log_summary(outcomes: Sequence[MirrorOutcome]) -> int:
        counts: Dict[MirrorStatus, int] = {status: 0 for status in MirrorStatus}
        for outcome in outcomes:
            counts[outcome.status] += 1
        Logger.info(
            f"done: {counts[MirrorStatus.MIRRORED]} mirrored, "
            f"{counts[MirrorStatus.SKIPPED]} skipped, "
            f"{counts[MirrorStatus.FAILED]} failed"
        )
        return counts[MirrorStatus.FAILED]
