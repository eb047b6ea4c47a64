#!/usr/bin/env python3
"""Utility functions for mirror-to-gitea."""

import threading
import time
from typing import Iterable, List, Set

from logging_utils import Logger
from models import RepositoryDescriptor


class RateLimiter:
    """Rate limiter to prevent abuse and respect API limits."""

    def __init__(self, max_requests_per_minute: int = 60):
        self.max_requests = max_requests_per_minute
        self.requests: List[float] = []
        self.lock = threading.Lock()

    def wait_if_needed(self, operation_type: str = "API") -> None:
        """Wait if necessary to respect rate limits."""
        current_time = time.time()

        with self.lock:
            self._clean_old_requests(current_time)
            if len(self.requests) >= self.max_requests:
                wait_time = 60 - (current_time - self.requests[0])
                if wait_time > 0:
                    Logger.security_event(
                        "RATE_LIMIT_HIT",
                        f"rate limit reached for {operation_type}, "
                        f"waiting {wait_time:.2f}s",
                    )
                    time.sleep(wait_time)
                    current_time = time.time()
                    self._clean_old_requests(current_time)
            self.requests.append(current_time)

    def _clean_old_requests(self, current_time: float) -> None:
        """Remove requests older than 1 minute."""
        cutoff_time = current_time - 60
        self.requests = [
            req_time for req_time in self.requests if req_time > cutoff_time
        ]


def deduplicate_by_url(
    repositories: Iterable[RepositoryDescriptor],
) -> List[RepositoryDescriptor]:
    """Drop repositories whose clone URL was already seen, keeping the first."""
    seen: Set[str] = set()
    unique: List[RepositoryDescriptor] = []
    for repo in repositories:
        if repo.url in seen:
            continue
        seen.add(repo.url)
        unique.append(repo)
    return unique
