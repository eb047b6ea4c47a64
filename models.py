#!/usr/bin/env python3
"""Domain types shared by the source, target and orchestrator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class MirrorStatus(Enum):
    """Enumeration for per-repository mirroring results."""
    SKIPPED = "skipped"
    MIRRORED = "mirrored"
    FAILED = "failed"


@dataclass(frozen=True)
class RepositoryDescriptor:
    """Normalized source repository; the clone URL is the identity key."""
    name: str
    url: str
    private: bool


@dataclass(frozen=True)
class DestinationAccount:
    """Gitea user or organization that owns created mirrors."""
    id: int
    name: str


@dataclass(frozen=True)
class PlatformCredentials:
    """Tokens and endpoint needed by the mirroring tasks."""
    source_token: Optional[str]
    destination_url: str
    destination_token: str


@dataclass(frozen=True)
class MirrorOutcome:
    """Result of processing one repository."""
    repository: str
    status: MirrorStatus
    cause: Optional[str] = None

    @classmethod
    def skipped(cls, repository: str) -> "MirrorOutcome":
        return cls(repository, MirrorStatus.SKIPPED)

    @classmethod
    def mirrored(cls, repository: str) -> "MirrorOutcome":
        return cls(repository, MirrorStatus.MIRRORED)

    @classmethod
    def failed(cls, repository: str, cause: str) -> "MirrorOutcome":
        return cls(repository, MirrorStatus.FAILED, cause)
