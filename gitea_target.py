#!/usr/bin/env python3
"""Gitea API wrapper for resolving the owner and creating pull mirrors."""

from __future__ import annotations

from typing import Optional
from urllib.parse import quote

import requests

from config import DEFAULT_REQUEST_TIMEOUT_S
from errors import (DestinationAuthError, DestinationIdentityError,
                    MirrorCheckAmbiguous, MirrorCreationError)
from logging_utils import Logger
from models import (DestinationAccount, MirrorOutcome, PlatformCredentials,
                    RepositoryDescriptor)
from security import SecurityValidator
from utils import RateLimiter


class GiteaTarget:
    """Wrapper around the Gitea REST API (v1)."""

    def __init__(
        self,
        url: str,
        token: str,
        request_timeout_s: float = DEFAULT_REQUEST_TIMEOUT_S,
    ) -> None:
        self.url = url.rstrip("/")
        self.token = token
        self.request_timeout_s = request_timeout_s
        self.rate_limiter = RateLimiter(max_requests_per_minute=120)

    @classmethod
    def from_credentials(
        cls,
        credentials: PlatformCredentials,
        request_timeout_s: float = DEFAULT_REQUEST_TIMEOUT_S,
    ) -> "GiteaTarget":
        return cls(
            credentials.destination_url,
            credentials.destination_token,
            request_timeout_s=request_timeout_s,
        )

    def _get_api_headers(self) -> dict:
        """Get standard API headers for Gitea requests."""
        return {
            "Accept": "application/json",
            "Authorization": f"token {self.token}",
        }

    def _api_url(self, path: str) -> str:
        return f"{self.url}/api/v1{path}"

    def resolve_account(self, org_name: Optional[str]) -> DestinationAccount:
        """Resolve the organization, or the token's own user, that owns mirrors.

        Organizations report their name under ``name`` and users under
        ``login``; older Gitea releases only expose ``username`` on both.
        """
        if org_name:
            endpoint = f"/orgs/{quote(org_name, safe='')}"
            name_field = "name"
        else:
            endpoint = "/user"
            name_field = "login"

        try:
            self.rate_limiter.wait_if_needed("Gitea API")
            response = requests.get(
                self._api_url(endpoint),
                headers=self._get_api_headers(),
                timeout=self.request_timeout_s,
            )
        except requests.RequestException as e:
            raise DestinationIdentityError(f"failed to contact gitea api: {e}") from e

        if response.status_code == 401:
            raise DestinationAuthError(
                "unauthorized (401): gitea token invalid or expired"
            )
        if response.status_code == 403:
            raise DestinationAuthError(
                f"forbidden (403): gitea token may not read {endpoint}"
            )
        if response.status_code == 404:
            raise DestinationIdentityError(
                f"not found (404): organization '{org_name}' does not exist"
                if org_name
                else "not found (404): authenticated gitea user"
            )
        if response.status_code != 200:
            raise DestinationIdentityError(
                f"unexpected response resolving gitea account: {response.status_code}"
            )

        try:
            body = response.json()
            account = DestinationAccount(
                id=int(body["id"]),
                name=body.get(name_field) or body["username"],
            )
        except (ValueError, KeyError, TypeError) as e:
            raise DestinationIdentityError(
                f"malformed gitea account response from {endpoint}: {e}"
            ) from e

        Logger.info(f"gitea owner: {account.name} (id {account.id})")
        return account

    def _lookup_repo(self, owner: str, name: str) -> bool:
        url = self._api_url(f"/repos/{quote(owner, safe='')}/{quote(name, safe='')}")
        try:
            self.rate_limiter.wait_if_needed("Gitea API")
            response = requests.get(
                url, headers=self._get_api_headers(), timeout=self.request_timeout_s
            )
        except requests.RequestException as e:
            raise MirrorCheckAmbiguous(f"request error: {e}") from e

        if response.status_code == 200:
            return True
        if response.status_code == 404:
            return False
        raise MirrorCheckAmbiguous(f"unexpected status {response.status_code}")

    def repo_exists(self, owner: str, name: str) -> bool:
        """Return True only when Gitea confirms ``owner/name`` exists.

        An inconclusive lookup counts as absent, so the worst case is a
        redundant migrate call rather than a silently skipped repository.
        """
        try:
            return self._lookup_repo(owner, name)
        except MirrorCheckAmbiguous as e:
            Logger.debug(f"could not confirm '{owner}/{name}' on gitea: {e}")
            return False

    def create_mirror(
        self,
        repository: RepositoryDescriptor,
        account: DestinationAccount,
        source_token: Optional[str],
    ) -> MirrorOutcome:
        """Ask Gitea to create a pull mirror of ``repository`` under ``account``."""
        payload = {
            "clone_addr": repository.url,
            "mirror": True,
            "uid": account.id,
            "repo_name": repository.name,
            "private": repository.private,
        }
        if source_token:
            payload["auth_token"] = source_token

        try:
            self._post_migration(repository.name, payload)
        except MirrorCreationError as e:
            Logger.error(f"failed to mirror '{repository.name}': {e.cause}")
            return MirrorOutcome.failed(repository.name, e.cause)

        Logger.success(f"mirrored: {repository.name}")
        return MirrorOutcome.mirrored(repository.name)

    def _post_migration(self, name: str, payload: dict) -> None:
        try:
            self.rate_limiter.wait_if_needed("Gitea API")
            response = requests.post(
                self._api_url("/repos/migrate"),
                headers=self._get_api_headers(),
                json=payload,
                timeout=self.request_timeout_s,
            )
        except requests.RequestException as e:
            raise MirrorCreationError(
                name, SecurityValidator.sanitize_for_logging(str(e))
            ) from e

        if response.status_code in (200, 201):
            return
        if response.status_code == 409:
            raise MirrorCreationError(name, "conflict (409): repository already exists")
        if response.status_code == 422:
            raise MirrorCreationError(
                name, f"validation failed (422): {self._error_message(response)}"
            )
        raise MirrorCreationError(
            name,
            f"unexpected status {response.status_code}: {self._error_message(response)}",
        )

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            message = response.json().get("message")
        except (ValueError, AttributeError):
            message = None
        return SecurityValidator.sanitize_for_logging(message or response.text or "")
