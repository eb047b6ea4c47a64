"""Tests for GitHubSource repository discovery."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import Mock

import github
import pytest

from errors import SourceApiError, SourceAuthError
from github_source import GitHubSource
from models import RepositoryDescriptor


def _raw(name: str, url: str, private: bool = False) -> SimpleNamespace:
    return SimpleNamespace(name=name, clone_url=url, private=private, fork=False)


def _make_source(public, owned=None) -> GitHubSource:
    source = GitHubSource('ghp_exampletoken')
    source.rate_limiter.wait_if_needed = lambda *_args, **_kwargs: None

    named_user = Mock()
    named_user.get_repos.return_value = public
    auth_user = Mock()
    auth_user.get_repos.return_value = owned or []

    def get_user_side_effect(*args):
        return named_user if args else auth_user

    source.api = Mock()
    source.api.get_user.side_effect = get_user_side_effect
    source.named_user = named_user
    source.auth_user = auth_user
    return source


def test_lists_public_repositories_only_by_default() -> None:
    source = _make_source(
        [_raw('a', 'u1'), _raw('b', 'u2')],
        owned=[_raw('secret', 'u9', private=True)],
    )

    repos = source.list_repositories('octocat', include_private=False)

    assert repos == [
        RepositoryDescriptor('a', 'u1', False),
        RepositoryDescriptor('b', 'u2', False),
    ]
    source.api.get_user.assert_called_once_with('octocat')
    source.auth_user.get_repos.assert_not_called()


def test_private_listing_is_merged_without_duplicate_urls() -> None:
    source = _make_source(
        [_raw('a', 'u1'), _raw('b', 'u2')],
        owned=[_raw('b', 'u2'), _raw('c', 'u3', private=True)],
    )

    repos = source.list_repositories('octocat', include_private=True)

    assert [(r.name, r.url) for r in repos] == [('a', 'u1'), ('b', 'u2'), ('c', 'u3')]
    assert repos[2].private is True
    source.auth_user.get_repos.assert_called_once_with(
        visibility='all', affiliation='owner'
    )


def test_owned_superset_dedup_counts_distinct_urls() -> None:
    public = [_raw(f'r{i}', f'https://github.com/octocat/r{i}.git') for i in range(5)]
    owned = public + [
        _raw(f'p{i}', f'https://github.com/octocat/p{i}.git', private=True)
        for i in range(3)
    ]
    source = _make_source(public, owned=owned)

    repos = source.list_repositories('octocat', include_private=True)

    urls = [r.url for r in repos]
    assert len(repos) == 8
    assert len(set(urls)) == len(urls)


def test_failure_on_later_page_aborts_listing() -> None:
    def paginated():
        yield _raw('a', 'u1')
        raise github.GithubException(502, {'message': 'bad gateway'}, None)

    source = _make_source(paginated())

    with pytest.raises(SourceApiError):
        source.list_repositories('octocat', include_private=False)


def test_bad_credentials_raise_auth_error() -> None:
    source = _make_source([_raw('a', 'u1')])
    source.auth_user.get_repos.side_effect = github.BadCredentialsException(
        401, {'message': 'Bad credentials'}, None
    )

    with pytest.raises(SourceAuthError) as excinfo:
        source.list_repositories('octocat', include_private=True)
    assert excinfo.value.exit_code == 40


def test_list_requires_connect() -> None:
    source = GitHubSource(None)

    with pytest.raises(SourceApiError):
        source.list_repositories('octocat', include_private=False)
