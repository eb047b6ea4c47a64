"""Tests for configuration building and startup validation."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from argument_parser import build_config, build_parser, parse_arguments
from errors import EXIT_MISSING_ARGUMENTS, ConfigurationError

FULL_ENV = {
    'GITHUB_USERNAME': 'octocat',
    'GITEA_URL': 'https://git.example.com/',
    'GITEA_TOKEN': 'gitea-token',
}


def _build(argv=(), env=None):
    args = build_parser().parse_args(list(argv))
    return build_config(args, env if env is not None else dict(FULL_ENV))


def test_config_from_environment() -> None:
    cfg = _build(env=dict(FULL_ENV, GITEA_ORG_NAME='acme'))

    assert cfg.github.username == 'octocat'
    assert cfg.github.token is None
    assert cfg.github.api_url == 'https://api.github.com'
    assert cfg.gitea.url == 'https://git.example.com'
    assert cfg.gitea.org_name == 'acme'
    assert cfg.behavior.mirror_private is False
    assert cfg.behavior.concurrency == 4


def test_flags_override_environment() -> None:
    cfg = _build(['--github-username', 'hubot', '--gitea-org', 'mirrors', '-c', '8'])

    assert cfg.github.username == 'hubot'
    assert cfg.gitea.org_name == 'mirrors'
    assert cfg.behavior.concurrency == 8


@pytest.mark.parametrize(
    'env, missing',
    [
        ({}, 'github username'),
        ({'GITHUB_USERNAME': 'octocat'}, 'gitea url'),
        ({'GITHUB_USERNAME': 'octocat', 'GITEA_URL': 'https://git.example.com'}, 'gitea token'),
    ],
)
def test_required_settings_are_checked_in_order(env, missing) -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        _build(env=env)
    assert missing in str(excinfo.value)


def test_private_mirroring_without_github_token_aborts() -> None:
    env = dict(FULL_ENV, MIRROR_PRIVATE_REPOSITORIES='true')

    with pytest.raises(ConfigurationError) as excinfo:
        _build(env=env)
    assert 'github token' in str(excinfo.value)


def test_private_mirroring_with_token() -> None:
    env = dict(FULL_ENV, MIRROR_PRIVATE_REPOSITORIES='true', GITHUB_TOKEN='ghp_x')

    cfg = _build(env=env)

    assert cfg.behavior.mirror_private is True
    assert cfg.credentials().source_token == 'ghp_x'
    assert cfg.credentials().destination_url == 'https://git.example.com'


def test_private_flag_other_than_true_is_off() -> None:
    cfg = _build(env=dict(FULL_ENV, MIRROR_PRIVATE_REPOSITORIES='yes'))

    assert cfg.behavior.mirror_private is False


@pytest.mark.parametrize(
    'argv',
    [
        ['--gitea-url', 'ftp://git.example.com'],
        ['--github-username', 'bad/name'],
        ['--gitea-org', '../admin'],
        ['--concurrency', '0'],
    ],
)
def test_invalid_values_are_rejected(argv) -> None:
    with pytest.raises(ConfigurationError):
        _build(argv)


def test_parse_arguments_exits_before_any_api_call() -> None:
    env = dict(FULL_ENV, MIRROR_PRIVATE_REPOSITORIES='true')
    with patch.dict('os.environ', env, clear=True), \
            patch('github_source.GitHubSource.list_repositories') as mock_list:
        with pytest.raises(SystemExit) as excinfo:
            parse_arguments([])

    assert excinfo.value.code == EXIT_MISSING_ARGUMENTS
    mock_list.assert_not_called()
