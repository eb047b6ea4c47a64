#!/usr/bin/env python3
"""
Mirror to Gitea - Mirror the repositories of a GitHub user into Gitea.

This tool lists a user's public GitHub repositories (and, with a token, the
private ones they own) and asks a Gitea instance to create a pull mirror of
each one that is not mirrored yet. Runs are stateless: both platforms are
queried again every time, so repeated runs only add what is missing.
"""

from __future__ import annotations

import sys
from typing import NoReturn

from argument_parser import parse_arguments
from mirror_orchestrator import MirrorOrchestrator


def main() -> NoReturn:
    cfg = parse_arguments()
    orchestrator = MirrorOrchestrator(cfg)
    sys.exit(orchestrator.run())


if __name__ == "__main__":
    main()
