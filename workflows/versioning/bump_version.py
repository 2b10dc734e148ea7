#!/usr/bin/env python3
#
# Copyright 2026 ABSA Group Limited
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#


"""Apply a version increment by hand.

Use after a failed automation run (rejected push, missing label) to bump the
version of an already merged pull request, or to bump by an explicit kind.

Either:
  python3 bump_version.py --repo owner/repo --pr 42
    re-reads the merged pull request's labels through ``gh pr view`` and
    applies its increment on top of the current main branch, unless a
    version commit for that pull request already landed;
or:
  python3 bump_version.py --increment minor
    applies the given increment to the current HEAD.

Add --dry-run to print the new version only.
"""

from __future__ import annotations

import argparse
import os
import sys

from shared.common import parse_runner_debug, set_verbose_enabled
from shared.github_pulls import gh_pr_view

from versioning.utils.applicator import ApplyConfig, apply_increment, apply_merged_pull_request
from versioning.utils.constants import (
    DEFAULT_BOT_EMAIL,
    DEFAULT_BOT_NAME,
    DEFAULT_MAIN_BRANCH,
    DEFAULT_REMOTE,
    DEFAULT_VERSION_FILE,
    DEFAULT_VERSION_TABLE,
)
from versioning.utils.errors import EventPayloadError, VersionGateError
from versioning.utils.events import event_from_pr_view
from versioning.utils.models import IncrementKind, PullRequestEvent

INCREMENT_CHOICES = {kind.label: kind for kind in IncrementKind if kind is not IncrementKind.NONE}


def load_merged_pr(repo: str, number: int, config: ApplyConfig) -> PullRequestEvent:
    data = gh_pr_view(repo, number)
    if data is None:
        raise EventPayloadError(f"could not load pull request #{number} from {repo}")

    event = event_from_pr_view(data, repo)
    if not event.merged:
        raise EventPayloadError(f"pull request #{number} is not merged")
    if event.base_ref and event.base_ref != config.main_branch:
        raise EventPayloadError(f"pull request #{number} targets {event.base_ref!r}, not {config.main_branch!r}")

    return event


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Bump the package version and push the commit")

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--pr",
        type=int,
        help="Merged pull request whose increment label should be applied.",
    )
    source.add_argument(
        "--increment",
        choices=sorted(INCREMENT_CHOICES),
        help="Increment to apply to the current HEAD.",
    )

    parser.add_argument(
        "--repo",
        default=os.environ.get("GITHUB_REPOSITORY"),
        help="GitHub repository in owner/repo format (default: $GITHUB_REPOSITORY).",
    )
    parser.add_argument("--repo-dir", default=".", help="Working copy (default: current directory).")
    parser.add_argument(
        "--version-file",
        default=os.environ.get("VERSION_FILE", DEFAULT_VERSION_FILE),
        help=f"Version file relative to --repo-dir (default: {DEFAULT_VERSION_FILE}).",
    )
    parser.add_argument(
        "--version-table",
        default=os.environ.get("VERSION_TABLE", DEFAULT_VERSION_TABLE),
        help=f"TOML table holding the version key (default: {DEFAULT_VERSION_TABLE}).",
    )
    parser.add_argument(
        "--main-branch",
        default=os.environ.get("MAIN_BRANCH", DEFAULT_MAIN_BRANCH),
        help=f"Branch to push to (default: {DEFAULT_MAIN_BRANCH}).",
    )
    parser.add_argument("--remote", default=os.environ.get("GIT_REMOTE", DEFAULT_REMOTE))
    parser.add_argument(
        "--no-checkout",
        action="store_true",
        help="Do not fetch and check out the main branch tip before bumping (--pr only).",
    )
    parser.add_argument("--dry-run", action="store_true", help="Print the new version only.")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    set_verbose_enabled(args.verbose or parse_runner_debug())

    if args.pr is not None and not args.repo:
        raise SystemExit("ERROR: --repo (or GITHUB_REPOSITORY) is required with --pr")

    config = ApplyConfig(
        repo_dir=args.repo_dir,
        version_file=args.version_file,
        version_table=args.version_table,
        main_branch=args.main_branch,
        remote=args.remote,
        bot_name=os.environ.get("BOT_NAME", DEFAULT_BOT_NAME),
        bot_email=os.environ.get("BOT_EMAIL", DEFAULT_BOT_EMAIL),
        checkout=not args.no_checkout,
        dry_run=args.dry_run,
    )

    try:
        if args.pr is not None:
            apply_merged_pull_request(load_merged_pr(args.repo, args.pr, config), config)
        else:
            apply_increment(INCREMENT_CHOICES[args.increment], config)
    except VersionGateError as exc:
        print(f"ERROR: {exc.message}", file=sys.stderr)
        if exc.suggestion:
            print(exc.suggestion, file=sys.stderr)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
