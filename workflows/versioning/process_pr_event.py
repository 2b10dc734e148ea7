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


"""Run the version gate or the version applicator for one pull_request event.

Triggered by ``pull_request`` events (labeled, unlabeled, opened,
synchronize, closed, reopened) on the main branch.

- opened / labeled / unlabeled / synchronize / reopened:
  fail the check unless one of the labels ``major-increment``,
  ``minor-increment``, ``patch-increment`` is set
  (several labels: the most severe wins).
- closed with merged=true:
  bump the version file on the latest main branch tip, commit it as
  ``Bump version`` and push. A rejected (non-fast-forward) push fails the
  run; nothing is retried. Re-running the same event bumps the new tip, and
  an event whose bump already landed is left alone.

Environment:
  GITHUB_EVENT_PATH   event payload (required unless --event-path)
  GITHUB_TOKEN        optional; used to comment the new version on the PR
  TEAMS_WEBHOOK_URL   optional; failed applies are reported to Teams
  GITHUB_ENV          optional; VERSION_INCREMENT=<kind> is exported
  RUNNER_DEBUG        '1' enables verbose output

Usage:
  python3 process_pr_event.py --version-file Cargo.toml --version-table package
"""

from __future__ import annotations

import argparse
import os
import sys

from shared.common import parse_runner_debug, set_verbose_enabled, vprint
from shared.github_pulls import gh_pr_comment
from shared.teams import notify_teams

from versioning.utils.applicator import ApplyConfig, apply_merged_pull_request
from versioning.utils.constants import (
    DEFAULT_BOT_EMAIL,
    DEFAULT_BOT_NAME,
    DEFAULT_MAIN_BRANCH,
    DEFAULT_REMOTE,
    DEFAULT_VERSION_FILE,
    DEFAULT_VERSION_TABLE,
)
from versioning.utils.errors import PolicyViolationError, VersionGateError
from versioning.utils.events import load_pull_request_event
from versioning.utils.gate import evaluate_gate, route_event
from versioning.utils.models import ApplyResult, IncrementKind, PullRequestEvent, Route


def export_increment(increment: IncrementKind) -> None:
    """Append ``VERSION_INCREMENT=<kind>`` to ``$GITHUB_ENV`` for later steps."""
    env_file = os.environ.get("GITHUB_ENV")
    if not env_file or increment is IncrementKind.NONE:
        return
    with open(env_file, "a", encoding="utf-8") as fh:
        fh.write(f"VERSION_INCREMENT={increment.label}\n")
    vprint(f"Exported VERSION_INCREMENT={increment.label}")


def build_applied_comment(result: ApplyResult) -> str:
    return (
        f"Version bumped from `{result.old_version}` to `{result.new_version}` "
        f"({result.increment.label} increment) in {result.commit_sha}."
    )


def build_failure_body(event: PullRequestEvent, exc: VersionGateError) -> str:
    error = exc.to_dict()
    lines = [f"**{error['error_code']}**\n", f"{error['message']}\n"]
    if event.repo and event.number:
        link = f"https://github.com/{event.repo}/pull/{event.number}"
        lines.append(f"- Pull request: [#{event.number}]({link})\n")
    if "suggestion" in error:
        lines.append(f"- Next step: {error['suggestion']}\n")
    return "\n".join(lines)


def handle_event(event: PullRequestEvent, config: ApplyConfig, *, token: str | None = None) -> ApplyResult | None:
    """Route *event* and run the matching path.

    Raises :class:`PolicyViolationError` when the gate fails and any other
    :class:`VersionGateError` when the apply path fails.
    """
    route = route_event(event, config.main_branch)
    print(f"Pull request #{event.number} action={event.action} route={route.value}")
    if route is Route.SKIP:
        return None

    print(f"Labels: {', '.join(sorted(event.labels)) if event.labels else '(none)'}")
    gate = evaluate_gate(event.labels)
    export_increment(gate.increment)

    if route is Route.GATE:
        if not gate.passed:
            raise PolicyViolationError(gate.message)
        print(f"Version gate passed: {gate.message}")
        return None

    result = apply_merged_pull_request(event, config)
    if token and event.repo and event.number and result.pushed:
        gh_pr_comment(token, event.repo, event.number, build_applied_comment(result))
    return result


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Enforce and apply the version increment label of a pull request",
    )
    parser.add_argument(
        "--event-path",
        default=os.environ.get("GITHUB_EVENT_PATH"),
        help="Path to the pull_request event payload (default: $GITHUB_EVENT_PATH).",
    )
    parser.add_argument(
        "--repo-dir",
        default=".",
        help="Working copy the version file lives in (default: current directory).",
    )
    parser.add_argument(
        "--version-file",
        default=os.environ.get("VERSION_FILE", DEFAULT_VERSION_FILE),
        help=f"Version file relative to --repo-dir (default: $VERSION_FILE or {DEFAULT_VERSION_FILE}).",
    )
    parser.add_argument(
        "--version-table",
        default=os.environ.get("VERSION_TABLE", DEFAULT_VERSION_TABLE),
        help=f"TOML table holding the version key (default: $VERSION_TABLE or {DEFAULT_VERSION_TABLE}).",
    )
    parser.add_argument(
        "--main-branch",
        default=os.environ.get("MAIN_BRANCH", DEFAULT_MAIN_BRANCH),
        help=f"Branch the policy applies to (default: $MAIN_BRANCH or {DEFAULT_MAIN_BRANCH}).",
    )
    parser.add_argument(
        "--remote",
        default=os.environ.get("GIT_REMOTE", DEFAULT_REMOTE),
        help=f"Remote to push the version commit to (default: {DEFAULT_REMOTE}).",
    )
    parser.add_argument(
        "--no-checkout",
        action="store_true",
        help="Use the current HEAD instead of fetching and checking out the main branch tip.",
    )
    parser.add_argument(
        "--teams-webhook-url",
        default=os.environ.get("TEAMS_WEBHOOK_URL"),
        help="Teams Incoming Webhook for failed applies (default: $TEAMS_WEBHOOK_URL).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Compute the new version from the current working copy; nothing is fetched, written or pushed.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Verbose output (also enabled by RUNNER_DEBUG=1).",
    )
    return parser.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> ApplyConfig:
    return ApplyConfig(
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


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    set_verbose_enabled(args.verbose or parse_runner_debug())
    config = config_from_args(args)

    try:
        event = load_pull_request_event(args.event_path)
    except VersionGateError as exc:
        print(f"ERROR: {exc.message}", file=sys.stderr)
        raise SystemExit(1)

    try:
        handle_event(event, config, token=os.environ.get("GITHUB_TOKEN"))
    except PolicyViolationError as exc:
        print(f"ERROR: {exc.message}", file=sys.stderr)
        print(exc.suggestion, file=sys.stderr)
        raise SystemExit(1)
    except VersionGateError as exc:
        print(f"ERROR: {exc.message}", file=sys.stderr)
        if exc.suggestion:
            print(exc.suggestion, file=sys.stderr)
        notify_teams(
            args.teams_webhook_url,
            build_failure_body(event, exc),
            title="Version bump failed",
            subtitle=event.repo or None,
            dry_run=args.dry_run,
        )
        raise SystemExit(1)


if __name__ == "__main__":
    main()
