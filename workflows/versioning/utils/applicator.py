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


"""Version applicator – the mutating path run once a pull request merges.

Procedure: check out the latest main branch tip holding the merge commit,
re-classify the final labels, bump the version file read fresh from disk,
commit that file alone and push it to the main branch. A pull request whose
bump already landed is not bumped again. Mutual exclusion between concurrent
runs is left to the remote, which rejects the second, non-fast-forward push.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from shared.common import vprint
from shared.git import (
    GitError,
    PushRejectedError,
    git_checkout,
    git_commit_file,
    git_fetch,
    git_is_ancestor,
    git_log_grep,
    git_push,
)

from .classifier import classify
from .constants import (
    COMMIT_MESSAGE,
    DEFAULT_BOT_EMAIL,
    DEFAULT_BOT_NAME,
    DEFAULT_MAIN_BRANCH,
    DEFAULT_REMOTE,
    DEFAULT_VERSION_FILE,
    DEFAULT_VERSION_TABLE,
    PULL_REQUEST_TRAILER,
)
from .errors import ConcurrentMutationConflictError, GitCommandError, MissingPreconditionError
from .gate import warn_if_ambiguous
from .models import ApplyResult, IncrementKind, PullRequestEvent
from .version_file import load_version_artifact, write_version_artifact


@dataclass
class ApplyConfig:
    repo_dir: str = "."
    version_file: str = DEFAULT_VERSION_FILE
    version_table: str = DEFAULT_VERSION_TABLE
    main_branch: str = DEFAULT_MAIN_BRANCH
    remote: str = DEFAULT_REMOTE
    bot_name: str = DEFAULT_BOT_NAME
    bot_email: str = DEFAULT_BOT_EMAIL
    checkout: bool = True
    dry_run: bool = False


def checkout_main_tip(event: PullRequestEvent, config: ApplyConfig) -> None:
    """Put the working tree on the fetched tip of the main branch.

    The bump always lands on the latest tip, so a later merge or a re-run
    after a rejected push does not conflict. The pull request's merge commit
    must already be part of that tip.
    """
    tip = f"{config.remote}/{config.main_branch}"
    try:
        git_fetch(config.remote, config.main_branch, cwd=config.repo_dir)
        if event.merge_commit_sha:
            if not git_is_ancestor(event.merge_commit_sha, tip, cwd=config.repo_dir):
                raise GitCommandError("merge-base", f"merge commit {event.merge_commit_sha} is not on {tip}")
        else:
            vprint(f"Event carries no merge commit – bumping {tip} as is")
        git_checkout(tip, cwd=config.repo_dir)
    except GitError as exc:
        raise GitCommandError(exc.step, exc.stderr) from exc


def find_applied_bump(event: PullRequestEvent, config: ApplyConfig) -> str | None:
    """Return the sha of a version commit already pushed for *event*, if any.

    Only commits after the merge commit are searched.
    """
    if not event.number or not event.merge_commit_sha:
        return None
    trailer = PULL_REQUEST_TRAILER.format(number=event.number)
    try:
        shas = git_log_grep(f"{event.merge_commit_sha}..HEAD", f"^{trailer}$", cwd=config.repo_dir)
    except GitError as exc:
        raise GitCommandError(exc.step, exc.stderr) from exc
    return shas[0] if shas else None


def resolve_increment(event: PullRequestEvent) -> IncrementKind:
    warn_if_ambiguous(event.labels)
    increment = classify(event.labels)
    if increment is IncrementKind.NONE:
        raise MissingPreconditionError(event.number)
    return increment


def apply_increment(
    increment: IncrementKind,
    config: ApplyConfig,
    pr_number: int | None = None,
) -> ApplyResult:
    """Bump the version file by *increment*, commit and push it.

    The file is re-read on every call. If committing or pushing fails the
    local file may already be rewritten, but nothing reaches the remote.
    """
    if increment is IncrementKind.NONE:
        raise MissingPreconditionError(None)

    path = os.path.join(config.repo_dir, config.version_file)
    artifact = load_version_artifact(path, config.version_table)
    old_version = artifact.version
    new_version = old_version.bump(increment)
    print(f"Applying {increment.label} increment: {old_version} -> {new_version}")

    if config.dry_run:
        print(f"DRY-RUN: would write {new_version} to {config.version_file}, commit and push to {config.main_branch}")
        return ApplyResult(increment, old_version, new_version, commit_sha=None, pushed=False)

    write_version_artifact(artifact, new_version)

    message = COMMIT_MESSAGE
    if pr_number:
        message += "\n\n" + PULL_REQUEST_TRAILER.format(number=pr_number)
    try:
        sha = git_commit_file(
            config.version_file,
            message,
            author_name=config.bot_name,
            author_email=config.bot_email,
            cwd=config.repo_dir,
        )
        git_push(config.remote, config.main_branch, cwd=config.repo_dir)
    except PushRejectedError as exc:
        raise ConcurrentMutationConflictError(config.main_branch, exc.stderr) from exc
    except GitError as exc:
        raise GitCommandError(exc.step, exc.stderr) from exc

    print(f"Pushed version {new_version} to {config.remote}/{config.main_branch} ({sha})")
    return ApplyResult(increment, old_version, new_version, commit_sha=sha, pushed=True)


def apply_merged_pull_request(event: PullRequestEvent, config: ApplyConfig) -> ApplyResult:
    """Run the whole apply path for a closed+merged pull request event.

    A dry run leaves the working copy where it is and bumps its current file.
    """
    if not event.merged:
        raise MissingPreconditionError(event.number)

    on_tip = config.checkout and not config.dry_run
    if on_tip:
        checkout_main_tip(event, config)

    increment = resolve_increment(event)

    applied = find_applied_bump(event, config) if on_tip else None
    if applied:
        path = os.path.join(config.repo_dir, config.version_file)
        current = load_version_artifact(path, config.version_table).version
        print(f"Pull request #{event.number} was already applied in {applied}; version stays {current}")
        return ApplyResult(increment, current, current, commit_sha=applied, pushed=False)

    return apply_increment(increment, config, pr_number=event.number)
