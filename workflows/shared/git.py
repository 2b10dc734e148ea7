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


"""Local git operations used by the version applicator – fetch, checkout,
ancestry and history lookups, single-file commit under the automation
identity, and push with non-fast-forward detection.
"""

from __future__ import annotations

import subprocess

from .common import run_git, vprint

PUSH_REJECTED_MARKERS = ("[rejected]", "non-fast-forward", "fetch first", "stale info")


class GitError(Exception):
    """A git command exited non-zero."""

    def __init__(self, step: str, result: subprocess.CompletedProcess):
        self.step = step
        self.returncode = result.returncode
        self.stderr = (result.stderr or "") + (result.stdout or "")
        super().__init__(f"git {step} failed ({self.returncode}): {self.stderr.strip()}")


class PushRejectedError(GitError):
    """The remote refused the push because the branch moved."""


def _check(step: str, result: subprocess.CompletedProcess) -> subprocess.CompletedProcess:
    if result.returncode != 0:
        raise GitError(step, result)
    return result


def is_push_rejected(output: str) -> bool:
    return any(marker in (output or "") for marker in PUSH_REJECTED_MARKERS)


def git_fetch(remote: str, branch: str, *, cwd: str | None = None) -> None:
    _check("fetch", run_git(["fetch", "--quiet", remote, branch], cwd=cwd))


def git_checkout(ref: str, *, cwd: str | None = None) -> None:
    _check("checkout", run_git(["checkout", "--quiet", "--detach", ref], cwd=cwd))


def git_head_sha(*, cwd: str | None = None) -> str:
    res = _check("rev-parse", run_git(["rev-parse", "HEAD"], cwd=cwd))
    return (res.stdout or "").strip()


def git_is_ancestor(ancestor: str, descendant: str, *, cwd: str | None = None) -> bool:
    """Return whether *ancestor* is reachable from *descendant*."""
    res = run_git(["merge-base", "--is-ancestor", ancestor, descendant], cwd=cwd)
    if res.returncode in (0, 1):
        return res.returncode == 0
    raise GitError("merge-base", res)


def git_log_grep(rev_range: str, pattern: str, *, cwd: str | None = None) -> list[str]:
    """Return the shas in *rev_range* whose message has a line matching *pattern*."""
    res = _check("log", run_git(["log", "--format=%H", f"--grep={pattern}", rev_range], cwd=cwd))
    return (res.stdout or "").split()


def git_commit_file(
    path: str,
    message: str,
    *,
    author_name: str,
    author_email: str,
    cwd: str | None = None,
) -> str:
    """Commit only *path* and return the new commit sha.

    The identity is passed per command so the runner's global git config is
    left untouched.
    """
    identity = ["-c", f"user.name={author_name}", "-c", f"user.email={author_email}"]
    _check("add", run_git(["add", "--", path], cwd=cwd))
    _check("commit", run_git(identity + ["commit", "--quiet", "-m", message, "--", path], cwd=cwd))
    sha = git_head_sha(cwd=cwd)
    vprint(f"Created commit {sha} touching {path}")
    return sha


def git_push(remote: str, branch: str, *, cwd: str | None = None) -> None:
    """Push ``HEAD`` to *branch* on *remote*; never forces."""
    res = run_git(["push", "--porcelain", remote, f"HEAD:refs/heads/{branch}"], cwd=cwd)
    if res.returncode == 0:
        return
    output = (res.stderr or "") + (res.stdout or "")
    if is_push_rejected(output):
        raise PushRejectedError("push", res)
    raise GitError("push", res)
