"""Shared fixtures: import path setup and throwaway git repositories."""

import json
import shutil
import subprocess
import sys
from pathlib import Path

import pytest

# Put workflows/ on the path so ``shared`` and ``versioning`` import like in CI.
workflows_dir = str(Path(__file__).parent.parent / "workflows")
if workflows_dir not in sys.path:
    sys.path.insert(0, workflows_dir)

from shared import common  # noqa: E402

CARGO_TOML = """[package]
name = "sensitive-data"
version = "1.0.0"
edition = "2018"

[dependencies]
libc = { version = "0.2" }
"""


def git(*args, cwd=None):
    cmd = ["git", "-c", "user.name=Test", "-c", "user.email=test@example.com", "-c", "commit.gpgsign=false"]
    res = subprocess.run(cmd + list(args), cwd=cwd, capture_output=True, text=True, check=True)
    return res.stdout.strip()


class RemoteRepo:
    """A bare remote seeded with one commit on ``master`` holding Cargo.toml."""

    def __init__(self, root: Path, manifest: str = CARGO_TOML):
        self.root = root
        self.bare = root / "remote.git"
        git("init", "--quiet", "--bare", str(self.bare))
        git("symbolic-ref", "HEAD", "refs/heads/master", cwd=self.bare)

        seed = root / "seed"
        git("init", "--quiet", str(seed))
        (seed / "Cargo.toml").write_text(manifest, encoding="utf-8")
        (seed / "README.md").write_text("sensitive-data\n", encoding="utf-8")
        git("add", ".", cwd=seed)
        git("commit", "--quiet", "-m", "Initial commit", cwd=seed)
        git("push", "--quiet", str(self.bare), "HEAD:refs/heads/master", cwd=seed)
        self.base_sha = git("rev-parse", "HEAD", cwd=seed)

    def clone(self, name: str) -> Path:
        path = self.root / name
        git("clone", "--quiet", str(self.bare), str(path))
        return path

    def show(self, ref: str, path: str) -> str:
        return git("show", f"{ref}:{path}", cwd=self.bare)

    def rev_count(self, rev_range: str) -> int:
        return int(git("rev-list", "--count", rev_range, cwd=self.bare))

    def changed_files(self, old: str, new: str) -> list[str]:
        return git("diff", "--name-only", old, new, cwd=self.bare).splitlines()

    def last_commit(self, ref: str) -> tuple[str, str]:
        """Return ``(subject, author name)`` of the commit at *ref*."""
        subject, author = git("log", "-1", "--format=%s%n%an", ref, cwd=self.bare).splitlines()
        return subject, author

    def commit_message(self, ref: str) -> str:
        return git("log", "-1", "--format=%B", ref, cwd=self.bare)


@pytest.fixture
def remote_repo(tmp_path):
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    return RemoteRepo(tmp_path)


@pytest.fixture(autouse=True)
def quiet_environment(monkeypatch):
    """Keep the runner's environment out of the tests."""
    for key in (
        "GITHUB_ENV", "GITHUB_TOKEN", "GITHUB_REPOSITORY", "GITHUB_EVENT_PATH", "TEAMS_WEBHOOK_URL",
        "RUNNER_DEBUG", "VERSION_FILE", "VERSION_TABLE", "MAIN_BRANCH", "GIT_REMOTE", "BOT_NAME", "BOT_EMAIL",
    ):
        monkeypatch.delenv(key, raising=False)
    common.set_verbose_enabled(False)


@pytest.fixture
def write_event(tmp_path):
    def _write(action, labels=(), merged=False, number=7, base_ref="master", merge_commit_sha=None):
        payload = {
            "action": action,
            "number": number,
            "pull_request": {
                "number": number,
                "labels": [{"name": name} for name in labels],
                "merged": merged,
                "base": {"ref": base_ref},
                "merge_commit_sha": merge_commit_sha,
            },
            "repository": {"full_name": "absa/sensitive-data"},
        }
        path = tmp_path / f"event_{action}.json"
        path.write_text(json.dumps(payload), encoding="utf-8")
        return str(path)

    return _write
