"""Integration tests for the merge-time version applicator (real git repositories)."""

import pytest

from shared.git import git_commit_file, git_head_sha, is_push_rejected
from versioning.utils.applicator import ApplyConfig, apply_increment, apply_merged_pull_request, checkout_main_tip
from versioning.utils.errors import (
    ConcurrentMutationConflictError,
    GitCommandError,
    MissingPreconditionError,
    VersionFileError,
)
from versioning.utils.models import IncrementKind, PullRequestEvent, Version


def merged_event(labels, sha, number=5):
    return PullRequestEvent(
        action="closed",
        labels=list(labels),
        merged=True,
        number=number,
        base_ref="master",
        merge_commit_sha=sha,
        repo="absa/sensitive-data",
    )


class TestApplyMergedPullRequest:
    def test_minor_bump_is_pushed(self, remote_repo):
        clone = remote_repo.clone("runner")
        config = ApplyConfig(repo_dir=str(clone))

        result = apply_merged_pull_request(merged_event(["minor-increment"], remote_repo.base_sha), config)

        assert result.old_version == Version(1, 0, 0)
        assert result.new_version == Version(1, 1, 0)
        assert result.pushed is True
        assert 'version = "1.1.0"' in remote_repo.show("master", "Cargo.toml")

    def test_exactly_one_commit_touching_only_the_version_file(self, remote_repo):
        clone = remote_repo.clone("runner")
        config = ApplyConfig(repo_dir=str(clone), bot_name="Version Bot", bot_email="bot@example.com")

        apply_merged_pull_request(merged_event(["patch-increment"], remote_repo.base_sha), config)

        base = remote_repo.base_sha
        assert remote_repo.rev_count(f"{base}..master") == 1
        assert remote_repo.changed_files(base, "master") == ["Cargo.toml"]
        assert remote_repo.last_commit("master") == ("Bump version", "Version Bot")
        assert "Pull-Request: #5" in remote_repo.commit_message("master")

    def test_major_resets_lower_components(self, remote_repo):
        clone = remote_repo.clone("runner")
        config = ApplyConfig(repo_dir=str(clone))

        first = apply_merged_pull_request(merged_event(["patch-increment"], remote_repo.base_sha), config)
        second = apply_merged_pull_request(merged_event(["major-increment"], first.commit_sha, number=6), config)

        assert second.old_version == Version(1, 0, 1)
        assert second.new_version == Version(2, 0, 0)
        assert remote_repo.rev_count(f"{remote_repo.base_sha}..master") == 2

    def test_missing_label_fails_loudly(self, remote_repo):
        clone = remote_repo.clone("runner")
        config = ApplyConfig(repo_dir=str(clone))

        with pytest.raises(MissingPreconditionError) as exc_info:
            apply_merged_pull_request(merged_event(["bug"], remote_repo.base_sha), config)

        assert "#5" in exc_info.value.message
        assert remote_repo.rev_count(f"{remote_repo.base_sha}..master") == 0

    def test_unmerged_event_is_rejected(self, remote_repo):
        clone = remote_repo.clone("runner")
        event = merged_event(["patch-increment"], remote_repo.base_sha)
        event.merged = False

        with pytest.raises(MissingPreconditionError):
            apply_merged_pull_request(event, ApplyConfig(repo_dir=str(clone)))

    def test_dry_run_writes_nothing(self, remote_repo):
        clone = remote_repo.clone("runner")
        config = ApplyConfig(repo_dir=str(clone), dry_run=True)

        result = apply_merged_pull_request(merged_event(["major-increment"], remote_repo.base_sha), config)

        assert result.new_version == Version(2, 0, 0)
        assert result.pushed is False
        assert result.commit_sha is None
        assert 'version = "1.0.0"' in (clone / "Cargo.toml").read_text(encoding="utf-8")
        assert remote_repo.rev_count(f"{remote_repo.base_sha}..master") == 0

    def test_dry_run_leaves_the_checkout_alone(self, remote_repo):
        clone = remote_repo.clone("runner")
        config = ApplyConfig(repo_dir=str(clone), remote="upstream", dry_run=True)

        result = apply_merged_pull_request(merged_event(["patch-increment"], remote_repo.base_sha), config)

        assert result.new_version == Version(1, 0, 1)
        assert (clone / ".git" / "HEAD").read_text(encoding="utf-8").strip() == "ref: refs/heads/master"

    def test_merge_commit_must_be_on_main(self, remote_repo):
        clone = remote_repo.clone("runner")
        (clone / "README.md").write_text("unpublished\n", encoding="utf-8")
        git_commit_file("README.md", "Local only", author_name="Dev", author_email="dev@example.com", cwd=str(clone))
        local_sha = git_head_sha(cwd=str(clone))

        with pytest.raises(GitCommandError) as exc_info:
            apply_merged_pull_request(merged_event(["patch-increment"], local_sha), ApplyConfig(repo_dir=str(clone)))

        assert exc_info.value.step == "merge-base"
        assert "origin/master" in exc_info.value.message
        assert remote_repo.rev_count(f"{remote_repo.base_sha}..master") == 0

    def test_unknown_remote(self, remote_repo):
        clone = remote_repo.clone("runner")
        config = ApplyConfig(repo_dir=str(clone), remote="upstream")

        with pytest.raises(GitCommandError) as exc_info:
            apply_merged_pull_request(merged_event(["patch-increment"], remote_repo.base_sha), config)
        assert exc_info.value.step == "fetch"

    def test_missing_version_file(self, remote_repo):
        clone = remote_repo.clone("runner")
        config = ApplyConfig(repo_dir=str(clone), version_file="pyproject.toml", version_table="project")

        with pytest.raises(VersionFileError):
            apply_merged_pull_request(merged_event(["patch-increment"], remote_repo.base_sha), config)


class TestConcurrentApplies:
    def test_second_push_is_rejected(self, remote_repo):
        runner_a = remote_repo.clone("runner-a")
        runner_b = remote_repo.clone("runner-b")
        base = remote_repo.base_sha
        loser = merged_event(["patch-increment"], base, number=11)

        # Both runners are on the same tip before either pushes.
        checkout_main_tip(loser, ApplyConfig(repo_dir=str(runner_b)))
        first = apply_merged_pull_request(
            merged_event(["minor-increment"], base, number=10),
            ApplyConfig(repo_dir=str(runner_a)),
        )
        assert first.new_version == Version(1, 1, 0)

        with pytest.raises(ConcurrentMutationConflictError) as exc_info:
            apply_merged_pull_request(loser, ApplyConfig(repo_dir=str(runner_b), checkout=False))

        assert exc_info.value.code == "CONCURRENT_MUTATION_CONFLICT"
        remote_manifest = remote_repo.show("master", "Cargo.toml")
        assert 'version = "1.1.0"' in remote_manifest
        assert "1.0.1" not in remote_manifest
        assert remote_repo.rev_count(f"{base}..master") == 1
        # The losing runner's working copy was modified but never published.
        assert 'version = "1.0.1"' in (runner_b / "Cargo.toml").read_text(encoding="utf-8")

    def test_rerun_after_conflict_bumps_latest_tip(self, remote_repo):
        runner_a = remote_repo.clone("runner-a")
        runner_b = remote_repo.clone("runner-b")
        base = remote_repo.base_sha
        loser = merged_event(["patch-increment"], base, number=11)

        checkout_main_tip(loser, ApplyConfig(repo_dir=str(runner_b)))
        apply_merged_pull_request(
            merged_event(["minor-increment"], base, number=10),
            ApplyConfig(repo_dir=str(runner_a)),
        )
        with pytest.raises(ConcurrentMutationConflictError):
            apply_merged_pull_request(loser, ApplyConfig(repo_dir=str(runner_b), checkout=False))

        rerun = apply_merged_pull_request(loser, ApplyConfig(repo_dir=str(runner_b)))

        assert rerun.old_version == Version(1, 1, 0)
        assert rerun.new_version == Version(1, 1, 1)
        assert rerun.pushed is True
        assert 'version = "1.1.1"' in remote_repo.show("master", "Cargo.toml")
        assert remote_repo.rev_count(f"{base}..master") == 2

    def test_later_merge_does_not_block_the_bump(self, remote_repo):
        stale = remote_repo.clone("stale-runner")
        other = remote_repo.clone("other-runner")
        base = remote_repo.base_sha
        apply_merged_pull_request(
            merged_event(["minor-increment"], base, number=10),
            ApplyConfig(repo_dir=str(other)),
        )

        result = apply_merged_pull_request(
            merged_event(["major-increment"], base, number=11),
            ApplyConfig(repo_dir=str(stale)),
        )

        assert result.old_version == Version(1, 1, 0)
        assert result.new_version == Version(2, 0, 0)
        assert remote_repo.rev_count(f"{base}..master") == 2

    def test_rerun_of_applied_event_changes_nothing(self, remote_repo):
        clone = remote_repo.clone("runner")
        event = merged_event(["minor-increment"], remote_repo.base_sha, number=10)
        first = apply_merged_pull_request(event, ApplyConfig(repo_dir=str(clone)))

        again = apply_merged_pull_request(event, ApplyConfig(repo_dir=str(remote_repo.clone("runner-2"))))

        assert again.pushed is False
        assert again.commit_sha == first.commit_sha
        assert again.new_version == Version(1, 1, 0)
        assert remote_repo.rev_count(f"{remote_repo.base_sha}..master") == 1


class TestApplyIncrement:
    def test_none_is_refused(self, tmp_path):
        with pytest.raises(MissingPreconditionError):
            apply_increment(IncrementKind.NONE, ApplyConfig(repo_dir=str(tmp_path)))

    def test_without_checkout_uses_head(self, remote_repo):
        clone = remote_repo.clone("runner")
        config = ApplyConfig(repo_dir=str(clone), checkout=False)

        result = apply_increment(IncrementKind.PATCH, config)

        assert result.new_version == Version(1, 0, 1)
        assert 'version = "1.0.1"' in remote_repo.show("master", "Cargo.toml")


@pytest.mark.parametrize("output, expected", [
    ("!\tHEAD:refs/heads/master\t[rejected] (fetch first)\nDone\n", True),
    (" ! [rejected]        HEAD -> master (non-fast-forward)\n", True),
    ("fatal: could not read Username for 'https://github.com'\n", False),
    ("", False),
])
def test_is_push_rejected(output, expected):
    assert is_push_rejected(output) is expected
