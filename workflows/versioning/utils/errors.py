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


"""Error catalog for the version gate and applicator.

Every error carries a stable code, a human message and a suggested fix so the
workflow log tells the author what to do next.
"""

from __future__ import annotations


class VersionGateError(Exception):
    """Base error with structured code + suggestion."""

    def __init__(self, code: str, message: str, suggestion: str = ""):
        self.code = code
        self.message = message
        self.suggestion = suggestion
        super().__init__(message)

    def to_dict(self) -> dict[str, str]:
        d = {
            "error_code": self.code,
            "message": self.message,
        }
        if self.suggestion:
            d["suggestion"] = self.suggestion
        return d


class PolicyViolationError(VersionGateError):
    def __init__(self, message: str):
        super().__init__(
            code="POLICY_VIOLATION",
            message=message,
            suggestion="Add one of the labels major-increment, minor-increment or patch-increment to the pull request.",
        )


class MissingPreconditionError(VersionGateError):
    def __init__(self, pr_number: int | None):
        ref = f"#{pr_number}" if pr_number else "the pull request"
        super().__init__(
            code="MISSING_PRECONDITION",
            message=f"Merged pull request {ref} carries no version increment label; refusing to bump",
            suggestion="Bump the version manually with bump_version.py --increment <kind> and check branch protection.",
        )


class ConcurrentMutationConflictError(VersionGateError):
    def __init__(self, branch: str, detail: str = ""):
        self.detail = detail
        super().__init__(
            code="CONCURRENT_MUTATION_CONFLICT",
            message=f"Push to {branch!r} was rejected: the branch moved since the version was read",
            suggestion=(
                "Re-run the workflow, which bumps the latest tip of the branch, "
                "or run bump_version.py --pr <number>. No retry is attempted."
            ),
        )


class VersionFileError(VersionGateError):
    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(
            code="VERSION_FILE_INVALID",
            message=f"Cannot use version file {path}: {reason}",
            suggestion='The file must hold version = "MAJOR.MINOR.PATCH" inside the configured table.',
        )


class GitCommandError(VersionGateError):
    def __init__(self, step: str, stderr: str):
        self.step = step
        self.stderr = stderr
        super().__init__(
            code="GIT_COMMAND_FAILED",
            message=f"git {step} failed: {(stderr or '').strip()}",
        )


class EventPayloadError(VersionGateError):
    def __init__(self, reason: str):
        super().__init__(
            code="EVENT_PAYLOAD_INVALID",
            message=f"Unusable pull_request event payload: {reason}",
            suggestion="Run from a pull_request workflow or pass --event-path.",
        )
